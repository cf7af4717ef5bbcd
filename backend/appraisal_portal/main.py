from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from appraisal_portal.api.v1.router import api_router
from appraisal_portal.core.config import settings
from appraisal_portal.services.directory_service import directory_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await directory_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize directory service; continuing without the store")
    yield
    await directory_service.close()


app = FastAPI(
    title="Appraisal Portal API",
    description="Org chart and performance appraisal assignments",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Appraisal Portal API"}
