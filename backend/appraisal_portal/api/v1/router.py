from fastapi import APIRouter

from appraisal_portal.api.v1.endpoints import assignments, employees, health, org_chart, review_periods, templates

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(employees.router)
api_router.include_router(org_chart.router)
api_router.include_router(review_periods.router)
api_router.include_router(assignments.router)
api_router.include_router(templates.router)
