"""Cosmos DB directory store: employees, teams, profiles, periods and assignments."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from azure.core.exceptions import AzureError
from azure.cosmos.aio import CosmosClient
from pydantic import BaseModel, ValidationError

from appraisal_portal.core.config import Settings
from appraisal_portal.models.assignment import AppraisalAssignment
from appraisal_portal.models.employee import DirectorySnapshot, Employee, EmployeeProfile, Team
from appraisal_portal.models.review_period import ReviewPeriod
from appraisal_portal.models.template import Template, normalize_template

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

EMPLOYEES = "employees"
TEAMS = "teams"
PROFILES = "profiles"
PERIODS = "periods"
ASSIGNMENTS = "assignments"
TEMPLATES = "templates"


class DirectoryServiceError(Exception):
    pass


class DirectoryService:
    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.containers: dict[str, Any] = {}
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.COSMOS_DB_ENDPOINT or not settings.COSMOS_DB_KEY:
            logger.warning("Cosmos DB credentials missing — directory service not initialized")
            return

        self.client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
        db = self.client.get_database_client(settings.COSMOS_DB_DATABASE)
        self.containers = {
            EMPLOYEES: db.get_container_client(settings.COSMOS_DB_EMPLOYEES_CONTAINER),
            TEAMS: db.get_container_client(settings.COSMOS_DB_TEAMS_CONTAINER),
            PROFILES: db.get_container_client(settings.COSMOS_DB_PROFILES_CONTAINER),
            PERIODS: db.get_container_client(settings.COSMOS_DB_PERIODS_CONTAINER),
            ASSIGNMENTS: db.get_container_client(settings.COSMOS_DB_ASSIGNMENTS_CONTAINER),
            TEMPLATES: db.get_container_client(settings.COSMOS_DB_TEMPLATES_CONTAINER),
        }
        self.initialized = True
        logger.info("DirectoryService initialized (database=%s)", settings.COSMOS_DB_DATABASE)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.containers = {}
            self.initialized = False

    async def _query(
        self,
        name: str,
        query: str = "SELECT * FROM c",
        parameters: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        container = self.containers.get(name)
        if container is None:
            return []

        items: list[dict[str, Any]] = []
        async for item in container.query_items(
            query=query,
            parameters=parameters or [],
            enable_cross_partition_query=True,
        ):
            items.append(item)
        return items

    @staticmethod
    def _parse_all(model: type[ModelT], docs: list[dict[str, Any]]) -> list[ModelT]:
        parsed: list[ModelT] = []
        for doc in docs:
            try:
                parsed.append(model.model_validate(doc))
            except ValidationError as e:
                logger.warning("Skipping malformed %s document %s: %s", model.__name__, doc.get("id"), e)
        return parsed

    async def get_employees(self) -> list[Employee]:
        return self._parse_all(Employee, await self._query(EMPLOYEES))

    async def get_employee(self, employee_id: str) -> Employee | None:
        docs = await self._query(
            EMPLOYEES,
            "SELECT * FROM c WHERE c.id = @id",
            [{"name": "@id", "value": employee_id}],
        )
        parsed = self._parse_all(Employee, docs)
        return parsed[0] if parsed else None

    async def get_teams(self) -> list[Team]:
        return self._parse_all(Team, await self._query(TEAMS))

    async def get_profiles(self) -> list[EmployeeProfile]:
        return self._parse_all(EmployeeProfile, await self._query(PROFILES))

    async def load_snapshot(self) -> DirectorySnapshot:
        return DirectorySnapshot(
            employees=await self.get_employees(),
            teams=await self.get_teams(),
            profiles=await self.get_profiles(),
        )

    async def get_review_period(self, period_id: str) -> ReviewPeriod | None:
        docs = await self._query(
            PERIODS,
            "SELECT * FROM c WHERE c.id = @id",
            [{"name": "@id", "value": period_id}],
        )
        parsed = self._parse_all(ReviewPeriod, docs)
        return parsed[0] if parsed else None

    async def get_templates(self) -> list[Template]:
        templates: list[Template] = []
        for doc in await self._query(TEMPLATES):
            try:
                templates.append(normalize_template(doc))
            except ValidationError as e:
                logger.warning("Skipping malformed template %s: %s", doc.get("id"), e)
        return templates

    async def get_assignments(self, review_period_id: str | None = None) -> list[AppraisalAssignment]:
        if review_period_id:
            docs = await self._query(
                ASSIGNMENTS,
                "SELECT * FROM c WHERE c.reviewPeriodId = @period",
                [{"name": "@period", "value": review_period_id}],
            )
        else:
            docs = await self._query(ASSIGNMENTS)
        return self._parse_all(AppraisalAssignment, docs)

    async def save_assignment(self, assignment: AppraisalAssignment) -> AppraisalAssignment:
        container = self.containers.get(ASSIGNMENTS)
        if container is None:
            raise DirectoryServiceError("DirectoryService not initialized")

        try:
            stored = await container.upsert_item(assignment.model_dump(by_alias=True, exclude_none=True))
        except AzureError as e:
            raise DirectoryServiceError(f"Failed to save assignment {assignment.id}: {e}") from e

        return AppraisalAssignment.model_validate(stored) if stored else assignment

    async def check_connection(self) -> bool:
        container = self.containers.get(EMPLOYEES)
        if container is None:
            return False
        try:
            async for _ in container.query_items(
                query="SELECT VALUE COUNT(1) FROM c",
                enable_cross_partition_query=True,
            ):
                return True
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False


directory_service = DirectoryService()
