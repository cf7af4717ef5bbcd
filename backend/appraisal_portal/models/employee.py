"""Directory models: employees, teams and their optional profiles.

Records arrive from the store with camelCase keys (``teamId``, ``reportsTo``);
every model accepts either spelling and serializes back to camelCase.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

HierarchyTag = Literal["chairman", "executive", "leader", "department-leader", "member", "hr"]


class PortalModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Employee(PortalModel):
    """A person in the directory.

    ``hierarchy`` is kept exactly as stored; it may be missing or carry an
    unknown tag. Use ``services.hierarchy.normalize_hierarchy`` to rank it.
    """

    id: str
    name: str = ""
    role: str = ""
    hierarchy: str | None = "member"
    team_id: str | None = None
    reports_to: str | None = None
    email: str | None = None
    created_at: str | None = None


class Team(PortalModel):
    id: str
    name: str = ""
    description: str | None = None
    created_at: str | None = None


class EmployeeProfile(PortalModel):
    """Optional directory card for an employee (photo, bio, skills)."""

    employee_id: str
    profile_picture: str | None = None
    cover_photo: str | None = None
    cover_position: int | None = None
    headline: str | None = None
    bio: str | None = None
    location: str | None = None
    skills: list[str] = []
    interests: list[str] = []


class DirectorySnapshot(PortalModel):
    """Employees, teams and profiles read together for one request."""

    employees: list[Employee] = []
    teams: list[Team] = []
    profiles: list[EmployeeProfile] = []
