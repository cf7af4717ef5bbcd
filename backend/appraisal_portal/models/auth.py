"""Authenticated portal user."""

from __future__ import annotations

from pydantic import BaseModel


class UserInfo(BaseModel):
    id: str | None = None
    name: str | None = None
    email: str | None = None
    roles: list[str] = []
    # Directory record of the signed-in person; admins may have none.
    employee_id: str | None = None
