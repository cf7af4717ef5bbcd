"""Hierarchy tag normalization and ranking.

Levels: chairman=0, executive=1, leader/department-leader=2, member/hr=3.
"""

from __future__ import annotations

from appraisal_portal.models.employee import HierarchyTag

VALID_HIERARCHIES: frozenset[str] = frozenset(
    {"chairman", "executive", "leader", "department-leader", "member", "hr"}
)
DEPARTMENT_LEADER_TAGS: frozenset[str] = frozenset({"leader", "department-leader"})

CHAIRMAN_LEVEL = 0
EXECUTIVE_LEVEL = 1
DEPARTMENT_LEADER_LEVEL = 2
MEMBER_LEVEL = 3


def normalize_hierarchy(tag: str | None) -> HierarchyTag:
    if tag in VALID_HIERARCHIES:
        return tag  # type: ignore[return-value]
    return "member"


def is_department_leader(tag: str | None) -> bool:
    return tag in DEPARTMENT_LEADER_TAGS


def hierarchy_level(tag: str | None) -> int:
    if tag == "chairman":
        return CHAIRMAN_LEVEL
    if tag == "executive":
        return EXECUTIVE_LEVEL
    if is_department_leader(tag):
        return DEPARTMENT_LEADER_LEVEL
    return MEMBER_LEVEL
