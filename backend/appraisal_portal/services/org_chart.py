"""Org chart construction from flat employee records.

Parent/child relations come from hierarchy rank only, never from
``reports_to``: a chairman's children are all executives, an executive's are
all department leaders, a department leader's are all members and HR.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable

from appraisal_portal.models.employee import Employee, EmployeeProfile, Team
from appraisal_portal.models.org_chart import OrgChartConfig, OrgChartNode
from appraisal_portal.services.hierarchy import (
    CHAIRMAN_LEVEL,
    DEPARTMENT_LEADER_LEVEL,
    EXECUTIVE_LEVEL,
    MEMBER_LEVEL,
    hierarchy_level,
    normalize_hierarchy,
)

logger = logging.getLogger(__name__)

EXPANDED_DEPTH = 2

_DEPARTMENT_LEADER_ID_TAGS = frozenset({"leader", "department-leader", "executive", "hr"})


def _first_by_key(items: Iterable, key: str) -> dict:
    index: dict = {}
    for item in items:
        index.setdefault(getattr(item, key), item)
    return index


def _normalized(employees: Iterable[Employee]) -> list[Employee]:
    result = []
    for employee in employees:
        tag = normalize_hierarchy(employee.hierarchy)
        result.append(employee if employee.hierarchy == tag else employee.model_copy(update={"hierarchy": tag}))
    return result


def _children_by_hierarchy(parent: Employee, employees: list[Employee]) -> list[Employee]:
    level = hierarchy_level(parent.hierarchy)
    if level >= MEMBER_LEVEL:
        return []
    return [e for e in employees if hierarchy_level(e.hierarchy) == level + 1]


def _first_at_level(employees: list[Employee], level: int) -> Employee | None:
    return next((e for e in employees if hierarchy_level(e.hierarchy) == level), None)


def _sort_key(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


class _ChartContext:
    """Lookups and the visited set for one top-level build.

    ``visited`` is the only mutable state; it never outlives the call that
    created the context.
    """

    def __init__(self, employees: list[Employee], profiles: Iterable[EmployeeProfile], teams: Iterable[Team]) -> None:
        self.employees = employees
        self.profiles: dict[str, EmployeeProfile] = _first_by_key(profiles, "employee_id")
        self.teams: dict[str, Team] = _first_by_key(teams, "id")
        self.visited: set[str] = set()

    def node(
        self,
        employee: Employee,
        children: list[OrgChartNode] | None = None,
        is_expanded: bool | None = None,
    ) -> OrgChartNode:
        return OrgChartNode(
            employee=employee,
            profile=self.profiles.get(employee.id),
            team=self.teams.get(employee.team_id) if employee.team_id else None,
            children=children or [],
            is_expanded=is_expanded,
        )

    def build_bounded(self, employee: Employee, depth: int, max_depth: int) -> OrgChartNode:
        if depth >= max_depth:
            return self.node(employee, is_expanded=False)
        self.visited.add(employee.id)
        pending = [c for c in _children_by_hierarchy(employee, self.employees) if c.id not in self.visited]
        children = []
        for child in pending:
            self.visited.add(child.id)
            children.append(self.build_bounded(child, depth + 1, max_depth))
        return self.node(employee, children, is_expanded=depth < EXPANDED_DEPTH)

    def build_with_placeholders(self, employee: Employee, depth: int) -> OrgChartNode:
        if employee.id in self.visited:
            return self.node(employee, is_expanded=True)
        self.visited.add(employee.id)
        children = [self.build_with_placeholders(c, depth + 1) for c in _children_by_hierarchy(employee, self.employees)]
        return self.node(employee, children, is_expanded=depth < EXPANDED_DEPTH)


def build_org_chart_tree(
    employees: list[Employee],
    profiles: list[EmployeeProfile],
    teams: list[Team],
    config: OrgChartConfig | None = None,
) -> list[OrgChartNode]:
    """Build the company tree from a single root.

    The root is ``config.root_employee_id`` when it survives the hierarchy
    filter, otherwise the first chairman, executive, department leader or
    member/HR, in that order. Returns an empty list when nothing qualifies.
    """
    config = config or OrgChartConfig()
    allowed = set(config.include_hierarchy)
    filtered = [e for e in _normalized(employees) if e.hierarchy in allowed]

    if config.root_employee_id:
        root = next((e for e in filtered if e.id == config.root_employee_id), None)
    else:
        root = next(
            (
                candidate
                for candidate in (
                    _first_at_level(filtered, CHAIRMAN_LEVEL),
                    _first_at_level(filtered, EXECUTIVE_LEVEL),
                    _first_at_level(filtered, DEPARTMENT_LEADER_LEVEL),
                    _first_at_level(filtered, MEMBER_LEVEL),
                )
                if candidate is not None
            ),
            filtered[0] if filtered else None,
        )

    if root is None:
        return []

    context = _ChartContext(filtered, profiles, teams)
    tree = context.build_bounded(root, 0, config.max_depth)
    logger.debug("Built org chart tree rooted at %s (%d employees visited)", root.id, len(context.visited))
    return [tree]


def get_department_subtree(
    team_id: str,
    employees: list[Employee],
    teams: list[Team],
    profiles: list[EmployeeProfile],
) -> OrgChartNode | None:
    """Tree for one team, rooted at its most senior member. None if the team is unknown or empty."""
    if not any(t.id == team_id for t in teams):
        return None

    in_team = [e for e in _normalized(employees) if e.team_id == team_id]
    if not in_team:
        return None

    root = next(
        (
            candidate
            for candidate in (
                _first_at_level(in_team, CHAIRMAN_LEVEL),
                _first_at_level(in_team, EXECUTIVE_LEVEL),
                _first_at_level(in_team, DEPARTMENT_LEADER_LEVEL),
            )
            if candidate is not None
        ),
        in_team[0],
    )
    return _ChartContext(in_team, profiles, teams).build_with_placeholders(root, 0)


def build_org_chart_levels(
    employees: list[Employee],
    profiles: list[EmployeeProfile],
    teams: list[Team],
    config: OrgChartConfig | None = None,
) -> list[list[OrgChartNode]]:
    """Four flat rows: chairman, executives, department leaders, members/HR."""
    config = config or OrgChartConfig()
    allowed = set(config.include_hierarchy)
    filtered = [e for e in _normalized(employees) if e.hierarchy in allowed]
    context = _ChartContext(filtered, profiles, teams)

    levels: list[list[OrgChartNode]] = [[] for _ in range(MEMBER_LEVEL + 1)]
    for employee in filtered:
        levels[hierarchy_level(employee.hierarchy)].append(context.node(employee))

    if config.group_by_department:
        return [
            sorted(row, key=lambda n: (_sort_key(n.team.name if n.team else ""), _sort_key(n.employee.name)))
            for row in levels
        ]
    if config.sort_alphabetically:
        return [sorted(row, key=lambda n: _sort_key(n.employee.name)) for row in levels]
    return levels


def tree_to_levels(root: OrgChartNode) -> list[list[OrgChartNode]]:
    """Flatten a nested tree into per-depth rows of childless nodes."""
    levels: list[list[OrgChartNode]] = []

    def traverse(node: OrgChartNode, depth: int) -> None:
        if len(levels) <= depth:
            levels.append([])
        levels[depth].append(
            OrgChartNode(employee=node.employee, profile=node.profile, team=node.team, children=[])
        )
        for child in node.children:
            traverse(child, depth + 1)

    traverse(root, 0)
    return levels


def get_department_leader_id(team_id: str, employees: list[Employee]) -> str | None:
    leader = next(
        (e for e in employees if e.team_id == team_id and e.hierarchy in _DEPARTMENT_LEADER_ID_TAGS),
        None,
    )
    return leader.id if leader else None
