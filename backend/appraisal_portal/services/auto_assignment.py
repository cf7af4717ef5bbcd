"""Derive appraisal assignments from the org structure.

``preview_auto_assignments`` proposes reviewer → reviewee pairs from
``reports_to`` links and team membership; an admin reviews the preview and
``build_assignments_from_preview`` turns it into assignment records.
Manual assignments created elsewhere coexist with these.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone

from appraisal_portal.models.assignment import (
    AppraisalAssignment,
    AssignmentCandidate,
    AutoAssignmentOptions,
    AutoAssignmentPreview,
    RelationshipType,
    TemplateMapping,
)
from appraisal_portal.models.employee import Employee
from appraisal_portal.models.template import AppraisalType

logger = logging.getLogger(__name__)

# Literal tags only: "department-leader" is not a manager for assignment purposes.
MANAGER_TAGS = frozenset({"leader", "executive"})

_TEMPLATE_TYPES: dict[str, AppraisalType] = {
    "leader-to-member": "leaders-to-members",
    "member-to-leader": "members-to-leaders",
    "leader-to-leader": "leaders-to-leaders",
    "exec-to-leader": "executives-to-leaders",
}


def is_manager(employee: Employee) -> bool:
    return employee.hierarchy in MANAGER_TAGS


def _candidate(appraiser: Employee, employee: Employee) -> AssignmentCandidate:
    return AssignmentCandidate(
        appraiser_id=appraiser.id,
        appraiser_name=appraiser.name,
        employee_id=employee.id,
        employee_name=employee.name,
    )


def _resolve_options(options: AutoAssignmentOptions | Mapping[str, bool] | None) -> AutoAssignmentOptions:
    if options is None:
        return AutoAssignmentOptions()
    if isinstance(options, AutoAssignmentOptions):
        return options
    return AutoAssignmentOptions.model_validate(dict(options))


def _structure_warnings(employees: list[Employee]) -> list[str]:
    warnings: list[str] = []

    unassigned_members = sum(1 for e in employees if e.hierarchy == "member" and not e.reports_to)
    if unassigned_members:
        warnings.append(
            f'{unassigned_members} member(s) have no "Reports To" set – '
            "skipped for Leader→Member and Member→Leader."
        )

    has_reports = {e.reports_to for e in employees if e.reports_to}
    idle_leaders = sum(1 for e in employees if e.hierarchy == "leader" and e.id not in has_reports)
    if idle_leaders:
        warnings.append(f"{idle_leaders} leader(s) have no members reporting to them.")

    return warnings


def preview_auto_assignments(
    employees: list[Employee],
    review_period_id: str,
    options: AutoAssignmentOptions | Mapping[str, bool] | None = None,
) -> AutoAssignmentPreview:
    """Compute the assignments the enabled rules would create.

    ``review_period_id`` does not filter anything yet; it is accepted so that
    callers already pass the period the preview is meant for.
    """
    opts = _resolve_options(options)
    by_id: dict[str, Employee] = {}
    for employee in employees:
        by_id.setdefault(employee.id, employee)

    preview = AutoAssignmentPreview(warnings=_structure_warnings(employees))

    if opts.include_leader_to_member:
        for member in employees:
            if member.hierarchy != "member" or not member.reports_to:
                continue
            manager = by_id.get(member.reports_to)
            if manager is None or not is_manager(manager):
                continue
            preview.leader_to_member.append(_candidate(manager, member))

    if opts.include_member_to_leader:
        for member in employees:
            if member.hierarchy != "member" or not member.reports_to:
                continue
            manager = by_id.get(member.reports_to)
            if manager is None:
                continue
            preview.member_to_leader.append(_candidate(member, manager))

    if opts.include_leader_to_leader:
        managers = [e for e in employees if is_manager(e)]
        for appraiser in managers:
            for target in managers:
                if appraiser.id == target.id or (appraiser.team_id or None) != (target.team_id or None):
                    continue
                preview.leader_to_leader.append(_candidate(appraiser, target))

    if opts.include_exec_to_leader:
        leaders = [e for e in employees if e.hierarchy == "leader"]
        for executive in employees:
            if executive.hierarchy != "executive" or not executive.team_id:
                continue
            for leader in leaders:
                if leader.team_id == executive.team_id:
                    preview.exec_to_leader.append(_candidate(executive, leader))

    logger.debug(
        "Auto-assignment preview for period %s: %d pairs, %d warning(s)",
        review_period_id,
        preview.total,
        len(preview.warnings),
    )
    return preview


def relationship_to_template_type(relationship: str) -> AppraisalType | None:
    return _TEMPLATE_TYPES.get(relationship)


def build_assignments_from_preview(
    preview: AutoAssignmentPreview,
    template_mapping: TemplateMapping,
    review_period_id: str,
    review_period_name: str,
    due_date: str | None = None,
) -> list[AppraisalAssignment]:
    """One pending ``auto`` assignment per preview row, in preview order.

    ``review_period_name`` is not stored on assignments; it is used for the
    log line only.
    """
    created_at = datetime.now(timezone.utc).isoformat()
    groups: list[tuple[RelationshipType, list[AssignmentCandidate], str]] = [
        ("leader-to-member", preview.leader_to_member, template_mapping.leader_to_member),
        ("member-to-leader", preview.member_to_leader, template_mapping.member_to_leader),
        ("leader-to-leader", preview.leader_to_leader, template_mapping.leader_to_leader),
        ("exec-to-leader", preview.exec_to_leader, template_mapping.exec_to_leader),
    ]

    assignments = [
        AppraisalAssignment(
            id=str(uuid.uuid4()),
            review_period_id=review_period_id,
            appraiser_id=row.appraiser_id,
            appraiser_name=row.appraiser_name,
            employee_id=row.employee_id,
            employee_name=row.employee_name,
            relationship_type=relationship,
            template_id=template_id,
            status="pending",
            assignment_type="auto",
            created_at=created_at,
            due_date=due_date,
        )
        for relationship, rows, template_id in groups
        for row in rows
    ]
    logger.info("Built %d auto assignment(s) for %s", len(assignments), review_period_name or review_period_id)
    return assignments
