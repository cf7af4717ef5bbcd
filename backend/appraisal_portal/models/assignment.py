"""Appraisal assignment models and the auto-assignment preview."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from appraisal_portal.models.employee import PortalModel

RelationshipType = Literal["leader-to-member", "member-to-leader", "leader-to-leader", "exec-to-leader", "custom"]
AssignmentStatus = Literal["pending", "in-progress", "completed"]
AssignmentType = Literal["auto", "manual"]


class AssignmentCandidate(PortalModel):
    """One reviewer → reviewee pair proposed by the rule engine."""

    appraiser_id: str
    appraiser_name: str
    employee_id: str
    employee_name: str


class AutoAssignmentPreview(PortalModel):
    leader_to_member: list[AssignmentCandidate] = []
    member_to_leader: list[AssignmentCandidate] = []
    leader_to_leader: list[AssignmentCandidate] = []
    exec_to_leader: list[AssignmentCandidate] = []
    warnings: list[str] = []

    @property
    def total(self) -> int:
        return (
            len(self.leader_to_member)
            + len(self.member_to_leader)
            + len(self.leader_to_leader)
            + len(self.exec_to_leader)
        )


class AutoAssignmentOptions(PortalModel):
    include_leader_to_member: bool = True
    include_member_to_leader: bool = True
    include_leader_to_leader: bool = False
    include_exec_to_leader: bool = False


class TemplateMapping(PortalModel):
    leader_to_member: str
    member_to_leader: str
    leader_to_leader: str
    exec_to_leader: str


class AppraisalAssignment(PortalModel):
    id: str
    review_period_id: str
    appraiser_id: str
    appraiser_name: str = ""
    employee_id: str
    employee_name: str = ""
    relationship_type: RelationshipType
    template_id: str
    status: AssignmentStatus = "pending"
    assignment_type: AssignmentType = "manual"
    link_token: str | None = None
    created_at: str
    due_date: str | None = None


class AutoAssignmentPreviewRequest(PortalModel):
    review_period_id: str = Field(..., min_length=1)
    options: AutoAssignmentOptions = Field(default_factory=AutoAssignmentOptions)


class GenerateAssignmentsRequest(AutoAssignmentPreviewRequest):
    template_mapping: TemplateMapping
    due_date: str | None = None


class GenerateAssignmentsResponse(PortalModel):
    created: list[AppraisalAssignment]
    warnings: list[str] = []
