from __future__ import annotations

from typing import Literal

from appraisal_portal.models.employee import PortalModel

PeriodType = Literal["Q1", "Q2", "Q3", "Q4", "H1", "H2", "Annual", "Custom"]
PeriodStatus = Literal["planning", "active", "completed", "archived"]


class ReviewPeriod(PortalModel):
    id: str
    name: str
    type: PeriodType = "Custom"
    year: int
    start_date: str
    end_date: str
    status: PeriodStatus = "planning"
    description: str | None = None
    created_at: str | None = None


class ReviewPeriodDraft(PortalModel):
    """Pre-filled values for a new period; Custom periods leave the dates open."""

    type: PeriodType
    year: int
    name: str
    start_date: str | None = None
    end_date: str | None = None
    status: PeriodStatus = "planning"


class ReviewPeriodSummary(PortalModel):
    period: ReviewPeriod
    date_range: str
    days_remaining: int
    is_active: bool
