#!/usr/bin/env python3
"""Generate auto appraisal assignments for a review period.

Run from the backend/ directory:

    python3 scripts/auto_assign.py --period-id P [--dry-run] [--verbose] \
        --template-leader-to-member T1 --template-member-to-leader T2 ...

Reads employees and the review period from Cosmos DB, prints the
auto-assignment preview and, unless --dry-run is given, saves one assignment
per previewed pair.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from appraisal_portal.core.config import Settings  # noqa: E402
from appraisal_portal.models.assignment import (  # noqa: E402
    AutoAssignmentOptions,
    AutoAssignmentPreview,
    TemplateMapping,
)
from appraisal_portal.services.auto_assignment import (  # noqa: E402
    build_assignments_from_preview,
    preview_auto_assignments,
)
from appraisal_portal.services.directory_service import DirectoryService, DirectoryServiceError  # noqa: E402
from appraisal_portal.services.period_utils import days_remaining  # noqa: E402

logger = logging.getLogger(__name__)

_SECTIONS = (
    ("Leader → Member", "leader_to_member"),
    ("Member → Leader", "member_to_leader"),
    ("Leader → Leader", "leader_to_leader"),
    ("Executive → Leader", "exec_to_leader"),
)


def build_options(args: argparse.Namespace) -> AutoAssignmentOptions:
    return AutoAssignmentOptions(
        include_leader_to_member=not args.no_leader_to_member,
        include_member_to_leader=not args.no_member_to_leader,
        include_leader_to_leader=args.leader_to_leader,
        include_exec_to_leader=args.exec_to_leader,
    )


def build_template_mapping(args: argparse.Namespace) -> TemplateMapping:
    return TemplateMapping(
        leader_to_member=args.template_leader_to_member or "",
        member_to_leader=args.template_member_to_leader or "",
        leader_to_leader=args.template_leader_to_leader or "",
        exec_to_leader=args.template_exec_to_leader or "",
    )


def missing_templates(options: AutoAssignmentOptions, mapping: TemplateMapping) -> list[str]:
    """Enabled relationship kinds that have no template id."""
    required = (
        (options.include_leader_to_member, "leader_to_member"),
        (options.include_member_to_leader, "member_to_leader"),
        (options.include_leader_to_leader, "leader_to_leader"),
        (options.include_exec_to_leader, "exec_to_leader"),
    )
    return [field for enabled, field in required if enabled and not getattr(mapping, field)]


def format_preview(preview: AutoAssignmentPreview) -> list[str]:
    lines: list[str] = []
    for title, field in _SECTIONS:
        rows = getattr(preview, field)
        lines.append(f"{title}: {len(rows)}")
        lines.extend(f"  {row.appraiser_name} ({row.appraiser_id}) → {row.employee_name} ({row.employee_id})" for row in rows)
    lines.extend(f"WARNING: {w}" for w in preview.warnings)
    return lines


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Preview and create auto appraisal assignments from the org structure",
    )
    parser.add_argument("--period-id", required=True, help="Review period id")
    parser.add_argument("--due-date", default=None, help="Due date stored on each assignment (ISO date)")
    parser.add_argument("--no-leader-to-member", action="store_true", help="Disable Leader → Member")
    parser.add_argument("--no-member-to-leader", action="store_true", help="Disable Member → Leader")
    parser.add_argument("--leader-to-leader", action="store_true", help="Enable Leader → Leader peer reviews")
    parser.add_argument("--exec-to-leader", action="store_true", help="Enable Executive → Leader reviews")
    parser.add_argument("--template-leader-to-member", default=None)
    parser.add_argument("--template-member-to-leader", default=None)
    parser.add_argument("--template-leader-to-leader", default=None)
    parser.add_argument("--template-exec-to-leader", default=None)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the preview without saving assignments",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, directory: DirectoryService | None = None) -> int:
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    options = build_options(args)
    mapping = build_template_mapping(args)
    missing = missing_templates(options, mapping)
    if missing and not args.dry_run:
        logger.error("Missing template id for: %s", ", ".join(missing))
        return 2

    owns_directory = directory is None
    if directory is None:
        directory = DirectoryService()
        await directory.initialize(Settings())
    if not directory.initialized:
        logger.error("Cosmos DB is not configured")
        return 1

    try:
        period = await directory.get_review_period(args.period_id)
        if period is None:
            logger.error("Review period %s not found", args.period_id)
            return 1

        employees = await directory.get_employees()
        logger.info(
            "Loaded %d employees for %s (%d day(s) remaining)",
            len(employees),
            period.name,
            days_remaining(period.end_date),
        )

        preview = preview_auto_assignments(employees, period.id, options)
        for line in format_preview(preview):
            logger.info(line)

        if args.dry_run:
            logger.info("[DRY RUN] %d assignment(s) would be created.", preview.total)
            return 0

        assignments = build_assignments_from_preview(preview, mapping, period.id, period.name, args.due_date)
        saved = 0
        for assignment in assignments:
            try:
                await directory.save_assignment(assignment)
                saved += 1
            except DirectoryServiceError:
                logger.exception("Failed to save assignment %s", assignment.id)

        logger.info("Saved %d of %d assignment(s)", saved, len(assignments))
        return 0 if saved == len(assignments) else 1
    finally:
        if owns_directory:
            await directory.close()


def main() -> None:
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
