"""Walks explicit ``reports_to`` links, independent of hierarchy rank."""

from __future__ import annotations

from appraisal_portal.models.employee import Employee

MAX_CHAIN_DEPTH = 50


def get_direct_reports(employee_id: str, employees: list[Employee]) -> list[Employee]:
    return [e for e in employees if e.reports_to == employee_id]


def get_reporting_chain(employee_id: str, employees: list[Employee]) -> list[Employee]:
    """Managers above ``employee_id``, nearest first.

    Stops at the top of the chain, at a dangling manager id, when a manager
    repeats or loops back to the starting employee, or after
    ``MAX_CHAIN_DEPTH`` hops.
    """
    by_id: dict[str, Employee] = {}
    for employee in employees:
        by_id.setdefault(employee.id, employee)

    chain: list[Employee] = []
    seen: set[str] = {employee_id}
    current = by_id.get(employee_id)
    while current is not None and current.reports_to and len(chain) < MAX_CHAIN_DEPTH:
        manager_id = current.reports_to
        if manager_id in seen:
            break
        seen.add(manager_id)
        current = by_id.get(manager_id)
        if current is not None:
            chain.append(current)
    return chain
