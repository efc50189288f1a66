"""Timesheet approval status from a group label.

Rules are evaluated top to bottom and the first match wins. "to be approved"
must stay ahead of every rule that looks for "approved", otherwise rows
waiting for approval would be reported as approved.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from ..core.enums import TimesheetStatus

_STARTS_WITH_APPROVED = re.compile(r"^approved\b")

StatusRule = tuple[str, Callable[[str], bool], TimesheetStatus]

STATUS_RULES: tuple[StatusRule, ...] = (
    ("to_be_approved", lambda label: "to be approved" in label, TimesheetStatus.PENDING),
    ("payroll_processed", lambda label: "payroll processed" in label, TimesheetStatus.APPROVED),
    (
        "upcoming_payroll",
        lambda label: "approved - upcoming payroll" in label,
        TimesheetStatus.APPROVED,
    ),
    (
        "starts_with_approved",
        lambda label: _STARTS_WITH_APPROVED.search(label) is not None,
        TimesheetStatus.APPROVED,
    ),
)


def classify_status(group_label: str | None) -> TimesheetStatus:
    """Classify a timesheet's group label as pending or approved.

    Args:
        group_label: Group title of the timesheet row (may be None)

    Returns:
        TimesheetStatus.APPROVED or TimesheetStatus.PENDING

    Examples:
        >>> classify_status("To Be Approved")
        <TimesheetStatus.PENDING: 'pending'>
        >>> classify_status("Approved - Upcoming Payroll")
        <TimesheetStatus.APPROVED: 'approved'>
    """
    label = (group_label or "").strip().lower()
    for _name, matches, status in STATUS_RULES:
        if matches(label):
            return status
    return TimesheetStatus.PENDING
