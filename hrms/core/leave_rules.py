"""Leave Rules: working-day arithmetic, balances, overlaps and status transitions.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Working days are Monday-Friday, counted inclusively (public holidays not modelled)
    - Only vacation and sick leave draw from a balance; unpaid/personal are unlimited
    - Balances never go below zero
    - pending and approved requests block overlapping requests; draft does not
"""

from datetime import date, timedelta

from hrms.core.domain_types import LeaveStatus, LeaveType
from hrms.core.errors import BusinessRuleError, InsufficientBalanceError, ValidationError

BLOCKING_STATUSES: tuple[LeaveStatus, ...] = (LeaveStatus.PENDING, LeaveStatus.APPROVED)

ALLOWED_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.DRAFT: frozenset({LeaveStatus.PENDING, LeaveStatus.CANCELLED}),
    LeaveStatus.PENDING: frozenset({
        LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED,
    }),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELLED: frozenset(),
}

_BALANCE_FIELDS: dict[LeaveType, str] = {
    LeaveType.VACATION: "vacation_balance",
    LeaveType.SICK: "sick_balance",
}


def working_days(start: date, end: date) -> int:
    """Count Monday-Friday dates in [start, end]."""
    if end < start:
        return 0
    total = (end - start).days + 1
    full_weeks, remainder = divmod(total, 7)
    days = full_weeks * 5
    for offset in range(remainder):
        if (start + timedelta(days=full_weeks * 7 + offset)).weekday() < 5:
            days += 1
    return days


def validate_leave_window(start: date, end: date, today: date) -> int:
    """Validate a requested window and return its working-day count."""
    if end < start:
        raise ValidationError("End date must not be before start date", "end_date")
    if start < today:
        raise ValidationError("Leave cannot be requested for past dates", "start_date")
    days = working_days(start, end)
    if days == 0:
        raise ValidationError("Requested period contains no working days", "end_date")
    return days


def balance_field(leave_type: LeaveType) -> str | None:
    return _BALANCE_FIELDS.get(leave_type)


def check_balance(leave_type: LeaveType, balance: float | None, days: float) -> None:
    if balance_field(leave_type) is None:
        return
    available = float(balance or 0)
    if days > available:
        raise InsufficientBalanceError(leave_type.value, available, float(days))


def remaining_after(leave_type: LeaveType, balance: float | None, days: float) -> float | None:
    if balance_field(leave_type) is None:
        return None
    return round(float(balance or 0) - float(days), 2)


def deduct(balance: float, days: float) -> float:
    return max(0.0, round(float(balance) - float(days), 2))


def restore(balance: float, days: float) -> float:
    return round(float(balance) + float(days), 2)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and b_start <= a_end


def check_transition(current: LeaveStatus, target: LeaveStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise BusinessRuleError(
            f"Cannot move a {current.value} request to {target.value}",
            "INVALID_LEAVE_TRANSITION",
            current=current.value, target=target.value,
        )


def check_cancellable(status: LeaveStatus, start: date, today: date) -> bool:
    """Validate cancellation; returns True when the balance must be restored."""
    check_transition(status, LeaveStatus.CANCELLED)
    if status == LeaveStatus.APPROVED:
        if start <= today:
            raise BusinessRuleError(
                "Approved leave that has already started cannot be cancelled",
                "LEAVE_ALREADY_STARTED",
            )
        return True
    return False
