"""Leave Rules tests: pure working-day, balance and transition logic.

Tests cover:
    - working_days counts Monday-Friday inclusively, across weekends and weeks
    - validate_leave_window rejects reversed, past and weekend-only windows
    - Balances only apply to vacation/sick; deduct never goes negative
    - Status transitions and cancellation rules
"""

from datetime import date

import pytest

from hrms.core.domain_types import LeaveStatus, LeaveType
from hrms.core.errors import BusinessRuleError, InsufficientBalanceError, ValidationError
from hrms.core.leave_rules import (
    balance_field, check_balance, check_cancellable, check_transition, deduct,
    ranges_overlap, remaining_after, restore, validate_leave_window, working_days,
)

MONDAY = date(2030, 1, 7)
FRIDAY = date(2030, 1, 11)
SATURDAY = date(2030, 1, 12)
SUNDAY = date(2030, 1, 13)


# --- working_days -----------------------------------------------------------------


def test_working_days_single_weekday():
    assert working_days(MONDAY, MONDAY) == 1


def test_working_days_full_week():
    assert working_days(MONDAY, SUNDAY) == 5


def test_working_days_spans_weekend():
    """Friday to next Monday is two working days."""
    assert working_days(FRIDAY, date(2030, 1, 14)) == 2


def test_working_days_three_weeks():
    assert working_days(MONDAY, date(2030, 1, 25)) == 15


def test_working_days_reversed_range_is_zero():
    assert working_days(FRIDAY, MONDAY) == 0


# --- validate_leave_window ----------------------------------------------------------


def test_window_returns_working_days():
    assert validate_leave_window(MONDAY, FRIDAY, today=date(2030, 1, 1)) == 5


def test_window_same_day_allowed():
    assert validate_leave_window(MONDAY, MONDAY, today=MONDAY) == 1


def test_window_end_before_start_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_leave_window(FRIDAY, MONDAY, today=date(2030, 1, 1))
    assert exc.value.field == "end_date"


def test_window_in_the_past_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_leave_window(MONDAY, FRIDAY, today=date(2030, 1, 8))
    assert exc.value.field == "start_date"


def test_window_weekend_only_rejected():
    with pytest.raises(ValidationError):
        validate_leave_window(SATURDAY, SUNDAY, today=date(2030, 1, 1))


# --- Balances -------------------------------------------------------------------


def test_balance_field_only_for_vacation_and_sick():
    assert balance_field(LeaveType.VACATION) == "vacation_balance"
    assert balance_field(LeaveType.SICK) == "sick_balance"
    assert balance_field(LeaveType.UNPAID) is None
    assert balance_field(LeaveType.PERSONAL) is None


def test_check_balance_insufficient():
    with pytest.raises(InsufficientBalanceError) as exc:
        check_balance(LeaveType.VACATION, 3.0, 5)
    assert exc.value.code == "INSUFFICIENT_BALANCE"
    assert exc.value.params == {"leave_type": "vacation", "available": 3.0, "requested": 5.0}


def test_check_balance_exact_amount_allowed():
    check_balance(LeaveType.SICK, 5.0, 5)


def test_check_balance_unlimited_types_ignore_balance():
    check_balance(LeaveType.UNPAID, 0.0, 30)


def test_remaining_after():
    assert remaining_after(LeaveType.VACATION, 10.0, 3) == 7.0
    assert remaining_after(LeaveType.PERSONAL, 10.0, 3) is None


def test_deduct_floors_at_zero():
    assert deduct(2.0, 5) == 0.0
    assert deduct(10.0, 2.5) == 7.5


def test_restore_adds_days_back():
    assert restore(7.5, 2.5) == 10.0


def test_ranges_overlap():
    assert ranges_overlap(MONDAY, FRIDAY, FRIDAY, SUNDAY)
    assert not ranges_overlap(MONDAY, date(2030, 1, 10), FRIDAY, SUNDAY)


# --- Transitions ----------------------------------------------------------------


def test_pending_can_be_approved():
    check_transition(LeaveStatus.PENDING, LeaveStatus.APPROVED)


def test_draft_cannot_be_approved():
    with pytest.raises(BusinessRuleError) as exc:
        check_transition(LeaveStatus.DRAFT, LeaveStatus.APPROVED)
    assert exc.value.code == "INVALID_LEAVE_TRANSITION"
    assert exc.value.params == {"current": "draft", "target": "approved"}


def test_rejected_is_terminal():
    for target in LeaveStatus:
        with pytest.raises(BusinessRuleError):
            check_transition(LeaveStatus.REJECTED, target)


def test_cancel_pending_needs_no_restore():
    assert check_cancellable(LeaveStatus.PENDING, MONDAY, today=date(2030, 1, 1)) is False


def test_cancel_future_approved_restores_balance():
    assert check_cancellable(LeaveStatus.APPROVED, MONDAY, today=date(2030, 1, 1)) is True


def test_cancel_started_approved_rejected():
    with pytest.raises(BusinessRuleError) as exc:
        check_cancellable(LeaveStatus.APPROVED, MONDAY, today=MONDAY)
    assert exc.value.code == "LEAVE_ALREADY_STARTED"


def test_cancel_cancelled_rejected():
    with pytest.raises(BusinessRuleError):
        check_cancellable(LeaveStatus.CANCELLED, MONDAY, today=date(2030, 1, 1))
