import random
import re
from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from agency.domain.coverage import CoveragePeriod, add_years
from agency.domain.policy_ledger import (
    check_invariant,
    commission_entry_type,
    ensure_payment_fits,
    generate_expense_receipt_number,
    generate_receipt_number,
    recompute,
    validate_amount,
    validate_method,
)
from agency.domain.status_transitions import CHEQUE_STATUS, StatusMachine
from agency.errors import (
    AmountExceedsDebtError,
    DomainValidationError,
    InvalidAmountError,
    InvalidPaymentMethodError,
    InvalidTransitionError,
    LedgerIntegrityError,
    PolicyFullyPaidError,
)


def _policy(insurance_amount, *amounts, paid=None, remaining=None):
    payments = [SimpleNamespace(amount=amount) for amount in amounts]
    return SimpleNamespace(
        insurance_amount=insurance_amount,
        payments=payments,
        paid_amount=paid,
        remaining_debt=remaining,
    )


# ============================================================================
# LEDGER FIGURES
# ============================================================================


def test_recompute_derives_figures_from_payments():
    policy = recompute(_policy(1000, 300, 200))
    assert policy.paid_amount == 500
    assert policy.remaining_debt == 500
    check_invariant(policy)


def test_recompute_without_payments():
    policy = recompute(_policy(800))
    assert (policy.paid_amount, policy.remaining_debt) == (0, 800)


def test_check_invariant_detects_stale_paid_amount():
    policy = _policy(1000, 300, 200, paid=300, remaining=700)
    with pytest.raises(LedgerIntegrityError):
        check_invariant(policy)


def test_check_invariant_detects_wrong_remaining_debt():
    policy = _policy(1000, 300, paid=300, remaining=600)
    with pytest.raises(LedgerIntegrityError):
        check_invariant(policy)


def test_check_invariant_detects_overpayment():
    policy = recompute(_policy(500, 400, 200))
    with pytest.raises(LedgerIntegrityError):
        check_invariant(policy)


# ============================================================================
# PAYMENT CHECKS
# ============================================================================


def test_ensure_payment_fits_exact_remaining():
    ensure_payment_fits(remaining_debt=300, amount=300)


def test_ensure_payment_fits_over_remaining():
    with pytest.raises(AmountExceedsDebtError) as exc_info:
        ensure_payment_fits(remaining_debt=300, amount=301)
    assert not isinstance(exc_info.value, PolicyFullyPaidError)


def test_ensure_payment_fits_fully_paid():
    """Test a fully paid policy is reported as such and still counts as exceeding the debt."""
    with pytest.raises(PolicyFullyPaidError) as exc_info:
        ensure_payment_fits(remaining_debt=0, amount=1)
    assert isinstance(exc_info.value, AmountExceedsDebtError)


@pytest.mark.parametrize("amount", [0, -5, None])
def test_validate_amount_rejects_non_positive(amount):
    with pytest.raises(InvalidAmountError):
        validate_amount(amount)


@pytest.mark.parametrize("method", ["cash", "card", "cheque", "bank_transfer"])
def test_validate_method_accepts_known_methods(method):
    validate_method(method)


def test_validate_method_rejects_unknown():
    with pytest.raises(InvalidPaymentMethodError):
        validate_method("bitcoin")


@pytest.mark.parametrize(
    "flow, expected",
    [("from_agent", "credit"), ("to_agent", "debit"), ("none", None)],
)
def test_commission_entry_type(flow, expected):
    assert commission_entry_type(flow) == expected


# ============================================================================
# RECEIPT NUMBERS
# ============================================================================


def test_receipt_number_format():
    assert re.fullmatch(r"REC-\d+-\d{3}", generate_receipt_number())


def test_receipt_number_is_built_from_time_and_random_suffix():
    now = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    receipt = generate_receipt_number(now=now, rng=random.Random(7))
    millis = int(now.timestamp() * 1000)
    assert receipt.startswith(f"REC-{millis}-")
    assert len(receipt.rsplit("-", 1)[1]) == 3


def test_expense_receipt_number_format():
    now = datetime(2026, 1, 2, tzinfo=timezone.utc)
    assert generate_expense_receipt_number(now) == f"EXP-{int(now.timestamp() * 1000)}"


# ============================================================================
# COVERAGE PERIOD
# ============================================================================


def test_coverage_defaults_to_today_for_one_term():
    period = CoveragePeriod.resolve(today=date(2026, 3, 10), term_years=1)
    assert period == CoveragePeriod(date(2026, 3, 10), date(2027, 3, 10))


def test_coverage_continues_from_previous_policy():
    period = CoveragePeriod.resolve(
        today=date(2026, 3, 10), term_years=1, previous_end=date(2026, 6, 1)
    )
    assert period.start_date == date(2026, 6, 1)
    assert period.end_date == date(2027, 6, 1)


def test_coverage_explicit_dates_win():
    period = CoveragePeriod.resolve(
        today=date(2026, 3, 10),
        term_years=1,
        previous_end=date(2026, 6, 1),
        start_date=date(2026, 4, 1),
        end_date=date(2026, 10, 1),
    )
    assert period == CoveragePeriod(date(2026, 4, 1), date(2026, 10, 1))


def test_coverage_end_before_start():
    with pytest.raises(DomainValidationError):
        CoveragePeriod.resolve(
            today=date(2026, 3, 10),
            term_years=1,
            start_date=date(2026, 4, 1),
            end_date=date(2026, 3, 1),
        )


def test_coverage_end_without_start():
    with pytest.raises(DomainValidationError):
        CoveragePeriod.resolve(today=date(2026, 3, 10), term_years=1, end_date=date(2027, 1, 1))


def test_add_years_from_leap_day():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


# ============================================================================
# STATUS MACHINES
# ============================================================================


def test_cheque_status_transitions():
    assert CHEQUE_STATUS.can_transition("pending", "cleared")
    assert CHEQUE_STATUS.can_transition("pending", "returned")
    assert not CHEQUE_STATUS.can_transition("cleared", "pending")
    assert not CHEQUE_STATUS.can_transition("returned", "cleared")


def test_status_machine_rejects_unknown_status():
    machine = StatusMachine("thing", {"open": frozenset({"closed"})})
    assert machine.statuses == frozenset({"open", "closed"})

    with pytest.raises(InvalidTransitionError, match="Unknown thing status"):
        machine.ensure_transition("open", "lost")


def test_status_machine_same_status_is_not_a_transition():
    with pytest.raises(InvalidTransitionError):
        CHEQUE_STATUS.ensure_transition("pending", "pending")
