"""Tests for created / paid / both report-window semantics."""
import pytest

from salesgrid.services.date_pivot import (
    created_timestamp,
    is_in_range,
    needs_payment_lookup,
    paid_timestamp,
    pivot_timestamp,
)
from salesgrid.utils.money import parse_timestamp

from factories import make_order, make_payment


def day_window(day: int):
    start = parse_timestamp(f"2025-01-{day:02d}T00:00:00.000-03:00")
    end = parse_timestamp(f"2025-01-{day:02d}T23:59:59.999-03:00")
    return start, end


@pytest.fixture
def order():
    """Created on day 1, paid on day 5"""
    return make_order(date_created="2025-01-01T12:00:00.000-03:00")


@pytest.fixture
def payments():
    return [make_payment(
        date_approved="2025-01-05T12:00:00.000-03:00",
        date_created="2025-01-05T11:00:00.000-03:00",
    )]


class TestPaidTimestamp:

    def test_earliest_approved_payment(self, order):
        payments = [
            make_payment(payment_id=1, date_approved="2025-01-06T00:00:00.000Z"),
            make_payment(payment_id=2, date_approved="2025-01-04T00:00:00.000Z"),
        ]
        assert paid_timestamp(order, payments) == parse_timestamp("2025-01-04T00:00:00.000Z")

    def test_unapproved_payments_are_ignored(self, order):
        payments = [make_payment(status="rejected", date_approved="2025-01-02T00:00:00.000Z")]
        assert paid_timestamp(order, payments) is None

    def test_accredited_falls_back_to_accreditation_date(self, order):
        payments = [make_payment(status="accredited", date_approved=None, date_accredited="2025-01-03T00:00:00.000Z")]
        assert paid_timestamp(order, payments) == parse_timestamp("2025-01-03T00:00:00.000Z")

    def test_falls_back_to_creation_date(self, order):
        payments = [make_payment(date_approved=None, date_created="2025-01-02T00:00:00.000Z")]
        assert paid_timestamp(order, payments) == parse_timestamp("2025-01-02T00:00:00.000Z")

    def test_order_closing_time_counts(self, payments):
        order = make_order(date_closed="2025-01-04T08:00:00.000-03:00")
        assert paid_timestamp(order, payments) == parse_timestamp("2025-01-04T08:00:00.000-03:00")

    def test_nothing_resolves(self, order):
        assert paid_timestamp(order, []) is None
        assert paid_timestamp(order, None) is None


class TestIsInRange:

    @pytest.mark.parametrize("day,expected", [(1, True), (3, False), (5, True)])
    def test_both_mode(self, order, payments, day, expected):
        assert is_in_range(order, payments, "both", *day_window(day)) is expected

    @pytest.mark.parametrize("day,expected", [(1, True), (3, False), (5, False)])
    def test_created_mode(self, order, payments, day, expected):
        assert is_in_range(order, payments, "created", *day_window(day)) is expected

    @pytest.mark.parametrize("day,expected", [(1, False), (3, False), (5, True)])
    def test_paid_mode(self, order, payments, day, expected):
        assert is_in_range(order, payments, "paid", *day_window(day)) is expected

    def test_paid_mode_without_payment_excludes(self, order):
        assert is_in_range(order, [], "paid", *day_window(1)) is False

    def test_bounds_are_inclusive(self, order, payments):
        created = created_timestamp(order)
        assert is_in_range(order, payments, "created", created, created)


class TestPivotTimestamp:

    def test_created_mode(self, order, payments):
        assert pivot_timestamp(order, payments, "created") == created_timestamp(order)

    def test_paid_mode_uses_payment(self, order, payments):
        assert pivot_timestamp(order, payments, "both") == parse_timestamp("2025-01-05T12:00:00.000-03:00")

    def test_falls_back_to_created_when_unpaid(self, order):
        assert pivot_timestamp(order, [], "paid") == created_timestamp(order)


class TestNeedsPaymentLookup:

    def test_created_mode_never_needs_payments(self, order):
        assert needs_payment_lookup(order, "created") is False

    def test_missing_embedded_payment(self, order):
        assert needs_payment_lookup(order, "paid") is True

    def test_embedded_payment_is_enough(self, payments):
        assert needs_payment_lookup(make_order(payments=payments), "both") is False
