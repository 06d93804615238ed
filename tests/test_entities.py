"""Tests for domain entities."""

import pytest
from datetime import datetime, UTC
from decimal import Decimal

from cashdrawer.domain.entities import (
    BalanceSnapshot,
    CashSession,
    CountedBuckets,
    MovementKind,
    PaymentMethod,
    SessionStatus,
)


def _session(status=SessionStatus.OPEN):
    return CashSession(
        id=1,
        opened_by=1,
        opened_at=datetime.now(UTC),
        opening_amount=Decimal("50.00"),
        status=status,
    )


class TestCashSession:
    """Tests for CashSession entity."""

    def test_is_open(self):
        assert _session().is_open is True
        assert _session(SessionStatus.CLOSED).is_open is False

    def test_immutability(self):
        session = _session()
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            session.status = SessionStatus.CLOSED

    def test_status_values(self):
        assert SessionStatus("Open") is SessionStatus.OPEN
        assert SessionStatus.CLOSED.value == "Closed"
        assert MovementKind("Out") is MovementKind.OUT


class TestCountedBuckets:
    """Tests for CountedBuckets entity."""

    def test_defaults_to_zero(self):
        buckets = CountedBuckets()
        assert buckets.cash == Decimal("0")
        assert buckets.card == Decimal("0")
        assert buckets.transfer == Decimal("0")
        assert buckets.other == Decimal("0")


class TestBalanceSnapshot:
    """Tests for BalanceSnapshot derived figures."""

    def _snapshot(self, counted_cash=None, cash_method_id=1):
        return BalanceSnapshot(
            session=_session(),
            methods=(PaymentMethod(id=1, name="Cash", is_active=True),),
            payment_totals={1: Decimal("25.00")},
            movements_in=Decimal("0"),
            movements_out=Decimal("0"),
            cash_expenses=Decimal("0"),
            expected_cash=Decimal("75.00"),
            method_balances={1: Decimal("75.00")},
            cash_method_id=cash_method_id,
            counted_cash=counted_cash,
        )

    def test_cash_payments(self):
        assert self._snapshot().cash_payments == Decimal("25.00")
        assert self._snapshot(cash_method_id=None).cash_payments == Decimal("0")

    def test_variance_requires_count(self):
        assert self._snapshot().cash_variance is None
        assert self._snapshot(Decimal("80.00")).cash_variance == Decimal("5.00")

    def test_counted_for_cash_method_uses_counted_cash(self):
        snapshot = self._snapshot(Decimal("70.00"))
        assert snapshot.counted_for(1) == Decimal("70.00")
        assert snapshot.variance_for(1) == Decimal("-5.00")
