"""Tests for the pure balance snapshot builder."""

from datetime import datetime, UTC
from decimal import Decimal

from cashdrawer.domain.entities import (
    CashClosure,
    CashSession,
    ClosureLine,
    PaymentMethod,
    SessionLedgerTotals,
    SessionStatus,
)
from cashdrawer.domain.snapshot import (
    build_snapshot,
    resolve_cash_method_id,
    snapshot_from_closure,
)


def _session(opening="100.00"):
    return CashSession(
        id=1,
        opened_by=7,
        opened_at=datetime(2024, 3, 1, 9, 0, tzinfo=UTC),
        opening_amount=Decimal(opening),
        status=SessionStatus.OPEN,
    )


METHODS = (
    PaymentMethod(id=1, name="Cash", is_active=True),
    PaymentMethod(id=2, name="Card", is_active=True),
    PaymentMethod(id=3, name="Transfer", is_active=True),
)


def test_expected_cash_combines_all_cash_flows():
    """Opening 100 + cash payments 200 + in 20 - out 10 - cash expenses 10 = 300."""
    session = _session()
    totals = SessionLedgerTotals(
        session=session,
        payment_totals={1: Decimal("200.00"), 2: Decimal("75.50")},
        movements_in=Decimal("20.00"),
        movements_out=Decimal("10.00"),
        expense_totals={1: Decimal("10.00")},
    )

    snapshot = build_snapshot(session, METHODS, totals)

    assert snapshot.expected_cash == Decimal("300.00")
    assert snapshot.cash_method_id == 1
    assert snapshot.cash_payments == Decimal("200.00")
    assert snapshot.cash_expenses == Decimal("10.00")
    assert snapshot.method_balances == {
        1: Decimal("300.00"),
        2: Decimal("75.50"),
        3: Decimal("0"),
    }
    assert snapshot.counted_cash is None
    assert snapshot.cash_variance is None


def test_counted_cash_gives_variance():
    session = _session()
    totals = SessionLedgerTotals(session=session, payment_totals={1: Decimal("200.00")})

    snapshot = build_snapshot(session, METHODS, totals, counted_cash=Decimal("295.00"))

    assert snapshot.expected_cash == Decimal("300.00")
    assert snapshot.cash_variance == Decimal("-5.00")
    assert snapshot.variance_for(1) == Decimal("-5.00")
    assert snapshot.variance_for(2) is None


def test_counted_non_cash_totals_give_per_method_variance():
    session = _session()
    totals = SessionLedgerTotals(session=session, payment_totals={2: Decimal("80.00")})

    snapshot = build_snapshot(
        session, METHODS, totals, counted_cash=Decimal("100.00"), counted_totals={2: Decimal("82.00")}
    )

    assert snapshot.counted_for(2) == Decimal("82.00")
    assert snapshot.variance_for(2) == Decimal("2.00")
    assert snapshot.counted_for(3) is None


def test_no_cash_method_ignores_payments_and_expenses():
    """Without a cash tender only opening amount and movements are counted."""
    session = _session()
    methods = (PaymentMethod(id=2, name="Card", is_active=True),)
    totals = SessionLedgerTotals(
        session=session,
        payment_totals={2: Decimal("500.00")},
        movements_in=Decimal("20.00"),
        movements_out=Decimal("5.00"),
        expense_totals={2: Decimal("50.00")},
    )

    snapshot = build_snapshot(session, methods, totals)

    assert snapshot.cash_method_id is None
    assert snapshot.expected_cash == Decimal("115.00")
    assert snapshot.cash_payments == Decimal("0")
    assert snapshot.cash_expenses == Decimal("0")
    assert snapshot.method_balances == {2: Decimal("500.00")}


def test_inactive_methods_are_excluded():
    session = _session()
    methods = METHODS + (PaymentMethod(id=4, name="Voucher", is_active=False),)
    totals = SessionLedgerTotals(session=session, payment_totals={4: Decimal("30.00")})

    snapshot = build_snapshot(session, methods, totals)

    assert [m.id for m in snapshot.methods] == [1, 2, 3]
    assert 4 not in snapshot.method_balances
    assert snapshot.expected_cash == Decimal("100.00")


def test_inactive_cash_method_is_not_cash():
    session = _session()
    methods = (
        PaymentMethod(id=1, name="Cash", is_active=False),
        PaymentMethod(id=2, name="Card", is_active=True),
    )
    totals = SessionLedgerTotals(session=session, payment_totals={1: Decimal("40.00")})

    snapshot = build_snapshot(session, methods, totals)

    assert snapshot.cash_method_id is None
    assert snapshot.expected_cash == Decimal("100.00")


def test_building_twice_gives_identical_snapshots():
    session = _session()
    totals = SessionLedgerTotals(
        session=session,
        payment_totals={1: Decimal("12.34")},
        movements_in=Decimal("1.00"),
    )

    assert build_snapshot(session, METHODS, totals) == build_snapshot(session, METHODS, totals)


def test_every_active_method_has_a_balance():
    session = _session()
    totals = SessionLedgerTotals(session=session)

    snapshot = build_snapshot(session, METHODS, totals)

    assert set(snapshot.method_balances) == {m.id for m in METHODS}


class TestResolveCashMethod:
    """Tests for picking the tender treated as physical cash."""

    def test_matches_name_case_insensitively(self):
        methods = [
            PaymentMethod(id=5, name="Card", is_active=True),
            PaymentMethod(id=6, name="cASH", is_active=True),
        ]
        assert resolve_cash_method_id(methods) == 6

    def test_first_match_wins_for_duplicate_names(self):
        methods = [
            PaymentMethod(id=3, name="Cash", is_active=True),
            PaymentMethod(id=8, name="CASH", is_active=True),
        ]
        assert resolve_cash_method_id(methods) == 3

    def test_name_beats_flag(self):
        methods = [
            PaymentMethod(id=1, name="Cash", is_active=True),
            PaymentMethod(id=2, name="Efectivo", is_active=True, is_cash=True),
        ]
        assert resolve_cash_method_id(methods) == 1

    def test_flag_used_when_no_method_named_cash(self):
        methods = [
            PaymentMethod(id=1, name="Card", is_active=True),
            PaymentMethod(id=2, name="Efectivo", is_active=True, is_cash=True),
        ]
        assert resolve_cash_method_id(methods) == 2

    def test_inactive_flagged_method_is_ignored(self):
        methods = [PaymentMethod(id=2, name="Efectivo", is_active=False, is_cash=True)]
        assert resolve_cash_method_id(methods) is None

    def test_none_when_no_cash_tender(self):
        methods = [PaymentMethod(id=1, name="Card", is_active=True)]
        assert resolve_cash_method_id(methods) is None


def test_flagged_method_does_not_hide_cash_payments():
    """Cash payments still count when another method carries the cash flag."""
    session = _session()
    methods = (
        PaymentMethod(id=1, name="Cash", is_active=True),
        PaymentMethod(id=2, name="Efectivo", is_active=True, is_cash=True),
    )
    totals = SessionLedgerTotals(session=session, payment_totals={1: Decimal("200.00")})

    snapshot = build_snapshot(session, methods, totals)

    assert snapshot.cash_method_id == 1
    assert snapshot.expected_cash == Decimal("300.00")
    assert snapshot.method_balances[2] == Decimal("0")


def test_snapshot_from_closure_uses_stored_figures():
    closed_at = datetime(2024, 3, 1, 18, 0, tzinfo=UTC)
    session = CashSession(
        id=1,
        opened_by=7,
        opened_at=datetime(2024, 3, 1, 9, 0, tzinfo=UTC),
        opening_amount=Decimal("100.00"),
        status=SessionStatus.CLOSED,
        closed_by=8,
        closed_at=closed_at,
    )
    closure = CashClosure(
        id=5,
        session_id=1,
        closed_by=8,
        closed_at=closed_at,
        expected_cash=Decimal("300.00"),
        counted_cash=Decimal("295.00"),
        cash_variance=Decimal("-5.00"),
        cash_method_id=1,
        cash_payments=Decimal("200.00"),
        movements_in=Decimal("50.00"),
        movements_out=Decimal("20.00"),
        cash_expenses=Decimal("30.00"),
        lines=(
            ClosureLine(1, "Cash", Decimal("300.00"), Decimal("295.00"), Decimal("-5.00")),
            ClosureLine(2, "Card", Decimal("80.00"), Decimal("81.00"), Decimal("1.00")),
            ClosureLine(3, "Transfer", Decimal("0.00"), None, None),
        ),
    )

    snapshot = snapshot_from_closure(session, closure)

    assert snapshot.session == session
    assert [m.name for m in snapshot.methods] == ["Cash", "Card", "Transfer"]
    assert snapshot.cash_method_id == 1
    assert snapshot.cash_payments == Decimal("200.00")
    assert snapshot.payment_totals[2] == Decimal("80.00")
    assert snapshot.expected_cash == Decimal("300.00")
    assert snapshot.cash_variance == Decimal("-5.00")
    assert snapshot.method_balances == {1: Decimal("300.00"), 2: Decimal("80.00"), 3: Decimal("0.00")}
    assert snapshot.variance_for(2) == Decimal("1.00")
    assert snapshot.counted_for(3) is None
