"""Cash balance snapshot building.

``build_snapshot`` is a pure function: it only combines the figures it is
handed and never touches the database. ``SnapshotService`` gathers those
figures from the storage collaborator.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Optional

from cashdrawer.database.base import Database
from cashdrawer.domain.entities import (
    ZERO,
    BalanceSnapshot,
    CashClosure,
    CashSession,
    PaymentMethod,
    SessionLedgerTotals,
)

CASH_METHOD_NAME = "Cash"


def resolve_cash_method_id(methods: Iterable[PaymentMethod]) -> Optional[int]:
    """Return the ID of the active method treated as physical cash.

    The first active method named "Cash" (case-insensitive) wins, in the order
    given. A method flagged ``is_cash`` is only used when no such name exists.
    """
    active = [method for method in methods if method.is_active]
    for method in active:
        if method.name.casefold() == CASH_METHOD_NAME.casefold():
            return method.id
    for method in active:
        if method.is_cash:
            return method.id
    return None


def build_snapshot(
    session: CashSession,
    methods: Iterable[PaymentMethod],
    totals: SessionLedgerTotals,
    counted_cash: Optional[Decimal] = None,
    counted_totals: Optional[Mapping[int, Decimal]] = None,
) -> BalanceSnapshot:
    """Combine ledger totals and tender data into a balance snapshot.

    Args:
        session: Session being reconciled
        methods: All payment methods; inactive ones are ignored
        totals: Aggregated payment, movement and expense totals for the session
        counted_cash: Cash counted at close, if any
        counted_totals: Counted amounts for non-cash tenders, keyed by method ID

    Returns:
        BalanceSnapshot with every intermediate figure retained
    """
    active = tuple(method for method in methods if method.is_active)
    cash_method_id = resolve_cash_method_id(active)
    payment_totals = dict(totals.payment_totals)

    cash_expenses = ZERO
    cash_payments = ZERO
    if cash_method_id is not None:
        cash_expenses = totals.expense_totals.get(cash_method_id, ZERO)
        cash_payments = payment_totals.get(cash_method_id, ZERO)

    expected_cash = (
        session.opening_amount
        + cash_payments
        + totals.movements_in
        - totals.movements_out
        - cash_expenses
    )

    # Only cash is reconciled against the drawer; other tenders show payments.
    balances: dict[int, Decimal] = {}
    for method in active:
        if method.id == cash_method_id:
            balances[method.id] = expected_cash
        else:
            balances[method.id] = payment_totals.get(method.id, ZERO)

    return BalanceSnapshot(
        session=session,
        methods=active,
        payment_totals=payment_totals,
        movements_in=totals.movements_in,
        movements_out=totals.movements_out,
        cash_expenses=cash_expenses,
        expected_cash=expected_cash,
        method_balances=balances,
        cash_method_id=cash_method_id,
        counted_cash=counted_cash,
        counted_totals=dict(counted_totals or {}),
    )


def snapshot_from_closure(session: CashSession, closure: CashClosure) -> BalanceSnapshot:
    """Rebuild the snapshot of a closed session from its closing record.

    The figures are the ones frozen at close. Ledger rows written later, even
    ones dated inside the session window, do not change them.
    """
    cash_method_id = closure.cash_method_id
    methods = tuple(
        PaymentMethod(
            id=line.payment_method_id,
            name=line.method_name,
            is_active=True,
            is_cash=line.payment_method_id == cash_method_id,
        )
        for line in closure.lines
    )

    payment_totals = {
        line.payment_method_id: line.expected
        for line in closure.lines
        if line.payment_method_id != cash_method_id
    }
    if cash_method_id is not None:
        payment_totals[cash_method_id] = closure.cash_payments

    counted_totals = {
        line.payment_method_id: line.counted
        for line in closure.lines
        if line.counted is not None and line.payment_method_id != cash_method_id
    }

    return BalanceSnapshot(
        session=session,
        methods=methods,
        payment_totals=payment_totals,
        movements_in=closure.movements_in,
        movements_out=closure.movements_out,
        cash_expenses=closure.cash_expenses,
        expected_cash=closure.expected_cash,
        method_balances={line.payment_method_id: line.expected for line in closure.lines},
        cash_method_id=cash_method_id,
        counted_cash=closure.counted_cash,
        counted_totals=counted_totals,
    )


class SnapshotService:
    """Service for reading the reconciliation state of cash sessions."""

    def __init__(self, db: Database):
        """Initialize snapshot service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_snapshot(self, session_id: int) -> Optional[BalanceSnapshot]:
        """Build the snapshot for a session.

        Open sessions are aggregated up to now. Closed sessions are read back
        from their closing record, so later ledger writes never change them.

        Args:
            session_id: Cash session ID

        Returns:
            BalanceSnapshot, or None if the session does not exist
        """
        session = self.db.get_session(session_id)
        if session is None:
            return None

        if not session.is_open:
            closure = self.db.get_closure(session_id)
            if closure is not None:
                return snapshot_from_closure(session, closure)

        totals = self.db.get_session_summary(session_id)
        if totals is None:
            return None
        return build_snapshot(totals.session, self.db.list_payment_methods(), totals)

    def get_open_snapshot(self) -> Optional[BalanceSnapshot]:
        """Build the snapshot for the currently open session, if any."""
        session = self.db.get_open_session()
        if session is None:
            return None
        return self.get_snapshot(session.id)
