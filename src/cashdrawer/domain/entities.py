"""Domain model entities for cashdrawer.

These are pure data classes representing business concepts, independent of
database schema. Snapshots and ledger totals are derived values and are never
persisted as-is.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


ZERO = Decimal("0.00")


class SessionStatus(str, Enum):
    """Lifecycle status of a cash session."""

    OPEN = "Open"
    CLOSED = "Closed"


class MovementKind(str, Enum):
    """Direction of a manual cash movement."""

    IN = "In"
    OUT = "Out"


class AuditAction(str, Enum):
    """Actions reported to the audit sink."""

    CASH_SESSION_OPENED = "CashSessionOpened"
    CASH_MOVEMENT_CREATED = "CashMovementCreated"
    CASH_SESSION_CLOSED = "CashSessionClosed"


class PaymentSource(str, Enum):
    """Origin of a tendered payment."""

    SALE = "sale"
    PAYMENT = "payment"


@dataclass(frozen=True)
class PaymentMethod:
    """Tender type domain entity."""

    id: int
    name: str
    is_active: bool
    is_cash: bool = False


@dataclass(frozen=True)
class CashSession:
    """One shift of cash-drawer activity."""

    id: int
    opened_by: int
    opened_at: datetime
    opening_amount: Decimal
    status: SessionStatus
    closed_by: Optional[int] = None
    closed_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.OPEN


@dataclass(frozen=True)
class CashMovement:
    """Manual paid-in or paid-out adjustment to the drawer."""

    id: int
    session_id: int
    kind: MovementKind
    amount: Decimal
    note: Optional[str]
    created_at: datetime
    created_by: int


@dataclass(frozen=True)
class Payment:
    """Tendered payment consumed by the ledger aggregation."""

    id: int
    payment_method_id: int
    amount: Decimal
    paid_at: datetime
    source: PaymentSource


@dataclass(frozen=True)
class Expense:
    """Expense record, optionally tagged with the tender it was paid from."""

    id: int
    description: str
    amount: Decimal
    payment_method_id: Optional[int]
    notes: Optional[str]
    created_at: datetime
    created_by: Optional[int]


@dataclass(frozen=True)
class AuditLog:
    """Audit trail entry."""

    id: int
    action: str
    entity_name: str
    entity_id: str
    user_id: Optional[int]
    created_at: datetime
    data_json: Optional[str]


@dataclass(frozen=True)
class SessionLedgerTotals:
    """Aggregated figures for one session, as supplied by the ledger source.

    Payment and expense totals are keyed by payment method ID; methods with no
    activity are simply absent.
    """

    session: CashSession
    payment_totals: dict[int, Decimal] = field(default_factory=dict)
    movements_in: Decimal = ZERO
    movements_out: Decimal = ZERO
    expense_totals: dict[int, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class CountedBuckets:
    """Counted totals entered by the operator at close, one per tender bucket."""

    cash: Decimal = ZERO
    card: Decimal = ZERO
    transfer: Decimal = ZERO
    other: Decimal = ZERO


@dataclass(frozen=True)
class BalanceSnapshot:
    """Full reconciliation state of a session at a point in time.

    All intermediate figures are kept so reports can show how the expected
    cash figure was derived. ``counted_cash`` and ``counted_totals`` are only
    populated for closed sessions.
    """

    session: CashSession
    methods: tuple[PaymentMethod, ...]
    payment_totals: dict[int, Decimal]
    movements_in: Decimal
    movements_out: Decimal
    cash_expenses: Decimal
    expected_cash: Decimal
    method_balances: dict[int, Decimal]
    cash_method_id: Optional[int]
    counted_cash: Optional[Decimal] = None
    counted_totals: dict[int, Decimal] = field(default_factory=dict)

    @property
    def cash_payments(self) -> Decimal:
        if self.cash_method_id is None:
            return ZERO
        return self.payment_totals.get(self.cash_method_id, ZERO)

    @property
    def cash_variance(self) -> Optional[Decimal]:
        """Counted minus expected cash, or None when nothing was counted."""
        if self.counted_cash is None:
            return None
        return self.counted_cash - self.expected_cash

    def counted_for(self, method_id: int) -> Optional[Decimal]:
        if method_id == self.cash_method_id:
            return self.counted_cash
        return self.counted_totals.get(method_id)

    def variance_for(self, method_id: int) -> Optional[Decimal]:
        counted = self.counted_for(method_id)
        if counted is None:
            return None
        return counted - self.method_balances.get(method_id, ZERO)


@dataclass(frozen=True)
class ClosureLine:
    """Expected and counted figures for one tender at close."""

    payment_method_id: int
    method_name: str
    expected: Decimal
    counted: Optional[Decimal]
    variance: Optional[Decimal]


@dataclass(frozen=True)
class CashClosure:
    """Persisted closing record of a cash session."""

    id: int
    session_id: int
    closed_by: int
    closed_at: datetime
    expected_cash: Decimal
    counted_cash: Optional[Decimal]
    cash_variance: Optional[Decimal]
    cash_method_id: Optional[int] = None
    cash_payments: Decimal = ZERO
    movements_in: Decimal = ZERO
    movements_out: Decimal = ZERO
    cash_expenses: Decimal = ZERO
    lines: tuple[ClosureLine, ...] = ()
