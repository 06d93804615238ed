"""Abstract database interface."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from cashdrawer.domain.entities import (
    AuditLog,
    BalanceSnapshot,
    CashClosure,
    CashMovement,
    CashSession,
    MovementKind,
    PaymentMethod,
    PaymentSource,
    SessionLedgerTotals,
    SessionStatus,
)

Finalizer = Callable[[SessionLedgerTotals], BalanceSnapshot]


class Database(ABC):
    """Abstract database interface for cashdrawer.

    Every write method is a single transaction: it either fully commits or
    leaves no trace.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Payment method operations
    @abstractmethod
    def create_payment_method(self, name: str, is_active: bool = True, is_cash: bool = False) -> int:
        """Create a payment method. Returns payment method ID."""
        pass

    @abstractmethod
    def get_payment_method(self, method_id: int) -> Optional[PaymentMethod]:
        """Get payment method by ID."""
        pass

    @abstractmethod
    def list_payment_methods(self) -> list[PaymentMethod]:
        """List all payment methods, active and inactive, ordered by ID."""
        pass

    # Cash session operations
    @abstractmethod
    def get_session(self, session_id: int) -> Optional[CashSession]:
        """Get cash session by ID."""
        pass

    @abstractmethod
    def get_open_session(self) -> Optional[CashSession]:
        """Get the currently open cash session, if any."""
        pass

    @abstractmethod
    def list_sessions(
        self,
        status: Optional[SessionStatus] = None,
        closed_from: Optional[datetime] = None,
        closed_before: Optional[datetime] = None,
    ) -> list[CashSession]:
        """List cash sessions, newest first.

        Args:
            status: Optional status filter
            closed_from: Only sessions closed at or after this instant
            closed_before: Only sessions closed strictly before this instant
        """
        pass

    @abstractmethod
    def open_session(self, opened_by: int, opening_amount: Decimal, opened_at: datetime) -> CashSession:
        """Create a new open session.

        The existence check and the insert are atomic against concurrent callers.

        Raises:
            ConflictError: If a session is already open
        """
        pass

    @abstractmethod
    def get_session_summary(
        self, session_id: int, as_of: Optional[datetime] = None
    ) -> Optional[SessionLedgerTotals]:
        """Get aggregated payment, movement and expense totals for a session.

        The aggregation window runs from the session's opening instant to its
        closing instant, or to ``as_of`` (default: now) while it is open.

        Returns:
            SessionLedgerTotals, or None if the session does not exist
        """
        pass

    @abstractmethod
    def close_session(
        self, session_id: int, closed_by: int, closed_at: datetime, finalize: Finalizer
    ) -> BalanceSnapshot:
        """Close a session and persist its closing record.

        The session row is locked, ledger totals are aggregated as of
        ``closed_at`` and handed to ``finalize``; the returned snapshot is
        stored together with the status change in the same transaction.

        Returns:
            The final snapshot, carrying the closed session

        Raises:
            NotFoundError: If the session does not exist
            InvalidStateError: If the session is not open
        """
        pass

    @abstractmethod
    def get_closure(self, session_id: int) -> Optional[CashClosure]:
        """Get the closing record of a session."""
        pass

    # Cash movement operations
    @abstractmethod
    def create_movement(
        self,
        session_id: int,
        kind: MovementKind,
        amount: Decimal,
        note: Optional[str],
        created_by: int,
        created_at: datetime,
    ) -> CashMovement:
        """Record a cash movement against an open session.

        Raises:
            NotFoundError: If the session does not exist
            InvalidStateError: If the session is not open
        """
        pass

    @abstractmethod
    def list_movements(self, session_id: Optional[int] = None) -> list[CashMovement]:
        """List cash movements, newest first, optionally for one session."""
        pass

    # Ledger source records
    @abstractmethod
    def record_payment(
        self, payment_method_id: int, amount: Decimal, paid_at: datetime, source: PaymentSource
    ) -> int:
        """Record a tendered payment. Returns payment ID."""
        pass

    @abstractmethod
    def record_expense(
        self,
        description: str,
        amount: Decimal,
        payment_method_id: Optional[int],
        notes: Optional[str],
        created_at: datetime,
        created_by: Optional[int] = None,
    ) -> int:
        """Record an expense. Returns expense ID."""
        pass

    # Audit operations
    @abstractmethod
    def create_audit_log(
        self,
        action: str,
        entity_name: str,
        entity_id: str,
        user_id: Optional[int],
        data_json: Optional[str],
        created_at: datetime,
    ) -> int:
        """Create an audit log entry. Returns audit log ID."""
        pass

    @abstractmethod
    def list_audit_logs(
        self, entity_name: Optional[str] = None, entity_id: Optional[str] = None
    ) -> list[AuditLog]:
        """List audit log entries in insertion order."""
        pass
