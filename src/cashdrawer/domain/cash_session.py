"""Cash session domain service.

Manages the lifecycle of the single cash drawer: opening a session,
recording cash movements against it, and closing it with counted totals.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime, time, timedelta, UTC
from decimal import Decimal
from typing import Any, Optional

from cashdrawer.database.base import Database
from cashdrawer.domain.audit import AuditService
from cashdrawer.domain.entities import (
    AuditAction,
    BalanceSnapshot,
    CashClosure,
    CashMovement,
    CashSession,
    CountedBuckets,
    MovementKind,
    PaymentMethod,
    SessionLedgerTotals,
    SessionStatus,
)
from cashdrawer.domain.errors import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
    session_not_found,
    session_not_open,
)
from cashdrawer.domain.money import non_negative_money, positive_money
from cashdrawer.domain.snapshot import SnapshotService, build_snapshot, resolve_cash_method_id

logger = logging.getLogger(__name__)

SESSION_ENTITY = "CashSession"
MOVEMENT_ENTITY = "CashMovement"

# Non-cash counted buckets, matched to payment methods by name.
COUNTED_BUCKETS = ("card", "transfer", "other")

CountedInput = CountedBuckets | Mapping[int, Decimal | int | str]


def parse_movement_kind(kind: MovementKind | str) -> MovementKind:
    """Parse a movement kind, accepting "in"/"out" in any case.

    Raises:
        ValidationError: If the kind is neither In nor Out
    """
    if isinstance(kind, MovementKind):
        return kind
    wanted = str(kind).strip().casefold()
    for candidate in MovementKind:
        if candidate.value.casefold() == wanted:
            return candidate
    raise ValidationError(f"Invalid movement kind '{kind}'. Use 'In' or 'Out'")


def resolve_counted_totals(
    methods: list[PaymentMethod], counted: Optional[CountedInput]
) -> tuple[Optional[Decimal], dict[int, Decimal]]:
    """Turn operator counts into (counted cash, counted non-cash totals by method ID).

    ``counted`` is either a CountedBuckets value or a mapping of payment
    method ID to counted amount. Counted amounts must not be negative and may
    only reference active methods.

    Raises:
        ValidationError: If an amount is invalid or a count can't be attributed
    """
    if counted is None:
        return None, {}

    active = [method for method in methods if method.is_active]
    cash_method_id = resolve_cash_method_id(active)

    if isinstance(counted, CountedBuckets):
        counted_cash = non_negative_money(counted.cash, "Counted cash")
        counted_totals: dict[int, Decimal] = {}
        for bucket in COUNTED_BUCKETS:
            amount = non_negative_money(getattr(counted, bucket), f"Counted {bucket}")
            method = next(
                (
                    m
                    for m in active
                    if m.name.casefold() == bucket and m.id != cash_method_id
                ),
                None,
            )
            if method is not None:
                counted_totals[method.id] = amount
            elif amount != 0:
                raise ValidationError(
                    f"No active payment method matches the counted '{bucket}' total"
                )
        return counted_cash, counted_totals

    active_ids = {method.id for method in active}
    counted_cash = None
    counted_totals = {}
    for method_id, raw_amount in counted.items():
        if method_id not in active_ids:
            raise ValidationError(f"Payment method ID {method_id} is not an active payment method")
        amount = non_negative_money(raw_amount, "Counted amount")
        if method_id == cash_method_id:
            counted_cash = amount
        else:
            counted_totals[method_id] = amount
    return counted_cash, counted_totals


class CashSessionService:
    """Service for managing cash sessions."""

    def __init__(
        self,
        db: Database,
        audit: Optional[AuditService] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize cash session service.

        Args:
            db: Database instance
            audit: Audit trail writer; defaults to one backed by ``db``
            clock: Returns the current UTC time; defaults to the system clock
        """
        self.db = db
        self.clock = clock or (lambda: datetime.now(UTC))
        self.audit = audit if audit is not None else AuditService(db, clock=self.clock)
        self.snapshots = SnapshotService(db)

    def open_session(self, opening_amount: Decimal | int | str, operator_id: int) -> CashSession:
        """Open a new cash session.

        Args:
            opening_amount: Cash placed in the drawer, zero or more
            operator_id: User opening the session

        Returns:
            The new open session

        Raises:
            ValidationError: If the opening amount is negative
            ConflictError: If a session is already open
        """
        amount = non_negative_money(opening_amount, "Opening amount")
        session = self.db.open_session(
            opened_by=operator_id, opening_amount=amount, opened_at=self.clock()
        )
        logger.info(
            "Cash session %s opened by user %s with %s",
            session.id,
            operator_id,
            amount,
            extra={"session_id": session.id, "user_id": operator_id},
        )
        self._audit_safely(
            AuditAction.CASH_SESSION_OPENED,
            SESSION_ENTITY,
            session.id,
            operator_id,
            {"opening_amount": amount, "opened_at": session.opened_at},
        )
        return session

    def get_session(self, session_id: int) -> Optional[CashSession]:
        """Get cash session by ID."""
        return self.db.get_session(session_id)

    def get_current_session(self) -> Optional[CashSession]:
        """Get the currently open session, if any."""
        return self.db.get_open_session()

    def add_movement(
        self,
        session_id: int,
        kind: MovementKind | str,
        amount: Decimal | int | str,
        note: Optional[str],
        operator_id: int,
    ) -> CashMovement:
        """Record cash put into or taken out of the drawer.

        Args:
            session_id: Open session the movement belongs to
            kind: "In" or "Out"
            amount: Positive amount
            note: Optional free text; blank notes are stored as None
            operator_id: User recording the movement

        Returns:
            The stored movement

        Raises:
            ValidationError: If the kind or amount is invalid
            NotFoundError: If the session doesn't exist
            InvalidStateError: If the session is closed
        """
        movement_kind = parse_movement_kind(kind)
        value = positive_money(amount, "Amount")
        note = note.strip() if note else None

        movement = self.db.create_movement(
            session_id=session_id,
            kind=movement_kind,
            amount=value,
            note=note or None,
            created_by=operator_id,
            created_at=self.clock(),
        )
        logger.info(
            "Cash movement %s (%s %s) recorded on session %s by user %s",
            movement.id,
            movement.kind.value,
            movement.amount,
            session_id,
            operator_id,
            extra={"session_id": session_id, "user_id": operator_id},
        )
        self._audit_safely(
            AuditAction.CASH_MOVEMENT_CREATED,
            MOVEMENT_ENTITY,
            movement.id,
            operator_id,
            {
                "session_id": session_id,
                "kind": movement.kind,
                "amount": movement.amount,
                "note": movement.note,
            },
        )
        return movement

    def list_movements(self, session_id: Optional[int] = None) -> list[CashMovement]:
        """List cash movements, newest first, optionally for one session."""
        return self.db.list_movements(session_id)

    def close_session(
        self, session_id: int, counted: Optional[CountedInput], operator_id: int
    ) -> BalanceSnapshot:
        """Close a session, recording the counted totals against the expected ones.

        The expected figures are computed inside the closing transaction, so a
        movement recorded concurrently either lands before the snapshot or is
        rejected because the session is already closed.

        Args:
            session_id: Session to close
            counted: CountedBuckets, or counted amounts keyed by payment method ID
            operator_id: User closing the session

        Returns:
            Final snapshot with counted figures and variances

        Raises:
            NotFoundError: If the session doesn't exist
            InvalidStateError: If the session is already closed
            ValidationError: If the counted amounts are invalid
        """
        session = self.db.get_session(session_id)
        if session is None:
            raise NotFoundError(session_not_found(session_id))
        if session.status != SessionStatus.OPEN:
            raise InvalidStateError(session_not_open(session_id))

        methods = self.db.list_payment_methods()
        counted_cash, counted_totals = resolve_counted_totals(methods, counted)

        def finalize(totals: SessionLedgerTotals) -> BalanceSnapshot:
            return build_snapshot(
                totals.session,
                methods,
                totals,
                counted_cash=counted_cash,
                counted_totals=counted_totals,
            )

        snapshot = self.db.close_session(
            session_id=session_id,
            closed_by=operator_id,
            closed_at=self.clock(),
            finalize=finalize,
        )

        variance = snapshot.cash_variance
        log_context = {"session_id": session_id, "user_id": operator_id}
        if variance:
            logger.warning(
                "Cash session %s closed by user %s with variance %s (expected %s, counted %s)",
                session_id,
                operator_id,
                variance,
                snapshot.expected_cash,
                snapshot.counted_cash,
                extra=log_context,
            )
        else:
            logger.info(
                "Cash session %s closed by user %s", session_id, operator_id, extra=log_context
            )

        self._audit_safely(
            AuditAction.CASH_SESSION_CLOSED,
            SESSION_ENTITY,
            session_id,
            operator_id,
            {
                "expected_cash": snapshot.expected_cash,
                "counted_cash": snapshot.counted_cash,
                "cash_variance": variance,
                "expected": {
                    str(method.id): snapshot.method_balances[method.id]
                    for method in snapshot.methods
                },
                "counted": {
                    str(method.id): snapshot.counted_for(method.id)
                    for method in snapshot.methods
                    if snapshot.counted_for(method.id) is not None
                },
            },
        )
        return snapshot

    def get_snapshot(self, session_id: int) -> BalanceSnapshot:
        """Get the balance snapshot of a session.

        Raises:
            NotFoundError: If the session doesn't exist
        """
        snapshot = self.snapshots.get_snapshot(session_id)
        if snapshot is None:
            raise NotFoundError(session_not_found(session_id))
        return snapshot

    def get_open_snapshot(self) -> Optional[BalanceSnapshot]:
        """Get the balance snapshot of the open session, if any."""
        return self.snapshots.get_open_snapshot()

    def get_closure(self, session_id: int) -> Optional[CashClosure]:
        """Get the closing record of a session, if it was closed."""
        return self.db.get_closure(session_id)

    def list_closures(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[CashSession]:
        """List closed sessions, newest first.

        Args:
            start_date: Only sessions closed on or after this UTC day
            end_date: Only sessions closed on or before this UTC day
        """
        closed_from = None
        closed_before = None
        if start_date is not None:
            closed_from = datetime.combine(start_date, time.min, tzinfo=UTC)
        if end_date is not None:
            closed_before = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=UTC)
        if closed_from is not None and closed_before is not None and closed_from >= closed_before:
            raise ValidationError("Start date must be on or before end date")

        return self.db.list_sessions(
            status=SessionStatus.CLOSED, closed_from=closed_from, closed_before=closed_before
        )

    def _audit_safely(
        self,
        action: AuditAction,
        entity_name: str,
        entity_id: int,
        user_id: int,
        payload: dict[str, Any],
    ) -> None:
        # The audit trail never rolls back or fails a committed operation.
        try:
            self.audit.log(action.value, entity_name, entity_id, user_id, payload)
        except Exception:
            logger.warning(
                "Failed to write audit entry %s for %s %s",
                action.value,
                entity_name,
                entity_id,
                exc_info=True,
                extra={"action": action.value, "user_id": user_id},
            )
