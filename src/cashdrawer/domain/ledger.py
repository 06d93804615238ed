"""Ledger source domain service.

Records the payments and expenses that cash session aggregation consumes.
"""

from collections.abc import Callable
from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from cashdrawer.database.base import Database
from cashdrawer.domain.entities import PaymentSource
from cashdrawer.domain.errors import NotFoundError, ValidationError, payment_method_not_found
from cashdrawer.domain.money import positive_money


class LedgerService:
    """Service for recording tendered payments and expenses."""

    def __init__(self, db: Database, clock: Optional[Callable[[], datetime]] = None):
        """Initialize ledger service.

        Args:
            db: Database instance
            clock: Returns the current UTC time; defaults to the system clock
        """
        self.db = db
        self.clock = clock or (lambda: datetime.now(UTC))

    def record_payment(
        self,
        payment_method_id: int,
        amount: Decimal | int | str,
        paid_at: Optional[datetime] = None,
        source: PaymentSource | str = PaymentSource.SALE,
    ) -> int:
        """Record a tendered payment.

        Args:
            payment_method_id: Tender the payment was received in
            amount: Positive amount
            paid_at: Payment instant; defaults to now
            source: "sale" for sale payments, "payment" for standalone payments

        Returns:
            Payment ID

        Raises:
            ValidationError: If the amount or source is invalid
            NotFoundError: If the payment method doesn't exist
        """
        value = positive_money(amount, "Amount")
        try:
            payment_source = PaymentSource(source)
        except ValueError as e:
            raise ValidationError(f"Invalid payment source '{source}'") from e
        self._require_method(payment_method_id)

        return self.db.record_payment(
            payment_method_id=payment_method_id,
            amount=value,
            paid_at=paid_at or self.clock(),
            source=payment_source,
        )

    def record_expense(
        self,
        description: str,
        amount: Decimal | int | str,
        payment_method_id: Optional[int] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
        created_by: Optional[int] = None,
    ) -> int:
        """Record an expense.

        Only expenses tagged with a payment method take part in session
        reconciliation.

        Returns:
            Expense ID

        Raises:
            ValidationError: If the description is blank or the amount invalid
            NotFoundError: If the payment method doesn't exist
        """
        description = (description or "").strip()
        if not description:
            raise ValidationError("Expense description cannot be empty")
        value = positive_money(amount, "Amount")
        if payment_method_id is not None:
            self._require_method(payment_method_id)

        return self.db.record_expense(
            description=description,
            amount=value,
            payment_method_id=payment_method_id,
            notes=notes.strip() if notes and notes.strip() else None,
            created_at=created_at or self.clock(),
            created_by=created_by,
        )

    def _require_method(self, payment_method_id: int) -> None:
        if self.db.get_payment_method(payment_method_id) is None:
            raise NotFoundError(payment_method_not_found(payment_method_id))
