"""Payment method domain service."""

from typing import Optional

from cashdrawer.database.base import Database
from cashdrawer.domain.entities import PaymentMethod
from cashdrawer.domain.errors import ConflictError, ValidationError
from cashdrawer.domain.snapshot import resolve_cash_method_id


class PaymentMethodService:
    """Service for managing the tender registry."""

    def __init__(self, db: Database):
        """Initialize payment method service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_method(self, name: str, is_active: bool = True, is_cash: bool = False) -> int:
        """Create a payment method.

        Args:
            name: Display name (e.g. "Cash", "Card")
            is_active: Whether the method is offered and reconciled
            is_cash: Explicitly mark the method as the physical cash tender

        Returns:
            Payment method ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If an active cash tender already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Payment method name cannot be empty")

        if is_cash and is_active:
            cash_method_id = resolve_cash_method_id(self.db.list_payment_methods())
            if cash_method_id is not None:
                cash_method = self.db.get_payment_method(cash_method_id)
                raise ConflictError(
                    f"Payment method '{cash_method.name}' (ID: {cash_method.id}) is already the cash tender"
                )

        return self.db.create_payment_method(name=name, is_active=is_active, is_cash=is_cash)

    def get_method(self, method_id: int) -> Optional[PaymentMethod]:
        """Get payment method by ID."""
        return self.db.get_payment_method(method_id)

    def list_methods(self, active_only: bool = False) -> list[PaymentMethod]:
        """List payment methods ordered by ID.

        Args:
            active_only: If True, skip inactive methods
        """
        methods = self.db.list_payment_methods()
        if active_only:
            return [method for method in methods if method.is_active]
        return methods

    def find_by_name(self, name: str) -> Optional[PaymentMethod]:
        """Find a payment method by case-insensitive name, preferring active ones."""
        wanted = name.strip().casefold()
        matches = [m for m in self.db.list_payment_methods() if m.name.casefold() == wanted]
        for method in matches:
            if method.is_active:
                return method
        return matches[0] if matches else None
