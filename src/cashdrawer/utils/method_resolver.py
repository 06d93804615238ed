"""Utility for resolving payment method names to IDs."""

from cashdrawer.domain.errors import NotFoundError, payment_method_not_found
from cashdrawer.domain.payment_method import PaymentMethodService


def resolve_payment_method(method_service: PaymentMethodService, method: str | int) -> int:
    """Resolve payment method name or ID to payment method ID.

    Names are matched case-insensitively; the first match by ID wins.

    Raises:
        NotFoundError: If the payment method is not found
    """
    if isinstance(method, int):
        if method_service.get_method(method) is None:
            raise NotFoundError(payment_method_not_found(method))
        return method

    try:
        method_id = int(method)
    except (ValueError, TypeError):
        method_id = None

    if method_id is not None:
        if method_service.get_method(method_id) is None:
            raise NotFoundError(payment_method_not_found(method_id))
        return method_id

    found = method_service.find_by_name(method)
    if found is None:
        raise NotFoundError(payment_method_not_found(method))
    return found.id
