"""Domain layer for cashdrawer application.

Services are loaded lazily so that ``cashdrawer.database`` can import the
entity module without pulling in the services that depend on it.
"""

from importlib import import_module

_SERVICES = {
    "CashSessionService": "cashdrawer.domain.cash_session",
    "SnapshotService": "cashdrawer.domain.snapshot",
    "PaymentMethodService": "cashdrawer.domain.payment_method",
    "LedgerService": "cashdrawer.domain.ledger",
    "AuditService": "cashdrawer.domain.audit",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
