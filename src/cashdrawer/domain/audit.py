"""Audit trail domain service."""

import json
from collections.abc import Callable
from datetime import date, datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from cashdrawer.database.base import Database


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_payload(payload: Optional[dict[str, Any]]) -> Optional[str]:
    """Serialize an audit payload to JSON, keeping decimals exact as strings."""
    if payload is None:
        return None
    return json.dumps(payload, default=_json_default, sort_keys=True)


class AuditService:
    """Service writing audit trail entries."""

    def __init__(self, db: Database, clock: Optional[Callable[[], datetime]] = None):
        """Initialize audit service.

        Args:
            db: Database instance
            clock: Returns the current UTC time; defaults to the system clock
        """
        self.db = db
        self.clock = clock or (lambda: datetime.now(UTC))

    def log(
        self,
        action: str,
        entity_name: str,
        entity_id: str | int,
        user_id: Optional[int],
        payload: Optional[dict[str, Any]] = None,
    ) -> int:
        """Write one audit entry. Returns audit log ID."""
        return self.db.create_audit_log(
            action=action,
            entity_name=entity_name,
            entity_id=str(entity_id),
            user_id=user_id,
            data_json=serialize_payload(payload),
            created_at=self.clock(),
        )
