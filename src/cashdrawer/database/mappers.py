"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from datetime import datetime, UTC
from typing import Optional

from cashdrawer.domain import entities as domain
from cashdrawer.database.models import (
    AuditLog as ORMAuditLog,
    CashClosure as ORMCashClosure,
    CashClosureLine as ORMCashClosureLine,
    CashMovement as ORMCashMovement,
    CashSession as ORMCashSession,
    PaymentMethod as ORMPaymentMethod,
)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return the datetime in UTC, treating naive values as already UTC.

    SQLite drops the offset on storage, so values read back are naive.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def payment_method_to_domain(orm_method: ORMPaymentMethod) -> domain.PaymentMethod:
    """Convert SQLAlchemy PaymentMethod model to domain PaymentMethod entity."""
    return domain.PaymentMethod(
        id=orm_method.id,
        name=orm_method.name,
        is_active=orm_method.is_active,
        is_cash=orm_method.is_cash,
    )


def cash_session_to_domain(orm_session: ORMCashSession) -> domain.CashSession:
    """Convert SQLAlchemy CashSession model to domain CashSession entity."""
    return domain.CashSession(
        id=orm_session.id,
        opened_by=orm_session.opened_by,
        opened_at=as_utc(orm_session.opened_at),
        opening_amount=orm_session.opening_amount,
        status=domain.SessionStatus(orm_session.status),
        closed_by=orm_session.closed_by,
        closed_at=as_utc(orm_session.closed_at),
    )


def cash_movement_to_domain(orm_movement: ORMCashMovement) -> domain.CashMovement:
    """Convert SQLAlchemy CashMovement model to domain CashMovement entity."""
    return domain.CashMovement(
        id=orm_movement.id,
        session_id=orm_movement.session_id,
        kind=domain.MovementKind(orm_movement.kind),
        amount=orm_movement.amount,
        note=orm_movement.note,
        created_at=as_utc(orm_movement.created_at),
        created_by=orm_movement.created_by,
    )


def closure_line_to_domain(orm_line: ORMCashClosureLine) -> domain.ClosureLine:
    """Convert SQLAlchemy CashClosureLine model to domain ClosureLine entity."""
    return domain.ClosureLine(
        payment_method_id=orm_line.payment_method_id,
        method_name=orm_line.method_name,
        expected=orm_line.expected,
        counted=orm_line.counted,
        variance=orm_line.variance,
    )


def cash_closure_to_domain(orm_closure: ORMCashClosure) -> domain.CashClosure:
    """Convert SQLAlchemy CashClosure model to domain CashClosure entity."""
    return domain.CashClosure(
        id=orm_closure.id,
        session_id=orm_closure.session_id,
        closed_by=orm_closure.closed_by,
        closed_at=as_utc(orm_closure.closed_at),
        expected_cash=orm_closure.expected_cash,
        counted_cash=orm_closure.counted_cash,
        cash_variance=orm_closure.cash_variance,
        cash_method_id=orm_closure.cash_method_id,
        cash_payments=orm_closure.cash_payments,
        movements_in=orm_closure.movements_in,
        movements_out=orm_closure.movements_out,
        cash_expenses=orm_closure.cash_expenses,
        lines=tuple(closure_line_to_domain(line) for line in orm_closure.lines),
    )


def audit_log_to_domain(orm_log: ORMAuditLog) -> domain.AuditLog:
    """Convert SQLAlchemy AuditLog model to domain AuditLog entity."""
    return domain.AuditLog(
        id=orm_log.id,
        action=orm_log.action,
        entity_name=orm_log.entity_name,
        entity_id=orm_log.entity_id,
        user_id=orm_log.user_id,
        created_at=as_utc(orm_log.created_at),
        data_json=orm_log.data_json,
    )
