"""SQLAlchemy models for cashdrawer database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(12, 2)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PaymentMethod(Base):
    """Tender type model."""

    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_cash = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class CashSession(Base):
    """Cash drawer session model."""

    __tablename__ = "cash_sessions"

    id = Column(Integer, primary_key=True)
    opened_by = Column(Integer, nullable=False)
    opened_at = Column(DateTime(timezone=True), nullable=False)
    opening_amount = Column(MONEY, nullable=False)
    status = Column(String(16), nullable=False)
    closed_by = Column(Integer, nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    # At most one row may have status 'Open'
    __table_args__ = (
        Index(
            "uq_cash_sessions_single_open",
            "status",
            unique=True,
            sqlite_where=text("status = 'Open'"),
            postgresql_where=text("status = 'Open'"),
        ),
    )

    # Relationships
    movements = relationship("CashMovement", back_populates="session")
    closure = relationship("CashClosure", back_populates="session", uselist=False)


class CashMovement(Base):
    """Manual cash movement model."""

    __tablename__ = "cash_movements"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("cash_sessions.id"), nullable=False, index=True)
    kind = Column(String(8), nullable=False)
    amount = Column(MONEY, nullable=False)
    note = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(Integer, nullable=False)

    # Relationships
    session = relationship("CashSession", back_populates="movements")


class CashClosure(Base):
    """Closing record of a cash session."""

    __tablename__ = "cash_closures"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("cash_sessions.id"), unique=True, nullable=False)
    closed_by = Column(Integer, nullable=False)
    closed_at = Column(DateTime(timezone=True), nullable=False)
    expected_cash = Column(MONEY, nullable=False)
    counted_cash = Column(MONEY, nullable=True)
    cash_variance = Column(MONEY, nullable=True)
    # Breakdown of the expected cash figure at close
    cash_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=True)
    cash_payments = Column(MONEY, nullable=False, default=0)
    movements_in = Column(MONEY, nullable=False, default=0)
    movements_out = Column(MONEY, nullable=False, default=0)
    cash_expenses = Column(MONEY, nullable=False, default=0)

    # Relationships
    session = relationship("CashSession", back_populates="closure")
    lines = relationship(
        "CashClosureLine",
        back_populates="closure",
        cascade="all, delete-orphan",
        order_by="CashClosureLine.payment_method_id",
    )


class CashClosureLine(Base):
    """Per-tender expected and counted figures of a closure."""

    __tablename__ = "cash_closure_lines"

    id = Column(Integer, primary_key=True)
    closure_id = Column(Integer, ForeignKey("cash_closures.id"), nullable=False)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=False)
    method_name = Column(String, nullable=False)
    expected = Column(MONEY, nullable=False)
    counted = Column(MONEY, nullable=True)
    variance = Column(MONEY, nullable=True)

    # Relationships
    closure = relationship("CashClosure", back_populates="lines")


class Payment(Base):
    """Tendered payment model (sale payments and standalone payments)."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=False)
    amount = Column(MONEY, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=False, index=True)
    source = Column(String(16), nullable=False)


class Expense(Base):
    """Expense model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_by = Column(Integer, nullable=True)


class AuditLog(Base):
    """Audit trail model."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    action = Column(String, nullable=False)
    entity_name = Column(String, nullable=False)
    entity_id = Column(String, nullable=False)
    user_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    data_json = Column(Text, nullable=True)


def _use_immediate_transactions(engine: Engine) -> None:
    """Make every SQLite transaction take the write lock up front.

    pysqlite's own transaction handling is disabled so the BEGIN emitted here
    is the only one.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_database_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine, configured for concurrent writers."""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"timeout": 30, "check_same_thread": False},
        )
        _use_immediate_transactions(engine)
        return engine
    return create_engine(database_url, echo=False, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    return sessionmaker(bind=engine, expire_on_commit=False)
