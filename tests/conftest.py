"""Shared pytest fixtures for cashdrawer tests."""

import logging
import tempfile
import os
import pytest

from cashdrawer.database.factories import create_sqlite_database
from cashdrawer.domain.audit import AuditService
from cashdrawer.domain.cash_session import CashSessionService
from cashdrawer.domain.ledger import LedgerService
from cashdrawer.domain.payment_method import PaymentMethodService
from cashdrawer.domain.snapshot import SnapshotService


@pytest.fixture
def db_path():
    """Path of a temporary SQLite database file."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield path

    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def temp_db(db_path):
    """Create a temporary database for testing."""
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()


@pytest.fixture
def method_service(temp_db):
    """Create a PaymentMethodService with a temporary database."""
    return PaymentMethodService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def audit_service(temp_db):
    """Create an AuditService with a temporary database."""
    return AuditService(temp_db)


@pytest.fixture
def session_service(temp_db):
    """Create a CashSessionService with a temporary database."""
    return CashSessionService(temp_db)


@pytest.fixture
def snapshot_service(temp_db):
    """Create a SnapshotService with a temporary database."""
    return SnapshotService(temp_db)


@pytest.fixture
def sample_methods(method_service):
    """Create the usual tenders and return their IDs by name."""
    return {
        name: method_service.create_method(name)
        for name in ("Cash", "Card", "Transfer", "Other")
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def restore_cashdrawer_logger():
    """Undo handlers installed by the CLI's logging setup."""
    logger = logging.getLogger("cashdrawer")
    handlers = list(logger.handlers)
    level = logger.level

    yield

    logger.handlers = handlers
    logger.setLevel(level)
