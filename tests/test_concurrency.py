"""Concurrency tests against a file-backed SQLite database."""

import threading
from decimal import Decimal

from cashdrawer.database.factories import create_sqlite_database
from cashdrawer.domain.cash_session import CashSessionService
from cashdrawer.domain.entities import CountedBuckets, SessionStatus
from cashdrawer.domain.errors import ConflictError, InvalidStateError
from cashdrawer.domain.payment_method import PaymentMethodService


def _run_concurrently(targets):
    barrier = threading.Barrier(len(targets))
    threads = []

    def wrap(target):
        def run():
            barrier.wait()
            target()

        return run

    for target in targets:
        threads.append(threading.Thread(target=wrap(target)))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)


def test_concurrent_opens_create_exactly_one_session(temp_db):
    service = CashSessionService(temp_db)
    results = []
    errors = []
    lock = threading.Lock()

    def attempt(operator_id):
        def run():
            try:
                session = service.open_session(Decimal("100"), operator_id=operator_id)
            except ConflictError as e:
                with lock:
                    errors.append(e)
            else:
                with lock:
                    results.append(session)

        return run

    _run_concurrently([attempt(i) for i in range(1, 9)])

    assert len(results) == 1
    assert len(errors) == 7
    open_sessions = temp_db.list_sessions(status=SessionStatus.OPEN)
    assert [s.id for s in open_sessions] == [results[0].id]


def test_concurrent_opens_from_separate_engines(db_path, temp_db):
    """Two processes sharing the file behave like two engines."""
    other_db = create_sqlite_database(database_path=db_path)
    services = [CashSessionService(temp_db), CashSessionService(other_db)]
    outcomes = []
    lock = threading.Lock()

    def attempt(service):
        def run():
            try:
                service.open_session(Decimal("10"), operator_id=1)
                outcome = "opened"
            except ConflictError:
                outcome = "conflict"
            with lock:
                outcomes.append(outcome)

        return run

    try:
        _run_concurrently([attempt(s) for s in services])
    finally:
        other_db.disconnect()

    assert sorted(outcomes) == ["conflict", "opened"]
    assert len(temp_db.list_sessions(status=SessionStatus.OPEN)) == 1


def test_movements_racing_close_are_in_snapshot_or_rejected(temp_db):
    PaymentMethodService(temp_db).create_method("Cash")
    service = CashSessionService(temp_db)
    session = service.open_session(Decimal("100"), operator_id=1)
    accepted = []
    rejected = []
    snapshots = []
    lock = threading.Lock()

    def add_movement():
        try:
            movement = service.add_movement(session.id, "In", Decimal("5"), None, operator_id=2)
        except InvalidStateError:
            with lock:
                rejected.append(True)
        else:
            with lock:
                accepted.append(movement)

    def close():
        snapshots.append(
            service.close_session(session.id, CountedBuckets(cash=Decimal("100")), operator_id=1)
        )

    _run_concurrently([add_movement] * 6 + [close])

    assert len(snapshots) == 1
    assert len(accepted) + len(rejected) == 6
    snapshot = snapshots[0]
    assert snapshot.movements_in == Decimal("5") * len(accepted)
    assert snapshot.expected_cash == Decimal("100") + Decimal("5") * len(accepted)
    assert sorted(m.id for m in temp_db.list_movements(session.id)) == sorted(m.id for m in accepted)
