"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory SQLite store before any app module is imported.
"""

import os
import sys
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SEED_DEFAULT_CLASSES", "false")

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient

from adapters.record_store import RecordStore
from domain.models import Base, build_engine, build_session_factory, init_database
from services import AuditLogService, DataVersionChannel


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory schema per test"""
    eng = build_engine("sqlite://")
    init_database(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """
    Plain session for direct inspection of stored rows.

    Yields:
        Session: SQLAlchemy database session
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def store(session_factory) -> RecordStore:
    return RecordStore(session_factory)


@pytest.fixture(scope="function")
def file_engine(tmp_path):
    """
    File-backed SQLite schema per test.

    Unlike the in-memory engine, every session gets its own connection, so a
    second store can commit while another store's transaction is still open.
    """
    eng = build_engine(f"sqlite:///{tmp_path / 'mealcount.db'}")
    init_database(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture(scope="function")
def shared_stores(file_engine):
    """Two stores over the same file-backed database: (ours, rival)"""
    factory = build_session_factory(file_engine)
    return RecordStore(factory), RecordStore(factory)


@pytest.fixture(scope="function")
def versions() -> DataVersionChannel:
    return DataVersionChannel()


@pytest.fixture(scope="function")
def audit_log(store) -> AuditLogService:
    return AuditLogService(store)


@pytest.fixture(scope="function")
def client(store, versions, session_factory):
    """
    TestClient wired to the per-test store.

    Lifespan is not entered, so the application's own engine is never touched.
    """
    from main import app
    from api.dependencies import get_data_version, get_db, get_record_store

    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_data_version] = lambda: versions
    app.dependency_overrides[get_db] = override_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
