"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from accounting_core.main import app
from accounting_core.models.base import Base, get_db
from accounting_core.models.ledger_account import Account
from accounting_core.security import AuthContext, Role
from accounting_core.seed import ensure_default_accounts


# SQLite for tests: no external database needed.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def other_session():
    """A second session on the same database, as a concurrent request would use."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client bound to the test database.

    get_db is overridden so the app uses the test session.
    The client is not entered as a context manager, so the
    startup seeding against the real database never runs.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Ledger fixtures ---

@pytest.fixture
def chart(db_session) -> dict[str, Account]:
    """The default chart of accounts, keyed by account code."""
    ensure_default_accounts(db_session)
    db_session.commit()
    accounts = db_session.execute(select(Account)).scalars().all()
    return {a.code: a for a in accounts}


@pytest.fixture
def admin():
    return AuthContext(role=Role.ADMIN, user_id="admin-1")


@pytest.fixture
def accountant():
    return AuthContext(role=Role.ACCOUNTANT, user_id="acct-1")


@pytest.fixture
def approver():
    return AuthContext(role=Role.APPROVER, user_id="appr-1")


@pytest.fixture
def auditor():
    return AuthContext(role=Role.AUDITOR, user_id="audit-1")


@pytest.fixture
def headers():
    """Build request headers identifying the caller."""
    def _headers(role: str, user_id: str = "user-1") -> dict[str, str]:
        return {"X-Accounting-Role": role, "X-User-Id": user_id}
    return _headers
