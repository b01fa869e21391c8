"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets its own
session from get_db(), and every service receives that
session explicitly; no service reaches for shared state.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from accounting_core.config import get_settings

settings = get_settings()

# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# so a restarted database does not fail the next posting.
_connect_args = (
    {"check_same_thread": False}
    if settings.DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

# --- Session Factory ---
# autocommit=False: the API layer decides when a request's
# writes are committed, so a document and the journal entry
# it triggers land together or not at all.
# autoflush=False: nothing is sent to the database until a
# service flushes explicitly.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally guarantees the session is closed even
    when the endpoint raises, so connections never leak
    from the pool.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
