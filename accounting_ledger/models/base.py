"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets a session
from get_db().
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from accounting_ledger.config import get_settings

settings = get_settings()

# --- Engine ---
# pool_pre_ping=True tests connections before handing them out,
# so a restarted database does not fail the next ledger command.
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite connections are shared across the threadpool FastAPI
    # runs sync endpoints on
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# --- Session Factory ---
# autocommit=False: the API layer decides when a unit of work
# commits. Services only flush, so a rejected command never
# leaves half of an entry behind.
# autoflush=False: no SQL is emitted until an explicit flush,
# which keeps validation queries from writing pending rows.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """One session per request, closed when the request ends."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
