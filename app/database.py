import os
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import sessionmaker, declarative_base

from app.exceptions import ConcurrencyConflict

logger = logging.getLogger(__name__)

# ---------------------------
# Load environment variables
# ---------------------------
load_dotenv()

# ---------------------------
# Database URL
# ---------------------------
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    raise ValueError("❌ DATABASE_URL is not set in the .env file")

SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# Counter recomputation needs repeatable read or stronger
DB_ISOLATION_LEVEL = os.getenv("DB_ISOLATION_LEVEL", "REPEATABLE READ")

# ---------------------------
# Engine
# ---------------------------
engine = create_async_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    isolation_level=DB_ISOLATION_LEVEL,
    future=True
)

# ---------------------------
# Session Local
# ---------------------------
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)

# ---------------------------
# Base model
# ---------------------------
Base = declarative_base()

# ---------------------------
# Dependency for FastAPI
# ---------------------------
async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


# ---------------------------
# Transaction boundary
# ---------------------------
SERIALIZATION_SQLSTATES = ("40001", "40P01")


def _is_serialization_failure(exc: DBAPIError) -> bool:
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return sqlstate in SERIALIZATION_SQLSTATES


@asynccontextmanager
async def unit_of_work(db: AsyncSession):
    """
    Run a block as one transaction on the given session.
    Commits when the block finishes, rolls back and re-raises on any error.
    Lost unique-key races and serialization failures surface as
    ConcurrencyConflict.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Integrity conflict, transaction rolled back: %s", exc.orig)
        raise ConcurrencyConflict("Record was modified by a concurrent request") from exc
    except DBAPIError as exc:
        await db.rollback()
        if _is_serialization_failure(exc):
            logger.warning("Serialization failure, transaction rolled back")
            raise ConcurrencyConflict("Concurrent update, please retry") from exc
        raise
    except Exception:
        await db.rollback()
        raise
