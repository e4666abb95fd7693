"""
hackjudge/database.py
Async database engine, session factory and schema bootstrap
"""
import os
import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from dotenv import load_dotenv

from hackjudge.orm.base import Base
import hackjudge.orm  # registers every model on Base.metadata

load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./hackjudge.db")

if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is not set")


def build_engine(database_url: str = DATABASE_URL, echo: bool = False):
    """
    Create an async engine tuned for the backing database.

    SQLite serializes writers, so it gets a long busy timeout; upserts from
    concurrent judges queue on the lock instead of failing.
    """
    if "sqlite" in database_url.lower():
        return create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            connect_args={
                "timeout": 30.0,   # SQLite busy timeout in seconds
            }
        )
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=20,
        max_overflow=30,
        pool_timeout=30,
        pool_recycle=3600,
    )


def build_sessionmaker(bind) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine()
AsyncSessionLocal = build_sessionmaker(engine)


async def get_db():
    """Dependency for getting async database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind=None):
    """
    Create missing tables. Existing tables are left as they are.
    """
    bind = bind or engine
    logger.info("Initializing database...")
    try:
        logger.info(f"Database dialect: {bind.url.get_backend_name()}")
        async with bind.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✓ Database initialization complete")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise


async def close_db():
    """Close database connection"""
    await engine.dispose()
    logger.info("Database connection closed")


def dialect_insert(db: AsyncSession, model):
    """
    INSERT construct of the session's dialect, for ON CONFLICT upserts.

    Only SQLite and PostgreSQL provide on_conflict_do_update().
    """
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    elif dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        raise NotImplementedError(f"Upserts are not supported on dialect '{dialect}'")
    return insert(model)
