"""
Database connection and session management.

Key concepts:
- We use SQLAlchemy 2.0's async API (asyncpg in deployment, aiosqlite in tests)
- AsyncSession gives us non-blocking database calls
- get_db() is a "dependency" that FastAPI injects into route handlers -
  it provides a session and ensures cleanup after each request
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import NullPool

from reportcard.config import settings

# - echo=True logs all SQL in development (helpful for debugging)
# - PostgreSQL keeps 5 connections ready; SQLite (tests) opens one per session
engine_kwargs = {"echo": settings.DEBUG}
if settings.DATABASE_URL.startswith("sqlite"):
    engine_kwargs["poolclass"] = NullPool
else:
    engine_kwargs.update(pool_size=5, max_overflow=10)

engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)

# Session factory - creates new database sessions
# - expire_on_commit=False means objects stay usable after commit
#   (without this, accessing an attribute after commit triggers a lazy load,
#    which fails with async)
AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


async def get_db():
    """FastAPI dependency that provides a database session.

    Usage in a route:
        @router.get("/students")
        async def list_students(db: AsyncSession = Depends(get_db)):
            ...

    The session is closed when the request finishes, even if an error occurs.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create all tables defined by our models.

    Called once at startup. A deployment with real data would use
    migrations instead.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
