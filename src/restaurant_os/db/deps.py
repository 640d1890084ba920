from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from restaurant_os.db.session import AsyncSessionLocal


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Session factory for long-lived handlers (websockets) that open a session per call."""
    return AsyncSessionLocal
