from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from restaurant_os.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, future=True)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Use as Depends(get_async_session).
    Example: async def endpoint(db: AsyncSession = Depends(get_async_session))
    """
    async with AsyncSessionLocal() as session:
        yield session
