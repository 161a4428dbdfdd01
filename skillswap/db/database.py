from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from skillswap import config

engine = create_async_engine(config.DATABASE_URL, echo=config.SQL_ECHO, future=True)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


# Зависимость для получения сессии
async def get_async_session():
    async with AsyncSessionLocal() as session:
        yield session


async def init_models(bind=None):
    """Create every table registered on ``Base`` if it does not exist yet."""
    from . import models  # noqa: F401  registers the mappers

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
