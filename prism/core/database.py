from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from prism.core.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

# Keep loaded attributes usable after commit, every handler reads rows back after writing
AsyncSessionLocal = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


# One session per request
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


# Every table registers itself on this metadata (alembic and the tests read it)
class Base(DeclarativeBase):
    pass
