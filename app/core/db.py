from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from .config import settings
from .base import Base

engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_session():
    async with SessionLocal() as session:
        yield session

def _import_models():
    # registers every mapped class on Base.metadata
    from app.modules.persons import models as _persons  # noqa: F401
    from app.modules.patients import models as _patients  # noqa: F401
    from app.modules.psychologists import models as _psychologists  # noqa: F401
    from app.modules.documents import models as _documents  # noqa: F401

async def init_models():
    ## In dev-only "create_all" mode, keep old behavior; otherwise, migrations own the schema.
    if settings.DB_MANAGE == "create_all":
        _import_models()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
