from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool
from gigflow.core.config import settings


def _engine_options(url: str) -> dict:
    """依資料庫種類決定連線池與逾時設定"""
    options = {
        "pool_pre_ping": True, # 每次從連線池取連線前，先 PING 一次，確保連線有效
        "echo": settings.DB_ECHO,
    }
    if settings.DB_ISOLATION_LEVEL:
        options["isolation_level"] = settings.DB_ISOLATION_LEVEL

    if url.startswith("sqlite"):
        # SQLite 檔案每次取用新連線；timeout 為等待寫入鎖的秒數
        options["poolclass"] = NullPool
        options["connect_args"] = {"timeout": settings.DB_OPERATION_TIMEOUT_SECONDS}
    else:
        options["pool_timeout"] = settings.DB_POOL_TIMEOUT_SECONDS
        options["connect_args"] = {"connect_timeout": int(settings.DB_POOL_TIMEOUT_SECONDS)}
    return options


# 建立非同步引擎
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# 建立非同步 Session
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# 建立 ORM Model 基底類別
Base = declarative_base()

async def get_db() -> AsyncSession:
    """FastAPI Dependency: 取得非同步資料庫 session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables() -> None:
    """建立所有資料表 (開發/測試用)"""
    # 確保所有 Model 都已註冊到 Base.metadata
    from gigflow.models import bid, gig, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    from gigflow.models import bid, gig, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
