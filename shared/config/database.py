from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from shared.config.settings import get_settings

# One PostgreSQL schema per service to keep the tables isolated
SERVICE_SCHEMAS = ("auth_schema", "product_schema", "cart_schema", "order_schema")

# Upper bound of a PostgreSQL INTEGER column (ids, quantities)
MAX_INT_COLUMN = 2**31 - 1


def engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    # SQLite has no schemas: fold every service schema into the main database
    # and share one connection so an in-memory database survives across sessions.
    return {
        "execution_options": {"schema_translate_map": {name: None for name in SERVICE_SCHEMAS}},
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }


settings = get_settings()
DATABASE_URL = settings.sqlalchemy_url

engine = create_async_engine(DATABASE_URL, echo=settings.sql_echo, **engine_options(DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)

Base = declarative_base()


async def create_tables():
    async with engine.begin() as conn:
        if engine.dialect.name == "postgresql":
            for schema in SERVICE_SCHEMAS:
                await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema}"))
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
