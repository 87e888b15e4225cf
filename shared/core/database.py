from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from shared.core.config import ESTATE_DATABASE_URL

Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # single shared connection so in-memory data survives across sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": POOL_SIZE,          # max idle connections
        "max_overflow": MAX_OVERFLOW,    # max temporary extra connections
        "pool_timeout": 30,              # wait time before failing
    }


# Estate DB
estate_engine = create_engine(
    ESTATE_DATABASE_URL, **_engine_options(ESTATE_DATABASE_URL))
EstateSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=estate_engine)


# Dependency
def get_estate_db():
    db = EstateSessionLocal()
    try:
        yield db
    finally:
        db.close()
