from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL


def connect_args_for(url: str) -> dict:
    # SQLite connections are shared across FastAPI's threadpool
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args=connect_args_for(SQLALCHEMY_DATABASE_URL)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind=None):
    """Create missing tables. Safe to call on every startup."""
    import models  # noqa: F401  registers the tables on Base

    Base.metadata.create_all(bind=bind or engine)


#database dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
