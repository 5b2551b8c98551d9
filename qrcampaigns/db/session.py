from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from qrcampaigns.core.config import settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # SQLite connections are shared across the threadpool FastAPI runs sync endpoints in
        return {"connect_args": {"check_same_thread": False}}
    if url.startswith("postgres"):
        return {"connect_args": {"options": "-c timezone=utc"}, "pool_pre_ping": True}
    return {}


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
