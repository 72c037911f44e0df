from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from railclaim.core.config import settings

engine = create_engine(
    settings.db_dsn,
    pool_pre_ping=True,
    future=True,
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

Base = declarative_base()
