from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from agency.core.config import settings


def normalize_database_url(url: str) -> str:
    """Point plain ``postgresql://`` URLs at the psycopg3 driver."""
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


database_url = normalize_database_url(settings.database_url)

if database_url.startswith("sqlite"):
    # Requests for one customer may be served from different worker threads
    engine = create_engine(database_url, connect_args={"check_same_thread": False})
else:
    engine = create_engine(database_url, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
