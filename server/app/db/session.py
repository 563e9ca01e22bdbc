from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings

settings = get_settings()


def _connect_args(url: str, timeout_seconds: int) -> dict:
    """Bound every statement so a stalled store fails the request instead of hanging it."""
    if url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": timeout_seconds}
    return {
        "connect_timeout": timeout_seconds,
        "options": f"-c statement_timeout={timeout_seconds * 1000}",
    }


engine = create_engine(
    settings.database_url_sync,
    pool_pre_ping=True,
    pool_timeout=settings.store_timeout_seconds,
    connect_args=_connect_args(settings.database_url_sync, settings.store_timeout_seconds),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
