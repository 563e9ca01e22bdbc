from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.session import SessionLocal
from app.models.user import User
from app.services.auth import decode_token, get_user_by_email
from app.services.catalog import CatalogService
from app.services.invalidation import CacheInvalidationCoordinator
from app.services.search_cache import SearchCache, build_search_cache

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_search_cache() -> SearchCache:
    """Process-wide search cache handle, shared by every request."""
    return build_search_cache(get_settings())


def get_catalog_service(
    db: Session = Depends(get_db),
    cache: SearchCache = Depends(get_search_cache),
) -> CatalogService:
    return CatalogService(
        db,
        cache,
        CacheInvalidationCoordinator(cache),
        cache_ttl_seconds=get_settings().search_cache_ttl_seconds,
    )


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = decode_token(token)
    if token_data is None or token_data.email is None:
        raise credentials_exception
    user = get_user_by_email(db, token_data.email)
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return user


def get_current_academy(current_user: User = Depends(get_current_user)) -> User:
    """Only allow academy accounts."""
    if not current_user.is_academy:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only academy accounts can do this",
        )
    return current_user
