from fastapi import APIRouter, Depends

from app.api import auth, documents
from app.api.deps import get_search_cache
from app.schemas.common import HealthResponse
from app.services.search_cache import SearchCache

api_router = APIRouter()


@api_router.get("/health", tags=["health"], response_model=HealthResponse)
def api_health_check(cache: SearchCache = Depends(get_search_cache)) -> HealthResponse:
    """Health check for monitoring. A down cache degrades search speed, not availability."""
    return HealthResponse(
        status="ok",
        service="api",
        search_cache="ok" if cache.ping() else "unavailable",
    )


api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
