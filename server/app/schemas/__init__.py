from app.schemas.auth import Token, TokenData
from app.schemas.document import (
    DocumentCreate,
    DocumentOut,
    DocumentResult,
    PublishResponse,
    SearchResponse,
)
from app.schemas.user import RegisterRequest, RegisterResponse, UserOut

__all__ = [
    "Token",
    "TokenData",
    "UserOut",
    "RegisterRequest",
    "RegisterResponse",
    "DocumentCreate",
    "DocumentOut",
    "DocumentResult",
    "PublishResponse",
    "SearchResponse",
]
