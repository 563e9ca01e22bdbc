from app.models.base import Base
from app.models.document import Document
from app.models.user import User

__all__ = [
    "Base",
    "User",
    "Document",
]
