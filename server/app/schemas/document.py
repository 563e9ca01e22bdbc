from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class DocumentCreate(BaseModel):
    # Emptiness is checked after normalization by the catalog service
    subject: str = Field("", max_length=255)
    class_name: str = Field("", max_length=255)
    school: str = Field("", max_length=255)
    file_location: str = Field("", max_length=1024)


class DocumentOut(BaseModel):
    id: int
    owner_id: int
    file_location: str
    subject: str
    class_name: str
    school: str
    created_at: datetime

    class Config:
        from_attributes = True


class DocumentResult(DocumentOut):
    """A search row enriched with the publishing academy's email."""

    owner_email: str


class PublishResponse(BaseModel):
    message: str
    data: DocumentOut


class SearchResponse(BaseModel):
    data: list[DocumentResult]
    source: Literal["cache", "database"]


class UploadResponse(BaseModel):
    file_location: str
