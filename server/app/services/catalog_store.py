"""Catalog store queries over the documents and users tables."""

from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.document import Document
from app.models.user import User
from app.services.query_normalizer import SearchQuery


def create_document(
    db: Session,
    owner_id: int,
    subject: str,
    class_name: str,
    school: str,
    file_location: str,
) -> Document:
    """Insert a document and commit. Returns only once the row is durable.

    The returned instance is expired by the commit and is not reloaded here;
    callers that read its columns must refresh it themselves.
    """
    document = Document(
        owner_id=owner_id,
        subject=subject,
        class_name=class_name,
        school=school,
        file_location=file_location,
    )
    db.add(document)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return document


def find_documents(db: Session, query: SearchQuery, owner_id: int | None = None) -> list[Document]:
    """Documents matching every present filter, newest first.

    Each filter is a case-insensitive substring match with LIKE wildcards
    escaped, so ``%`` and ``_`` in a filter match literally.
    """
    q = db.query(Document)
    if query.subject is not None:
        q = q.filter(Document.subject.icontains(query.subject, autoescape=True))
    if query.class_name is not None:
        q = q.filter(Document.class_name.icontains(query.class_name, autoescape=True))
    if query.school is not None:
        q = q.filter(Document.school.icontains(query.school, autoescape=True))
    if owner_id is not None:
        q = q.filter(Document.owner_id == owner_id)
    return q.order_by(Document.created_at.desc(), Document.id.desc()).all()


def get_document(db: Session, document_id: int) -> Document | None:
    return db.query(Document).filter(Document.id == document_id).first()


def get_owner_emails(db: Session, owner_ids: Iterable[int]) -> dict[int, str]:
    """Resolve owner emails in a single query. Missing owners are absent from the map."""
    ids = set(owner_ids)
    if not ids:
        return {}
    rows = db.query(User.id, User.email).filter(User.id.in_(ids)).all()
    return {user_id: email for user_id, email in rows}
