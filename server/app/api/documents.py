from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Path,
    Query,
    Request,
    UploadFile,
    status,
)
from sqlalchemy.orm import Session

from app.api.deps import get_catalog_service, get_current_academy, get_current_user, get_db
from app.core.config import get_settings
from app.core.rate_limit import limiter
from app.models.user import User
from app.schemas.document import (
    DocumentCreate,
    DocumentOut,
    DocumentResult,
    PublishResponse,
    SearchResponse,
    UploadResponse,
)
from app.services.blob import store_pdf_upload
from app.services.catalog import (
    CatalogService,
    DocumentValidationError,
    NotAcademyError,
    enrich_document,
)
from app.services.catalog_store import get_document, get_owner_emails

router = APIRouter()
settings = get_settings()


@router.post("", response_model=PublishResponse, status_code=status.HTTP_201_CREATED)
def publish_document(
    payload: DocumentCreate,
    current_user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
) -> PublishResponse:
    try:
        document = catalog.publish(
            current_user,
            subject=payload.subject,
            class_name=payload.class_name,
            school=payload.school,
            file_location=payload.file_location,
        )
    except NotAcademyError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only academy accounts can publish documents",
        )
    except DocumentValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return PublishResponse(
        message="Upload successful", data=DocumentOut.model_validate(document)
    )


@router.get("", response_model=SearchResponse)
@limiter.limit(lambda: f"{settings.search_rate_limit_per_minute}/minute")
def search_documents(
    request: Request,
    subject: str | None = Query(None, max_length=255),
    class_name: str | None = Query(None, alias="class", max_length=255),
    school: str | None = Query(None, max_length=255),
    mine: bool = False,
    current_user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
) -> SearchResponse:
    """Search by subject, class and school. ``mine`` limits academies to their own documents."""
    outcome = catalog.search(
        current_user,
        subject=subject,
        class_name=class_name,
        school=school,
        personal=mine,
    )
    return SearchResponse(data=outcome.results, source=outcome.source)


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def upload_document_file(
    request: Request,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_academy),
) -> UploadResponse:
    """Store a PDF and return the location to publish it under."""
    try:
        file_location = store_pdf_upload(file, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return UploadResponse(file_location=file_location)


@router.get("/{document_id}", response_model=DocumentResult)
def read_document(
    document_id: int = Path(..., gt=0),
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DocumentResult:
    document = get_document(db, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return enrich_document(document, get_owner_emails(db, [document.owner_id]))
