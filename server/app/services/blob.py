"""Local file storage for uploaded PDFs.

Files land in ``<uploads_dir>/documents/`` and are served by the static
``/uploads`` mount. The returned location is what academies submit when
publishing; the catalog never reads the file itself.
"""

import logging
import secrets
import shutil
from pathlib import Path

from fastapi import UploadFile

from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF-"
DOCUMENTS_SUBDIR = "documents"


def _get_documents_dir() -> Path:
    """Return the documents upload directory, creating it if needed."""
    documents_dir = Path(settings.resolved_uploads_dir) / DOCUMENTS_SUBDIR
    documents_dir.mkdir(parents=True, exist_ok=True)
    return documents_dir


def store_pdf_upload(file: UploadFile, owner_id: int) -> str:
    """Validate and save an uploaded PDF.

    Args:
        file: The uploaded file.
        owner_id: Uploading academy, used as a filename prefix.

    Returns:
        The file location to record on the published document.

    Raises:
        ValueError: If the file is empty, too large, or not a PDF.
    """
    max_size = settings.max_upload_size_mb * 1024 * 1024

    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(0)
    if size > max_size:
        raise ValueError(f"File size exceeds {settings.max_upload_size_mb}MB limit.")
    if size == 0:
        raise ValueError("File is empty.")

    header = file.file.read(len(PDF_SIGNATURE))
    file.file.seek(0)
    if header != PDF_SIGNATURE:
        raise ValueError("Only PDF files can be uploaded.")

    filename = f"{owner_id}_{secrets.token_hex(12)}.pdf"
    with open(_get_documents_dir() / filename, "wb") as out:
        shutil.copyfileobj(file.file, out)

    logger.info("Stored %d byte upload for academy %s as %s", size, owner_id, filename)
    return f"/uploads/{DOCUMENTS_SUBDIR}/{filename}"
