"""Upload validation and text extraction."""

import io
import logging
from typing import Optional

from pydantic import BaseModel

from projectrag.exceptions import DocumentValidationError, FileTooLarge, UnsupportedFileType
from projectrag.utils.config import UploadConfig

from .document import DocumentMetadata, DocumentType

logger = logging.getLogger(__name__)

TEXT_MIME_TYPES = ("text/plain", "text/markdown")
PDF_MIME_TYPE = "application/pdf"


class UploadRequest(BaseModel):
    """A document upload as received from the upload endpoint.

    Text and URL uploads carry ``content``; file uploads carry ``data`` with
    its file name, size and MIME type.
    """
    project_id: str
    created_by: str
    title: Optional[str] = None
    type: DocumentType = DocumentType.TEXT
    content: Optional[str] = None
    url: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    data: Optional[bytes] = None

    @property
    def is_file(self) -> bool:
        return self.data is not None


class PreparedUpload(BaseModel):
    """Validated title, content and metadata ready for chunking."""
    title: str
    content: str
    type: DocumentType
    metadata: DocumentMetadata


def extract_pdf_text(data: bytes) -> str:
    """Extract the text of every page of a PDF."""
    try:
        import pypdf
        from pypdf.errors import PdfReadError
    except ImportError:
        raise ImportError(
            "PDF uploads require 'pypdf'. "
            "Install it with: pip install pypdf"
        )

    try:
        reader = pypdf.PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except PdfReadError as e:
        raise DocumentValidationError(f"Could not read PDF: {e}") from e
    return "\n".join(pages)


def extract_file_text(data: bytes, mime_type: str) -> str:
    """Decode an uploaded file into text according to its MIME type."""
    if mime_type in TEXT_MIME_TYPES:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentValidationError("Text files must be UTF-8 encoded") from e
    elif mime_type == PDF_MIME_TYPE:
        return extract_pdf_text(data)
    raise UnsupportedFileType(mime_type, list(TEXT_MIME_TYPES) + [PDF_MIME_TYPE])


def prepare_upload(request: UploadRequest, config: Optional[UploadConfig] = None) -> PreparedUpload:
    """
    Validate an upload and produce its title, content and metadata.

    Args:
        request: The raw upload
        config: Upload limits (defaults when omitted)

    Returns:
        PreparedUpload

    Raises:
        DocumentValidationError: On a missing title or content, or an unreadable file
        FileTooLarge: If the file exceeds ``max_file_size``
        UnsupportedFileType: If the MIME type is not allowed
    """
    config = config or UploadConfig()

    title = (request.title or "").strip()
    if not title:
        raise DocumentValidationError("Title is required")
    if len(title) > config.max_title_length:
        raise DocumentValidationError(f"Title cannot exceed {config.max_title_length} characters")

    if not request.is_file:
        if request.type == DocumentType.PDF:
            raise DocumentValidationError("File is required")
        if not request.content:
            raise DocumentValidationError("Content is required for text documents")
        metadata = DocumentMetadata(url=request.url) if request.type == DocumentType.URL else DocumentMetadata()
        return PreparedUpload(title=title, content=request.content, type=request.type, metadata=metadata)

    size = len(request.data)
    if size > config.max_file_size:
        raise FileTooLarge(config.max_file_size)
    if request.mime_type not in config.allowed_mime_types:
        raise UnsupportedFileType(request.mime_type, config.allowed_mime_types)

    content = extract_file_text(request.data, request.mime_type)
    if not content.strip():
        raise DocumentValidationError("No text could be extracted from the file")

    logger.debug(f"Extracted {len(content)} characters from {request.file_name or 'upload'}")
    return PreparedUpload(
        title=title,
        content=content,
        type=DocumentType.PDF if request.mime_type == PDF_MIME_TYPE else request.type,
        metadata=DocumentMetadata(
            file_name=request.file_name,
            file_size=size,
            mime_type=request.mime_type,
            url=request.url if request.type == DocumentType.URL else None,
        ),
    )
