"""
projectrag exceptions.
"""


class ProjectRAGError(Exception):
    """Base exception for projectrag errors."""

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ProviderUnavailable(ProjectRAGError):
    """Raised when an embedding call cannot complete.

    Covers unreachable endpoints, rejected credentials, rate limiting,
    inactive or incomplete provider configuration and malformed responses.
    """

    def __init__(self, message: str = "Embedding provider unavailable", status: int | None = None):
        self.status = status
        super().__init__(message, code=503)


class DimensionMismatch(ProjectRAGError, ValueError):
    """Raised when two vectors of different dimension are combined."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Vector dimension mismatch: expected {expected}, got {actual}", code=400
        )


class DocumentValidationError(ProjectRAGError):
    """Raised when an upload fails title, content or file checks."""

    def __init__(self, message: str):
        super().__init__(message, code=400)


class FileTooLarge(DocumentValidationError):
    """Raised when an uploaded file exceeds the configured size limit."""

    def __init__(self, max_size: int):
        self.max_size = max_size
        super().__init__(f"File size must be less than {max_size / 1024 / 1024:g}MB")


class UnsupportedFileType(DocumentValidationError):
    """Raised when an uploaded file has a MIME type that cannot be ingested."""

    def __init__(self, mime_type: str | None, allowed: list[str]):
        self.mime_type = mime_type
        self.allowed = allowed
        super().__init__("File type not supported. Allowed types: " + ", ".join(allowed))


class DocumentNotFound(ProjectRAGError):
    """Raised when a document does not exist in the requested project."""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Document '{document_id}' not found", code=404)


class DocumentPermissionError(ProjectRAGError):
    """Raised when an actor may not modify a document."""

    def __init__(self, message: str = "Only the project owner or document creator can delete this document"):
        super().__init__(message, code=403)
