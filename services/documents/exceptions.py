"""
Document System Exceptions

Custom exceptions for document generation, storage and e-signature errors.
Each exception carries the HTTP status the API layer answers with.
"""


class DocumentError(Exception):
    """Base exception for all document system errors."""
    http_status = 500


class InvalidDocumentType(DocumentError):
    """Raised when a document type tag is not one of the supported types."""
    http_status = 400

    def __init__(self, document_type):
        self.document_type = document_type
        super().__init__(f"Invalid document type: {document_type!r}")


class InvalidFormData(DocumentError):
    """
    Raised when form data does not match the shape its document type requires.

    This is a caller error, never a retryable condition.
    """
    http_status = 400

    def __init__(self, message: str, document_type: str = None, field: str = None):
        self.document_type = document_type
        self.field = field
        super().__init__(message)


class MissingFormData(DocumentError):
    """Raised when regeneration is requested for a document with no stored form data."""
    http_status = 400

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__("No form data available for regeneration")


class InvalidDocumentUpdate(DocumentError):
    """Raised when a document update or listing request carries unusable values."""
    http_status = 400


class NotFound(DocumentError):
    """
    Raised when a document does not exist or belongs to another owner.

    Both cases share this one error so existence is never leaked.
    """
    http_status = 404

    def __init__(self, message: str = "Document not found"):
        super().__init__(message)


class QuotaExceeded(DocumentError):
    """Raised when the owner's plan tier does not allow another document."""
    http_status = 403


class StorageFailure(DocumentError):
    """Raised when the document store fails to read or write."""
    http_status = 500


class UpstreamUnavailable(DocumentError):
    """
    Raised when the text generation service is unreachable or returns
    a non-success status.
    """
    http_status = 502

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class EmptyResponse(DocumentError):
    """Raised when the text generation service replies without any text."""
    http_status = 502


class SignatureAlreadyRequested(DocumentError):
    """Raised when a document already has a signature request."""
    http_status = 400

    def __init__(self):
        super().__init__("Document already has a signature request")


class NoSignatureRequest(DocumentError):
    """Raised when a signature action needs a request the document does not have."""
    http_status = 400

    def __init__(self, message: str = "No signature request found"):
        super().__init__(message)


class SignatureProviderError(DocumentError):
    """
    Raised when Dropbox Sign API calls fail.

    Wraps the underlying API error with context.
    """
    http_status = 502

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class WebhookError(DocumentError):
    """
    Base for signature webhook failures.

    These never reach the provider; the webhook boundary logs them and
    acknowledges receipt.
    """


class MalformedWebhookEvent(WebhookError):
    """Raised when a webhook payload is not parseable or lacks its correlation id."""


class AuthenticityFailure(WebhookError):
    """Raised when a webhook body does not match its HMAC signature."""
