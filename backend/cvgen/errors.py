"""
Service error taxonomy.

Every error that crosses a module boundary derives from ServiceError so the
API layer can render it uniformly as {success: false, error, message}.
"""
from typing import Optional


class ServiceError(Exception):
    """Base class for errors mapped onto an HTTP response.

    Attributes:
        code: machine readable category, e.g. "INVALID_REQUEST".
        error: short human readable label sent as the `error` field.
        message: details sent as the `message` field.
        http_status: status code used by the API layer.
    """

    code = "SERVICE_ERROR"
    error = "Internal server error"
    http_status = 500

    def __init__(self, message: str = "", *, http_status: Optional[int] = None):
        self.message = message or self.error
        if http_status is not None:
            self.http_status = http_status
        super().__init__(self.message)


class InvalidRequestError(ServiceError):
    code = "INVALID_REQUEST"
    error = "Invalid request"
    http_status = 400


class ImageProcessingError(ServiceError):
    code = "IMAGE_PROCESSING_FAILED"
    error = "Image processing failed"
    http_status = 400


class ImageDownloadError(ImageProcessingError):
    """Transport error or timeout while fetching a caller supplied image URL."""

    code = "DOWNLOAD_FAILED"


class ProviderError(ServiceError):
    """Raised by the model client; the message carries the provider's text."""

    code = "PROVIDER_ERROR"
    error = "Model provider error"

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ProviderOverloadedError(ServiceError):
    code = "PROVIDER_OVERLOADED"
    error = "Service temporarily overloaded. Please try again."
    http_status = 503


class GenerationFailedError(ServiceError):
    code = "GENERATION_FAILED"
    error = "Generation failed"
    http_status = 500


class ConversationNotFoundError(ServiceError):
    code = "NOT_FOUND"
    error = "Conversation not found"
    http_status = 404
