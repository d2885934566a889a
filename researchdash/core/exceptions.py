"""
Exception types shared by repositories, services and the API layer.

Repositories raise `UpstreamServiceError` subclasses when an outbound call
fails. Services translate those into `ResearchDashError` subclasses, which
carry the HTTP status and the message that is safe to show to a caller. The
API layer renders every `ResearchDashError` as `{"error": message}`.
"""

from typing import Optional


class UpstreamServiceError(Exception):
    """An outbound call to an external service failed."""

    service = "upstream"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.service} error ({self.status_code}): {self.message}"
        return f"{self.service} error: {self.message}"


class NotionAPIError(UpstreamServiceError):
    service = "Notion"


class ArxivAPIError(UpstreamServiceError):
    service = "arXiv"


class WebhookError(UpstreamServiceError):
    service = "n8n"


class DownloadError(UpstreamServiceError):
    service = "PDF host"


class ResearchDashError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(ResearchDashError):
    status_code = 400


class NotFoundError(ResearchDashError):
    status_code = 404


class NotConfiguredError(ResearchDashError):
    """A resource's credentials or identifiers are missing from settings."""

    status_code = 500


class ServiceUnavailableError(ResearchDashError):
    """Shared application state (e.g. the HTTP client) is missing."""

    status_code = 503


class UpstreamError(ResearchDashError):
    """
    An external call failed. `message` is the generic text returned to the
    caller; `detail` keeps the underlying cause for logs only.
    """

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail
