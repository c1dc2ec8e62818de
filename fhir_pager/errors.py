"""Exceptions raised by the FHIR pager client."""
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from fhir_pager.resources import OperationOutcome


class FHIRPagerError(Exception):
    """Base class for all client errors."""


class InvalidArgumentError(FHIRPagerError, ValueError):
    """A required input was missing."""


class ConfigurationError(InvalidArgumentError):
    """The client could not be configured (e.g. no base URL)."""


class FHIRServerError(FHIRPagerError):
    """The server answered with an error status.

    Every field is optional; absent values stay ``None`` so that callers can
    tell "not sent" apart from "empty".

    Attributes:
        status_code: HTTP status code of the response
        mime_type: Response MIME type without parameters
        body: Raw response body text
        additional_messages: Extra free-text messages attached to the error
        operation_outcome: Parsed OperationOutcome, if the body was one
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        mime_type: Optional[str] = None,
        body: Optional[str] = None,
        additional_messages: Optional[List[str]] = None,
        operation_outcome: Optional["OperationOutcome"] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.mime_type = mime_type
        self.body = body
        self.additional_messages = list(additional_messages or [])
        self.operation_outcome = operation_outcome


class TransportError(FHIRPagerError):
    """The HTTP exchange itself failed."""


class ConnectionFailedError(TransportError):
    """The server could not be reached."""


class RequestTimeoutError(TransportError):
    """The server did not answer in time."""


class MalformedResponseError(TransportError):
    """A successful response could not be parsed."""


class FetchCancelledError(FHIRPagerError):
    """Paging was cancelled by the caller."""
