"""Minimal FHIR search client that pages through Bundle results."""
from fhir_pager.bundle_fetcher import BundleFetcher, fetch_all
from fhir_pager.config import ClientConfig
from fhir_pager.error_reporter import (
    GENERIC_ERROR_MESSAGE,
    FailureReport,
    describe_failure,
    extract_messages,
)
from fhir_pager.errors import (
    ConfigurationError,
    ConnectionFailedError,
    FetchCancelledError,
    FHIRPagerError,
    FHIRServerError,
    InvalidArgumentError,
    MalformedResponseError,
    RequestTimeoutError,
    TransportError,
)
from fhir_pager.fhir_client import FHIRClient
from fhir_pager.interceptors import (
    AdditionalHttpHeadersInterceptor,
    BasicAuthInterceptor,
    ClientInterceptor,
    InterceptorPipeline,
    LoggingInterceptor,
)
from fhir_pager.resources import Bundle, BundleLink, OperationOutcome, OperationOutcomeIssue

__version__ = "0.1.0"
