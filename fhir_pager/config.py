"""Client configuration."""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fhir_pager.errors import ConfigurationError

FHIR_JSON = "application/fhir+json"
DEFAULT_TIMEOUT = 30.0


@dataclass
class ClientConfig:
    """Settings for one FHIRClient.

    Args:
        base_url: Base URL of the FHIR server, e.g. http://hapi.fhir.org/baseR4
        timeout: Seconds to wait for each HTTP exchange
        accept: MIME type sent in the Accept header
        username: Basic auth user (auth is only added when both are set)
        password: Basic auth password
        additional_headers: Extra header values added to every request
        log_requests: Register a LoggingInterceptor on the client
    """
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    accept: str = FHIR_JSON
    username: Optional[str] = None
    password: Optional[str] = None
    additional_headers: Dict[str, List[str]] = field(default_factory=dict)
    log_requests: bool = False

    def __post_init__(self):
        if not self.base_url:
            raise ConfigurationError(
                "The base URL for the FHIR server must be specified. "
                "For example: http://hapi.fhir.org/baseR4"
            )
        # Store without trailing slash
        self.base_url = self.base_url.rstrip('/')

    @property
    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None

    @classmethod
    def from_env(cls, base_url: Optional[str] = None) -> "ClientConfig":
        """Build a config from arguments, falling back to environment variables.

        Reads FHIR_BASE_URL, FHIR_TIMEOUT, FHIR_USERNAME and FHIR_PASSWORD.
        """
        url = base_url or os.environ.get('FHIR_BASE_URL')
        timeout = os.environ.get('FHIR_TIMEOUT')
        try:
            timeout_seconds = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"FHIR_TIMEOUT must be a number, got {timeout!r}") from None

        return cls(
            base_url=url,
            timeout=timeout_seconds,
            username=os.environ.get('FHIR_USERNAME'),
            password=os.environ.get('FHIR_PASSWORD'),
        )
