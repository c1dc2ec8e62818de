"""Client interceptors: hooks run on every outgoing request and incoming response."""
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import requests
from requests.auth import HTTPBasicAuth

from fhir_pager.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class ClientInterceptor:
    """Base interceptor. Both hooks do nothing unless overridden."""

    def intercept_request(self, request: requests.PreparedRequest) -> None:
        pass

    def intercept_response(self, response: requests.Response) -> None:
        pass


class AdditionalHttpHeadersInterceptor(ClientInterceptor):
    """Adds arbitrary header values to requests made by the client."""

    def __init__(self, additional_http_headers: Optional[Mapping[str, List[str]]] = None):
        self._headers: Dict[str, List[str]] = {}
        if additional_http_headers is not None:
            for name, values in additional_http_headers.items():
                self.add_all_header_values(name, values)

    def add_header_value(self, header_name: str, header_value: str) -> None:
        """Add one value for a header.

        Raises:
            InvalidArgumentError: if either argument is None
        """
        if header_name is None:
            raise InvalidArgumentError("header_name cannot be None")
        if header_value is None:
            raise InvalidArgumentError("header_value cannot be None")

        self._values_for(header_name).append(header_value)

    def add_all_header_values(self, header_name: str, header_values: Iterable[str]) -> None:
        """Add several values for a header, keeping their order.

        Raises:
            InvalidArgumentError: if the name, the list, or any value is None
        """
        if header_name is None:
            raise InvalidArgumentError("header_name cannot be None")
        if header_values is None:
            raise InvalidArgumentError("header_values cannot be None")

        values = list(header_values)
        if any(value is None for value in values):
            raise InvalidArgumentError("header_values cannot contain None")

        self._values_for(header_name).extend(values)

    def header_values(self, header_name: str) -> List[str]:
        return list(self._headers.get(header_name, []))

    @property
    def header_names(self) -> List[str]:
        return list(self._headers)

    def _values_for(self, header_name: str) -> List[str]:
        return self._headers.setdefault(header_name, [])

    def intercept_request(self, request: requests.PreparedRequest) -> None:
        # requests keeps one field per name, so repeated values are combined
        # with ", " in the order they were added.
        for name, values in self._headers.items():
            for value in values:
                existing = request.headers.get(name)
                request.headers[name] = value if existing is None else f"{existing}, {value}"


class BasicAuthInterceptor(ClientInterceptor):
    """Sets an HTTP Basic Authorization header on every request."""

    def __init__(self, username: str, password: str):
        if username is None or password is None:
            raise InvalidArgumentError("username and password cannot be None")
        self._username = username
        self._password = password

    @property
    def username(self) -> str:
        return self._username

    @property
    def password(self) -> str:
        return self._password

    def intercept_request(self, request: requests.PreparedRequest) -> None:
        HTTPBasicAuth(self._username, self._password)(request)


class LoggingInterceptor(ClientInterceptor):
    """Logs requests and responses without changing them.

    Summaries are logged by default; headers and bodies only when enabled.
    """

    def __init__(
        self,
        log_request_summary: bool = True,
        log_request_headers: bool = False,
        log_request_body: bool = False,
        log_response_summary: bool = True,
        log_response_headers: bool = False,
        log_response_body: bool = False,
        log: Optional[logging.Logger] = None,
    ):
        self.log_request_summary = log_request_summary
        self.log_request_headers = log_request_headers
        self.log_request_body = log_request_body
        self.log_response_summary = log_response_summary
        self.log_response_headers = log_response_headers
        self.log_response_body = log_response_body
        self.log = log or logger

    def intercept_request(self, request: requests.PreparedRequest) -> None:
        if self.log_request_summary:
            self.log.info("Client request: %s %s", request.method, request.url)
        if self.log_request_headers:
            self.log.info("Client request headers:\n%s", _format_headers(request.headers))
        if self.log_request_body and request.body:
            body = request.body.decode("utf-8", "replace") if isinstance(request.body, bytes) else request.body
            self.log.info("Client request body:\n%s", body)

    def intercept_response(self, response: requests.Response) -> None:
        if self.log_response_summary:
            self.log.info(
                "Client response: HTTP %s %s (%s in %.0fms)",
                response.status_code,
                response.reason or "",
                response.url,
                response.elapsed.total_seconds() * 1000,
            )
        if self.log_response_headers:
            self.log.info("Client response headers:\n%s", _format_headers(response.headers))
        if self.log_response_body:
            self.log.info("Client response body:\n%s", response.text)


def _format_headers(headers: Mapping[str, str]) -> str:
    return "\n".join(f"{name}: {value}" for name, value in headers.items())


class InterceptorPipeline:
    """Ordered interceptors.

    Both hooks run in registration order; responses are not walked in reverse.
    """

    def __init__(self, interceptors: Optional[Iterable[ClientInterceptor]] = None):
        self._interceptors: List[ClientInterceptor] = []
        for interceptor in interceptors or ():
            self.register(interceptor)

    def register(self, interceptor: ClientInterceptor) -> None:
        if interceptor is None:
            raise InvalidArgumentError("interceptor cannot be None")
        self._interceptors.append(interceptor)

    def unregister(self, interceptor: ClientInterceptor) -> None:
        self._interceptors.remove(interceptor)

    @property
    def interceptors(self) -> Tuple[ClientInterceptor, ...]:
        return tuple(self._interceptors)

    def __len__(self) -> int:
        return len(self._interceptors)

    def before_send(self, request: requests.PreparedRequest) -> None:
        if request is None:
            raise InvalidArgumentError("request cannot be None")
        for interceptor in self._interceptors:
            interceptor.intercept_request(request)

    def after_receive(self, response: requests.Response) -> None:
        if response is None:
            raise InvalidArgumentError("response cannot be None")
        for interceptor in self._interceptors:
            interceptor.intercept_response(response)
