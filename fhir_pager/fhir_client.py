"""FHIR HTTP client with an interceptor pipeline."""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests

from fhir_pager.config import ClientConfig
from fhir_pager.errors import (
    ConnectionFailedError,
    FHIRServerError,
    InvalidArgumentError,
    MalformedResponseError,
    RequestTimeoutError,
    TransportError,
)
from fhir_pager.interceptors import ClientInterceptor, InterceptorPipeline
from fhir_pager.resources import LINK_NEXT, Bundle, parse_operation_outcome

logger = logging.getLogger(__name__)


class FHIRClient:
    """HTTP client for FHIR search and paging."""

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """Initialize FHIR client.

        Args:
            config: Client configuration (base URL, timeout, ...)
            session: Session to send requests with (default: a new one)
        """
        if config is None:
            raise InvalidArgumentError("config cannot be None")
        self.config = config
        self.base_url = config.base_url
        # Store with trailing slash for urljoin
        self._base_url_with_slash = self.base_url + '/'
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': config.accept})
        self.interceptors = InterceptorPipeline()

    def _url(self, path: str) -> str:
        """Construct full URL from path."""
        # Strip leading slash from path to avoid double slashes
        if path.startswith('/'):
            path = path[1:]
        return urljoin(self._base_url_with_slash, path)

    def register_interceptor(self, interceptor: ClientInterceptor) -> None:
        self.interceptors.register(interceptor)

    def search(self, resource_type: str, filter_field: str, filter_value: str,
               params: Optional[Dict[str, Any]] = None) -> Bundle:
        """Search resources matching one string parameter.

        Args:
            resource_type: Type of resource to search (e.g., 'Patient')
            filter_field: Search parameter name (e.g., 'family')
            filter_value: Value the parameter must match
            params: Extra search parameters such as _count

        Returns:
            The first page of results
        """
        if not resource_type:
            raise InvalidArgumentError("resource_type cannot be empty")
        if filter_field is None or filter_value is None:
            raise InvalidArgumentError("filter_field and filter_value cannot be None")

        query: Dict[str, Any] = {filter_field: filter_value}
        if params:
            query.update(params)
        return self._fetch_bundle(self._url(resource_type), query)

    def fetch_next_page(self, current_page: Bundle) -> Bundle:
        """Load the page the current page's 'next' link points to.

        Raises:
            InvalidArgumentError: if the page has no 'next' link
            MalformedResponseError: if the 'next' link has no url
        """
        if current_page is None:
            raise InvalidArgumentError("current_page cannot be None")
        next_link = current_page.get_link(LINK_NEXT)
        if next_link is None:
            raise InvalidArgumentError("Bundle has no 'next' link")
        if not next_link.url:
            raise MalformedResponseError("The 'next' link of the Bundle has no url")
        # Relative links resolve against the base URL; absolute ones are kept
        return self._fetch_bundle(self._url(next_link.url))

    def _fetch_bundle(self, url: str, params: Optional[Dict[str, Any]] = None) -> Bundle:
        response = self._exchange('GET', url, params)
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Response from {response.url} is not JSON") from e
        return Bundle.from_json(data)

    def _exchange(self, method: str, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Send one request through the interceptor pipeline.

        Returns:
            The response, if its status is below 400
        """
        request = self.session.prepare_request(requests.Request(method, url, params=params))
        self.interceptors.before_send(request)

        try:
            response = self.session.send(request, timeout=self.config.timeout)
        except requests.Timeout as e:
            raise RequestTimeoutError(f"{method} {request.url} timed out") from e
        except requests.ConnectionError as e:
            raise ConnectionFailedError(f"Could not connect for {method} {request.url}") from e
        except requests.RequestException as e:
            raise TransportError(f"{method} {request.url} failed: {e}") from e

        self.interceptors.after_receive(response)

        if response.status_code >= 400:
            raise self._server_error(method, response)
        return response

    @staticmethod
    def _server_error(method: str, response: requests.Response) -> FHIRServerError:
        content_type = response.headers.get('Content-Type')
        mime_type = content_type.split(';')[0].strip() if content_type else None
        body = response.text or None
        messages = [response.reason] if response.reason else []

        logger.debug("%s %s returned HTTP %s", method, response.url, response.status_code)
        return FHIRServerError(
            f"HTTP {response.status_code} {response.reason or ''}".strip(),
            status_code=response.status_code,
            mime_type=mime_type,
            body=body,
            additional_messages=messages,
            operation_outcome=parse_operation_outcome(body),
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "FHIRClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
