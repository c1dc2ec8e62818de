"""In-process FHIR server stand-in, mounted on a requests.Session as a transport adapter."""
import json
from typing import Any, Dict, List, Optional, Union

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict


class FakeFHIRServer(BaseAdapter):
    """Serves canned responses by URL and records every request it receives.

    Responses are looked up by the full request URL first, then by the URL
    without its query string. Unknown URLs get a 404 OperationOutcome.
    """

    def __init__(self, base_url: str = "http://fhir.test/baseR4"):
        super().__init__()
        self.base_url = base_url
        self.requests: List[requests.PreparedRequest] = []
        self._routes: Dict[str, Union[Dict[str, Any], Exception]] = {}

    def mount_on(self, session: requests.Session) -> None:
        session.mount(self.base_url, self)

    def add_json(self, url: str, data: Any, status: int = 200,
                 content_type: str = "application/fhir+json;charset=UTF-8",
                 reason: Optional[str] = None) -> None:
        self.add_response(url, json.dumps(data), status=status,
                          headers={"Content-Type": content_type}, reason=reason)

    def add_response(self, url: str, body: str = "", status: int = 200,
                     headers: Optional[Dict[str, str]] = None, reason: Optional[str] = None) -> None:
        self._routes[url] = {
            "body": body,
            "status": status,
            "headers": headers or {},
            "reason": reason if reason is not None else _REASONS.get(status, ""),
        }

    def add_pages(self, pages: List[Dict[str, Any]]) -> None:
        """Serve every page but the first at the 'next' URL pointing to it."""
        for previous, page in zip(pages, pages[1:]):
            next_url = next(link["url"] for link in previous["link"] if link["relation"] == "next")
            self.add_json(next_url, page)

    def raise_for(self, url: str, error: Exception) -> None:
        self._routes[url] = error

    def requests_to(self, url: str) -> List[requests.PreparedRequest]:
        return [r for r in self.requests if r.url == url]

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        route = self._routes.get(request.url)
        if route is None:
            route = self._routes.get(request.url.split('?')[0])
        if isinstance(route, Exception):
            raise route
        if route is None:
            outcome = {
                "resourceType": "OperationOutcome",
                "issue": [{"severity": "error", "code": "not-found",
                           "diagnostics": f"Unknown URL {request.url}"}]
            }
            route = {"body": json.dumps(outcome), "status": 404, "reason": "Not Found",
                     "headers": {"Content-Type": "application/fhir+json"}}

        response = requests.Response()
        response.status_code = route["status"]
        response.reason = route["reason"]
        response.headers = CaseInsensitiveDict(route["headers"])
        response._content = route["body"].encode("utf-8")
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


_REASONS = {
    200: "OK",
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    410: "Gone",
    500: "Internal Server Error",
}
