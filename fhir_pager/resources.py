"""Typed views of the FHIR resources the client reads: Bundle and OperationOutcome."""
import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fhir_pager.errors import MalformedResponseError

LINK_NEXT = "next"
LINK_SELF = "self"


@dataclass
class BundleLink:
    """A navigation link of a Bundle (Bundle.link)."""
    relation: str
    url: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "BundleLink":
        return cls(relation=_text(data.get("relation")) or "", url=_text(data.get("url")) or "")

    def to_json(self) -> Dict[str, str]:
        return {"relation": self.relation, "url": self.url}


@dataclass
class Bundle:
    """One page of search results.

    ``total`` is ``None`` when the server did not declare a match count.
    """
    entry: List[Dict[str, Any]] = field(default_factory=list)
    total: Optional[int] = None
    link: List[BundleLink] = field(default_factory=list)
    type: str = "searchset"
    id: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "Bundle":
        """Build a Bundle from parsed JSON.

        Raises:
            MalformedResponseError: if the data is not a Bundle
        """
        if not isinstance(data, dict) or data.get("resourceType") != "Bundle":
            found = data.get("resourceType") if isinstance(data, dict) else type(data).__name__
            raise MalformedResponseError(f"Expected a Bundle, got {found}")

        total = data.get("total")
        if total is not None and (isinstance(total, bool) or not isinstance(total, int)):
            raise MalformedResponseError(f"Bundle.total is not an integer: {total!r}")

        return cls(
            entry=_list_of_dicts(data, "entry"),
            total=total,
            link=[BundleLink.from_json(link) for link in _list_of_dicts(data, "link")],
            type=data.get("type", "searchset"),
            id=data.get("id"),
        )

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"resourceType": "Bundle", "type": self.type}
        if self.id is not None:
            data["id"] = self.id
        if self.total is not None:
            data["total"] = self.total
        if self.link:
            data["link"] = [link.to_json() for link in self.link]
        if self.entry:
            data["entry"] = self.entry
        return data

    def get_link(self, relation: str) -> Optional[BundleLink]:
        for link in self.link:
            if link.relation == relation:
                return link
        return None

    def resources(self) -> List[Dict[str, Any]]:
        return [entry.get("resource", {}) for entry in self.entry]

    def copy(self) -> "Bundle":
        return copy.deepcopy(self)


@dataclass
class OperationOutcomeIssue:
    """One issue of an OperationOutcome."""
    severity: Optional[str] = None
    code: Optional[str] = None
    details_text: Optional[str] = None
    diagnostics: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "OperationOutcomeIssue":
        details = data.get("details")
        if not isinstance(details, dict):
            details = {}
        return cls(
            severity=_text(data.get("severity")),
            code=_text(data.get("code")),
            details_text=_text(details.get("text")),
            diagnostics=_text(data.get("diagnostics")),
        )


@dataclass
class OperationOutcome:
    """A server's structured error report."""
    issue: List[OperationOutcomeIssue] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "OperationOutcome":
        issues = data.get("issue")
        if not isinstance(issues, list):
            issues = []
        return cls(issue=[OperationOutcomeIssue.from_json(i) for i in issues if isinstance(i, dict)])


def parse_operation_outcome(body: Optional[str]) -> Optional[OperationOutcome]:
    """Parse a response body as an OperationOutcome.

    Returns None when the body is empty, not JSON, or another resource type.
    """
    if not body:
        return None
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, dict) or data.get("resourceType") != "OperationOutcome":
        return None
    return OperationOutcome.from_json(data)


def _list_of_dicts(data: Dict[str, Any], name: str) -> List[Dict[str, Any]]:
    value = data.get(name, [])
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise MalformedResponseError(f"Bundle.{name} must be a list of objects, got {value!r}")
    return list(value)


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None
