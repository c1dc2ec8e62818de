"""FHIR-specific assertion helpers for testing."""
from typing import Any, Dict, List, Optional

import requests

from fhir_pager.resources import LINK_NEXT, Bundle


class FHIRAssertions:
    """Assertion helpers for Bundles, requests and failure reports."""

    @staticmethod
    def assert_bundle_count(bundle: Bundle, expected_count: int):
        """Assert Bundle has expected number of entries."""
        actual = len(bundle.entry)
        assert actual == expected_count, \
            f"Expected {expected_count} entries in Bundle, got {actual}"

    @staticmethod
    def assert_no_links(bundle: Bundle):
        """Assert Bundle carries no navigation links at all."""
        assert bundle.get_link(LINK_NEXT) is None, "Bundle should not expose a 'next' link"
        assert bundle.link == [], \
            f"Expected no links, got {[link.relation for link in bundle.link]}"

    @staticmethod
    def assert_entries_equal(bundle: Bundle, pages: List[Dict[str, Any]]):
        """Assert Bundle entries are the concatenation of the pages' entries, in order."""
        expected_ids = [e['resource']['id'] for page in pages for e in page.get('entry', [])]
        actual_ids = [e['resource']['id'] for e in bundle.entry]
        assert actual_ids == expected_ids, \
            f"Entries out of order or missing.\nExpected: {expected_ids}\nActual:   {actual_ids}"

    @staticmethod
    def assert_header(request: requests.PreparedRequest, name: str, expected: str):
        """Assert the prepared request carries a header with the given value."""
        assert name in request.headers, f"Header {name} missing from request to {request.url}"
        actual = request.headers[name]
        assert actual == expected, f"Expected {name}: {expected}, got {name}: {actual}"

    @staticmethod
    def assert_header_order(request: requests.PreparedRequest, names: List[str]):
        """Assert the headers appear on the request in the given relative order."""
        present = [n for n in request.headers.keys() if n in names]
        assert present == names, f"Expected header order {names}, got {present}"

    @staticmethod
    def assert_log_contains(records, level: str, text: str, logger_name: Optional[str] = None):
        """Assert at least one captured log record matches level and text."""
        for record in records:
            if record.levelname == level and text in record.getMessage():
                if logger_name is None or record.name == logger_name:
                    return record
        raise AssertionError(
            f"No {level} log record containing {text!r}. Got: "
            f"{[(r.levelname, r.getMessage()) for r in records]}"
        )
