"""FHIR resource generators for testing."""
import uuid
from typing import Dict, Any, Optional, List
from faker import Faker

fake = Faker()


class FHIRResourceGenerator:
    """Generate FHIR resources, paged Bundles and OperationOutcomes for testing."""

    @staticmethod
    def generate_id() -> str:
        """Generate a unique resource ID."""
        return str(uuid.uuid4())

    @staticmethod
    def generate_human_name(
        family: Optional[str] = None,
        given: Optional[List[str]] = None,
        use: str = "official"
    ) -> Dict[str, Any]:
        """Generate a HumanName."""
        return {
            "use": use,
            "family": family or fake.last_name(),
            "given": given or [fake.first_name()]
        }

    @staticmethod
    def generate_patient(**overrides) -> Dict[str, Any]:
        """Generate a valid Patient resource.

        Args:
            **overrides: Override any field in the generated patient

        Returns:
            Patient resource dictionary
        """
        patient = {
            "resourceType": "Patient",
            "id": FHIRResourceGenerator.generate_id(),
            "name": [FHIRResourceGenerator.generate_human_name()],
            "gender": fake.random_element(["male", "female", "other", "unknown"]),
            "birthDate": fake.date_of_birth(minimum_age=0, maximum_age=100).isoformat(),
            "active": True
        }

        # Merge overrides
        patient.update(overrides)
        return patient

    @staticmethod
    def generate_entry(resource: Dict[str, Any], base_url: str = "http://fhir.test/baseR4") -> Dict[str, Any]:
        """Wrap a resource in a searchset Bundle entry."""
        return {
            "fullUrl": f"{base_url}/{resource['resourceType']}/{resource['id']}",
            "resource": resource,
            "search": {"mode": "match"}
        }

    @staticmethod
    def generate_bundle(
        resources: Optional[List[Dict[str, Any]]] = None,
        total: Optional[int] = None,
        next_url: Optional[str] = None,
        self_url: Optional[str] = None,
        **overrides
    ) -> Dict[str, Any]:
        """Generate a searchset Bundle page.

        Args:
            resources: Resources to put in the entries
            total: Declared total match count (omitted when None)
            next_url: URL of the 'next' link (omitted when None)
            self_url: URL of the 'self' link (omitted when None)
            **overrides: Override any field

        Returns:
            Bundle resource dictionary
        """
        bundle: Dict[str, Any] = {
            "resourceType": "Bundle",
            "id": FHIRResourceGenerator.generate_id(),
            "type": "searchset",
            "entry": [FHIRResourceGenerator.generate_entry(r) for r in resources or []]
        }
        if total is not None:
            bundle["total"] = total

        links = []
        if self_url:
            links.append({"relation": "self", "url": self_url})
        if next_url:
            links.append({"relation": "next", "url": next_url})
        if links:
            bundle["link"] = links

        bundle.update(overrides)
        return bundle

    @staticmethod
    def generate_page_chain(
        page_sizes: List[int],
        base_url: str = "http://fhir.test/baseR4",
        total: Optional[int] = None,
        family: str = "reynolds"
    ) -> List[Dict[str, Any]]:
        """Generate linked Bundle pages, each pointing at the next one.

        The first page declares ``total`` (default: the sum of page sizes).
        Page URLs look like HAPI's: ``{base_url}?_getpages=<id>&_getpagesoffset=<n>``, plus the
        page index so that an empty page never shares a URL with the next one.

        Returns:
            Bundle dictionaries in link order
        """
        if total is None:
            total = sum(page_sizes)
        search_id = FHIRResourceGenerator.generate_id()

        def page_url(index, offset):
            return (f"{base_url}?_getpages={search_id}&_getpagesoffset={offset}"
                    f"&_count={page_sizes[0]}&_page={index}")

        pages = []
        offset = 0
        for index, size in enumerate(page_sizes):
            patients = [
                FHIRResourceGenerator.generate_patient(
                    name=[FHIRResourceGenerator.generate_human_name(family=family)]
                )
                for _ in range(size)
            ]
            is_last = index == len(page_sizes) - 1
            pages.append(FHIRResourceGenerator.generate_bundle(
                resources=patients,
                total=total if index == 0 else None,
                self_url=page_url(index, offset),
                next_url=None if is_last else page_url(index + 1, offset + size)
            ))
            offset += size
        return pages

    @staticmethod
    def generate_issue(
        severity: str = "error",
        code: str = "processing",
        details_text: Optional[str] = None,
        diagnostics: Optional[str] = None
    ) -> Dict[str, Any]:
        """Generate an OperationOutcome issue."""
        issue: Dict[str, Any] = {"severity": severity, "code": code}
        if details_text is not None:
            issue["details"] = {"text": details_text}
        if diagnostics is not None:
            issue["diagnostics"] = diagnostics
        return issue

    @staticmethod
    def generate_operation_outcome(issues: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """Generate an OperationOutcome (one generic issue by default)."""
        if issues is None:
            issues = [FHIRResourceGenerator.generate_issue(diagnostics=fake.sentence())]
        return {
            "resourceType": "OperationOutcome",
            "issue": issues
        }
