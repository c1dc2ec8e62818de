"""Turn server errors into human-readable messages."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from fhir_pager.errors import FHIRServerError
from fhir_pager.resources import OperationOutcome, OperationOutcomeIssue

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."
ABSENT = "<absent>"


def message_for_issue(issue: OperationOutcomeIssue) -> str:
    """Pick the message for one issue.

    The first defined of: issue.details.text, issue.diagnostics, a generic
    error message.
    """
    if issue.details_text:
        return issue.details_text
    if issue.diagnostics is not None:
        return issue.diagnostics
    return GENERIC_ERROR_MESSAGE


def extract_messages(operation_outcome: Optional[OperationOutcome]) -> List[str]:
    """Return one message per issue, in issue order."""
    if operation_outcome is None:
        return []
    return [message_for_issue(issue) for issue in operation_outcome.issue]


@dataclass(frozen=True)
class FailureReport:
    """Everything known about a failed server exchange; None means absent."""
    status_code: Optional[int] = None
    mime_type: Optional[str] = None
    body: Optional[str] = None
    additional_messages: Optional[List[str]] = None
    issue_messages: Optional[List[str]] = None


def describe_failure(error: FHIRServerError) -> FailureReport:
    """Break a server error down into a FailureReport."""
    issue_messages = None
    if error.operation_outcome is not None:
        issue_messages = extract_messages(error.operation_outcome)

    return FailureReport(
        status_code=error.status_code,
        mime_type=error.mime_type,
        body=error.body,
        additional_messages=list(error.additional_messages) or None,
        issue_messages=issue_messages,
    )


def _shown(value) -> str:
    return ABSENT if value is None else str(value)


def log_failure(report: FailureReport, logger: logging.Logger) -> None:
    """Write a FailureReport to the log at ERROR level."""
    logger.error("HTTP status: %s", _shown(report.status_code))
    logger.error("Response MIME type: %s", _shown(report.mime_type))
    logger.error("Response body: %s", _shown(report.body))

    if report.additional_messages is None:
        logger.error("Additional messages: %s", ABSENT)
    else:
        for message in report.additional_messages:
            logger.error("Additional message: %s", message)

    if report.issue_messages is None:
        logger.error("Operation outcome: %s", ABSENT)
    elif report.issue_messages:
        logger.error("Here are the error messages from each of the operation outcome issues:")
        for message in report.issue_messages:
            logger.error(message)
