"""Command line driver: search a FHIR server and page through all results."""
import logging
from typing import Optional

import typer

from fhir_pager.bundle_fetcher import BundleFetcher
from fhir_pager.config import ClientConfig
from fhir_pager.error_reporter import describe_failure, log_failure
from fhir_pager.errors import ConfigurationError, FHIRServerError
from fhir_pager.fhir_client import FHIRClient
from fhir_pager.interceptors import (
    AdditionalHttpHeadersInterceptor,
    BasicAuthInterceptor,
    LoggingInterceptor,
)
from fhir_pager.logging_config import configure_logging
from fhir_pager.resources import Bundle

logger = logging.getLogger(__name__)

CLIENT_NAME_HEADER = "X-Client-Name"
CLIENT_NAME = "fhir-pager"

app = typer.Typer(help="Search a FHIR server for patients and fetch every result page.")


def build_client(config: ClientConfig) -> FHIRClient:
    """Create a client with its interceptors registered in a fixed order."""
    client = FHIRClient(config)

    headers = AdditionalHttpHeadersInterceptor(config.additional_headers)
    headers.add_header_value(CLIENT_NAME_HEADER, CLIENT_NAME)
    client.register_interceptor(headers)

    if config.has_credentials:
        client.register_interceptor(BasicAuthInterceptor(config.username, config.password))
    if config.log_requests:
        client.register_interceptor(LoggingInterceptor())
    return client


def run(config: ClientConfig, resource_type: str = "Patient", filter_field: str = "family",
        filter_value: str = "reynolds", client: Optional[FHIRClient] = None) -> Optional[Bundle]:
    """Search, fetch every page and log what was found.

    Server errors are logged field by field and any other failure with its
    traceback; in both cases None is returned.
    """
    logger.debug("Base URL is %s", config.base_url)
    if client is None:
        with build_client(config) as owned_client:
            return _search_all(owned_client, resource_type, filter_field, filter_value)
    return _search_all(client, resource_type, filter_field, filter_value)


def _search_all(client: FHIRClient, resource_type: str, filter_field: str,
                filter_value: str) -> Optional[Bundle]:
    try:
        first_page = client.search(resource_type, filter_field, filter_value)
        results = BundleFetcher.starting_with(client, first_page).fetch_all()
    except FHIRServerError as e:
        logger.error("A FHIR error occurred!: %s", e)
        log_failure(describe_failure(e), logger)
        return None
    except Exception:
        logger.exception("Something really bad happened!")
        return None

    logger.info("Found %d %s resource(s).", len(results.entry), resource_type)
    for resource in results.resources():
        logger.info("ID of found %s is %s", resource.get("resourceType", resource_type), resource.get("id"))
    return results


@app.command()
def main(
    base_url: Optional[str] = typer.Argument(None, help="Base URL of the FHIR server, e.g. http://hapi.fhir.org/baseR4"),
) -> None:
    """Find patients with the family name 'reynolds' and log their IDs."""
    if not base_url:
        raise ConfigurationError(
            "The base URL for the FHIR server must be specified as an argument. "
            "For example: http://hapi.fhir.org/baseR4"
        )
    configure_logging(logging.DEBUG)
    run(ClientConfig.from_env(base_url))


if __name__ == "__main__":
    app()
