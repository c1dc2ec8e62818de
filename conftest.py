"""Pytest configuration and shared fixtures."""
import logging

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from fhir_pager.config import ClientConfig
from fhir_pager.fhir_client import FHIRClient
from fixtures.fake_fhir_server import FakeFHIRServer
from utils.assertions import FHIRAssertions


BASE_URL = "http://fhir.test/baseR4"


@pytest.fixture(scope="function")
def config():
    """Client configuration pointing at the fake server."""
    return ClientConfig(base_url=BASE_URL, timeout=5)


@pytest.fixture(scope="function")
def fake_server():
    """Fake FHIR server serving canned responses."""
    return FakeFHIRServer(BASE_URL)


@pytest.fixture(scope="function")
def client(config, fake_server):
    """Create FHIR client wired to the fake server."""
    client = FHIRClient(config)
    fake_server.mount_on(client.session)
    yield client
    client.close()


@pytest.fixture(scope="function")
def assertions():
    """Create assertions helper."""
    return FHIRAssertions()


@pytest.fixture(scope="function")
def fhir_log(caplog):
    """Capture DEBUG and above from the fhir_pager loggers."""
    caplog.set_level(logging.DEBUG, logger="fhir_pager")
    return caplog
