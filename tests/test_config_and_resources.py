"""Tests for client configuration and Bundle parsing."""
import logging

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from fhir_pager.config import DEFAULT_TIMEOUT, ClientConfig
from fhir_pager.errors import ConfigurationError, InvalidArgumentError, MalformedResponseError
from fhir_pager.logging_config import LOG_FORMAT, PACKAGE_LOGGER, configure_logging
from fhir_pager.resources import Bundle, parse_operation_outcome
from fixtures.resource_generators import FHIRResourceGenerator


class TestClientConfig:
    """Test configuration defaults and environment loading."""

    def test_missing_base_url(self):
        """Test that an empty base URL is a configuration error."""
        with pytest.raises(ConfigurationError):
            ClientConfig(base_url="")

    def test_configuration_error_is_invalid_argument(self):
        """Test the error taxonomy."""
        assert issubclass(ConfigurationError, InvalidArgumentError)

    def test_from_env(self, monkeypatch):
        """Test that environment variables fill in the config."""
        monkeypatch.setenv("FHIR_BASE_URL", "http://env.test/fhir/")
        monkeypatch.setenv("FHIR_TIMEOUT", "12")
        monkeypatch.setenv("FHIR_USERNAME", "alice")
        monkeypatch.setenv("FHIR_PASSWORD", "s3cret")

        config = ClientConfig.from_env()

        assert config.base_url == "http://env.test/fhir"
        assert config.timeout == 12.0
        assert config.has_credentials

    def test_argument_beats_env(self, monkeypatch):
        """Test that an explicit base URL wins over FHIR_BASE_URL."""
        monkeypatch.setenv("FHIR_BASE_URL", "http://env.test/fhir")
        monkeypatch.delenv("FHIR_TIMEOUT", raising=False)
        monkeypatch.delenv("FHIR_USERNAME", raising=False)
        monkeypatch.delenv("FHIR_PASSWORD", raising=False)

        config = ClientConfig.from_env("http://arg.test/fhir")

        assert config.base_url == "http://arg.test/fhir"
        assert config.timeout == DEFAULT_TIMEOUT
        assert not config.has_credentials

    def test_from_env_without_url(self, monkeypatch):
        """Test that no URL anywhere fails fast."""
        monkeypatch.delenv("FHIR_BASE_URL", raising=False)
        with pytest.raises(ConfigurationError):
            ClientConfig.from_env()

    def test_bad_timeout(self, monkeypatch):
        """Test that a non-numeric FHIR_TIMEOUT is rejected."""
        monkeypatch.setenv("FHIR_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError):
            ClientConfig.from_env("http://arg.test/fhir")


class TestBundleParsing:
    """Test Bundle and OperationOutcome parsing."""

    def test_round_trip_keeps_unknown_total_absent(self):
        """Test that a Bundle without total does not gain total=0."""
        data = FHIRResourceGenerator.generate_bundle(resources=[FHIRResourceGenerator.generate_patient()])

        bundle = Bundle.from_json(data)

        assert bundle.total is None
        assert "total" not in bundle.to_json()

    def test_not_a_bundle(self):
        """Test that other resources are rejected."""
        with pytest.raises(MalformedResponseError):
            Bundle.from_json(FHIRResourceGenerator.generate_operation_outcome())

    def test_non_integer_total(self):
        """Test that a malformed total is rejected."""
        with pytest.raises(MalformedResponseError):
            Bundle.from_json(FHIRResourceGenerator.generate_bundle(total="many"))

    @pytest.mark.parametrize("total", [True, False])
    def test_boolean_total_rejected(self, total):
        """Test that a JSON boolean is not read as a count."""
        with pytest.raises(MalformedResponseError):
            Bundle.from_json(FHIRResourceGenerator.generate_bundle(total=total))

    def test_copy_is_deep(self):
        """Test that changing a copy never shows through the original."""
        original = Bundle.from_json(FHIRResourceGenerator.generate_page_chain([2, 2])[0])

        copied = original.copy()
        copied.entry.append({"resource": {"id": "extra"}})
        copied.link.clear()
        copied.entry[0]["resource"]["id"] = "changed"

        assert len(original.entry) == 2
        assert original.get_link("next") is not None
        assert original.entry[0]["resource"]["id"] != "changed"

    def test_resources(self):
        """Test that resources() unwraps entries in order."""
        patients = [FHIRResourceGenerator.generate_patient() for _ in range(3)]
        bundle = Bundle.from_json(FHIRResourceGenerator.generate_bundle(resources=patients))

        assert [r["id"] for r in bundle.resources()] == [p["id"] for p in patients]

    @pytest.mark.parametrize("body", [None, "", "<html/>", '{"resourceType": "Patient"}', "[]"])
    def test_parse_operation_outcome_is_total(self, body):
        """Test that anything but an OperationOutcome parses to None."""
        assert parse_operation_outcome(body) is None


class TestConfigureLogging:
    """Test log handler setup for the driver."""

    def test_handler_added_once(self):
        """Test that repeated calls keep a single package handler and update the level."""
        logger = logging.getLogger(PACKAGE_LOGGER)
        saved_handlers, saved_level = list(logger.handlers), logger.level
        logger.handlers = []
        try:
            configure_logging(logging.INFO)
            configure_logging(logging.DEBUG)

            assert len(logger.handlers) == 1
            assert logger.handlers[0].formatter._fmt == LOG_FORMAT
            assert logger.level == logging.DEBUG
        finally:
            logger.handlers = saved_handlers
            logger.setLevel(saved_level)
