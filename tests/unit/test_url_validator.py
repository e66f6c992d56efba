"""Tests for Firefly API endpoint validation and normalization."""

import pytest

from firefly_client.exceptions import ConfigurationError
from firefly_client.url_validator import DEFAULT_API_URL, validate_and_normalize_endpoint


class TestValidateAndNormalizeEndpoint:
    @pytest.mark.parametrize("endpoint", [None, "", "   "])
    def test_missing_endpoint_uses_default(self, endpoint):
        assert validate_and_normalize_endpoint(endpoint) == DEFAULT_API_URL

    @pytest.mark.parametrize(
        "endpoint,expected",
        [
            ("https://api.example.com", "https://api.example.com"),
            ("https://api.example.com/", "https://api.example.com"),
            ("http://localhost:8080", "http://localhost:8080"),
            ("api.example.com", "https://api.example.com"),
            ("localhost:8443", "https://localhost:8443"),
            ("https://10.0.0.5:9000//", "https://10.0.0.5:9000"),
            ("https://example.com/firefly/api/", "https://example.com/firefly/api"),
            ("http://firefly-api:8080", "http://firefly-api:8080"),
            ("firefly-api:8080", "https://firefly-api:8080"),
            ("http://gateway/", "http://gateway"),
        ],
    )
    def test_valid_endpoints(self, endpoint, expected):
        assert validate_and_normalize_endpoint(endpoint) == expected

    def test_unsupported_protocol(self):
        with pytest.raises(ConfigurationError, match="Unsupported protocol"):
            validate_and_normalize_endpoint("ftp://api.example.com")

    @pytest.mark.parametrize(
        "endpoint",
        ["https://", "https://.example.com", "https://example.com:0"],
    )
    def test_invalid_endpoints(self, endpoint):
        with pytest.raises(ConfigurationError, match="Invalid endpoint URL"):
            validate_and_normalize_endpoint(endpoint)

    def test_invalid_port(self):
        with pytest.raises(ConfigurationError):
            validate_and_normalize_endpoint("https://api.example.com:99999")
