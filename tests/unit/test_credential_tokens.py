"""Unit tests for bearer token extraction."""

import pytest

from funcauth.credentials import AuthenticationData, TokenExtractionError, extract_bearer_token


class TestExtractBearerToken:
    """Tests for extract_bearer_token."""

    def test_command_data(self):
        """Test command data takes precedence over headers."""
        data = AuthenticationData(
            command_data="from-command",
            headers={"Authorization": "Bearer from-header"},
        )
        assert extract_bearer_token(data) == "from-command"

    def test_http_header(self):
        """Test the Authorization header is used without command data."""
        data = AuthenticationData(headers={"Authorization": "Bearer eyJhbGciOi"})
        assert extract_bearer_token(data) == "eyJhbGciOi"

    def test_header_mapping(self):
        """Test a plain header mapping is accepted."""
        assert extract_bearer_token({"Authorization": "Bearer eyJhbGciOi"}) == "eyJhbGciOi"

    def test_header_name_case_insensitive(self):
        """Test header names are matched case-insensitively."""
        assert extract_bearer_token({"authorization": "Bearer eyJhbGciOi"}) == "eyJhbGciOi"

    def test_raw_string(self):
        """Test a raw token string, with or without the Bearer prefix."""
        assert extract_bearer_token("eyJhbGciOi") == "eyJhbGciOi"
        assert extract_bearer_token("Bearer eyJhbGciOi") == "eyJhbGciOi"

    def test_none(self):
        """Test missing authentication data."""
        with pytest.raises(TokenExtractionError):
            extract_bearer_token(None)

    def test_missing_header(self):
        """Test headers without Authorization."""
        with pytest.raises(TokenExtractionError, match="Authorization"):
            extract_bearer_token({"Content-Type": "application/json"})

    def test_non_bearer_header(self):
        """Test a non-Bearer Authorization header."""
        with pytest.raises(TokenExtractionError):
            extract_bearer_token({"Authorization": "Basic dXNlcjpwYXNz"})

    @pytest.mark.parametrize("value", [123, None, b"Bearer eyJhbGciOi"])
    def test_non_string_header(self, value):
        """Test a non-string Authorization value is rejected as missing."""
        with pytest.raises(TokenExtractionError, match="Authorization"):
            extract_bearer_token({"Authorization": value})

    @pytest.mark.parametrize("source", ["", "   ", "Bearer ", {"Authorization": "Bearer   "}])
    def test_blank_token(self, source):
        """Test blank tokens are rejected."""
        with pytest.raises(TokenExtractionError):
            extract_bearer_token(source)

    def test_unsupported_type(self):
        """Test unsupported source types."""
        with pytest.raises(TokenExtractionError, match="Unsupported"):
            extract_bearer_token(42)
