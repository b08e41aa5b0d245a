"""Tests for the exception hierarchy."""

import pytest

from rcon_monitor.exceptions import (
    ApplicationError,
    AuthenticationError,
    ConfigurationError,
    ParseError,
    RconConnectionError,
    RconError,
    TransportError,
)


class TestExceptionHierarchy:
    def test_connection_errors_are_builtin_connection_errors(self) -> None:
        assert issubclass(RconConnectionError, ConnectionError)
        assert issubclass(AuthenticationError, RconConnectionError)
        assert issubclass(RconConnectionError, RconError)

    @pytest.mark.parametrize("error_type", [ConfigurationError, TransportError, ParseError, AuthenticationError])
    def test_everything_is_an_application_error(self, error_type) -> None:
        assert issubclass(error_type, ApplicationError)

    def test_default_messages(self) -> None:
        assert str(TransportError()) == "RCON transport failed"
        assert str(AuthenticationError()) == "RCON authentication failed"

    def test_keyword_context_becomes_attributes(self) -> None:
        error = RconConnectionError("refused", server_id="lobby", port=25575)
        assert error.server_id == "lobby"
        assert error.port == 25575
        assert str(error) == "refused"


class TestConfigurationErrorFactories:
    def test_missing_value_with_context(self) -> None:
        assert str(ConfigurationError.missing_value("host", "lobby")) == "host is missing or empty: lobby"

    def test_invalid_value_with_reason(self) -> None:
        error = ConfigurationError.invalid_value("port", 0, "Port must be in 1..65535")
        assert str(error) == "Invalid value for port: 0. Port must be in 1..65535"

    def test_unknown_server_carries_id(self) -> None:
        error = ConfigurationError.unknown_server("creative")
        assert error.server_id == "creative"
        assert "creative" in str(error)
