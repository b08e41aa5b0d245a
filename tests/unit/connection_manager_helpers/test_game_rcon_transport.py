"""Tests for the gamercon-async backed transport."""

import asyncio
from unittest.mock import MagicMock

import pytest

from rcon_monitor.connection_manager_helpers import transport as transport_module
from rcon_monitor.connection_manager_helpers.transport import GameRconTransport
from rcon_monitor.exceptions import AuthenticationError, RconConnectionError, TransportError


class FakeGameRCON:
    def __init__(self, enter_error=None, send_result="ok"):
        self.enter_error = enter_error
        self.send_result = send_result
        self.exited = False
        self.sent = []

    async def __aenter__(self):
        if self.enter_error is not None:
            raise self.enter_error
        return self

    async def __aexit__(self, *exc_info):
        self.exited = True
        return False

    async def send(self, command):
        self.sent.append(command)
        if isinstance(self.send_result, BaseException):
            raise self.send_result
        return self.send_result


@pytest.fixture
def install_client(monkeypatch):
    def install(client):
        constructor = MagicMock(return_value=client)
        monkeypatch.setattr(transport_module, "GameRCON", constructor)
        return constructor

    return install


class TestGameRconTransport:
    @pytest.mark.asyncio
    async def test_open_execute_close(self, install_client, server_config) -> None:
        client = FakeGameRCON(send_result="There are 0 of a max of 20 players online:")
        constructor = install_client(client)
        transport = GameRconTransport(server_config, MagicMock())

        await transport.open()
        response = await transport.execute("list")
        await transport.close()

        constructor.assert_called_once_with("127.0.0.1", 25575, "hunter2")
        assert response == "There are 0 of a max of 20 players online:"
        assert client.sent == ["list"]
        assert client.exited is True
        assert transport.is_open is False

    @pytest.mark.asyncio
    async def test_none_response_becomes_empty_string(self, install_client, server_config) -> None:
        install_client(FakeGameRCON(send_result=None))
        transport = GameRconTransport(server_config, MagicMock())
        await transport.open()

        assert await transport.execute("save-all") == ""

    @pytest.mark.asyncio
    async def test_unreachable_host_raises_connection_error(self, install_client, server_config) -> None:
        install_client(FakeGameRCON(enter_error=ConnectionRefusedError("refused")))
        transport = GameRconTransport(server_config, MagicMock())

        with pytest.raises(RconConnectionError, match="Cannot reach"):
            await transport.open()

    @pytest.mark.asyncio
    async def test_rejected_password_raises_authentication_error(self, install_client, server_config) -> None:
        install_client(FakeGameRCON(enter_error=RuntimeError("Invalid password")))
        transport = GameRconTransport(server_config, MagicMock())

        with pytest.raises(AuthenticationError):
            await transport.open()

    @pytest.mark.asyncio
    async def test_peer_close_fires_callback_once(self, install_client, server_config) -> None:
        install_client(FakeGameRCON(send_result=asyncio.IncompleteReadError(b"", 4)))
        on_closed = MagicMock()
        transport = GameRconTransport(server_config, on_closed)
        await transport.open()

        with pytest.raises(TransportError):
            await transport.execute("list")
        with pytest.raises(TransportError, match="closed"):
            await transport.execute("list")

        on_closed.assert_called_once()
        assert transport.is_open is False

    @pytest.mark.asyncio
    async def test_execute_before_open_raises(self, server_config) -> None:
        transport = GameRconTransport(server_config, MagicMock())

        with pytest.raises(TransportError):
            await transport.execute("list")
