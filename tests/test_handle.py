"""Tests for bundleserve.server.handle — bind, serve, close."""

import signal
import socket
import threading
import urllib.error
import urllib.request
from unittest.mock import MagicMock, patch

import pytest

from bundleserve.config import ServeConfig, TLSCredentials
from bundleserve.errors import PortInUse, ServerError, UnknownTransportFault
from bundleserve.server.handle import ServerHandle, close_on_termination


@pytest.fixture
def occupied_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen()
    yield sock.getsockname()[1]
    sock.close()


class TestBind:
    def test_ephemeral_port(self, public) -> None:
        handle = ServerHandle(ServeConfig(content_base=("public",), host="127.0.0.1", port=0))
        try:
            handle.bind()
            assert handle.is_bound
            assert handle.port != 0
        finally:
            handle.close()

    def test_url_uses_bound_port(self) -> None:
        handle = ServerHandle(ServeConfig(host="127.0.0.1", port=0))
        try:
            handle.bind()
            assert handle.url == f"http://127.0.0.1:{handle.port}"
            assert not handle.url.endswith(":0")
        finally:
            handle.close()

    def test_close_releases_binding(self) -> None:
        handle = ServerHandle(ServeConfig(host="127.0.0.1", port=0))
        handle.bind()
        handle.close()
        assert not handle.is_bound
        assert handle.port == 0
        handle.close()
        assert not handle.is_bound

    def test_port_in_use(self, occupied_port, caplog) -> None:
        config = ServeConfig(host="127.0.0.1", port=occupied_port)
        with pytest.raises(PortInUse) as exc_info:
            ServerHandle(config).bind()
        assert exc_info.value.url == f"http://127.0.0.1:{occupied_port}"
        assert "use a different port" in str(exc_info.value)
        assert "is in use" in caplog.text

    def test_unknown_host_is_transport_fault(self) -> None:
        config = ServeConfig(host="no-such-host.invalid", port=0)
        with pytest.raises(UnknownTransportFault):
            ServerHandle(config).bind()

    def test_missing_certificate_is_transport_fault(self, tmp_path) -> None:
        tls = TLSCredentials(certfile=str(tmp_path / "nope.pem"), keyfile=str(tmp_path / "nope.key"))
        config = ServeConfig(host="127.0.0.1", port=0, https=tls)
        with pytest.raises(UnknownTransportFault):
            ServerHandle(config).bind()

    def test_cannot_bind_twice(self, public) -> None:
        handle = ServerHandle(ServeConfig(host="127.0.0.1", port=0))
        try:
            handle.bind()
            with pytest.raises(ServerError):
                handle.bind()
        finally:
            handle.close()


class TestServing:
    def test_serves_over_http(self, public) -> None:
        config = ServeConfig.from_options(
            {"contentBase": ["public"], "host": "127.0.0.1", "port": 0, "headers": {"X-Dev": "1"}}
        )
        handle = ServerHandle(config)
        handle.start()
        try:
            assert handle.is_serving
            url = f"http://127.0.0.1:{handle.port}/index.html"
            with urllib.request.urlopen(url, timeout=5) as response:
                assert response.status == 200
                assert response.headers["X-Dev"] == "1"
                assert response.read() == b"<h1>Shell</h1>"

            with pytest.raises(urllib.error.HTTPError) as exc_info:
                urllib.request.urlopen(f"http://127.0.0.1:{handle.port}/missing", timeout=5)
            assert exc_info.value.code == 404
        finally:
            handle.close()
        assert not handle.is_serving
        assert not handle.is_bound

    def test_close_then_rebind_same_port(self, public) -> None:
        first = ServerHandle(ServeConfig(content_base=("public",), host="127.0.0.1", port=0))
        first.start()
        port = first.port
        first.close()

        second = ServerHandle(ServeConfig(content_base=("public",), host="127.0.0.1", port=port))
        try:
            second.start()
            assert second.port == port
        finally:
            second.close()

    def test_start_twice_rejected(self, public) -> None:
        handle = ServerHandle(ServeConfig(host="127.0.0.1", port=0))
        handle.start()
        try:
            with pytest.raises(ServerError):
                handle.start()
        finally:
            handle.close()

    def test_close_is_idempotent(self) -> None:
        handle = ServerHandle(ServeConfig(host="127.0.0.1", port=0))
        handle.close()
        handle.close()


class TestCloseOnTermination:
    def test_installs_handlers(self) -> None:
        with patch("bundleserve.server.handle.signal.signal") as mock_signal:
            assert close_on_termination(MagicMock()) is True
        installed = {call.args[0] for call in mock_signal.call_args_list}
        assert signal.SIGINT in installed
        assert signal.SIGTERM in installed

    def test_handler_closes_and_exits(self) -> None:
        close = MagicMock()
        with patch("bundleserve.server.handle.signal.signal") as mock_signal:
            close_on_termination(close)
        handler = mock_signal.call_args_list[0].args[1]
        with pytest.raises(SystemExit):
            handler(signal.SIGINT, None)
        close.assert_called_once()

    def test_off_main_thread_is_noop(self) -> None:
        results: list[bool] = []
        thread = threading.Thread(target=lambda: results.append(close_on_termination(MagicMock())))
        thread.start()
        thread.join()
        assert results == [False]
