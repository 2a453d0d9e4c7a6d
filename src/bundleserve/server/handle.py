"""Server lifecycle — an explicit handle around one listening socket.

A ``ServerHandle`` owns exactly one socket and one uvicorn server.  The
socket is bound once, up front, so bind failures surface as typed
errors (``PortInUse``, ``UnknownTransportFault``) before any serving
starts.  Reconfiguration is "close this handle, build a new one"; a
handle is never rebound.

Two ways to run:

- ``run()`` blocks in the foreground (the CLI).  uvicorn installs its
  own SIGINT/SIGTERM handling when running on the main thread.
- ``start()`` serves from a daemon thread and returns immediately (an
  embedding build tool); ``close()`` stops it.
"""

import errno
import logging
import signal
import socket
import threading
from collections.abc import Callable

import anyio
import uvicorn

from bundleserve._internal.asgi import ASGIApp
from bundleserve.app import StaticApp
from bundleserve.config import ServeConfig
from bundleserve.errors import PortInUse, ServerError, UnknownTransportFault

logger = logging.getLogger("bundleserve.server")

# Seconds close() waits for the serving thread to drain
_CLOSE_TIMEOUT = 5.0

TERMINATION_SIGNALS = ("SIGINT", "SIGTERM", "SIGQUIT", "SIGHUP")


class ServerHandle:
    """One listening socket plus the uvicorn server that serves it.

    Usage::

        handle = ServerHandle(config)
        handle.start()
        ...
        handle.close()
    """

    __slots__ = ("app", "config", "log_level", "_server", "_socket", "_thread")

    def __init__(
        self,
        config: ServeConfig,
        app: ASGIApp | None = None,
        *,
        log_level: str = "warning",
    ) -> None:
        self.config = config
        self.app = app if app is not None else StaticApp(config)
        self.log_level = log_level
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    # -- State --

    @property
    def is_bound(self) -> bool:
        return self._socket is not None

    @property
    def is_serving(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def port(self) -> int:
        """The bound port.  Differs from ``config.port`` only when that is 0."""
        if self._socket is None:
            return self.config.port
        return self._socket.getsockname()[1]

    @property
    def url(self) -> str:
        """Base URL of the listener, using the bound port once there is one."""
        return f"{self.config.scheme}://{self.config.host}:{self.port}"

    # -- Lifecycle --

    def bind(self) -> None:
        """Bind the listening socket and prepare the uvicorn server.

        Raises:
            PortInUse: The port is occupied.
            UnknownTransportFault: Any other bind or TLS setup failure.
        """
        if self._socket is not None:
            msg = "ServerHandle is already bound; build a new handle to rebind"
            raise ServerError(msg)

        host, port = self.config.host, self.config.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        try:
            sock = socket.create_server((host, port), family=family)
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                error = PortInUse(self.config.url)
                logger.error("%s", error)
                raise error from exc
            msg = f"Cannot listen on {self.config.url}: {exc}"
            raise UnknownTransportFault(msg) from exc

        try:
            server = uvicorn.Server(self._uvicorn_config())
            server.config.load()
        except (OSError, ValueError) as exc:
            sock.close()
            msg = f"Cannot set up transport for {self.config.url}: {exc}"
            raise UnknownTransportFault(msg) from exc

        self._socket = sock
        self._server = server
        logger.debug("bound %s", self.config.url)

    async def serve(self) -> None:
        """Serve on the bound socket until asked to exit."""
        if self._socket is None or self._server is None:
            self.bind()
        assert self._socket is not None and self._server is not None
        await self._server.serve(sockets=[self._socket])

    def run(self) -> None:
        """Bind and serve in the foreground until interrupted."""
        try:
            anyio.run(self.serve)
        finally:
            self._close_socket()

    def start(self) -> None:
        """Bind, then serve from a daemon thread."""
        if self._thread is not None:
            msg = "ServerHandle has already been started"
            raise ServerError(msg)
        self.bind()
        assert self._server is not None and self._socket is not None
        # the thread serves this socket; it never binds a new one
        self._thread = threading.Thread(
            target=anyio.run,
            args=(self._server.serve, [self._socket]),
            name=f"bundleserve:{self.config.port}",
            daemon=True,
        )
        self._thread.start()

    def close(self) -> None:
        """Stop serving and release the socket.  Safe to call twice."""
        if self._socket is None and not self.is_serving:
            return
        url = self.url
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(_CLOSE_TIMEOUT)
            if self._thread.is_alive():
                logger.warning("server thread for %s did not stop in time", url)
        self._close_socket()
        logger.debug("closed %s", url)

    # -- Internals --

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def _uvicorn_config(self) -> uvicorn.Config:
        tls = self.config.https
        return uvicorn.Config(
            self.app,
            host=self.config.host,
            port=self.config.port,
            lifespan="on",
            log_config=None,
            log_level=self.log_level,
            access_log=False,
            ssl_certfile=tls.certfile if tls else None,
            ssl_keyfile=tls.keyfile if tls else None,
            ssl_keyfile_password=tls.password if tls else None,
            ssl_ca_certs=tls.ca_certs if tls else None,
        )


def close_on_termination(close: Callable[[], None]) -> bool:
    """Install handlers that call *close* and exit on termination signals.

    Only the main thread may install signal handlers; elsewhere this is a
    no-op and returns False.
    """
    if threading.current_thread() is not threading.main_thread():
        logger.debug("not on the main thread; termination handlers not installed")
        return False

    def _terminate(signum: int, frame: object) -> None:
        logger.debug("received %s, closing server", signal.Signals(signum).name)
        close()
        raise SystemExit(0)

    for name in TERMINATION_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is not None:
            signal.signal(signum, _terminate)
    return True
