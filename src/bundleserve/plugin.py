"""Build-tool integration — serve the bundle while the build tool watches.

``serve()`` binds and starts the server immediately and returns a
``ServePlugin`` whose ``generate_bundle()`` hook the build tool fires
once per build cycle.  Only the first firing has side effects:
announcing the URL and, when asked, opening a browser.

Usage::

    plugin = serve({"contentBase": ["dist", "public"], "historyApiFallback": True})
    ...
    plugin.generate_bundle()   # prints http://localhost:10001 -> /abs/dist ...
    plugin.generate_bundle()   # no-op
"""

import logging
import re
import webbrowser
from collections.abc import Callable, Mapping
from typing import Any

from bundleserve.config import ServeConfig
from bundleserve.server.handle import ServerHandle, close_on_termination
from bundleserve.server.terminal import print_banner

logger = logging.getLogger("bundleserve.server")

_ABSOLUTE_URL = re.compile(r"https?://.+")

HandleFactory = Callable[[ServeConfig], ServerHandle]

# Signals are process-wide, so the plugins they must close are tracked here
_live_plugins: set["ServePlugin"] = set()
_termination_installed = False


def browser_target(config: ServeConfig, url: str | None = None) -> str:
    """The URL to open: ``open_page`` if absolute, else appended to *url*.

    *url* is the listening URL and defaults to ``config.url``.
    """
    if _ABSOLUTE_URL.match(config.open_page):
        return config.open_page
    return (url or config.url) + config.open_page


class ServePlugin:
    """The object a build tool holds for the lifetime of a watch session."""

    name = "serve"

    __slots__ = ("config", "_announced", "_handle", "_handle_factory")

    def __init__(self, config: ServeConfig, *, handle_factory: HandleFactory = ServerHandle) -> None:
        self.config = config
        self._handle_factory = handle_factory
        self._announced = False
        self._handle = self._start(config)

    @property
    def handle(self) -> ServerHandle:
        return self._handle

    def generate_bundle(self) -> None:
        """Build-cycle hook.  Announces and opens the browser on first call only."""
        if self._announced:
            return
        self._announced = True

        if self.config.verbose:
            print_banner(self.config, url=self._handle.url)
        if self.config.open:
            target = browser_target(self.config, self._handle.url)
            logger.debug("opening %s", target)
            webbrowser.open(target)

    def reconfigure(
        self,
        options: "str | list[str] | Mapping[str, Any] | ServeConfig | None" = None,
        **overrides: Any,
    ) -> None:
        """Replace the running server: close the old handle, then start a new one."""
        config = options if isinstance(options, ServeConfig) else ServeConfig.from_options(options, **overrides)
        self._handle.close()
        self.config = config
        self._announced = False
        self._handle = self._start(config)

    def close(self) -> None:
        self._handle.close()
        _live_plugins.discard(self)

    def _start(self, config: ServeConfig) -> ServerHandle:
        handle = self._handle_factory(config)
        handle.start()
        return handle


def serve(
    options: "str | list[str] | Mapping[str, Any] | None" = None,
    *,
    handle_factory: HandleFactory = ServerHandle,
    **overrides: Any,
) -> ServePlugin:
    """Start serving and return the build-tool plugin.

    Accepts a root, a list of roots, or an options mapping (see
    ``ServeConfig.from_options``).  The first call made from the main
    thread installs termination handlers; they close every live plugin.

    Raises:
        ConfigurationError: The options are invalid.
        PortInUse: The port is occupied.
        UnknownTransportFault: Any other listener failure.
    """
    config = ServeConfig.from_options(options, **overrides)
    plugin = ServePlugin(config, handle_factory=handle_factory)
    _live_plugins.add(plugin)
    _install_termination_handlers()
    return plugin


def close_live_plugins() -> None:
    """Close every plugin started by ``serve()`` that is still open."""
    for plugin in list(_live_plugins):
        plugin.close()


def _install_termination_handlers() -> None:
    global _termination_installed
    if not _termination_installed:
        _termination_installed = close_on_termination(close_live_plugins)
