"""bundleserve exception hierarchy.

Shared across configuration, the server handle, and the CLI so every
module raises and catches the same types.  Filesystem errors are not
part of this hierarchy: ``bundleserve.fs`` turns them into an
``ErrorKind`` before they reach request handling.
"""


class BundleServeError(Exception):
    """Base for all bundleserve-specific errors."""


class ConfigurationError(BundleServeError):
    """Raised when serve options are invalid.

    Typically raised by ``ServeConfig.from_options()`` before any
    socket is bound.
    """


class ServerError(BundleServeError):
    """Base for listener-level failures.  Always fatal at startup."""


class PortInUse(ServerError):  # noqa: N818
    """The listening port is already occupied by another process."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(
            f"{url} is in use, either stop the other server or use a different port."
        )


class UnknownTransportFault(ServerError):  # noqa: N818
    """Any other listener error (bad host, permission denied, TLS setup)."""
