"""Immutable HTTP request.

Frozen metadata only.  Static serving never reads a request body, so
unlike a full framework request there is no receive channel here.
"""

from dataclasses import dataclass
from urllib.parse import unquote

from bundleserve._internal.asgi import HTTPScope, Scope
from bundleserve.http.headers import Headers, accepts_gzip


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is always percent-decoded and free of any query string.
    """

    method: str
    path: str
    headers: Headers
    query_string: str = ""
    client: tuple[str, int] | None = None

    @classmethod
    def from_asgi(cls, scope: Scope) -> "Request":
        """Build from an ASGI ``http`` scope.

        ASGI servers hand over ``path`` already decoded and split from
        the query string, so it is used as-is.
        """
        http_scope = HTTPScope.from_scope(scope)
        return cls(
            method=http_scope.method.upper(),
            path=http_scope.path or "/",
            headers=Headers(http_scope.headers),
            query_string=http_scope.query_string.decode("latin-1"),
            client=http_scope.client,
        )

    @classmethod
    def from_target(
        cls,
        target: str,
        *,
        method: str = "GET",
        headers: Headers | None = None,
    ) -> "Request":
        """Build from a raw request target such as ``/a%20b.js?v=2``."""
        raw_path, _, query = target.partition("?")
        return cls(
            method=method.upper(),
            path=unquote(raw_path) or "/",
            headers=headers if headers is not None else Headers(),
            query_string=query,
        )

    @property
    def target(self) -> str:
        """The path with its query string, as the client asked for it."""
        return f"{self.path}?{self.query_string}" if self.query_string else self.path

    @property
    def peer(self) -> str:
        """``host:port`` of the client, or ``-`` when the server did not say."""
        if self.client is None:
            return "-"
        host, port = self.client
        return f"{host}:{port}"

    @property
    def accepts_compression(self) -> bool:
        """True if the client declared ``gzip`` support."""
        return accepts_gzip(self.headers)
