"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Headers keep insertion order.  ``with_header`` behaves like setting a
    header on a live response: a header of the same name (compared
    case-insensitively) is replaced in place, anything else is appended.
    """

    body: str | bytes = b""
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_body(self, body: str | bytes) -> "Response":
        """Return a new Response with a different body."""
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with *name* set to *value*."""
        lowered = name.lower()
        headers: list[tuple[str, str]] = []
        replaced = False
        for existing, existing_value in self.headers:
            if existing.lower() != lowered:
                headers.append((existing, existing_value))
            elif not replaced:
                headers.append((name, value))
                replaced = True
        if not replaced:
            headers.append((name, value))
        return replace(self, headers=tuple(headers))

    def with_headers(self, headers: Mapping[str, str] | tuple[tuple[str, str], ...]) -> "Response":
        """Return a new Response with every header in *headers* set."""
        items = headers.items() if isinstance(headers, Mapping) else headers
        response = self
        for name, value in items:
            response = response.with_header(name, value)
        return response

    # -- Accessors --

    def header(self, name: str) -> str | None:
        """Return the value of *name*, or ``None`` if it was never set."""
        lowered = name.lower()
        for existing, value in self.headers:
            if existing.lower() == lowered:
                return value
        return None

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.header("Content-Type")

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body
