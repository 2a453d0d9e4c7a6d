"""Response composition — turn a resolution result into a Response.

Configured headers go on first; the headers computed here are applied
after them and replace any configured header of the same name.
"""

import mimetypes
from collections.abc import Mapping

from bundleserve.http.response import Response
from bundleserve.resolve import Found, IOFault, NotFound, ResolutionResult

DEFAULT_CONTENT_TYPE = "text/plain"

# Content codings guess_type reports, as the container type of the file itself
_ENCODING_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "br": "application/x-brotli",
    "compress": "application/x-compress",
}
_ERROR_CONTENT_TYPE = "text/plain; charset=utf-8"


def content_type_for(logical_path: str) -> str:
    """MIME type for *logical_path*, ``text/plain`` when unrecognized."""
    content_type, encoding = mimetypes.guess_type(logical_path, strict=False)
    if encoding is not None:
        # bytes served as-is, so the file is the archive, not its contents
        return _ENCODING_TYPES.get(encoding, "application/octet-stream")
    return content_type or DEFAULT_CONTENT_TYPE


def compose(
    result: ResolutionResult,
    configured_headers: Mapping[str, str] | tuple[tuple[str, str], ...] = (),
) -> Response:
    """Build the response for *result*."""
    response = Response().with_headers(configured_headers)

    match result:
        case Found(content=content, is_compressed=is_compressed):
            response = response.with_header("Content-Type", content_type_for(result.logical_path))
            if is_compressed:
                response = response.with_header("Content-Encoding", "gzip")
            return response.with_status(200).with_body(content)

        case NotFound(attempted_path=attempted_path):
            body = f"404 Not Found\n\n{attempted_path}"
            return (
                response.with_header("Content-Type", _ERROR_CONTENT_TYPE)
                .with_status(404)
                .with_body(body)
            )

        case IOFault(attempted_path=attempted_path, detail=detail):
            body = f"500 Internal Server Error\n\n{attempted_path}\n\n{detail}"
            return (
                response.with_header("Content-Type", _ERROR_CONTENT_TYPE)
                .with_status(500)
                .with_body(body)
            )

    msg = f"Cannot compose a response for {result!r}"
    raise TypeError(msg)
