"""Content resolution — map a URL path onto the first content root that has it.

Roots are tried strictly in order and the first readable file wins, even
if a later root also has one.  A missing file moves on to the next root;
any other read failure stops immediately::

    result = await resolve("/app.js", ("dist", "public"), accepts_compression=True)
    match result:
        case Found(file_path=path, is_compressed=True):
            ...  # bytes of dist/app.js.gz, typed as dist/app.js
        case NotFound(attempted_path=path):
            ...  # public/app.js, the last candidate tried
        case IOFault(attempted_path=path, detail=detail):
            ...
"""

import os
import posixpath
from collections.abc import Sequence
from dataclasses import dataclass, field

from bundleserve import fs

INDEX_FILE = "index.html"
GZIP_SUFFIX = ".gz"


# ---------------------------------------------------------------------------
# Request and result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ResolutionRequest:
    """What one incoming request asks the resolver for."""

    url_path: str
    accepts_compression: bool = False


@dataclass(frozen=True, slots=True)
class Found:
    """A file was read.  ``file_path`` is the file the bytes came from."""

    file_path: str
    content: bytes = field(repr=False)
    is_compressed: bool = False

    @property
    def logical_path(self) -> str:
        """The path used for MIME typing, without any ``.gz`` suffix."""
        if self.is_compressed and self.file_path.endswith(GZIP_SUFFIX):
            return self.file_path[: -len(GZIP_SUFFIX)]
        return self.file_path


@dataclass(frozen=True, slots=True)
class NotFound:
    """No root had the file.  ``attempted_path`` is the last candidate."""

    attempted_path: str


@dataclass(frozen=True, slots=True)
class IOFault:
    """A read failed for a reason other than the file being absent."""

    attempted_path: str
    detail: str


ResolutionResult = Found | NotFound | IOFault


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def candidate_path(root: str, url_path: str) -> str:
    """Join *url_path* onto *root*, giving an absolute filesystem path.

    A trailing slash selects the directory's ``index.html``.  ``..``
    segments are collapsed against the URL root first, so the result
    always stays inside *root*.  An empty root is the working directory.
    """
    if url_path.endswith("/"):
        url_path += INDEX_FILE
    relative = posixpath.normpath("/" + url_path).lstrip("/")
    base = os.path.abspath(root or ".")
    if not relative:
        return base
    return os.path.join(base, *relative.split("/"))


async def resolve(
    url_path: str,
    roots: Sequence[str],
    accepts_compression: bool = False,
) -> ResolutionResult:
    """Resolve *url_path* against *roots*, left to right."""
    if not roots:
        msg = "resolve() needs at least one content root"
        raise ValueError(msg)

    attempted = ""
    for root in roots:
        attempted = candidate_path(root, url_path)
        compressed = accepts_compression and fs.exists(attempted + GZIP_SUFFIX)
        if compressed:
            attempted += GZIP_SUFFIX

        outcome = await fs.read_file(attempted)
        if isinstance(outcome, bytes):
            return Found(file_path=attempted, content=outcome, is_compressed=compressed)
        if outcome.kind is fs.ErrorKind.FAULT:
            return IOFault(attempted_path=attempted, detail=outcome.detail)

    return NotFound(attempted_path=attempted)


async def resolve_request(request: ResolutionRequest, roots: Sequence[str]) -> ResolutionResult:
    """Resolve a ``ResolutionRequest`` against *roots*."""
    return await resolve(request.url_path, roots, request.accepts_compression)
