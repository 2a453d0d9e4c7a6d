"""History API fallback — one retry against the app shell on a miss.

Client-side routed apps own their URLs, so a request for ``/users/42``
that matches no file should still get the app's ``index.html``.  The
router wraps ``resolve()``: when the primary attempt misses (absent file
*or* I/O fault) and a fallback path is configured, it resolves that path
once over the same roots.  There is no chaining; a fallback that also
misses is reported as-is, naming the fallback's own candidate path.
"""

import logging
from collections.abc import Sequence

from bundleserve.resolve import (
    Found,
    ResolutionRequest,
    ResolutionResult,
    resolve,
)

logger = logging.getLogger("bundleserve.server")

DEFAULT_FALLBACK = "/index.html"


def fallback_path(policy: bool | str | None) -> str | None:
    """Normalize a fallback policy to a path, or ``None`` when disabled.

    ``True`` selects ``/index.html``; a string is used as given (with a
    leading slash added); ``False``, ``None`` and ``""`` disable fallback.
    """
    if policy is None or policy is False:
        return None
    if policy is True:
        return DEFAULT_FALLBACK
    if not policy:
        return None
    return policy if policy.startswith("/") else "/" + policy


async def route(
    request: ResolutionRequest,
    roots: Sequence[str],
    fallback: str | None = None,
) -> ResolutionResult:
    """Resolve *request*, retrying once against *fallback* on a miss."""
    result = await resolve(request.url_path, roots, request.accepts_compression)
    if isinstance(result, Found) or fallback is None:
        return result

    logger.debug("%s missed (%s), falling back to %s", request.url_path, result, fallback)
    return await resolve(fallback, roots, request.accepts_compression)
