"""Filesystem primitives for content resolution.

Reads go through ``anyio`` so a slow disk suspends only the request that
issued the read.  OS errors are classified exactly once, here, into an
``ErrorKind``; callers branch on the kind and never inspect ``errno``.
"""

import errno
import os
from dataclasses import dataclass
from enum import Enum

import anyio

# errno values that mean "nothing servable lives at this path"
_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR, errno.EISDIR})


class ErrorKind(Enum):
    """Structured classification of a failed read."""

    MISSING = "missing"
    FAULT = "fault"


@dataclass(frozen=True, slots=True)
class ReadError:
    """A failed read: its kind plus a human-readable detail line."""

    kind: ErrorKind
    detail: str

    @classmethod
    def from_os_error(cls, exc: OSError) -> "ReadError":
        """Classify an ``OSError`` raised by a read attempt."""
        if isinstance(exc, (FileNotFoundError, NotADirectoryError, IsADirectoryError)):
            kind = ErrorKind.MISSING
        elif exc.errno in _MISSING_ERRNOS:
            kind = ErrorKind.MISSING
        else:
            kind = ErrorKind.FAULT
        code = errno.errorcode.get(exc.errno, "") if exc.errno is not None else ""
        reason = exc.strerror or str(exc)
        detail = f"{code}: {reason}" if code else reason
        return cls(kind=kind, detail=detail)


async def read_file(path: str) -> bytes | ReadError:
    """Read *path* in full, returning its bytes or a classified error."""
    try:
        return await anyio.Path(path).read_bytes()
    except OSError as exc:
        return ReadError.from_os_error(exc)
    except ValueError as exc:
        # embedded NUL byte: no such file can exist
        return ReadError(kind=ErrorKind.MISSING, detail=str(exc))


def exists(path: str) -> bool:
    """Synchronous existence check, used for ``.gz`` siblings."""
    return os.path.exists(path)
