"""Serve configuration.

ServeConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.  Reconfiguring a running server means building a
new ServeConfig, never mutating the old one.

``ServeConfig.from_options()`` accepts the loose shapes a build tool hands
over (a single root, a list of roots, or an options mapping using either
``camelCase`` or ``snake_case`` names) and normalizes them.
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from bundleserve.errors import ConfigurationError
from bundleserve.fallback import fallback_path


@dataclass(frozen=True, slots=True)
class TLSCredentials:
    """File paths handed to the TLS listener.  Provisioning them is up to you."""

    certfile: str
    keyfile: str | None = None
    ca_certs: str | None = None
    password: str | None = None

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> "TLSCredentials":
        """Accept ``{"cert": ..., "key": ..., "ca": ..., "passphrase": ...}``.

        The long names (``certfile``, ``keyfile``, ``ca_certs``,
        ``password``) are accepted as well.
        """
        aliases = {
            "cert": "certfile",
            "key": "keyfile",
            "ca": "ca_certs",
            "passphrase": "password",
        }
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, str] = {}
        for name, item in value.items():
            target = aliases.get(name, name)
            if target not in known:
                msg = f"Unknown https option {name!r}"
                raise ConfigurationError(msg)
            if item is not None:
                kwargs[target] = str(item)
        if "certfile" not in kwargs:
            msg = "https options need a 'cert' (certificate file path)"
            raise ConfigurationError(msg)
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class ServeConfig:
    """Serve configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServeConfig(content_base=("dist", "public"), port=8080)
    """

    # Content
    content_base: tuple[str, ...] = ("",)  # Roots tried left to right; "" is the cwd
    history_api_fallback: str | None = None  # Fallback path; None disables fallback
    headers: tuple[tuple[str, str], ...] = ()  # Applied to every response

    # Server
    host: str = "localhost"
    port: int = 10001
    https: TLSCredentials | None = None

    # Integration hook
    open: bool = False
    open_page: str = ""
    verbose: bool = True

    def __post_init__(self) -> None:
        if not self.content_base:
            msg = "content_base needs at least one root ('' for the working directory)"
            raise ConfigurationError(msg)
        if not 0 <= self.port <= 65535:
            msg = f"port must be between 0 and 65535, got {self.port}"
            raise ConfigurationError(msg)

    @property
    def scheme(self) -> str:
        return "https" if self.https else "http"

    @property
    def url(self) -> str:
        """Base URL announced to the operator, e.g. ``http://localhost:10001``."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def resolved_roots(self) -> tuple[Path, ...]:
        """Absolute form of each content root, for display."""
        return tuple(Path(root or ".").resolve() for root in self.content_base)

    @classmethod
    def from_options(
        cls,
        options: "str | list[str] | tuple[str, ...] | Mapping[str, Any] | None" = None,
        **overrides: Any,
    ) -> "ServeConfig":
        """Normalize build-tool style options into a ServeConfig.

        ``options`` may be a root, a list of roots, or a mapping of
        option names.  Keyword *overrides* win over the mapping.
        """
        if options is None:
            raw: dict[str, Any] = {}
        elif isinstance(options, (str, list, tuple)):
            raw = {"content_base": options}
        elif isinstance(options, Mapping):
            raw = dict(options)
        else:
            msg = f"Unsupported options type: {type(options).__name__}"
            raise ConfigurationError(msg)
        raw.update(overrides)

        kwargs: dict[str, Any] = {}
        for name, value in raw.items():
            key = _OPTION_ALIASES.get(name, name)
            normalizer = _NORMALIZERS.get(key)
            if normalizer is None:
                msg = f"Unknown serve option {name!r}"
                raise ConfigurationError(msg)
            if value is None:
                continue
            kwargs[key] = normalizer(value)
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Option normalization
# ---------------------------------------------------------------------------


def _content_base(value: Any) -> tuple[str, ...]:
    if isinstance(value, (str, Path)):
        return (str(value),)
    if isinstance(value, (list, tuple)):
        roots = tuple(str(root) for root in value)
        return roots or ("",)
    msg = f"content_base must be a path or a list of paths, got {type(value).__name__}"
    raise ConfigurationError(msg)


def _port(value: Any) -> int:
    if isinstance(value, bool):
        msg = "port must be an integer"
        raise ConfigurationError(msg)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        msg = f"port must be an integer, got {value!r}"
        raise ConfigurationError(msg) from exc


def _host(value: Any) -> str:
    return str(value) or "localhost"


def _https(value: Any) -> TLSCredentials | None:
    if value is False:
        return None
    if isinstance(value, TLSCredentials):
        return value
    if isinstance(value, Mapping):
        return TLSCredentials.from_mapping(value)
    msg = "https must be False or a mapping of certificate file paths"
    raise ConfigurationError(msg)


def _headers(value: Any) -> tuple[tuple[str, str], ...]:
    if isinstance(value, Mapping):
        items = value.items()
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        msg = "headers must be a mapping of header name to value"
        raise ConfigurationError(msg)
    return tuple(_header(str(name), str(item)) for name, item in items)


def _header(name: str, value: str) -> tuple[str, str]:
    if not name or any(ch in name for ch in "\r\n:") or any(ch in value for ch in "\r\n"):
        msg = f"Invalid header {name!r}: {value!r}"
        raise ConfigurationError(msg)
    try:
        name.encode("latin-1")
        value.encode("latin-1")
    except UnicodeEncodeError as exc:
        msg = f"Header {name!r} must be latin-1 encodable, got {value!r}"
        raise ConfigurationError(msg) from exc
    return name, value


def _history_api_fallback(value: Any) -> str | None:
    if not isinstance(value, (bool, str)):
        msg = "history_api_fallback must be a bool or a path"
        raise ConfigurationError(msg)
    return fallback_path(value)


def _flag(value: Any) -> bool:
    return bool(value)


_NORMALIZERS = {
    "content_base": _content_base,
    "port": _port,
    "host": _host,
    "https": _https,
    "headers": _headers,
    "history_api_fallback": _history_api_fallback,
    "open": _flag,
    "open_page": str,
    "verbose": _flag,
}

_OPTION_ALIASES = {
    "contentBase": "content_base",
    "historyApiFallback": "history_api_fallback",
    "openPage": "open_page",
}
