"""bundleserve — serve a build's output the way production will.

Static files from an ordered list of content roots, pre-compressed
``.gz`` siblings for clients that accept gzip, and a history API
fallback for client-side routed apps.

Embedding in a build tool::

    from bundleserve import serve

    plugin = serve({"contentBase": ["dist", "public"], "historyApiFallback": True})
    plugin.generate_bundle()  # after each build; announces the URL once

As a plain ASGI app::

    from bundleserve import ServeConfig, StaticApp

    app = StaticApp(ServeConfig(content_base=("dist",)))
"""

__version__ = "0.1.0"
__all__ = [
    "BundleServeError",
    "ConfigurationError",
    "Found",
    "IOFault",
    "NotFound",
    "PortInUse",
    "ResolutionRequest",
    "ServeConfig",
    "ServePlugin",
    "ServerHandle",
    "StaticApp",
    "TLSCredentials",
    "UnknownTransportFault",
    "route",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import bundleserve`` fast (uvicorn is only imported when a
    server is actually built) while providing a clean top-level API.
    """
    if name == "StaticApp":
        from bundleserve.app import StaticApp

        return StaticApp

    if name in ("ServeConfig", "TLSCredentials"):
        from bundleserve import config as _config

        return getattr(_config, name)

    if name in ("Found", "IOFault", "NotFound", "ResolutionRequest"):
        from bundleserve import resolve as _resolve

        return getattr(_resolve, name)

    if name == "route":
        from bundleserve.fallback import route

        return route

    if name in ("ServePlugin", "serve"):
        from bundleserve import plugin as _plugin

        return getattr(_plugin, name)

    if name == "ServerHandle":
        from bundleserve.server.handle import ServerHandle

        return ServerHandle

    if name in (
        "BundleServeError",
        "ConfigurationError",
        "PortInUse",
        "UnknownTransportFault",
    ):
        from bundleserve import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
