"""bundleserve CLI — serve a build output directory from the shell.

Entry point registered as ``bundleserve`` in ``pyproject.toml``::

    [project.scripts]
    bundleserve = "bundleserve.cli:main"
"""

import argparse


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``bundleserve`` command."""
    parser = argparse.ArgumentParser(
        prog="bundleserve",
        description="Serve built assets with SPA fallback and pre-compressed files.",
    )
    parser.add_argument(
        "roots",
        nargs="*",
        metavar="ROOT",
        help="Content roots, tried in order (default: current directory)",
    )
    parser.add_argument("--host", default=None, help="Bind host address (default: localhost)")
    parser.add_argument("--port", type=int, default=None, help="Bind port number (default: 10001)")
    parser.add_argument(
        "--fallback",
        nargs="?",
        const=True,
        default=None,
        metavar="PATH",
        help="Serve PATH (default /index.html) when a file is missing",
    )
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Add a header to every response (repeatable)",
    )
    parser.add_argument("--open", action="store_true", help="Open a browser once serving")
    parser.add_argument("--open-page", default=None, help="Page to open, relative to the base URL")
    parser.add_argument("--quiet", action="store_true", help="Do not print the serving URL")
    parser.add_argument("--certfile", default=None, help="TLS certificate file (enables HTTPS)")
    parser.add_argument("--keyfile", default=None, help="TLS private key file")
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=("debug", "info", "warning", "error", "critical"),
        help="Log level (default: warning)",
    )

    args = parser.parse_args(argv)

    from bundleserve.cli._run import run_server

    run_server(args)

