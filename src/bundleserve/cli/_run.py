"""``bundleserve`` — build a ServeConfig from CLI flags and serve in the foreground."""

import argparse
import logging
import sys
import webbrowser

from bundleserve.config import ServeConfig
from bundleserve.errors import BundleServeError, ConfigurationError


def parse_header(value: str) -> tuple[str, str]:
    """Split ``"Name: value"`` into a header pair."""
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        msg = f"--header expects NAME:VALUE, got {value!r}"
        raise ConfigurationError(msg)
    return name.strip(), header_value.strip()


def build_config(args: argparse.Namespace) -> ServeConfig:
    """Translate parsed CLI arguments into a ServeConfig."""
    options: dict[str, object] = {
        "content_base": args.roots or [""],
        "host": args.host,
        "port": args.port,
        "history_api_fallback": args.fallback,
        "headers": [parse_header(h) for h in args.header],
        "open": args.open,
        "open_page": args.open_page,
        "verbose": not args.quiet,
    }
    if args.certfile:
        options["https"] = {"cert": args.certfile, "key": args.keyfile}
    return ServeConfig.from_options(options)


def run_server(args: argparse.Namespace) -> None:
    """Serve until interrupted.

    Configuration and bind errors are reported as ``Error: ...`` on
    stderr with exit status 1.
    """
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from bundleserve.server.handle import ServerHandle
    from bundleserve.server.terminal import print_banner

    try:
        config = build_config(args)
        handle = ServerHandle(config, log_level=args.log_level)
        handle.bind()
    except BundleServeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if config.verbose:
        print_banner(config, url=handle.url)
    if config.open:
        from bundleserve.plugin import browser_target

        webbrowser.open(browser_target(config, handle.url))

    handle.run()
