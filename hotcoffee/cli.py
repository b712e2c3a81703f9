"""Command that serves the coffee shop API over HTTP."""

from __future__ import annotations

import argparse
import logging
import sys
from wsgiref.simple_server import WSGIRequestHandler, make_server

from hotcoffee.server import build_app
from hotcoffee.storage import DEFAULT_DATA_DIR, DEFAULT_PORT, help_text


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args) -> None:
        pass


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the --help, --dir and --port options."""
    parser = argparse.ArgumentParser(prog="hot-coffee", add_help=False, allow_abbrev=False)
    parser.add_argument("-help", "--help", dest="help", action="store_true")
    parser.add_argument("-dir", "--dir", dest="dir", default=DEFAULT_DATA_DIR)
    parser.add_argument("-port", "--port", dest="port", default=DEFAULT_PORT)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Start the server; return the process exit status."""
    args = parse_args(argv)
    if args.help:
        print(help_text())
        return 0

    app = build_app(args.dir)
    logger = logging.getLogger("hotcoffee")
    logger.info("Host is started")

    try:
        port = int(args.port)
    except ValueError:
        port = -1
    if not 0 <= port <= 65535:
        print(f"listen tcp: invalid port {args.port!r}", file=sys.stderr)
        return 1

    try:
        server = make_server("", port, app, handler_class=_QuietHandler)
    except OSError as exc:
        print(f"listen tcp :{port}: {exc}", file=sys.stderr)
        return 1

    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())