"""Entry point for bufwords.

Usage:
    bufwords                          # serve over stdio (editor launches us)
    bufwords --tcp --port 2087        # serve over TCP (debugging)
    bufwords --debug --log-file /tmp/bufwords.log
"""
import sys
import signal
import logging
import argparse

from bufwords import __version__


def setup_logging(debug: bool = False, log_file: str | None = None):
    # stdout carries the protocol in stdio mode; logs go to stderr or a file
    level = logging.DEBUG if debug else logging.INFO
    handler_kwargs = {"filename": log_file} if log_file else {"stream": sys.stderr}
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        **handler_kwargs,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bufwords",
        description="Language server offering words from the open buffer as completions",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    transport = parser.add_mutually_exclusive_group()
    transport.add_argument("--stdio", action="store_true",
                           help="Serve over stdin/stdout (default)")
    transport.add_argument("--tcp", action="store_true",
                           help="Serve over TCP")
    parser.add_argument("--host", default="127.0.0.1",
                        help="TCP bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=2087,
                        help="TCP port (default: %(default)s)")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--log-file", default=None,
                        help="Write logs to this file instead of stderr")
    return parser


def main(argv=None):
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    args = build_parser().parse_args(argv)

    from bufwords.config import Config
    from bufwords.server import create_server

    config = Config()
    setup_logging(args.debug or config.debug_logging, args.log_file)
    logger = logging.getLogger(__name__)

    server = create_server(config)
    if args.tcp:
        logger.info("Starting bufwords %s on %s:%d", __version__, args.host, args.port)
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting bufwords %s on stdio", __version__)
        server.start_io()


if __name__ == "__main__":
    main()
