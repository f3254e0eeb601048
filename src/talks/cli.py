#!/usr/bin/env python3
import argparse
import logging
import sys
from typing import List, Optional

from talks.config import load_config
from talks.errors import TalksError
from talks.root import resolve_root
from talks.server import build_router, run_server
from talks.version import server_header, version

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s][%(levelname)s][%(process)d] %(message)s"


class TalksArgumentParser(argparse.ArgumentParser):
    # Bad flags exit with -1 like every other startup failure.
    def error(self, message):
        self.print_usage(sys.stderr)
        sys.stderr.write(f"{self.prog}: error: {message}\n")
        sys.exit(-1)


def build_parser() -> argparse.ArgumentParser:
    parser = TalksArgumentParser(
        description="Serve static html plus the Talks version, collect and iceconfig APIs.",
        epilog="For example:\n\ttalks -conf talks.conf",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "-conf", "--conf", dest="conf", default="", help="The config file path")
    parser.add_argument("-p", "-product", "--product", dest="product", default="",
                        help="The product section for config file (currently unused)")
    parser.add_argument("-v", "-version", "--version", dest="version", action="store_true",
                        help="Print the version and exit")
    parser.add_argument("-verbose", "--verbose", dest="verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def setup_logging(verbose: bool = False):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def run(args: argparse.Namespace):
    """Load config, resolve the html root and serve until interrupted."""
    config = load_config(args.conf)
    if args.product:
        logger.info("Product %s", args.product)
    root = resolve_root(config.html)
    logger.info("Listen at %s, html is %s, root is %s", config.listen, config.html, root)

    router = build_router()
    run_server(config.listen, root, router)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        sys.stderr.write(f"Version {version()}\n")
        sys.exit(0)

    setup_logging(args.verbose)
    print(f"Talks of {server_header()} system")

    if not args.conf:
        parser.print_help(sys.stdout)
        sys.exit(-1)

    try:
        run(args)
    except TalksError as e:
        logger.error("run err %s", e, exc_info=args.verbose)
        sys.exit(-1)
    return 0


if __name__ == "__main__":
    sys.exit(main())
