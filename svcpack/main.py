"""
svcpack command line interface

Usage:
    svcpack [--verbose] [--with-package-list PATH] <pack-filename> <package>

Exit status is 0 when the pack was written and 1 otherwise.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from svcpack import __version__
from svcpack.client import HttpPackageClient
from svcpack.config import settings as default_settings
from svcpack.console import Console
from svcpack.context import PackContext
from svcpack.errors import Cancelled, ServicePackError
from svcpack.pack import list_pack
from svcpack.pipeline import ServicePackGenerator

log = logging.getLogger("svcpack")


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svcpack",
        description="Service pack generator: bundle a package and its "
        "dependencies for offline installation",
    )
    parser.add_argument("pack_filename", nargs="?", help="Pack file to create (*.pack)")
    parser.add_argument("package", nargs="?", help="Package id, name or capability")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show extra debugging information",
    )
    parser.add_argument(
        "--with-package-list",
        metavar="PATH",
        type=Path,
        help="Set the path of the file with the list of packages/dependencies "
        "to be excluded",
    )
    parser.add_argument("--url", help="URL of the package service")
    parser.add_argument("--filter", help="Filter passed to the package service")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: Optional[list[str]] = None, context: Optional[PackContext] = None) -> int:
    parser = get_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.pack_filename is None or args.package is None:
        parser.print_usage(sys.stderr)
        print(
            "You need to specify the pack name and packages to be packed",
            file=sys.stderr,
        )
        return 1

    if context is None:
        overrides = {}
        if args.url:
            overrides["upstream_url"] = args.url
        if args.filter:
            overrides["filter"] = args.filter
        settings = default_settings.model_copy(update=overrides)
        context = PackContext(settings, HttpPackageClient(settings), Console())

    generator = ServicePackGenerator(context)
    try:
        identity = generator.generate(
            Path(args.pack_filename), args.package, args.with_package_list
        )
    except Cancelled as e:
        log.debug(f"Cancelled: {e}")
        return 1
    except ServicePackError as e:
        print(f"Failed to create pack: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        for name in list_pack(Path(args.pack_filename)):
            log.debug(f"packed {name}")
    context.console.print(f"Created {args.pack_filename} for {identity.printable()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
