"""Command-line interface for dojoup."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import DojoupConfig
from .errors import DojoupError
from .options import OptionSet
from .scarb import install_scarb
from .strategy import PrebuiltDownload, check_requirements, choose_strategy, run_strategy
from .utils import console, log, setup_logging

logger = logging.getLogger(__name__)

BANNER = r"""
═════════════════════════════════════════════════════════════════════════

                    ██████╗  ██████╗      ██╗ ██████╗
                    ██╔══██╗██╔═══██╗     ██║██╔═══██╗
                    ██║  ██║██║   ██║     ██║██║   ██║
                    ██║  ██║██║   ██║██   ██║██║   ██║
                    ██████╔╝╚██████╔╝╚█████╔╝╚██████╔╝
                    ╚═════╝  ╚═════╝  ╚════╝  ╚═════╝

            Repo : https://github.com/dojoengine/dojo
            Book : https://book.dojoengine.org/
            Chat : https://discord.gg/dojoengine

═════════════════════════════════════════════════════════════════════════
"""


def update_dojo(options: OptionSet, config: DojoupConfig, *, scarb: bool = True) -> list[Path]:
    """Install the toolchain described by ``options``."""
    strategy = choose_strategy(options, config)
    logger.debug("Selected strategy %r", strategy)
    check_requirements(strategy)
    config.ensure_dirs()

    installed = run_strategy(strategy, config)

    if scarb and isinstance(strategy, PrebuiltDownload):
        result = install_scarb(config)
        if result.is_err():
            log(f"could not install scarb: {result.error}", "warning")

    log("done!", "success")
    return installed


def options_from_args(args: argparse.Namespace, config: DojoupConfig) -> OptionSet:
    return OptionSet(
        repo=args.repo or config.repo,
        branch=args.branch,
        tag=args.tag,
        version=args.version,
        path=args.path,
        pr=args.pr,
        commit=args.commit,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="dojoup",
        description="The installer for Dojo.",
        epilog="Update or revert to a specific Dojo version with ease.",
        add_help=False,
    )
    parser.add_argument("-r", "--repo", help="Build and install from a remote GitHub repo (uses default branch if no other options are set)")
    parser.add_argument("-b", "--branch", help="Build and install a specific branch")
    parser.add_argument("-t", "--tag", help="Install a specific release tag")
    parser.add_argument("-v", "--version", help="Install a specific version (default: stable)")
    parser.add_argument("-p", "--path", help="Build and install a local repository")
    parser.add_argument("-P", "--pr", help="Build and install a specific Pull Request")
    parser.add_argument("-c", "--commit", help="Build and install a specific commit")
    parser.add_argument(
        "--no-scarb",
        action="store_true",
        help="Do not install the scarb version matching the toolchain",
    )
    parser.add_argument("--config-file", type=str, help="Path to configuration file")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "-V",
        "--dojoup-version",
        action="version",
        version=f"dojoup {__version__}",
        help="Print the version of dojoup",
    )
    parser.add_argument("-h", "--help", action="store_true", help="Print help information")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main function to parse arguments and install dojo."""
    parser = create_parser()
    args, unknown = parser.parse_known_args(argv)

    if args.help:
        parser.print_help(sys.stderr)
        return
    if unknown:
        log(f"unknown option: {' '.join(unknown)}", "warning")
        parser.print_usage(sys.stderr)
        sys.exit(1)

    setup_logging(args.verbose)

    try:
        config = DojoupConfig.load_from_file(args.config_file)
        options = options_from_args(args, config)
        update_dojo(options, config, scarb=not args.no_scarb)
    except DojoupError as e:
        log(e.format(), "error")
        sys.exit(1)
    except Exception as e:
        log(f"error: {e!s}", "error")
        console.print_exception()
        sys.exit(1)

    console.print(BANNER, style="bold")


if __name__ == "__main__":
    main()
