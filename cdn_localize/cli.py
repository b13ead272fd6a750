"""Command-line entry point for the CDN localizer."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_HOST_PREFIX, DEFAULT_USER_AGENT, LocalizeConfig, default_asset_dir
from .localizer import localize_html, read_document, write_document

logger = logging.getLogger("cdn_localize.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cdn-localize",
        description=(
            "Download CDN-hosted media referenced by an HTML file and rewrite "
            "the file in place to point at the local copies."
        ),
    )
    parser.add_argument(
        "html_file",
        nargs="?",
        type=Path,
        help="HTML file to rewrite in place",
    )
    parser.add_argument(
        "--asset-dir",
        type=Path,
        default=None,
        help="Directory where downloaded assets are stored (default: static)",
    )
    parser.add_argument(
        "--prefix",
        default=DEFAULT_HOST_PREFIX,
        help="URL prefix identifying resources to download",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent header sent with every request",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: no timeout)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List matching URLs without downloading or writing anything",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.html_file is None:
        parser.print_usage(sys.stdout)
        sys.exit(1)

    _configure_logging(args.verbose)

    config = LocalizeConfig(
        asset_dir=args.asset_dir if args.asset_dir is not None else default_asset_dir(),
        host_prefix=args.prefix,
        user_agent=args.user_agent,
        timeout=args.timeout,
        dry_run=args.dry_run,
    )

    try:
        content = read_document(args.html_file)
    except OSError as exc:
        logger.error("Error reading file: %s", exc)
        sys.exit(1)

    start = time.perf_counter()
    try:
        result = localize_html(content, config)
    except OSError as exc:
        logger.error("Error creating asset directory %s: %s", config.asset_dir, exc)
        sys.exit(1)

    if config.dry_run:
        return

    try:
        write_document(args.html_file, result.content)
    except OSError as exc:
        logger.error("Error writing updated file: %s", exc)
        sys.exit(1)

    logger.info(
        "HTML file updated successfully in %.2fs (%d downloaded, %d failed, %d replacements)",
        time.perf_counter() - start,
        len(result.assets),
        len(result.failed),
        result.replacements,
    )


if __name__ == "__main__":
    main()
