"""MCP server exposing the CDN localizer as a tool."""

from __future__ import annotations

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_HOST_PREFIX, LocalizeConfig
from .localizer import localize_file
from .models import LocalizeResult

logger = logging.getLogger("cdn_localize.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="cdn-localize")


def summarize(path: Path, result: LocalizeResult) -> str:
    lines = [
        f"Rewrote {path}",
        f"Downloaded assets: {len(result.assets)}",
        f"Replacements: {result.replacements}",
    ]
    for asset in result.assets:
        lines.append(f"- {asset.url} -> {asset.relative_path}")
    if result.failed:
        lines.append(f"Failed downloads: {len(result.failed)}")
        lines.extend(f"- {url}" for url in result.failed)
    return "\n".join(lines)


@mcp.tool()
def localize(
    path: str,
    asset_dir: str = "static",
    prefix: str = DEFAULT_HOST_PREFIX,
) -> str:
    """Download CDN media referenced by an HTML file and rewrite it in place.

    Downloads run synchronously on the event loop, so the server answers no
    other request until the rewrite finishes.
    """

    source = Path(path).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"HTML file does not exist: {source}")

    config = LocalizeConfig(asset_dir=Path(asset_dir), host_prefix=prefix)
    result = localize_file(source, config)
    return summarize(source, result)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
