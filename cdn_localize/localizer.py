"""High-level orchestration for localizing CDN references in an HTML document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .assets import AssetFetcher, download_asset, ensure_asset_dir
from .config import LocalizeConfig
from .extract import scan_candidates
from .models import LocalAsset, LocalizeResult
from .normalize import AssociationMap, normalize_candidate
from .rewrite import rewrite_document

logger = logging.getLogger("cdn_localize")


def localize_html(
    content: str,
    config: LocalizeConfig,
    fetcher: Optional[AssetFetcher] = None,
) -> LocalizeResult:
    """Download every matching resource and return the rewritten document.

    Assets are written to ``config.asset_dir``; the document itself is only
    returned. ``OSError`` from creating the asset directory propagates.
    """
    matches = scan_candidates(content, config.host_prefix)
    if config.dry_run:
        for match in matches:
            logger.info("Found: %s", normalize_candidate(match).decoded)
        return LocalizeResult(content=content, associations=AssociationMap().freeze())

    ensure_asset_dir(config.asset_dir)

    associations = AssociationMap()
    assets: List[LocalAsset] = []
    failed: List[str] = []
    owns_fetcher = fetcher is None
    if fetcher is None:
        fetcher = AssetFetcher(config)
    try:
        for match in matches:
            if match.raw in associations:
                continue
            candidate = normalize_candidate(match)

            known = associations.known_path(candidate)
            if known is not None:
                associations.associate(candidate, known)
                logger.debug("Reusing %s for %s", known, candidate.raw)
                continue
            if candidate.decoded in failed:
                continue

            logger.info("Downloading: %s", candidate.decoded)
            asset = download_asset(fetcher, candidate.decoded, config.asset_dir)
            if asset is None:
                failed.append(candidate.decoded)
                continue
            assets.append(asset)
            associations.associate(candidate, asset.relative_path)
            logger.info("Will replace with local file: %s", asset.relative_path)
    finally:
        if owns_fetcher:
            fetcher.close()

    frozen = associations.freeze()
    rewritten, replacements = rewrite_document(content, frozen)
    return LocalizeResult(
        content=rewritten,
        associations=frozen,
        assets=assets,
        failed=failed,
        replacements=replacements,
    )


def read_document(path: Path) -> str:
    """Read the whole document; bytes that are not UTF-8 survive as escaped surrogates."""
    return path.read_bytes().decode("utf-8", errors="surrogateescape")


def write_document(path: Path, content: str) -> None:
    path.write_bytes(content.encode("utf-8", errors="surrogateescape"))


def localize_file(
    path: Path,
    config: LocalizeConfig,
    fetcher: Optional[AssetFetcher] = None,
) -> LocalizeResult:
    """Rewrite ``path`` in place once every resource has been processed."""
    content = read_document(path)
    result = localize_html(content, config, fetcher)
    if config.dry_run:
        return result
    write_document(path, result.content)
    logger.info("Saved %s (%d replacements)", path, result.replacements)
    return result
