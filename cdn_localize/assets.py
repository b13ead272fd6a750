"""Resource downloading and on-disk storage utilities."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path, PurePosixPath
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import requests

from .config import LocalizeConfig
from .models import FetchedResource, LocalAsset
from .normalize import URL_SEPARATOR

logger = logging.getLogger("cdn_localize")

GENERIC_EXTENSION = ".bin"
CONTENT_TYPE_EXTENSIONS: Tuple[Tuple[str, str], ...] = (
    ("image/jpeg", ".jpg"),
    ("image/png", ".png"),
    ("image/gif", ".gif"),
    ("image/webp", ".webp"),
    ("video/mp4", ".mp4"),
    ("video/quicktime", ".mov"),
    ("audio/mpeg", ".mp3"),
)


class FetchError(RuntimeError):
    """Raised when no variant of a URL could be downloaded."""

    def __init__(self, url: str, cause: object) -> None:
        super().__init__(f"Failed to fetch {url}: {cause}")
        self.url = url
        self.cause = cause


def extension_from_url(url: str) -> str:
    """Return the suffix of the last path segment, dot included."""
    name = urlparse(url).path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot == -1:
        return ""
    return name[dot:]


def extension_from_content_type(content_type: Optional[str]) -> str:
    """Map a declared Content-Type onto a file extension."""
    if content_type:
        for mime, extension in CONTENT_TYPE_EXTENSIONS:
            if mime in content_type:
                return extension
    return GENERIC_EXTENSION


def url_variants(url: str) -> List[str]:
    """Spellings to try for ``url``; the unmodified URL always comes first."""
    variants = [url]
    if url.endswith(URL_SEPARATOR):
        variants.append(url[: -len(URL_SEPARATOR)])
    return variants


def asset_filename(url: str, extension: str) -> str:
    """Deterministic filename for ``url``: its md5 hex digest plus ``extension``."""
    return hashlib.md5(url.encode("utf-8", errors="surrogateescape")).hexdigest() + extension


class AssetFetcher:
    """Download resources over HTTP(S) with a fixed client identifier."""

    def __init__(
        self,
        config: LocalizeConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.session.headers["User-Agent"] = config.user_agent

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "AssetFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get(self, url: str) -> FetchedResource:
        resp = self.session.get(url, timeout=self.config.timeout, allow_redirects=True)
        if resp.status_code != 200:
            raise requests.HTTPError(f"bad status: {resp.status_code} {resp.reason}", response=resp)
        content_type = resp.headers.get("Content-Type", "")
        extension = extension_from_url(url) or extension_from_content_type(content_type)
        return FetchedResource(
            url=url,
            content=resp.content,
            content_type=content_type,
            extension=extension,
        )

    def fetch(self, url: str) -> FetchedResource:
        """Try each variant of ``url`` in order and return the first success."""
        last_error: object = None
        for variant in url_variants(url):
            try:
                return self._get(variant)
            except (requests.RequestException, UnicodeError) as exc:
                last_error = exc
                logger.warning("Failed with variant %s: %s, trying next...", variant, exc)
        raise FetchError(url, last_error)


def ensure_asset_dir(asset_dir: Path) -> bool:
    """Create the asset directory if needed; return whether it was created."""
    if asset_dir.is_dir():
        return False
    asset_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Created directory: %s", asset_dir)
    return True


def relative_asset_path(asset_dir: Path, filename: str) -> str:
    return str(PurePosixPath(asset_dir.as_posix()) / filename)


def store_asset(resource: FetchedResource, asset_dir: Path) -> LocalAsset:
    """Write ``resource`` under its hashed filename, overwriting any previous copy."""
    ensure_asset_dir(asset_dir)
    filename = asset_filename(resource.url, resource.extension)
    destination = asset_dir / filename
    try:
        destination.write_bytes(resource.content)
    except OSError:
        destination.unlink(missing_ok=True)
        raise
    return LocalAsset(
        url=resource.url,
        filename=filename,
        relative_path=relative_asset_path(asset_dir, filename),
        content_type=resource.content_type,
        size=len(resource.content),
    )


def download_asset(fetcher: AssetFetcher, url: str, asset_dir: Path) -> Optional[LocalAsset]:
    """Fetch ``url`` and persist it, returning ``None`` when either step fails."""
    try:
        resource = fetcher.fetch(url)
    except FetchError as exc:
        logger.warning("Error downloading %s: %s", url, exc.cause)
        return None
    try:
        return store_asset(resource, asset_dir)
    except OSError as exc:
        logger.warning("Failed to write asset for %s: %s", url, exc)
        return None
