"""Configuration objects and constants for the localizer."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_ASSET_DIR = Path("static")
DEFAULT_HOST_PREFIX = "https://cdn.discordapp.com/"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
ASSET_DIR_ENV = "CDN_LOCALIZE_ASSET_DIR"


def default_asset_dir() -> Path:
    """Return the asset directory, honouring the environment override."""
    override = os.getenv(ASSET_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_ASSET_DIR


@dataclass
class LocalizeConfig:
    """Settings that control scanning, downloading and storing assets."""

    asset_dir: Path = field(default_factory=default_asset_dir)
    host_prefix: str = DEFAULT_HOST_PREFIX
    user_agent: str = DEFAULT_USER_AGENT
    timeout: Optional[float] = None
    dry_run: bool = False
