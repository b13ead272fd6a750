from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pytest
import requests

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cdn_localize.assets import AssetFetcher
from cdn_localize.config import LocalizeConfig


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", content_type: str = "") -> None:
        self.status_code = status_code
        self.reason = "OK" if status_code == 200 else "Error"
        self.content = content
        self.headers = {"Content-Type": content_type} if content_type else {}


class FakeSession:
    """Stand-in for ``requests.Session`` serving canned responses by URL."""

    def __init__(self, responses: Optional[Dict[str, Union[FakeResponse, Exception]]] = None) -> None:
        self.responses = dict(responses or {})
        self.headers: Dict[str, str] = {}
        self.calls: List[Tuple[str, Optional[float]]] = []
        self.closed = False

    def get(self, url: str, timeout: Optional[float] = None, allow_redirects: bool = True) -> FakeResponse:
        self.calls.append((url, timeout))
        response = self.responses.get(url)
        if response is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def config(tmp_path: Path) -> LocalizeConfig:
    return LocalizeConfig(asset_dir=tmp_path / "static")


@pytest.fixture
def make_fetcher(config: LocalizeConfig):
    def _make(responses: Dict[str, Union[FakeResponse, Exception]]) -> Tuple[AssetFetcher, FakeSession]:
        session = FakeSession(responses)
        return AssetFetcher(config, session=session), session

    return _make
