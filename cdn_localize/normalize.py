"""Variant spellings of extracted URLs and the association map built from them."""

from __future__ import annotations

import html
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Union

from .extract import trim_to_complete_url
from .models import Candidate, UrlMatch

URL_SEPARATOR = "&"


def strip_trailing_separator(url: str) -> str:
    """Drop a single trailing ``&`` left over from a truncated query string."""
    if url.endswith(URL_SEPARATOR):
        return url[: -len(URL_SEPARATOR)]
    return url


def normalize_candidate(match: Union[UrlMatch, str]) -> Candidate:
    """Build the raw, cleaned and entity-decoded spellings of one match."""
    if isinstance(match, UrlMatch):
        raw, trimmed = match.raw, match.trimmed
    else:
        raw, trimmed = match, trim_to_complete_url(match)
    cleaned = strip_trailing_separator(trimmed)
    decoded = html.unescape(cleaned)
    return Candidate(raw=raw, cleaned=cleaned, decoded=decoded)


class AssociationMap:
    """Literal URL spellings mapped to the local path that replaces them.

    Keys are never overwritten: the first path associated with a spelling wins.
    """

    def __init__(self) -> None:
        self._paths: Dict[str, str] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._paths.get(key, default)

    def known_path(self, candidate: Candidate) -> Optional[str]:
        """Return the path already associated with any spelling of ``candidate``."""
        for variant in candidate.variants:
            path = self._paths.get(variant)
            if path is not None:
                return path
        return None

    def associate(self, candidate: Candidate, path: str) -> List[str]:
        """Map every new spelling of ``candidate`` to ``path``; return the keys added."""
        added: List[str] = []
        for variant in candidate.variants:
            if variant not in self._paths:
                self._paths[variant] = path
                added.append(variant)
        return added

    def freeze(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self._paths))
