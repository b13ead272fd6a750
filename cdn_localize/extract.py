"""Scan raw HTML text for CDN resource URLs."""

from __future__ import annotations

from typing import Iterator, List, Tuple

from .config import DEFAULT_HOST_PREFIX
from .models import UrlMatch

URL_TERMINATORS = frozenset("<>\"'")
HTML_BOUNDARY_MARKERS: Tuple[str, ...] = ("<", ">", '"', "'", "</a>", "</span>")


def _is_url_char(char: str) -> bool:
    return not char.isspace() and char not in URL_TERMINATORS


def iter_url_spans(text: str, prefix: str = DEFAULT_HOST_PREFIX) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` offsets of non-overlapping URLs starting with ``prefix``.

    A span runs from the prefix up to the first whitespace or ``<>"'`` character
    and must contain at least one character past the prefix.
    """
    if not prefix:
        raise ValueError("host prefix must not be empty")
    length = len(text)
    position = text.find(prefix)
    while position != -1:
        end = position + len(prefix)
        while end < length and _is_url_char(text[end]):
            end += 1
        if end > position + len(prefix):
            yield position, end
            position = text.find(prefix, end)
        else:
            position = text.find(prefix, position + 1)


def trim_to_complete_url(url: str) -> str:
    """Cut ``url`` at the earliest HTML boundary marker found past its first character."""
    earliest = len(url)
    for marker in HTML_BOUNDARY_MARKERS:
        pos = url.find(marker)
        if 0 < pos < earliest:
            earliest = pos
    return url[:earliest]


def scan_candidates(text: str, prefix: str = DEFAULT_HOST_PREFIX) -> List[UrlMatch]:
    """Return every URL match in document order, duplicates included."""
    matches: List[UrlMatch] = []
    for start, end in iter_url_spans(text, prefix):
        raw = text[start:end]
        matches.append(UrlMatch(raw=raw, start=start, end=end, trimmed=trim_to_complete_url(raw)))
    return matches
