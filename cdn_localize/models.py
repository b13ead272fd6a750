"""Data models used throughout the localizer pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping


@dataclass
class UrlMatch:
    """Span of the document matched by the resource URL scan."""

    raw: str
    start: int
    end: int
    trimmed: str


@dataclass
class Candidate:
    """Remote URL found in the document together with its literal variants."""

    raw: str
    cleaned: str
    decoded: str

    @property
    def variants(self) -> List[str]:
        """Distinct spellings that must all resolve to the same local asset."""
        variants = [self.raw]
        if self.cleaned != self.raw:
            variants.append(self.cleaned)
        if self.decoded != self.cleaned and self.decoded not in variants:
            variants.append(self.decoded)
        return variants


@dataclass
class FetchedResource:
    """Response body retrieved for one URL variant."""

    url: str
    content: bytes
    content_type: str
    extension: str


@dataclass
class LocalAsset:
    """Downloaded resource stored in the asset directory."""

    url: str
    filename: str
    relative_path: str
    content_type: str
    size: int


@dataclass
class LocalizeResult:
    """Outcome of rewriting one document."""

    content: str
    associations: Mapping[str, str]
    assets: List[LocalAsset] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    replacements: int = 0
