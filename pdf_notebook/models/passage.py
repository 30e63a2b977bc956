"""Passage data models."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Passage:
    """Bounded-length fragment of a page's text; the unit of retrieval."""
    page: int
    text: str


@dataclass(frozen=True)
class RetrievedHit:
    """Passage matched by a query."""
    page: int
    text: str
    score: float  # 0.0 (exact) to 1.0 (unrelated), lower is better


@dataclass(frozen=True)
class Citation:
    """Source page backing an answer."""
    page: int
