"""Fuzzy lexical retrieval index over document passages."""
import logging
from typing import FrozenSet, List, Sequence, Tuple

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from pdf_notebook.config import RETRIEVAL_THRESHOLD, RETRIEVAL_TOP_K
from pdf_notebook.models.passage import Passage, RetrievedHit

logger = logging.getLogger(__name__)


class RetrievalIndex:
    """
    Read-only approximate text-matching index over passage text.

    Similarity is measured on normalised text and is always the query found
    in the passage, never the passage found in the query. ``partial_ratio``
    aligns the query against its best-matching window anywhere in the passage
    (tolerant of typos); a passage shorter than the query is compared whole
    with ``ratio``. A passage containing every query token scores a full
    match regardless of word order. Similarity is reported as a dissimilarity
    score in [0, 1] where lower is better; passages scoring above
    ``threshold`` are not returned.

    The index is built once per document. There is no way to add or remove
    passages; build a new index instead.
    """

    def __init__(self, passages: Sequence[Passage], threshold: float = RETRIEVAL_THRESHOLD):
        """
        Initialize the index. Prefer ``RetrievalIndex.build``.

        Args:
            passages: Passages to index
            threshold: Maximum dissimilarity score accepted by search
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0.0 and 1.0")
        self._passages: Tuple[Passage, ...] = tuple(passages)
        self._normalized: Tuple[str, ...] = tuple(default_process(p.text) for p in self._passages)
        self._tokens: Tuple[FrozenSet[str], ...] = tuple(frozenset(text.split()) for text in self._normalized)
        self.threshold = threshold

    @classmethod
    def build(cls, passages: Sequence[Passage], threshold: float = RETRIEVAL_THRESHOLD) -> "RetrievalIndex":
        """Build an index over ``passages``."""
        index = cls(passages, threshold=threshold)
        logger.info(f"Built retrieval index over {len(index)} passages (threshold={threshold})")
        return index

    def __len__(self) -> int:
        return len(self._passages)

    @property
    def is_empty(self) -> bool:
        return not self._passages

    @property
    def passages(self) -> Tuple[Passage, ...]:
        return self._passages

    def search(self, query: str, top_k: int = RETRIEVAL_TOP_K) -> List[RetrievedHit]:
        """
        Return up to ``top_k`` passages matching ``query``, best first.

        Args:
            query: Free-text query
            top_k: Maximum number of hits

        Returns:
            Hits ordered by ascending score; empty when nothing clears the
            threshold, the query is blank or the index is empty
        """
        if self.is_empty or top_k <= 0:
            return []

        needle = default_process(query or "")
        if not needle:
            logger.warning("Blank query string provided, returning empty results")
            return []

        needle_tokens = frozenset(needle.split())
        cutoff = (1.0 - self.threshold) * 100
        scored = []
        for position, passage in enumerate(self._passages):
            similarity = self._similarity(needle, needle_tokens, position, cutoff)
            if similarity < cutoff or similarity == 0:
                continue
            score = round(1.0 - similarity / 100.0, 6)
            scored.append((score, position, passage))

        # position breaks ties so equal scores keep document order
        scored.sort(key=lambda item: (item[0], item[1]))
        hits = [
            RetrievedHit(page=passage.page, text=passage.text, score=score)
            for score, _, passage in scored[:top_k]
        ]

        logger.debug(f"Query matched {len(scored)} passages, returning {len(hits)}")
        return hits

    def _similarity(self, needle: str, needle_tokens: FrozenSet[str], position: int, cutoff: float) -> float:
        """Similarity (0-100) of the query to the passage at ``position``."""
        haystack = self._normalized[position]
        if needle_tokens <= self._tokens[position]:
            return 100.0
        # partial_ratio aligns the shorter string inside the longer one
        if len(needle) <= len(haystack):
            return fuzz.partial_ratio(needle, haystack, score_cutoff=cutoff)
        return fuzz.ratio(needle, haystack, score_cutoff=cutoff)
