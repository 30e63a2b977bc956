"""Chunking engine that splits page text into sentence-aligned passages."""
import logging
import re
from typing import Iterable, List, Optional

from pdf_notebook.config import CHUNK_MAX_CHARS
from pdf_notebook.models.document import PageText
from pdf_notebook.models.passage import Passage

logger = logging.getLogger(__name__)

# Terminal punctuation followed by whitespace ends a sentence
SENTENCE_BOUNDARY = re.compile(r"(?<=[.?!])\s+")


class ChunkingEngine:
    """Segments page text into bounded-length passages with page attribution."""

    def __init__(self, max_chars: int = CHUNK_MAX_CHARS):
        """
        Initialize ChunkingEngine.

        Args:
            max_chars: Target maximum passage length in characters
        """
        if max_chars <= 0:
            raise ValueError("max_chars must be positive")
        self.max_chars = max_chars

    def chunk(self, pages: Iterable[PageText], max_chars: Optional[int] = None) -> List[Passage]:
        """
        Chunk every page into passages, preserving input page order.

        A sentence longer than ``max_chars`` is kept whole as a single
        oversized passage rather than being cut mid-sentence.

        Args:
            pages: Extracted page texts
            max_chars: Override for the engine's passage length limit

        Returns:
            List of Passage objects
        """
        limit = max_chars if max_chars is not None else self.max_chars
        passages: List[Passage] = []
        page_count = 0

        for page in pages:
            page_count += 1
            passages.extend(self._chunk_page(page, limit))

        logger.info(f"Created {len(passages)} passages from {page_count} pages")
        return passages

    def _chunk_page(self, page: PageText, max_chars: int) -> List[Passage]:
        """
        Greedily pack the sentences of one page into passages.

        Args:
            page: Page to chunk
            max_chars: Passage length limit

        Returns:
            Passages for this page, in text order
        """
        text = page.text or ""
        if not text.strip():
            return []

        passages = []
        buffer = ""
        for sentence in self.split_sentences(text):
            candidate = f"{buffer} {sentence}" if buffer else sentence
            if len(candidate) > max_chars and buffer:
                passages.append(Passage(page=page.page, text=buffer.strip()))
                buffer = sentence
            else:
                buffer = candidate

        if buffer.strip():
            passages.append(Passage(page=page.page, text=buffer.strip()))

        if not passages:
            # Unreachable with SENTENCE_BOUNDARY: non-blank text always yields a sentence
            logger.warning(f"Sentence split produced no passages for page {page.page}")
            passages.append(Passage(page=page.page, text=text[:max_chars]))

        return passages

    @staticmethod
    def split_sentences(text: str) -> List[str]:
        """Split text at sentence boundaries, dropping empty pieces."""
        return [s.strip() for s in SENTENCE_BOUNDARY.split(text) if s.strip()]
