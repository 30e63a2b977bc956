"""Document data models."""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class PageText:
    """Extracted text of a single PDF page (1-based page number)."""
    page: int
    text: str

    def __post_init__(self):
        if self.page < 1:
            raise ValueError(f"page numbers start at 1, got {self.page}")


@dataclass
class Document:
    """Represents a loaded PDF document."""
    filename: str
    pages: List[PageText] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return len(self.pages)
