"""Data models for PDF Notebook."""
from .document import Document, PageText
from .passage import Passage, RetrievedHit, Citation
from .conversation import Message, ChatMessage, PromptRequest

__all__ = [
    "Document",
    "PageText",
    "Passage",
    "RetrievedHit",
    "Citation",
    "Message",
    "ChatMessage",
    "PromptRequest",
]
