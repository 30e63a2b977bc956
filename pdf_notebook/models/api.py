"""API request/response models."""
from typing import List, Optional
from pydantic import BaseModel, Field

from pdf_notebook.models.conversation import Message


class AskRequest(BaseModel):
    """Question about the loaded document."""
    question: str = Field(..., description="Natural-language question")


class CitationOut(BaseModel):
    page: int


class MessageOut(BaseModel):
    role: str
    text: str
    citations: Optional[List[CitationOut]] = None

    @classmethod
    def from_message(cls, message: Message) -> "MessageOut":
        citations = None
        if message.citations is not None:
            citations = [CitationOut(page=c.page) for c in message.citations]
        return cls(role=message.role, text=message.text, citations=citations)


class AskResponse(BaseModel):
    messages: List[MessageOut]


class TranscriptResponse(BaseModel):
    messages: List[MessageOut]
    loading: bool


class DocumentResponse(BaseModel):
    filename: str
    total_pages: int
    passages: int


class ViewerResponse(BaseModel):
    page: Optional[int] = None
