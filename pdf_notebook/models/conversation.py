"""Conversation data models."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from pdf_notebook.models.passage import Citation

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class Message:
    """Single entry of the conversation transcript."""
    role: Role
    text: str
    citations: Optional[List[Citation]] = None


@dataclass(frozen=True)
class ChatMessage:
    """One message of a chat-completion request."""
    role: Literal["system", "user", "assistant"]
    content: str


@dataclass(frozen=True)
class PromptRequest:
    """Request body sent to the generation service."""
    model: str
    messages: List[ChatMessage] = field(default_factory=list)
    temperature: float = 0.0
    max_tokens: int = 400

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body of a chat-completions call."""
        return {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
