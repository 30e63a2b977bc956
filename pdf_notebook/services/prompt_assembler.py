"""Prompt assembly for grounded question answering."""
import logging
from typing import Optional, Sequence

from pdf_notebook.config import GenerationConfig
from pdf_notebook.models.conversation import ChatMessage, PromptRequest
from pdf_notebook.models.passage import RetrievedHit

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant. Answer concisely using only the provided context. "
    "If the context doesn't contain the answer, say you couldn't find it."
)
CONTEXT_SEPARATOR = "\n\n---\n\n"


class PromptAssembler:
    """Formats retrieved passages and a question into a chat-completion request."""

    def __init__(self, config: Optional[GenerationConfig] = None):
        self.config = config or GenerationConfig()

    def assemble(self, hits: Sequence[RetrievedHit], question: str) -> PromptRequest:
        """
        Build the request for ``question`` grounded on ``hits``.

        Args:
            hits: Retrieved passages, best first
            question: User question

        Returns:
            PromptRequest with system rule and context-bearing user message

        Raises:
            ValueError: If there are no hits to ground the answer on
        """
        if not hits:
            raise ValueError("Cannot assemble a prompt without retrieved passages")

        context = self.format_context(hits)
        logger.debug(f"Assembled prompt from {len(hits)} passages ({len(context)} chars of context)")

        return PromptRequest(
            model=self.config.model,
            messages=[
                ChatMessage(role="system", content=SYSTEM_PROMPT),
                ChatMessage(role="user", content=f"Context:\n{context}\n\nQuestion: {question}"),
            ],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

    @staticmethod
    def format_context(hits: Sequence[RetrievedHit]) -> str:
        return CONTEXT_SEPARATOR.join(f"Page {hit.page}: {hit.text}" for hit in hits)
