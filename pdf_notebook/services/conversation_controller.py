"""Conversation controller: retrieve, generate and cite for each question."""
import enum
import logging
from typing import Iterable, List, Optional, Protocol

from pdf_notebook.config import RETRIEVAL_THRESHOLD, RETRIEVAL_TOP_K
from pdf_notebook.models.conversation import Message
from pdf_notebook.models.document import PageText
from pdf_notebook.models.passage import Citation, RetrievedHit
from pdf_notebook.services.chunking_engine import ChunkingEngine
from pdf_notebook.services.llm_client import LLMClient
from pdf_notebook.services.prompt_assembler import PromptAssembler
from pdf_notebook.services.retrieval_index import RetrievalIndex

logger = logging.getLogger(__name__)

NO_MATCH_TEXT = "No relevant content found."
FAILURE_TEXT = "Error: could not contact AI service."


class Viewer(Protocol):
    """Document viewer capability used to open citations."""

    def scroll_to_page(self, page: int) -> None:
        ...


class QueryState(str, enum.Enum):
    """Lifecycle of a single question."""
    IDLE = "idle"
    RETRIEVING = "retrieving"
    NO_MATCH = "no_match"
    ASSEMBLING = "assembling"
    GENERATING = "generating"
    ANSWERED = "answered"
    FAILED = "failed"


def citations_for(hits: Iterable[RetrievedHit]) -> List[Citation]:
    """Distinct hit pages in order of first appearance."""
    seen = set()
    citations = []
    for hit in hits:
        if hit.page not in seen:
            seen.add(hit.page)
            citations.append(Citation(page=hit.page))
    return citations


class ConversationController:
    """
    Orchestrates chunk -> retrieve -> assemble -> generate for one session.

    The transcript is append-only and lives in memory. Only one question is
    processed at a time: a submission made while another is in flight is
    dropped, not queued.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        viewer: Optional[Viewer] = None,
        chunking_engine: Optional[ChunkingEngine] = None,
        prompt_assembler: Optional[PromptAssembler] = None,
        top_k: int = RETRIEVAL_TOP_K,
        threshold: float = RETRIEVAL_THRESHOLD
    ):
        """
        Initialize the controller.

        Args:
            llm_client: Generation client
            viewer: Viewer that citations scroll; optional
            chunking_engine: Chunker used on document load
            prompt_assembler: Prompt builder (defaults to the client's settings)
            top_k: Passages retrieved per question
            threshold: Retrieval dissimilarity threshold
        """
        self.llm_client = llm_client
        self.viewer = viewer
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.prompt_assembler = prompt_assembler or PromptAssembler(llm_client.config)
        self.top_k = top_k
        self.threshold = threshold

        self.index: Optional[RetrievalIndex] = None
        self.messages: List[Message] = []
        self.loading = False
        self.state = QueryState.IDLE
        self.last_outcome: Optional[QueryState] = None
        self.draft = ""

    @property
    def index_ready(self) -> bool:
        return self.index is not None

    @property
    def ask_enabled(self) -> bool:
        """Whether a presentation layer should offer the ask action."""
        return self.index_ready and self.llm_client.is_configured and not self.loading

    def load_document(self, pages: Iterable[PageText]) -> RetrievalIndex:
        """
        Replace the active document, rebuilding the index from scratch.

        Args:
            pages: Extracted page texts of the new document

        Returns:
            The new index
        """
        passages = self.chunking_engine.chunk(pages)
        self.index = RetrievalIndex.build(passages, threshold=self.threshold)
        return self.index

    async def submit(self, question: str) -> Optional[List[Message]]:
        """
        Answer ``question`` and append the exchange to the transcript.

        Args:
            question: User question

        Returns:
            The user and assistant messages appended, or None if the
            submission was rejected (no index, blank question, or another
            question in flight)
        """
        if self.loading:
            logger.info("Question already in flight, dropping submission")
            return None
        if not self.index_ready or not question or not question.strip():
            logger.debug("Submission rejected: index not ready or blank question")
            return None

        self.loading = True
        self.draft = question
        try:
            self.state = QueryState.RETRIEVING
            hits = self.index.search(question, top_k=self.top_k)

            if not hits:
                self.state = QueryState.NO_MATCH
                logger.info("No passages matched the question")
                return self._append(question, Message(role="assistant", text=NO_MATCH_TEXT, citations=[]))

            try:
                self.state = QueryState.ASSEMBLING
                request = self.prompt_assembler.assemble(hits, question)

                self.state = QueryState.GENERATING
                answer = await self.llm_client.generate(request)
            except Exception as e:
                self.state = QueryState.FAILED
                logger.error(f"Failed to answer question: {e}", exc_info=True)
                return self._append(question, Message(role="assistant", text=FAILURE_TEXT))

            self.state = QueryState.ANSWERED
            citations = citations_for(hits)
            logger.info(f"Answered question from {len(hits)} passages citing pages {[c.page for c in citations]}")
            return self._append(question, Message(role="assistant", text=answer.strip(), citations=citations))
        finally:
            self.last_outcome = self.state
            self.draft = ""
            self.loading = False
            self.state = QueryState.IDLE

    def open_citation(self, citation: Citation) -> None:
        """Scroll the viewer to the cited page."""
        if self.viewer is None:
            logger.warning(f"No viewer attached; cannot open page {citation.page}")
            return
        self.viewer.scroll_to_page(citation.page)

    def _append(self, question: str, reply: Message) -> List[Message]:
        exchange = [Message(role="user", text=question), reply]
        self.messages.extend(exchange)
        return exchange
