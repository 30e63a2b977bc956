"""Main entry point for the PDF Notebook API."""
import logging
from typing import Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from pdf_notebook import __version__
from pdf_notebook.config import CORS_ORIGINS, LOG_LEVEL, PORT, GenerationConfig
from pdf_notebook.logger import setup_logging
from pdf_notebook.models.api import (
    AskRequest,
    AskResponse,
    DocumentResponse,
    MessageOut,
    TranscriptResponse,
    ViewerResponse,
)
from pdf_notebook.models.passage import Citation
from pdf_notebook.services.conversation_controller import ConversationController
from pdf_notebook.services.document_loader import DocumentLoader, DocumentLoadError
from pdf_notebook.services.llm_client import LLMClient

logger = logging.getLogger(__name__)


class PageCursor:
    """In-process viewer: remembers the page a citation last pointed to."""

    def __init__(self):
        self.page: Optional[int] = None

    def scroll_to_page(self, page: int) -> None:
        logger.debug(f"Viewer moved to page {page}")
        self.page = page


# Initialize FastAPI app
app = FastAPI(
    title="PDF Notebook",
    description="Ask questions about an uploaded PDF and get page-cited answers",
    version=__version__
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
document_loader: DocumentLoader = None
controller: ConversationController = None
viewer: PageCursor = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global document_loader, controller, viewer

    setup_logging(LOG_LEVEL)
    logger.info("Initializing PDF Notebook services...")

    generation_config = GenerationConfig.from_env()
    if not generation_config.has_credential:
        logger.warning("OPENROUTER_API_KEY is not set; questions will fail until it is configured")

    document_loader = DocumentLoader()
    viewer = PageCursor()
    controller = ConversationController(LLMClient(generation_config), viewer=viewer)
    logger.info("All services initialized successfully")


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "pdf-notebook",
        "version": __version__,
        "document_loaded": controller is not None and controller.index_ready,
        "ask_enabled": controller is not None and controller.ask_enabled,
    }


@app.post("/document", response_model=DocumentResponse)
async def upload_document(file: UploadFile = File(...)) -> DocumentResponse:
    """
    Load a PDF, replacing any previous document and rebuilding the index.

    The conversation transcript is kept; only the searchable content changes.
    """
    data = await file.read()
    filename = file.filename or "document.pdf"
    try:
        document = document_loader.load_bytes(data, filename)
    except DocumentLoadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    index = controller.load_document(document.pages)
    return DocumentResponse(filename=document.filename, total_pages=document.total_pages, passages=len(index))


@app.post("/ask", response_model=AskResponse)
async def ask(request: AskRequest) -> AskResponse:
    """Answer a question about the loaded document."""
    if not request.question or not request.question.strip():
        raise HTTPException(status_code=400, detail="Question field is required and cannot be empty")
    if not controller.index_ready:
        raise HTTPException(status_code=409, detail="No document loaded")

    exchange = await controller.submit(request.question)
    if exchange is None:
        raise HTTPException(status_code=409, detail="A question is already being answered")

    return AskResponse(messages=[MessageOut.from_message(m) for m in exchange])


@app.get("/messages", response_model=TranscriptResponse)
async def messages() -> TranscriptResponse:
    """Full conversation transcript for this session."""
    return TranscriptResponse(
        messages=[MessageOut.from_message(m) for m in controller.messages],
        loading=controller.loading
    )


@app.post("/citations/{page}", response_model=ViewerResponse)
async def open_citation(page: int) -> ViewerResponse:
    """Scroll the viewer to a cited page."""
    if page < 1:
        raise HTTPException(status_code=400, detail="Page numbers start at 1")
    controller.open_citation(Citation(page=page))
    return ViewerResponse(page=viewer.page)


@app.get("/viewer", response_model=ViewerResponse)
async def viewer_state() -> ViewerResponse:
    return ViewerResponse(page=viewer.page)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
