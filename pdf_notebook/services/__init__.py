"""Services for PDF Notebook."""
from .document_loader import DocumentLoader, DocumentLoadError
from .chunking_engine import ChunkingEngine
from .retrieval_index import RetrievalIndex
from .prompt_assembler import PromptAssembler
from .llm_client import LLMClient, LLMError, LLMClientError, ConfigError, ServiceError, TransportError
from .conversation_controller import ConversationController, QueryState, Viewer

__all__ = ['DocumentLoader', 'DocumentLoadError', 'ChunkingEngine', 'RetrievalIndex', 'PromptAssembler', 'LLMClient', 'LLMError', 'LLMClientError', 'ConfigError', 'ServiceError', 'TransportError', 'ConversationController', 'QueryState', 'Viewer']
