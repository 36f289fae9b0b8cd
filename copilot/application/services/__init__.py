"""
Application services.

Exports:
  - ChatService: Chat completion pipeline
  - SessionService: Session lifecycle
  - RetrievalService: Product retrieval
  - CatalogService: Product catalog ingestion
"""

from copilot.application.services.catalog_service import CatalogLoadResult, CatalogService
from copilot.application.services.chat_service import ChatService
from copilot.application.services.retrieval_service import RetrievalService
from copilot.application.services.session_service import SessionService, session_partition_key

__all__ = [
    "CatalogLoadResult",
    "CatalogService",
    "ChatService",
    "RetrievalService",
    "SessionService",
    "session_partition_key",
]
