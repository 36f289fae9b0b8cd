"""
Domain entities and API schemas.

Exports:
  - Session, Message, CacheItem, Product: Domain entities
  - TransactionalBatch and its operations: Atomic partition writes
"""

from copilot.models.batch import (
    BatchOperation,
    DeleteItem,
    TransactionalBatch,
    UpsertMessage,
    UpsertSession,
)
from copilot.models.cache_item import CacheItem
from copilot.models.message import Message
from copilot.models.product import Product, Review, Tag
from copilot.models.session import DEFAULT_SESSION_NAME, Session

__all__ = [
    "BatchOperation",
    "CacheItem",
    "DEFAULT_SESSION_NAME",
    "DeleteItem",
    "Message",
    "Product",
    "Review",
    "Session",
    "Tag",
    "TransactionalBatch",
    "UpsertMessage",
    "UpsertSession",
]
