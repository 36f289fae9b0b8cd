"""
CRUD operations package.

Exports:
  - BaseCRUD, VectorCRUD: Generic bases
  - ChatStore, chat_store: Session/message store with transactional batch
  - CacheCRUD, ProductCRUD and singletons
"""

from copilot.boundary.db.CRUD.base_crud import BaseCRUD, VectorCRUD
from copilot.boundary.db.CRUD.cache_crud import CacheCRUD, cache_crud
from copilot.boundary.db.CRUD.chat_store import ChatStore, chat_store
from copilot.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from copilot.boundary.db.CRUD.product_crud import ProductCRUD, product_crud
from copilot.boundary.db.CRUD.session_crud import SessionCRUD, partition_filter, session_crud

__all__ = [
    "BaseCRUD",
    "CacheCRUD",
    "ChatStore",
    "MessageCRUD",
    "ProductCRUD",
    "SessionCRUD",
    "VectorCRUD",
    "cache_crud",
    "chat_store",
    "message_crud",
    "partition_filter",
    "product_crud",
    "session_crud",
]
