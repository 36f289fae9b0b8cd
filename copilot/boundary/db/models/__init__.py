"""
Database models package.

Exports:
  - SessionModel, MessageModel: Chat partition rows
  - CacheItemModel: Semantic cache rows
  - ProductModel: Product catalog rows

Dependencies: sqlalchemy, copilot.boundary.db.base
System role: Database model definitions for domain entities
"""

from copilot.boundary.db.models.cache_item_model import CacheItemModel
from copilot.boundary.db.models.message_model import MessageModel
from copilot.boundary.db.models.product_model import ProductModel
from copilot.boundary.db.models.session_model import SessionModel

__all__ = [
    "CacheItemModel",
    "MessageModel",
    "ProductModel",
    "SessionModel",
]
