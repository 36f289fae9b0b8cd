"""
Core domain logic.

Contains the exception hierarchy, partition keys, token budgeting and
similarity math. The context window builder and semantic cache live in
copilot.core.context_window and copilot.core.semantic_cache.
"""

from copilot.core.exceptions import (
    CopilotException,
    ItemConflictError,
    MalformedUpstreamDataError,
    MessageNotFoundError,
    NotFoundError,
    PartitionMismatchError,
    ProviderUnavailableError,
    RetrievalError,
    SessionNotFoundError,
    ValidationError,
    VectorStoreError,
)
from copilot.core.partition_key import PartitionKey, derive_partition_key
from copilot.core.similarity import DistanceFunction, cosine_similarity, reciprocal_rank_fusion
from copilot.core.token_budgeter import TokenBudgeter

__all__ = [
    # Exceptions
    "CopilotException",
    "ItemConflictError",
    "MalformedUpstreamDataError",
    "MessageNotFoundError",
    "NotFoundError",
    "PartitionMismatchError",
    "ProviderUnavailableError",
    "RetrievalError",
    "SessionNotFoundError",
    "ValidationError",
    "VectorStoreError",
    # Domain
    "DistanceFunction",
    "PartitionKey",
    "TokenBudgeter",
    "cosine_similarity",
    "derive_partition_key",
    "reciprocal_rank_fusion",
]
