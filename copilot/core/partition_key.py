"""
Hierarchical partition keys.

Sessions and messages are co-located under a tenant -> user -> session
hierarchy. A full key addresses one conversation; partial keys address
every conversation of a user, or of a tenant.

Dependencies: copilot.core.exceptions
System role: Partition key derivation for the chat store
"""

from dataclasses import dataclass

from copilot.core.exceptions import ValidationError


@dataclass(frozen=True)
class PartitionKey:
    """
    Full or partial hierarchical partition key.

    Attributes:
        tenant_id: Level 1, always present
        user_id: Level 2, present for user and session keys
        session_id: Level 3, present only for full keys
    """

    tenant_id: str
    user_id: str | None = None
    session_id: str | None = None

    @property
    def values(self) -> tuple[str, ...]:
        """Key components from the top of the hierarchy down."""
        return tuple(
            value
            for value in (self.tenant_id, self.user_id, self.session_id)
            if value is not None
        )

    @property
    def is_full(self) -> bool:
        """True when the key addresses a single session partition."""
        return self.session_id is not None

    def contains(self, other: "PartitionKey") -> bool:
        """True when ``other`` lies inside the partition addressed by this key."""
        return other.values[: len(self.values)] == self.values

    def __str__(self) -> str:
        return "/".join(self.values)


def derive_partition_key(
    tenant_id: str,
    user_id: str | None = None,
    session_id: str | None = None,
) -> PartitionKey:
    """
    Build a full or partial partition key from the identifiers given.

    Uses all three levels when tenant, user and session are non-empty,
    tenant and user when both are non-empty, and the tenant alone otherwise.

    Args:
        tenant_id: Tenant identifier (required)
        user_id: Optional user identifier
        session_id: Optional session identifier

    Returns:
        PartitionKey: Derived key

    Raises:
        ValidationError: If tenant_id is empty
    """
    if not tenant_id:
        raise ValidationError("tenant_id is required to derive a partition key", field="tenant_id")

    if user_id and session_id:
        return PartitionKey(tenant_id, user_id, session_id)
    if user_id:
        return PartitionKey(tenant_id, user_id)
    return PartitionKey(tenant_id)
