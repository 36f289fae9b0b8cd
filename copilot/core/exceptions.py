"""
Error taxonomy of the chat backend.

Every error carries a message and a details dict for logs. Errors
marked retryable leave no partial state behind: the caller may repeat
the operation, for example to complete a prompt recorded earlier.

Dependencies: None
System role: Exceptions shared by services, stores and the HTTP layer
"""

from typing import Any


class CopilotException(Exception):
    """Base exception for all copilot application errors."""

    retryable: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable description
            details: Structured context for logs
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(CopilotException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(CopilotException):
    """Raised when a referenced entity does not exist."""


class SessionNotFoundError(NotFoundError):
    """Raised when a session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session not found: {session_id}", details)


class MessageNotFoundError(NotFoundError):
    """Raised when a chat message cannot be found."""

    def __init__(self, message_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["message_id"] = message_id
        super().__init__(f"Message not found: {message_id}", details)


class ItemConflictError(CopilotException):
    """Raised when a create-only write targets an id that already exists."""

    def __init__(
        self,
        item_type: str,
        item_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"item_type": item_type, "item_id": item_id})
        super().__init__(f"{item_type} already exists: {item_id}", details)


class PartitionMismatchError(CopilotException):
    """
    Raised when a transactional batch spans more than one partition key.

    This is a programming error; batches are never split across partitions.
    """

    def __init__(
        self,
        partition_keys: list[tuple[str, ...]],
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["partition_keys"] = [list(pk) for pk in partition_keys]
        super().__init__("All batch items must share the same partition key", details)


class ProviderUnavailableError(CopilotException):
    """
    Raised when an embedding, completion or retrieval call fails or times out.

    Retryable: the prompt message recorded before the failure stays valid
    and can be completed again by the caller.
    """

    retryable = True

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize provider error.

        Args:
            message: Error message
            operation: Provider operation that failed (embed, complete, summarize)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class RetrievalError(ProviderUnavailableError):
    """Raised when product retrieval fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, operation="retrieve", details=details)


class VectorStoreError(CopilotException):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (lookup, insert, remove, clear)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class MalformedUpstreamDataError(CopilotException):
    """Raised when an upstream data source returns an invalid record."""

    def __init__(
        self,
        message: str,
        record_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if record_id:
            details["record_id"] = record_id
        super().__init__(message, details)
