"""
Token counting and budget trimming.

Counts tokens with a tiktoken BPE encoding and trims text, or lists of
structured records, to fit a token ceiling. Trimming always cuts on a
token boundary and never inside a UTF-8 character, so re-trimming a
trimmed result at the same budget returns it unchanged.

Dependencies: tiktoken, pydantic
System role: Token budget enforcement for prompts and retrieved context
"""

import json
import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

import tiktoken
from pydantic import BaseModel

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


def serialize_record(record: Any) -> str:
    """Serialize a record to the JSON text sent to the model."""
    if isinstance(record, BaseModel):
        return record.model_dump_json()
    return json.dumps(record, default=str)


class TokenBudgeter:
    """
    Token counter and trimmer backed by a tiktoken encoding.

    The encoding is resolved lazily from the model name so constructing
    a budgeter never touches the network.
    """

    def __init__(
        self,
        encoding: tiktoken.Encoding | None = None,
        model_name: str = "gpt-4o",
    ) -> None:
        """
        Initialize budgeter.

        Args:
            encoding: Explicit encoding (resolved from model_name when None)
            model_name: Model whose tokenizer should be used
        """
        self._encoding = encoding
        self._model_name = model_name

    @property
    def encoding(self) -> tiktoken.Encoding:
        """Encoding used for counting, loaded on first use."""
        if self._encoding is None:
            self._encoding = tiktoken.encoding_for_model(self._model_name)
            logger.info(f"{__name__}:encoding - Loaded {self._encoding.name} for {self._model_name}")
        return self._encoding

    def _encode(self, text: str) -> list[int]:
        # Special-token text in user input is counted as plain text
        return self.encoding.encode(text, disallowed_special=())

    def count_tokens(self, text: str) -> int:
        """
        Count tokens in text.

        Args:
            text: Text to count

        Returns:
            int: Number of tokens (0 for empty text)
        """
        if not text:
            return 0
        return len(self._encode(text))

    def trim(self, text: str, max_tokens: int) -> str:
        """
        Trim text to at most max_tokens tokens.

        Text that already fits is returned unchanged. Otherwise the longest
        token prefix whose decoded text still fits is returned; a trailing
        partial UTF-8 sequence is dropped rather than replaced.

        Args:
            text: Text to trim
            max_tokens: Token ceiling

        Returns:
            str: A prefix of text fitting within max_tokens
        """
        if max_tokens <= 0 or not text:
            return ""

        tokens = self._encode(text)
        if len(tokens) <= max_tokens:
            return text

        cut = max_tokens
        while cut > 0:
            raw = self.encoding.decode_bytes(tokens[:cut])
            candidate = raw.decode("utf-8", errors="ignore")
            if len(self._encode(candidate)) <= max_tokens:
                return candidate
            cut -= 1
        return ""

    def trim_records(
        self,
        records: Sequence[RecordT],
        max_tokens: int,
        serializer: Callable[[RecordT], str] = serialize_record,
    ) -> list[RecordT]:
        """
        Keep the longest prefix of records whose serialized cost fits.

        Records are walked in the given order. The first record that would
        push the running total over max_tokens is excluded entirely and the
        walk stops there.

        Args:
            records: Records in priority order
            max_tokens: Token ceiling for all kept records together
            serializer: Converts a record to the text the model will see

        Returns:
            list: Prefix of records fitting the budget
        """
        kept: list[RecordT] = []
        total = 0
        for record in records:
            cost = self.count_tokens(serializer(record))
            if total + cost > max_tokens:
                logger.debug(
                    f"{__name__}:trim_records - Budget reached",
                    extra={"kept": len(kept), "total": len(records), "max_tokens": max_tokens},
                )
                break
            total += cost
            kept.append(record)
        return kept
