"""
Test suite for TokenBudgeter.

Covers counting, text trimming on token boundaries and prefix trimming
of record lists. Uses a byte-level encoding; a tiktoken-backed check
runs when the encoding files are available.

System role: Verification of token budget enforcement
"""

import pytest
import tiktoken

from copilot.core.token_budgeter import TokenBudgeter, serialize_record
from copilot.models.product import Product


class TestTokenBudgeterCount:
    """Test suite for TokenBudgeter.count_tokens()."""

    def test_count_tokens_should_count_encoded_tokens(self, budgeter: TokenBudgeter) -> None:
        assert budgeter.count_tokens("bike") == 4

    def test_count_tokens_should_return_zero_for_empty_text(self, budgeter: TokenBudgeter) -> None:
        assert budgeter.count_tokens("") == 0

    def test_count_tokens_should_count_multibyte_characters(self, budgeter: TokenBudgeter) -> None:
        assert budgeter.count_tokens("vélo") == 5


class TestTokenBudgeterTrim:
    """Test suite for TokenBudgeter.trim()."""

    def test_trim_should_return_text_unchanged_when_it_fits(self, budgeter: TokenBudgeter) -> None:
        text = "Mountain bikes under $500"

        assert budgeter.trim(text, 100) is text

    def test_trim_should_cut_to_budget(self, budgeter: TokenBudgeter) -> None:
        assert budgeter.trim("Mountain bikes", 8) == "Mountain"

    def test_trim_should_never_split_a_character(self, budgeter: TokenBudgeter) -> None:
        # "é" is two bytes; a budget of 2 would end inside it
        assert budgeter.trim("héllo", 2) == "h"

    def test_trim_should_be_idempotent(self, budgeter: TokenBudgeter) -> None:
        text = "Größe und Gewicht der Räder"

        for max_tokens in range(0, 30):
            once = budgeter.trim(text, max_tokens)
            assert budgeter.trim(once, max_tokens) == once

    def test_trim_should_never_increase_token_count(self, budgeter: TokenBudgeter) -> None:
        text = "Größe und Gewicht der Räder"

        for max_tokens in range(0, 40):
            trimmed = budgeter.trim(text, max_tokens)
            assert budgeter.count_tokens(trimmed) <= min(max_tokens, budgeter.count_tokens(text))
            assert text.startswith(trimmed)

    def test_trim_should_return_empty_for_non_positive_budget(self, budgeter: TokenBudgeter) -> None:
        assert budgeter.trim("anything", 0) == ""
        assert budgeter.trim("anything", -5) == ""


class TestTokenBudgeterTrimRecords:
    """Test suite for TokenBudgeter.trim_records()."""

    def test_trim_records_should_keep_prefix_that_fits(self, budgeter: TokenBudgeter) -> None:
        records = ["aaaa", "bbbb", "cccc"]

        kept = budgeter.trim_records(records, 8, serializer=str)

        assert kept == ["aaaa", "bbbb"]

    def test_trim_records_should_stop_at_first_record_over_budget(self, budgeter: TokenBudgeter) -> None:
        # "bbbbbbbb" does not fit; "c" would, but the walk has stopped
        records = ["aaaa", "bbbbbbbb", "c"]

        kept = budgeter.trim_records(records, 6, serializer=str)

        assert kept == ["aaaa"]

    def test_trim_records_should_keep_everything_within_budget(self, budgeter: TokenBudgeter) -> None:
        records = ["a", "b"]

        assert budgeter.trim_records(records, 10, serializer=str) == records

    def test_trim_records_should_exclude_first_record_when_too_large(self, budgeter: TokenBudgeter) -> None:
        assert budgeter.trim_records(["toolarge"], 3, serializer=str) == []

    def test_trim_records_should_serialize_models_as_json(
        self,
        budgeter: TokenBudgeter,
        sample_products: list[Product],
    ) -> None:
        first_cost = budgeter.count_tokens(serialize_record(sample_products[0]))

        kept = budgeter.trim_records(sample_products, first_cost)

        assert kept == sample_products[:1]


class TestSerializeRecord:
    """Test suite for serialize_record()."""

    def test_serialize_record_should_dump_dicts_as_json(self) -> None:
        assert serialize_record({"name": "Road-650"}) == '{"name": "Road-650"}'


@pytest.fixture(scope="module")
def tiktoken_budgeter() -> TokenBudgeter:
    """Budgeter with the real o200k_base encoding, skipped when it cannot be loaded."""
    try:
        encoding = tiktoken.get_encoding("o200k_base")
    except Exception as e:
        pytest.skip(f"tiktoken encoding unavailable: {e}")
    return TokenBudgeter(encoding=encoding)


class TestTokenBudgeterWithTiktoken:
    """Trimming behavior against a real BPE encoding."""

    def test_trim_should_respect_budget_and_be_stable(self, tiktoken_budgeter: TokenBudgeter) -> None:
        text = "Which 🚲 mountain bikes do you have under $500? Größe: M/L"

        for max_tokens in range(1, tiktoken_budgeter.count_tokens(text) + 1):
            trimmed = tiktoken_budgeter.trim(text, max_tokens)
            assert tiktoken_budgeter.count_tokens(trimmed) <= max_tokens
            assert tiktoken_budgeter.trim(trimmed, max_tokens) == trimmed

    def test_count_tokens_should_treat_special_tokens_as_text(self, tiktoken_budgeter: TokenBudgeter) -> None:
        assert tiktoken_budgeter.count_tokens("<|endoftext|>") > 1
