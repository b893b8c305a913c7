"""Tests for fan-out batching and result folding."""
import pytest

from foro.domain.notifications.fanout import (
    FanOutResult,
    MulticastResult,
    TokenOutcome,
    chunk_tokens,
    fold_batch_error,
    fold_batch_response,
)


def test_chunk_tokens_respects_limit_and_order():
    tokens = [f"t{i}" for i in range(1201)]
    batches = chunk_tokens(tokens, 500)
    assert [len(b) for b in batches] == [500, 500, 201]
    assert [t for b in batches for t in b] == tokens


def test_chunk_tokens_exact_multiple_and_empty():
    assert [len(b) for b in chunk_tokens(["a"] * 1000, 500)] == [500, 500]
    assert chunk_tokens([], 500) == []


def test_chunk_tokens_rejects_non_positive_size():
    with pytest.raises(ValueError):
        chunk_tokens(["a"], 0)


def test_fold_batch_response_counts_and_collects_invalid():
    batch = ["t1", "t2", "t3"]
    response = MulticastResult(outcomes=(
        TokenOutcome("t1", True),
        TokenOutcome("t2", False, "unregistered"),
        TokenOutcome("t3", True),
    ))
    result = fold_batch_response(FanOutResult(total_tokens=3), batch, response)
    assert (result.success_count, result.failure_count) == (2, 1)
    assert result.invalid_tokens == ("t2",)
    assert result.batches == 1
    assert result.accounted == result.total_tokens


def test_fold_batch_response_missing_outcome_counts_as_failure_without_pruning():
    # Scenario: provider returned fewer results than tokens; every token still accounted for.
    response = MulticastResult(outcomes=(TokenOutcome("t1", True),))
    result = fold_batch_response(FanOutResult(total_tokens=2), ["t1", "t2"], response)
    assert (result.success_count, result.failure_count) == (1, 1)
    assert result.invalid_tokens == ()


def test_fold_batch_error_fails_whole_batch():
    start = FanOutResult(total_tokens=5, success_count=2, batches=1)
    result = fold_batch_error(start, ["a", "b", "c"])
    assert result.failure_count == 3
    assert result.success_count == 2
    assert result.batches == 2
    assert result.invalid_tokens == ()
    # Inputs are never mutated
    assert start.failure_count == 0
