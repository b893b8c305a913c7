"""Fan-out batching and result folding.

Everything here is pure: the dispatcher feeds provider responses in and gets
a new FanOutResult back, so the accounting can be tested without a provider.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class TokenOutcome:
    """Provider result for one token of a multicast send."""

    token: str
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class MulticastResult:
    """Per-token results of one multicast send, in batch order."""

    outcomes: tuple[TokenOutcome, ...] = ()

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failure_count(self) -> int:
        return len(self.outcomes) - self.success_count


@dataclass(frozen=True)
class FanOutResult:
    """Aggregate over all batches of one job."""

    total_tokens: int = 0
    success_count: int = 0
    failure_count: int = 0
    batches: int = 0
    invalid_tokens: tuple[str, ...] = field(default_factory=tuple)

    @property
    def accounted(self) -> int:
        return self.success_count + self.failure_count


def chunk_tokens(tokens: list[str], size: int) -> list[list[str]]:
    """Split tokens into consecutive batches of at most size, preserving order."""
    if size < 1:
        raise ValueError("batch size must be positive")
    return [tokens[i:i + size] for i in range(0, len(tokens), size)]


def fold_batch_response(
    result: FanOutResult, batch: list[str], response: MulticastResult
) -> FanOutResult:
    """Fold one successful provider call into the aggregate.

    Outcomes are matched to batch tokens by position. A token without an
    outcome counts as failed so every token is accounted for exactly once.
    """
    successes = 0
    invalid: list[str] = []
    for idx, token in enumerate(batch):
        outcome = response.outcomes[idx] if idx < len(response.outcomes) else None
        if outcome is None:
            continue
        if outcome.success:
            successes += 1
        else:
            invalid.append(token)
    return replace(
        result,
        success_count=result.success_count + successes,
        failure_count=result.failure_count + (len(batch) - successes),
        batches=result.batches + 1,
        invalid_tokens=result.invalid_tokens + tuple(invalid),
    )


def fold_batch_error(result: FanOutResult, batch: list[str]) -> FanOutResult:
    """Fold a provider call that raised: the whole batch failed, nothing is pruned."""
    return replace(
        result,
        failure_count=result.failure_count + len(batch),
        batches=result.batches + 1,
    )
