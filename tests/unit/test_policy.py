r"""Unit tests for retry policy and retry decider."""

from __future__ import annotations

import dataclasses

import pytest
from coola.equality import objects_are_equal

from superretry.config import DEFAULT_INITIAL_DELAY_MS, DEFAULT_MAX_ATTEMPTS, DEFAULT_STRATEGY
from superretry.exceptions import ConfigurationError, UnknownStrategyError
from superretry.policy import RetryDecider, RetryDecision, RetryPolicy


class NetworkError(Exception):
    pass


class ValidationError(Exception):
    pass


def only_network(error: Exception) -> bool:
    return isinstance(error, NetworkError)


################################
#     Tests for RetryPolicy    #
################################


def test_retry_policy_defaults() -> None:
    policy = RetryPolicy()
    assert policy.strategy == DEFAULT_STRATEGY
    assert policy.max_attempts == DEFAULT_MAX_ATTEMPTS
    assert policy.initial_delay_ms == DEFAULT_INITIAL_DELAY_MS
    assert policy.retry_if is None
    assert policy.max_delay_ms is None
    assert policy.jitter_factor == 0.0


def test_retry_policy_is_immutable() -> None:
    policy = RetryPolicy()
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.max_attempts = 10


def test_retry_policy_validation() -> None:
    with pytest.raises(ConfigurationError, match=r"max_attempts must be an integer >= 1"):
        RetryPolicy(max_attempts=0)


def test_retry_policy_unknown_strategy_is_not_checked_at_construction() -> None:
    assert RetryPolicy(strategy="not-registered-yet").strategy == "not-registered-yet"


def test_retry_policy_merge() -> None:
    policy = RetryPolicy(strategy="fixed", max_attempts=3, initial_delay_ms=500)
    merged = policy.merge(max_attempts=5, initial_delay_ms=None)
    assert merged.max_attempts == 5
    assert merged.initial_delay_ms == 500
    assert merged.strategy == "fixed"
    assert policy.max_attempts == 3


def test_retry_policy_merge_without_overrides_returns_same_policy() -> None:
    policy = RetryPolicy()
    assert policy.merge() is policy
    assert policy.merge(max_attempts=None) is policy


def test_retry_policy_merge_validates() -> None:
    with pytest.raises(ConfigurationError, match=r"initial_delay_ms"):
        RetryPolicy().merge(initial_delay_ms=-1)


def test_retry_policy_merge_unknown_option() -> None:
    with pytest.raises(ConfigurationError, match=r"unknown retry policy option\(s\): retries"):
        RetryPolicy().merge(retries=3)


def test_retry_policy_to_dict() -> None:
    policy = RetryPolicy(
        strategy="fixed",
        max_attempts=4,
        initial_delay_ms=250,
        retry_if=only_network,
        max_delay_ms=1000,
        jitter_factor=0.1,
    )
    assert objects_are_equal(
        policy.to_dict(),
        {
            "strategy": "fixed",
            "max_attempts": 4,
            "initial_delay_ms": 250,
            "retry_if": only_network,
            "max_delay_ms": 1000,
            "jitter_factor": 0.1,
        },
    )


################################
#     Tests for RetryDecider   #
################################


def test_retry_decider_retries_before_limit() -> None:
    decider = RetryDecider(RetryPolicy(max_attempts=3))
    assert decider.decide(RuntimeError("x"), attempt=1) is RetryDecision.RETRY
    assert decider.decide(RuntimeError("x"), attempt=2) is RetryDecision.RETRY


def test_retry_decider_exhausted_at_limit() -> None:
    decider = RetryDecider(RetryPolicy(max_attempts=3))
    assert decider.decide(RuntimeError("x"), attempt=3) is RetryDecision.EXHAUSTED


def test_retry_decider_single_attempt_never_retries() -> None:
    decider = RetryDecider(RetryPolicy(max_attempts=1, retry_if=lambda error: True))  # noqa: ARG005
    assert decider.decide(NetworkError(), attempt=1) is RetryDecision.EXHAUSTED


def test_retry_decider_predicate_rejects() -> None:
    decider = RetryDecider(RetryPolicy(max_attempts=3, retry_if=only_network))
    assert decider.decide(NetworkError(), attempt=1) is RetryDecision.RETRY
    assert decider.decide(ValidationError(), attempt=1) is RetryDecision.REJECTED


def test_retry_decider_limit_checked_before_predicate() -> None:
    calls = []

    def predicate(error: Exception) -> bool:
        calls.append(error)
        return False

    decider = RetryDecider(RetryPolicy(max_attempts=2, retry_if=predicate))
    assert decider.decide(RuntimeError(), attempt=2) is RetryDecision.EXHAUSTED
    assert calls == []


@pytest.mark.parametrize(
    "error",
    [ConfigurationError("bad config"), UnknownStrategyError("missing")],
)
def test_retry_decider_never_retries_configuration_errors(error: Exception) -> None:
    decider = RetryDecider(RetryPolicy(max_attempts=5))
    assert decider.decide(error, attempt=1) is RetryDecision.REJECTED
