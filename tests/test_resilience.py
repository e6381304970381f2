import pytest

from healing_guide.config.settings import CHAT_RETRY, DOCUMENT_RETRY, SEARCH_RETRY
from healing_guide.core.exceptions import ProviderConfigError, ProviderTimeoutError
from healing_guide.core.interfaces import ResilienceManager
from healing_guide.core.services.resilience import SimpleResilienceManager, with_retry


class Flaky:
    def __init__(self, failures, result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


async def test_two_failures_then_success_uses_backoff(sleeper):
    op = Flaky([ProviderTimeoutError("slow"), ProviderTimeoutError("slow")], result="third")

    result = await with_retry(op, 2, 2.0, 2.0, sleep=sleeper)

    assert result == "third"
    assert op.calls == 3
    assert sleeper.delays == [2.0, 4.0]


async def test_exhausted_budget_raises_last_error(sleeper):
    op = Flaky([ProviderTimeoutError("1"), ProviderTimeoutError("2"), ProviderTimeoutError("3")])

    with pytest.raises(ProviderTimeoutError, match="3"):
        await with_retry(op, 2, 2.0, 2.0, sleep=sleeper)

    assert op.calls == 3
    assert sleeper.delays == [2.0, 4.0]


async def test_config_error_short_circuits(sleeper):
    op = Flaky([ProviderConfigError("no key")])

    with pytest.raises(ProviderConfigError):
        await with_retry(op, 5, 1.0, 2.0, sleep=sleeper)

    assert op.calls == 1
    assert sleeper.delays == []


async def test_zero_retries_means_single_attempt(sleeper):
    op = Flaky([ValueError("boom")])
    with pytest.raises(ValueError):
        await with_retry(op, 0, 1.0, 2.0, sleep=sleeper)
    assert op.calls == 1


async def test_manager_passes_arguments_and_policy(sleeper):
    manager = SimpleResilienceManager(sleep=sleeper)
    seen = []

    async def echo(a, b=None):
        seen.append((a, b))
        if len(seen) == 1:
            raise ProviderTimeoutError("once")
        return a + b

    assert await manager.execute_with_policy(echo, CHAT_RETRY, 1, b=2) == 3
    assert seen == [(1, 2), (1, 2)]
    assert sleeper.delays == [1.0]


def test_call_site_budgets():
    assert (CHAT_RETRY.max_retries, CHAT_RETRY.initial_delay) == (1, 1.0)
    assert (DOCUMENT_RETRY.max_retries, DOCUMENT_RETRY.initial_delay, DOCUMENT_RETRY.backoff_factor) == (2, 2.0, 2.0)
    assert (SEARCH_RETRY.max_retries, SEARCH_RETRY.initial_delay, SEARCH_RETRY.backoff_factor) == (2, 2.0, 2.0)


def test_manager_satisfies_protocol():
    manager = SimpleResilienceManager()
    assert isinstance(manager, ResilienceManager)
    assert callable(manager.execute_with_policy)
