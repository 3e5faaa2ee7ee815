from __future__ import annotations

import pytest

from rag_providers.base.errors import AuthenticationError, ErrorCode, ProviderResponseError, RateLimitError
from rag_providers.base.resilience import RetryConfig, call_with_retry, retry


def _config(sleeps, **kw):
    return RetryConfig(sleep=sleeps.append, **kw)


def test_retries_transient_errors_then_succeeds():
    sleeps = []
    attempts = iter(
        [
            ProviderResponseError(message="busy", provider="p", code=ErrorCode.UNAVAILABLE),
            ProviderResponseError(message="busy", provider="p", code=ErrorCode.TRANSIENT),
            "done",
        ]
    )

    def call():
        value = next(attempts)
        if isinstance(value, Exception):
            raise value
        return value

    assert call_with_retry(call, _config(sleeps)) == "done"  # nosec B101 - pytest assertion
    assert sleeps == [1.0, 2.0]  # nosec B101 - pytest assertion


def test_non_retryable_error_raises_immediately():
    sleeps = []

    def call():
        raise AuthenticationError(message="bad key", provider="p")

    with pytest.raises(AuthenticationError):
        call_with_retry(call, _config(sleeps))
    assert sleeps == []  # nosec B101 - pytest assertion


def test_retry_after_overrides_schedule_and_is_capped():
    sleeps = []
    calls = []

    @retry(_config(sleeps, max_attempts=3, max_delay=10.0))
    def call():
        calls.append(1)
        raise RateLimitError(message="slow", provider="p", retry_after=30.0)

    with pytest.raises(RateLimitError):
        call()
    assert len(calls) == 3  # nosec B101 - pytest assertion
    assert sleeps == [10.0, 10.0]  # nosec B101 - pytest assertion


def test_attempts_are_logged(log_events):
    sleeps = []

    def call():
        raise ProviderResponseError(message="t", provider="p", code=ErrorCode.TIMEOUT)

    with pytest.raises(ProviderResponseError):
        call_with_retry(call, _config(sleeps, max_attempts=2))
    attempts = [e for e in log_events if e.get("event") == "retry.attempt"]
    assert [e["attempt"] for e in attempts] == [1, 2]  # nosec B101 - pytest assertion
    assert attempts[0]["error_code"] == "timeout"  # nosec B101 - pytest assertion
