"""
Unit tests for the retry decorator.
"""

import pytest

from utils.retry import retry_on_exception


class Flaky:
    def __init__(self, failures, error=ConnectionError):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error(f"failure {self.calls}")
        return "ok"


class TestRetryOnException:

    def test_retry_when_fails_then_succeeds_returns_result(self):
        sleeps = []
        flaky = Flaky(failures=2)
        wrapped = retry_on_exception((ConnectionError,), max_attempts=3, jitter=0, sleep=sleeps.append)(flaky)

        assert wrapped() == "ok"
        assert flaky.calls == 3
        assert sleeps == [1.0, 2.0]

    def test_retry_when_attempts_exhausted_then_reraises_last_error(self):
        flaky = Flaky(failures=5)
        wrapped = retry_on_exception((ConnectionError,), max_attempts=2, sleep=lambda _: None)(flaky)

        with pytest.raises(ConnectionError, match="failure 2"):
            wrapped()
        assert flaky.calls == 2

    def test_retry_when_predicate_rejects_then_raises_immediately(self):
        flaky = Flaky(failures=1)
        wrapped = retry_on_exception(
            (ConnectionError,), max_attempts=3, should_retry=lambda e: False, sleep=lambda _: None
        )(flaky)

        with pytest.raises(ConnectionError):
            wrapped()
        assert flaky.calls == 1

    def test_retry_when_exception_not_listed_then_not_retried(self):
        flaky = Flaky(failures=1, error=KeyError)
        wrapped = retry_on_exception((ConnectionError,), max_attempts=3, sleep=lambda _: None)(flaky)

        with pytest.raises(KeyError):
            wrapped()
        assert flaky.calls == 1
