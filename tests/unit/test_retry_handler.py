"""
Unit tests for the rate limit retry policy.
"""

from custom_workflow.engine.retry_handler import RetryHandler, parse_retry_after


def test_exponential_backoff():
    """Delays double per attempt when no Retry-After is given"""
    handler = RetryHandler()

    assert handler.should_retry(0) == (True, 1)
    assert handler.should_retry(1) == (True, 2)
    assert handler.should_retry(2) == (True, 4)


def test_stops_after_max_attempts():
    handler = RetryHandler(max_attempts=3)

    assert handler.should_retry(3) == (False, None)


def test_honors_retry_after_header():
    handler = RetryHandler()

    assert handler.should_retry(0, "7") == (True, 7)


def test_retry_after_capped_at_max_delay():
    handler = RetryHandler(max_delay=60)

    assert handler.should_retry(0, "600") == (True, 60)


def test_backoff_capped_at_max_delay():
    handler = RetryHandler(max_attempts=10, initial_delay=1, max_delay=5)

    assert handler.should_retry(6) == (True, 5)


def test_parse_retry_after():
    assert parse_retry_after("12") == 12
    assert parse_retry_after(" 3 ") == 3
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") is None
    assert parse_retry_after(None) is None
