import sqlite3

import pytest

from services.usage_service import UsageService


@pytest.mark.parametrize("prompt, response, expected", [
    ("", "", 0),
    ("abcd", "", 1),
    ("abcde", "", 2),
    ("a" * 400, "b" * 100, 125),
    (None, "abc", 1),
])
def test_estimate_tokens_rounds_up(prompt, response, expected):
    """Given prompt and response text, the estimate should be ceil(total chars / 4)."""
    assert UsageService.estimate_tokens(prompt, response) == expected


def test_record_usage_increments_caller_totals(usage_store):
    """Given an authenticated caller, one request and the estimated tokens should be added."""
    UsageService.record_usage("user-1", "p" * 40, "r" * 20, optimizer_id="linkedin", optimizer_name="LinkedIn")
    totals = UsageService.record_usage("user-1", "p" * 4, "")

    assert totals.total_tokens == 16
    assert totals.total_requests == 2


def test_record_usage_without_caller_is_noop(usage_store):
    """Given no caller id, nothing should be written."""
    assert UsageService.record_usage(None, "prompt", "response") is None
    assert UsageService.record_usage("", "prompt", "response") is None
    assert usage_store.get_ranking() == []


def test_record_usage_swallows_store_failures(usage_store, monkeypatch):
    """Given a failing store, the error should be logged and not raised."""
    def broken_increment(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(usage_store, "increment_usage", broken_increment)

    assert UsageService.record_usage("user-1", "prompt", "response") is None


def test_record_usage_logs_optimizer(usage_store):
    """The recorded request should be attributed to the optimizer in reports."""
    UsageService.record_usage("user-1", "x" * 8, "", optimizer_id="linkedin", optimizer_name="LinkedIn")

    _, by_optimizer = usage_store.get_report(0, 1e12)

    assert by_optimizer == [{"id": "linkedin", "name": "LinkedIn", "totalTokens": 2, "totalRequests": 1}]
