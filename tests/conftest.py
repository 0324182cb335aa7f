"""Shared fixtures for git-weekly-report tests."""

from datetime import datetime, timezone

import pytest

USER = "harwayne"


def raw_event(event_type: str, created_at: str = "2024-03-06T12:00:00Z", **payload) -> dict:
    """Build a GitHub Events API record."""
    return {
        "id": "1",
        "type": event_type,
        "created_at": created_at,
        "payload": payload,
    }


def raw_issue(title: str, url: str, author: str = USER, pull_request: bool = False) -> dict:
    issue = {"title": title, "html_url": url, "user": {"login": author}}
    if pull_request:
        issue["pull_request"] = {"html_url": url}
    return issue


def raw_pull_request(title: str, url: str, author: str = USER, merged: bool = False) -> dict:
    return {"title": title, "html_url": url, "user": {"login": author}, "merged": merged}


@pytest.fixture
def week_start():
    return datetime(2024, 3, 4, tzinfo=timezone.utc)
