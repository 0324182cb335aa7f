"""Decoding and time filtering of GitHub activity events."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from operator import attrgetter

from .errors import EventDecodeError
from .models import (
    ActivityEvent,
    CommitCommentEvent,
    CreateEvent,
    IssueCommentEvent,
    IssueRef,
    IssuesEvent,
    PullRequestEvent,
    PullRequestRef,
    PullRequestReviewCommentEvent,
    PushEvent,
    UnknownEvent,
)

logger = logging.getLogger(__name__)


def _parse_timestamp(value) -> datetime:
    if not isinstance(value, str):
        raise EventDecodeError(f"Missing or invalid created_at: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise EventDecodeError(f"Invalid created_at {value!r}: {e}") from e
    if parsed.tzinfo is None:
        raise EventDecodeError(f"created_at {value!r} has no timezone")
    return parsed


def event_created_at(raw: dict) -> datetime:
    """Return the creation time of a raw event without decoding its payload.

    Raises:
        EventDecodeError: If the record is not an object or its timestamp is invalid
    """
    if not isinstance(raw, dict):
        raise EventDecodeError(f"Event is not an object: {raw!r}")
    return _parse_timestamp(raw.get("created_at"))


def _login(data: dict) -> str:
    user = data.get("user") or {}
    return user.get("login") or ""


def _require_object(payload: dict, key: str, event_type: str) -> dict:
    value = payload.get(key)
    if not isinstance(value, dict):
        raise EventDecodeError(f"{event_type} payload has no '{key}' object")
    return value


def _parse_issue(payload: dict, event_type: str) -> IssueRef:
    issue = _require_object(payload, "issue", event_type)
    return IssueRef(
        title=issue.get("title") or "",
        html_url=issue.get("html_url") or "",
        author=_login(issue),
        is_pull_request=issue.get("pull_request") is not None,
    )


def _parse_pull_request(payload: dict, event_type: str) -> PullRequestRef:
    pull_request = _require_object(payload, "pull_request", event_type)
    return PullRequestRef(
        title=pull_request.get("title") or "",
        html_url=pull_request.get("html_url") or "",
        author=_login(pull_request),
        merged=bool(pull_request.get("merged")),
    )


def parse_event(raw: dict) -> ActivityEvent:
    """Decode one GitHub Events API record into an ActivityEvent.

    Args:
        raw: Event object as returned by the Events API

    Returns:
        The typed event; unrecognized event types become UnknownEvent

    Raises:
        EventDecodeError: If the record or its payload is malformed
    """
    if not isinstance(raw, dict):
        raise EventDecodeError(f"Event is not an object: {raw!r}")

    event_type = raw.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise EventDecodeError(f"Event {raw.get('id')!r} has no type")

    created_at = _parse_timestamp(raw.get("created_at"))

    payload = raw.get("payload")
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise EventDecodeError(f"{event_type} {raw.get('id')!r} has a non-object payload")

    if event_type == "CommitCommentEvent":
        return CommitCommentEvent(created_at=created_at)
    if event_type == "CreateEvent":
        return CreateEvent(created_at=created_at, ref_type=payload.get("ref_type") or "")
    if event_type == "IssueCommentEvent":
        return IssueCommentEvent(
            created_at=created_at, issue=_parse_issue(payload, event_type)
        )
    if event_type == "IssuesEvent":
        return IssuesEvent(
            created_at=created_at,
            action=payload.get("action") or "",
            issue=_parse_issue(payload, event_type),
        )
    if event_type == "PullRequestEvent":
        return PullRequestEvent(
            created_at=created_at,
            action=payload.get("action") or "",
            pull_request=_parse_pull_request(payload, event_type),
        )
    if event_type == "PullRequestReviewCommentEvent":
        return PullRequestReviewCommentEvent(
            created_at=created_at,
            pull_request=_parse_pull_request(payload, event_type),
        )
    if event_type == "PushEvent":
        return PushEvent(created_at=created_at)

    return UnknownEvent(created_at=created_at, event_type=event_type)


def parse_events(raw_events: Iterable[dict]) -> list[ActivityEvent]:
    """Decode a sequence of raw events, stopping at the first bad one.

    Raises:
        EventDecodeError: If any event cannot be decoded
    """
    events = [parse_event(raw) for raw in raw_events]
    logger.debug(f"Decoded {len(events)} events")
    return events


def filter_events_for_window(
    events: Iterable[ActivityEvent],
    start: datetime,
    duration: timedelta,
    created_at: Callable | None = None,
) -> list[ActivityEvent]:
    """Keep events created strictly between start and start + duration.

    Args:
        events: Events in fetch order
        start: Exclusive lower bound
        duration: Window length; start + duration is the exclusive upper bound
        created_at: Returns the creation time of an event; defaults to its
            created_at attribute

    Returns:
        Matching events in their original order
    """
    end = start + duration
    get_created_at = created_at or attrgetter("created_at")
    return [e for e in events if start < get_created_at(e) < end]


def filter_raw_events_for_window(
    raw_events: Iterable[dict], start: datetime, duration: timedelta
) -> list[dict]:
    """Keep raw events created strictly inside the window.

    Only the timestamp is read, so payloads of events outside the window are
    never decoded.

    Raises:
        EventDecodeError: If an event's created_at cannot be parsed
    """
    return filter_events_for_window(
        raw_events, start, duration, created_at=event_created_at
    )
