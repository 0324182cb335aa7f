"""Classification of activity events into report sections."""

import logging
from collections.abc import Iterable

from .models import (
    ActivityEvent,
    CommitCommentEvent,
    CreateEvent,
    EventSets,
    IssueCommentEvent,
    IssuesEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PushEvent,
    UnknownEvent,
)

logger = logging.getLogger(__name__)

WORK_IN_PROGRESS_MARKER = "WIP"


def classify_events(events: Iterable[ActivityEvent], username: str) -> EventSets:
    """Sort events into report sections for the tracked user.

    Comments and reviews on pull requests authored by ``username`` count as
    their own work under review; on anyone else's they count as reviews.
    The result has not been reconciled, see :func:`reconcile`.

    Args:
        events: Decoded events, in any order
        username: Login of the tracked user

    Returns:
        EventSets with every classified title added
    """
    sets = EventSets()
    for event in events:
        _classify_event(sets, event, username)
    return sets


def _classify_event(sets: EventSets, event: ActivityEvent, username: str) -> None:
    if isinstance(event, CommitCommentEvent):
        logger.debug("Skipping commit comment event")

    elif isinstance(event, (CreateEvent, PushEvent)):
        pass

    elif isinstance(event, IssueCommentEvent):
        issue = event.issue
        if not issue.is_pull_request:
            sets.issues.add(issue.key)
        elif issue.author == username:
            sets.under_review.add(issue.key)
        else:
            sets.reviewed.add(issue.key)

    elif isinstance(event, IssuesEvent):
        issue = event.issue
        if issue.is_pull_request:
            sets.reviewed.add(issue.key)
        else:
            sets.issues.add(issue.key)
            logger.debug(f"Added issue event {issue.key} ({event.action})")

    elif isinstance(event, PullRequestEvent):
        _classify_pull_request_event(sets, event)

    elif isinstance(event, PullRequestReviewCommentEvent):
        pull_request = event.pull_request
        if pull_request.author == username:
            sets.under_review.add(pull_request.key)
        else:
            sets.reviewed.add(pull_request.key)

    else:
        logger.warning(f"Skipping unhandled event type: {_event_type(event)}")


def _classify_pull_request_event(sets: EventSets, event: PullRequestEvent) -> None:
    pull_request = event.pull_request
    action = event.action

    if action == "opened":
        if WORK_IN_PROGRESS_MARKER in pull_request.title:
            sets.in_progress.add(pull_request.key)
        else:
            sets.under_review.add(pull_request.key)
    elif action in ("edited", "reopened"):
        sets.in_progress.add(pull_request.key)
    elif action == "closed":
        logger.debug(f"Pull request closed: {pull_request}")
        if pull_request.merged:
            sets.merged.add(pull_request.key)
        else:
            sets.abandoned.add(pull_request.key)
    else:
        logger.warning(f"Unknown pull request action: {action}")


def _event_type(event: ActivityEvent) -> str:
    if isinstance(event, UnknownEvent):
        return event.event_type
    return type(event).__name__


def reconcile(sets: EventSets) -> EventSets:
    """Enforce that terminal states win over transitional ones."""
    return sets.reconcile()


def build_event_sets(events: Iterable[ActivityEvent], username: str) -> EventSets:
    """Classify events and reconcile the resulting sections."""
    return reconcile(classify_events(events, username))
