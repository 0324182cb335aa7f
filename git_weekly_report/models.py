"""Data models for activity events and report sections."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

WEEK = timedelta(days=7)


def format_title(text: str, url: str) -> str:
    """Build the Markdown link used to identify an issue or pull request."""
    return f"[{text}]({url})"


@dataclass(frozen=True)
class IssueRef:
    """The parts of an issue payload used for classification."""

    title: str
    html_url: str
    author: str = ""
    is_pull_request: bool = False

    @property
    def key(self) -> str:
        return format_title(self.title, self.html_url)


@dataclass(frozen=True)
class PullRequestRef:
    """The parts of a pull request payload used for classification."""

    title: str
    html_url: str
    author: str = ""
    merged: bool = False

    @property
    def key(self) -> str:
        return format_title(self.title, self.html_url)


@dataclass(frozen=True)
class ActivityEvent:
    """Base class for a single entry of a user's activity stream."""

    created_at: datetime


@dataclass(frozen=True)
class CommitCommentEvent(ActivityEvent):
    pass


@dataclass(frozen=True)
class CreateEvent(ActivityEvent):
    ref_type: str = ""


@dataclass(frozen=True)
class IssueCommentEvent(ActivityEvent):
    issue: IssueRef


@dataclass(frozen=True)
class IssuesEvent(ActivityEvent):
    action: str
    issue: IssueRef


@dataclass(frozen=True)
class PullRequestEvent(ActivityEvent):
    action: str
    pull_request: PullRequestRef


@dataclass(frozen=True)
class PullRequestReviewCommentEvent(ActivityEvent):
    pull_request: PullRequestRef


@dataclass(frozen=True)
class PushEvent(ActivityEvent):
    pass


@dataclass(frozen=True)
class UnknownEvent(ActivityEvent):
    """An event whose type is not classified."""

    event_type: str = ""


@dataclass
class ReportWindow:
    """Time range covered by a report."""

    start: datetime
    duration: timedelta = WEEK

    @property
    def end(self) -> datetime:
        return self.start + self.duration


@dataclass
class EventSets:
    """Issue and pull request titles grouped by report section."""

    merged: set[str] = field(default_factory=set)
    abandoned: set[str] = field(default_factory=set)
    under_review: set[str] = field(default_factory=set)
    in_progress: set[str] = field(default_factory=set)
    reviewed: set[str] = field(default_factory=set)
    issues: set[str] = field(default_factory=set)

    def reconcile(self) -> "EventSets":
        """Remove titles from sections that a later state supersedes.

        Merged and abandoned pull requests are no longer under review or in
        progress, and anything under review is no longer in progress. The
        removals run in that order so each step sees the previous one.

        Returns:
            This object, modified in place
        """
        for title in self.merged:
            self.under_review.discard(title)
            self.in_progress.discard(title)
        for title in self.abandoned:
            self.under_review.discard(title)
            self.in_progress.discard(title)
        for title in self.under_review:
            self.in_progress.discard(title)
        return self

    def sections(self) -> list[tuple[str, set[str]]]:
        """Return (heading, titles) pairs in report order."""
        return [
            ("Merged", self.merged),
            ("Abandoned", self.abandoned),
            ("Under Review", self.under_review),
            ("In Progress", self.in_progress),
            ("Reviewed", self.reviewed),
            ("Issues", self.issues),
        ]
