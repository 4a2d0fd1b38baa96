"""YouTrack Cloud and YouTrack Server adapter.

The adapter uses the YouTrack REST API to extract ticket information
from issues.

Supported page URLs:
- Issue page: .../issue/<ISSUE-KEY>
- Issue page (with slug): .../issue/<ISSUE-KEY>/<SLUG>
- Issue detail view on agile board: .../agiles/<BOARD-ID>/<SPRINT>?issue=<ISSUE-KEY>

The instance may live under any host and path prefix; everything before
``/issue/`` or ``/agiles/`` is treated as the instance base URL.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict
from urllib.parse import parse_qs, quote, urlsplit, urlunsplit

from ticketeer.integrations.adapters.base import TicketData, Tracker, TrackerAdapter
from ticketeer.integrations.adapters.dom import PageDocument, has
from ticketeer.integrations.adapters.registry import AdapterRegistry
from ticketeer.integrations.client import RequestOptions, create_client
from ticketeer.integrations.exceptions import TrackerResponseParseError

logger = logging.getLogger(__name__)

# Custom element rendered by every YouTrack page
PAGE_MARKER = "yt-page-loader"

# Issue page with optional human-readable slug: <base>/issue/TT-123[/slug]
_ISSUE_PAGE_PATTERN = re.compile(r"(?P<base>.+)/issue/(?P<id>[A-Z]+-[0-9]+)(?P<slug>/[^/]+)?$")

# Agile board with the issue in a side panel: <base>/agiles/1-23/4-56?issue=TT-123
_AGILE_BOARD_PATTERN = re.compile(
    r"(?P<base>.+)/agiles/(?P<board>[0-9]+-[0-9]+)/(?P<sprint>[0-9]+-[0-9]+|current)$"
)

# Field selection for the issue read; only what normalize() consumes
ISSUE_FIELDS = ",".join(
    [
        "idReadable",
        "summary",
        "description",
        "fields(name,value(name))",
    ]
)

# Name of the custom field holding the issue classification
TYPE_FIELD_NAME = "Type"


@dataclass(frozen=True)
class YouTrackMatch:
    """Identifying context derived from a YouTrack page URL.

    Attributes:
        base: Instance root URL (scheme, host and optional path prefix)
        id: Issue key (e.g., "TT-123")
    """

    base: str
    id: str


class YouTrackFieldValue(TypedDict):
    name: str


class YouTrackIssueField(TypedDict):
    name: str
    value: YouTrackFieldValue | None


class YouTrackIssue(TypedDict):
    """Issue payload returned for the ISSUE_FIELDS selection."""

    idReadable: str
    summary: NotRequired[str | None]
    description: NotRequired[str | None]
    fields: NotRequired[list[YouTrackIssueField] | None]


def normalize_url(url: str) -> str:
    """Drop query string and fragment so only the path shape is matched."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def analyze(url: str) -> YouTrackMatch | None:
    """Derive instance base and issue key from a page URL.

    The issue page pattern is tried first; the agile board pattern is a
    fallback and takes the key from the original URL's ``issue`` query
    parameter.

    Args:
        url: Absolute page URL

    Returns:
        YouTrackMatch, or None if the URL is not a recognized issue view
    """
    normalized = normalize_url(url)

    match = _ISSUE_PAGE_PATTERN.match(normalized)
    if match and match.group("base") and match.group("id"):
        return YouTrackMatch(base=match.group("base"), id=match.group("id"))

    match = _AGILE_BOARD_PATTERN.match(normalized)
    if match and match.group("base"):
        issue_ids = parse_qs(urlsplit(url).query).get("issue")
        if issue_ids and issue_ids[0]:
            return YouTrackMatch(base=match.group("base"), id=issue_ids[0])

    return None


def find_field(
    fields: Sequence[YouTrackIssueField] | None, name: str
) -> YouTrackIssueField | None:
    """Return the first issue field called exactly ``name``, or None."""
    for field in fields or ():
        if isinstance(field, dict) and field.get("name") == name:
            return field
    return None


def normalize(issue: YouTrackIssue, base: str) -> TicketData:
    """Convert a YouTrack issue payload to TicketData.

    Handles edge cases gracefully:
    - Missing or empty summary (title falls back to the issue key)
    - Missing, null or empty description (key omitted)
    - Missing fields list, null field values, duplicate "Type" fields

    Args:
        issue: Raw issue as returned by the REST API
        base: Instance root URL used to build the canonical issue link

    Returns:
        Normalized ticket
    """
    ticket_id = issue["idReadable"]

    ticket: TicketData = {
        "id": ticket_id,
        "title": issue.get("summary") or ticket_id,
        "url": f"{base}/issue/{ticket_id}",
    }

    description = issue.get("description")
    if description:
        ticket["description"] = description

    type_field = find_field(issue.get("fields"), TYPE_FIELD_NAME)
    value = type_field.get("value") if type_field else None
    type_name = value.get("name") if isinstance(value, dict) else None
    if type_name:
        ticket["type"] = type_name.lower()

    return ticket


@AdapterRegistry.register
class YouTrackAdapter(TrackerAdapter):
    """YouTrack tracker adapter.

    Recognizes YouTrack pages by their page loader element, derives the
    issue from the URL and reads it through the REST API.

    Class Attributes:
        TRACKER: Tracker.YOUTRACK for registry registration
    """

    TRACKER = Tracker.YOUTRACK

    def __init__(
        self,
        timeout_seconds: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize YouTrackAdapter.

        Args:
            timeout_seconds: Optional API timeout passed to the client
            headers: Optional extra request headers passed to the client
        """
        self._client_options: dict[str, Any] = {}
        if timeout_seconds is not None:
            self._client_options["timeout_seconds"] = timeout_seconds
        if headers:
            self._client_options["headers"] = dict(headers)

    @property
    def tracker(self) -> Tracker:
        """Return the tracker this adapter handles."""
        return Tracker.YOUTRACK

    @property
    def name(self) -> str:
        """Human-readable adapter name."""
        return "YouTrack"

    def is_applicable(self, document: PageDocument) -> bool:
        """Check for the YouTrack page loader element."""
        return has(PAGE_MARKER, document)

    async def scan(self, url: str, document: PageDocument) -> list[TicketData]:
        """Extract the YouTrack issue shown on the page.

        Returns:
            A single ticket, or an empty list when the page is not a
            YouTrack issue view

        Raises:
            TrackerError: If the issue cannot be read from the API
            TrackerResponseParseError: If the API answers with something
                other than an issue object
        """
        if not self.is_applicable(document):
            return []  # document is not a YouTrack page

        info = analyze(url)
        if info is None:
            logger.debug("YouTrack page not recognized as an issue view: %s", url)
            return []

        logger.debug("Recognized YouTrack issue %s at %s", info.id, info.base)

        yt = create_client(f"{info.base}/api", **self._client_options)
        options: RequestOptions = {"search_params": {"fields": ISSUE_FIELDS}}
        issue = await yt.get(f"issues/{quote(info.id, safe='')}", options)
        if not isinstance(issue, dict) or not issue.get("idReadable"):
            raise TrackerResponseParseError(
                f"Unexpected issue payload for {info.id}: {type(issue).__name__}",
                tracker=self.name,
            )

        return [normalize(issue, info.base)]


async def scan(url: str, document: PageDocument) -> list[TicketData]:
    """Scan a page with a default-configured YouTrackAdapter."""
    return await YouTrackAdapter().scan(url, document)


__all__ = [
    "ISSUE_FIELDS",
    "PAGE_MARKER",
    "YouTrackAdapter",
    "YouTrackIssue",
    "YouTrackIssueField",
    "YouTrackMatch",
    "analyze",
    "find_field",
    "normalize",
    "normalize_url",
    "scan",
]
