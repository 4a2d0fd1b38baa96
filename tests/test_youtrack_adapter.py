"""Tests for ticketeer.integrations.adapters.youtrack module.

Tests cover:
- URL analysis for issue pages, slugs and agile board views
- Normalization of issue payloads into TicketData
- scan() end to end with a mocked API client
- Page guard short-circuiting before any client is created
- Propagation of API failures
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bs4 import BeautifulSoup

from ticketeer.integrations.adapters.base import Tracker
from ticketeer.integrations.adapters.registry import AdapterRegistry
from ticketeer.integrations.adapters.youtrack import (
    ISSUE_FIELDS,
    YouTrackAdapter,
    YouTrackMatch,
    analyze,
    find_field,
    normalize,
    normalize_url,
    scan,
)
from ticketeer.integrations.exceptions import (
    TicketNotFoundError,
    TrackerConnectionError,
    TrackerResponseParseError,
)

BASE = "https://bitcrowd.youtrack.cloud"

YOUTRACK_HTML = "<html><body><yt-page-loader></yt-page-loader></body></html>"
OTHER_HTML = "<html><body><div id='app'></div></body></html>"

OPTIONS = {
    "search_params": {
        "fields": "idReadable,summary,description,fields(name,value(name))",
    },
}


@pytest.fixture
def api():
    """Mock ApiClient returned by create_client."""
    client = MagicMock()
    client.get = AsyncMock(return_value={})
    return client


@pytest.fixture
def mock_create_client(api):
    """Patch create_client at the adapter's import site."""
    with patch(
        "ticketeer.integrations.adapters.youtrack.create_client", return_value=api
    ) as mock:
        yield mock


@pytest.fixture
def doc():
    """Parsed YouTrack page."""
    return BeautifulSoup(YOUTRACK_HTML, "html.parser")


class TestNormalizeUrl:
    """Tests for normalize_url()."""

    def test_strips_query_and_fragment(self):
        assert normalize_url(f"{BASE}/issue/TT-1?tab=comments#focus") == f"{BASE}/issue/TT-1"

    def test_keeps_path_prefix(self):
        assert normalize_url("https://host/youtrack/issue/TT-1#x") == (
            "https://host/youtrack/issue/TT-1"
        )


class TestAnalyze:
    """Tests for analyze()."""

    def test_issue_page(self):
        assert analyze(f"{BASE}/issue/TT-0") == YouTrackMatch(base=BASE, id="TT-0")

    def test_issue_page_with_slug(self):
        assert analyze(f"{BASE}/issue/TT-1/Support-YouTrack") == YouTrackMatch(
            base=BASE, id="TT-1"
        )

    @pytest.mark.parametrize("slug", ["a", "Some-Title", "x%20y", "123"])
    def test_slug_does_not_affect_result(self, slug):
        assert analyze(f"{BASE}/issue/TT-1/{slug}") == analyze(f"{BASE}/issue/TT-1")

    def test_issue_page_ignores_query_and_fragment(self):
        assert analyze(f"{BASE}/issue/TT-7?tab=history#comment") == YouTrackMatch(
            base=BASE, id="TT-7"
        )

    def test_issue_page_under_path_prefix(self):
        assert analyze("https://example.com/youtrack/issue/ABC-12") == YouTrackMatch(
            base="https://example.com/youtrack", id="ABC-12"
        )

    def test_agile_board_current_sprint(self):
        assert analyze(f"{BASE}/agiles/1-234/current?issue=TT-2") == YouTrackMatch(
            base=BASE, id="TT-2"
        )

    def test_agile_board_sprint_id(self):
        assert analyze(f"{BASE}/agiles/1-234/5-678?issue=TT-3") == YouTrackMatch(
            base=BASE, id="TT-3"
        )

    def test_agile_board_takes_first_issue_param(self):
        match = analyze(f"{BASE}/agiles/1-234/current?issue=TT-2&issue=TT-9")
        assert match is not None
        assert match.id == "TT-2"

    def test_agile_board_without_issue_param(self):
        assert analyze(f"{BASE}/agiles/1-234/current") is None

    def test_agile_board_with_empty_issue_param(self):
        assert analyze(f"{BASE}/agiles/1-234/current?issue=") is None

    def test_agile_board_with_invalid_sprint(self):
        assert analyze(f"{BASE}/agiles/1-234/next?issue=TT-2") is None

    @pytest.mark.parametrize(
        "url",
        [
            f"{BASE}/",
            f"{BASE}/issues",
            f"{BASE}/issue/tt-1",
            f"{BASE}/issue/TT1",
            f"{BASE}/issue/TT-1/slug/extra",
            f"{BASE}/issue/TT-1/",
            f"{BASE}/dashboard?issue=TT-1",
            f"{BASE}/agiles/1-234?issue=TT-1",
            "https://github.com/owner/repo/issues/42",
        ],
    )
    def test_unrecognized_urls(self, url):
        assert analyze(url) is None


class TestFindField:
    """Tests for find_field()."""

    def test_returns_first_match(self):
        fields = [
            {"name": "Priority", "value": {"name": "Major"}},
            {"name": "Type", "value": {"name": "Bug"}},
            {"name": "Type", "value": {"name": "Task"}},
        ]
        assert find_field(fields, "Type") == {"name": "Type", "value": {"name": "Bug"}}

    def test_name_must_match_exactly(self):
        assert find_field([{"name": "type", "value": {"name": "Bug"}}], "Type") is None

    def test_handles_missing_fields(self):
        assert find_field(None, "Type") is None
        assert find_field([], "Type") is None


class TestNormalize:
    """Tests for normalize()."""

    def test_minimal_issue(self):
        ticket = normalize({"idReadable": "TT-0", "summary": "S"}, "https://h")
        assert ticket == {"id": "TT-0", "title": "S", "url": "https://h/issue/TT-0"}

    @pytest.mark.parametrize("summary", [None, ""])
    def test_title_falls_back_to_id(self, summary):
        ticket = normalize({"idReadable": "TT-1", "summary": summary}, BASE)
        assert ticket["title"] == "TT-1"

    def test_title_falls_back_to_id_when_summary_missing(self):
        assert normalize({"idReadable": "TT-1"}, BASE)["title"] == "TT-1"

    def test_description_included_when_present(self):
        ticket = normalize(
            {"idReadable": "TT-4", "summary": "S", "description": "Mark**down** description"},
            BASE,
        )
        assert ticket["description"] == "Mark**down** description"

    @pytest.mark.parametrize("description", [None, ""])
    def test_description_omitted_when_empty(self, description):
        ticket = normalize({"idReadable": "TT-4", "description": description}, BASE)
        assert "description" not in ticket

    def test_type_is_lower_cased(self):
        ticket = normalize(
            {"idReadable": "TT-5", "fields": [{"name": "Type", "value": {"name": "User Story"}}]},
            BASE,
        )
        assert ticket["type"] == "user story"

    def test_type_first_match_wins(self):
        ticket = normalize(
            {
                "idReadable": "TT-5",
                "fields": [
                    {"name": "Type", "value": {"name": "Bug"}},
                    {"name": "Type", "value": {"name": "Task"}},
                ],
            },
            BASE,
        )
        assert ticket["type"] == "bug"

    @pytest.mark.parametrize(
        "fields",
        [
            None,
            [],
            [{"name": "State", "value": {"name": "Open"}}],
            [{"name": "Type", "value": None}],
            [{"name": "Type", "value": {"name": ""}}],
        ],
    )
    def test_type_omitted_when_unavailable(self, fields):
        ticket = normalize({"idReadable": "TT-5", "fields": fields}, BASE)
        assert "type" not in ticket

    def test_never_emits_none(self):
        ticket = normalize(
            {"idReadable": "TT-6", "summary": None, "description": None, "fields": None}, BASE
        )
        assert None not in ticket.values()
        assert set(ticket) == {"id", "title", "url"}


class TestYouTrackAdapterProperties:
    """Tests for adapter properties and page guard."""

    def test_tracker_attribute(self):
        assert YouTrackAdapter.TRACKER == Tracker.YOUTRACK
        assert YouTrackAdapter().tracker == Tracker.YOUTRACK

    def test_name(self):
        assert YouTrackAdapter().name == "YouTrack"

    def test_registered_on_import(self):
        assert Tracker.YOUTRACK in AdapterRegistry.list_trackers()
        assert isinstance(AdapterRegistry.get_adapter(Tracker.YOUTRACK), YouTrackAdapter)

    def test_is_applicable_with_marker(self, doc):
        assert YouTrackAdapter().is_applicable(doc) is True

    def test_is_applicable_with_raw_html(self):
        assert YouTrackAdapter().is_applicable(YOUTRACK_HTML) is True

    def test_is_not_applicable_without_marker(self):
        assert YouTrackAdapter().is_applicable(OTHER_HTML) is False


class TestYouTrackAdapterScan:
    """Tests for YouTrackAdapter.scan()."""

    @pytest.mark.asyncio
    async def test_returns_empty_list_on_other_page_url(self, doc, api, mock_create_client):
        """Marker present, but URL is not an issue view."""
        result = await scan(f"{BASE}/", doc)

        assert result == []
        mock_create_client.assert_not_called()
        api.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_returns_empty_list_without_marker(self, api, mock_create_client):
        """Non-YouTrack page never reaches the API, even with an issue URL."""
        result = await scan(f"{BASE}/issue/TT-0", OTHER_HTML)

        assert result == []
        mock_create_client.assert_not_called()
        api.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_extracts_ticket_from_issue_page(self, doc, api, mock_create_client):
        api.get.return_value = {"idReadable": "TT-0", "summary": "Test issue page"}

        result = await scan(f"{BASE}/issue/TT-0", doc)

        mock_create_client.assert_called_once_with(f"{BASE}/api")
        api.get.assert_awaited_once_with("issues/TT-0", OPTIONS)
        assert result == [
            {"id": "TT-0", "title": "Test issue page", "url": f"{BASE}/issue/TT-0"},
        ]

    @pytest.mark.asyncio
    async def test_extracts_ticket_from_issue_page_with_slug(self, doc, api, mock_create_client):
        api.get.return_value = {"idReadable": "TT-1", "summary": "Test issue page with slug"}

        result = await scan(f"{BASE}/issue/TT-1/Support-YouTrack", doc)

        api.get.assert_awaited_once_with("issues/TT-1", OPTIONS)
        assert result == [
            {"id": "TT-1", "title": "Test issue page with slug", "url": f"{BASE}/issue/TT-1"},
        ]

    @pytest.mark.asyncio
    async def test_extracts_ticket_from_agile_board_current(self, doc, api, mock_create_client):
        api.get.return_value = {"idReadable": "TT-2", "summary": "Test agile board page"}

        result = await scan(f"{BASE}/agiles/1-234/current?issue=TT-2", doc)

        api.get.assert_awaited_once_with("issues/TT-2", OPTIONS)
        assert result == [
            {"id": "TT-2", "title": "Test agile board page", "url": f"{BASE}/issue/TT-2"},
        ]

    @pytest.mark.asyncio
    async def test_extracts_ticket_from_agile_board_sprint(self, doc, api, mock_create_client):
        api.get.return_value = {
            "idReadable": "TT-3",
            "summary": "Test agile board page with sprint ID",
        }

        result = await scan(f"{BASE}/agiles/1-234/5-678?issue=TT-3", doc)

        api.get.assert_awaited_once_with("issues/TT-3", OPTIONS)
        assert result == [
            {
                "id": "TT-3",
                "title": "Test agile board page with sprint ID",
                "url": f"{BASE}/issue/TT-3",
            },
        ]

    @pytest.mark.asyncio
    async def test_recognizes_description(self, doc, api, mock_create_client):
        api.get.return_value = {
            "idReadable": "TT-4",
            "summary": "Test description",
            "description": "Mark**down** description",
        }

        result = await scan(f"{BASE}/issue/TT-4", doc)

        assert result == [
            {
                "id": "TT-4",
                "title": "Test description",
                "description": "Mark**down** description",
                "url": f"{BASE}/issue/TT-4",
            },
        ]

    @pytest.mark.asyncio
    async def test_recognizes_issue_type(self, doc, api, mock_create_client):
        api.get.return_value = {
            "idReadable": "TT-5",
            "summary": "Test type",
            "fields": [{"name": "Type", "value": {"name": "Task"}}],
        }

        result = await scan(f"{BASE}/issue/TT-5", doc)

        assert result == [
            {
                "id": "TT-5",
                "title": "Test type",
                "type": "task",
                "url": f"{BASE}/issue/TT-5",
            },
        ]

    @pytest.mark.asyncio
    async def test_passes_client_options(self, doc, api, mock_create_client):
        api.get.return_value = {"idReadable": "TT-0"}
        adapter = YouTrackAdapter(timeout_seconds=5.0, headers={"Authorization": "Bearer x"})

        await adapter.scan(f"{BASE}/issue/TT-0", doc)

        mock_create_client.assert_called_once_with(
            f"{BASE}/api", timeout_seconds=5.0, headers={"Authorization": "Bearer x"}
        )

    @pytest.mark.asyncio
    async def test_requests_only_consumed_fields(self, doc, api, mock_create_client):
        api.get.return_value = {"idReadable": "TT-0"}

        await scan(f"{BASE}/issue/TT-0", doc)

        _, options = api.get.await_args.args
        assert options["search_params"]["fields"] == ISSUE_FIELDS

    @pytest.mark.asyncio
    async def test_api_errors_propagate(self, doc, api, mock_create_client):
        api.get.side_effect = TrackerConnectionError("unreachable")

        with pytest.raises(TrackerConnectionError, match="unreachable"):
            await scan(f"{BASE}/issue/TT-0", doc)

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, doc, api, mock_create_client):
        api.get.side_effect = TicketNotFoundError(ticket_id="TT-404")

        with pytest.raises(TicketNotFoundError) as exc_info:
            await scan(f"{BASE}/issue/TT-404", doc)

        assert exc_info.value.ticket_id == "TT-404"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [[], {}, None, "TT-0", {"summary": "No key"}])
    async def test_rejects_non_issue_payload(self, doc, api, mock_create_client, payload):
        api.get.return_value = payload

        with pytest.raises(TrackerResponseParseError, match="Unexpected issue payload for TT-0"):
            await scan(f"{BASE}/issue/TT-0", doc)
