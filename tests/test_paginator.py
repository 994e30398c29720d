"""Tests for the paginator module (fetch_apps mocked)."""

from unittest.mock import MagicMock, patch

import pytest

from playsearch.fetcher import DecodeError, FetchError
from playsearch.models import AppRecord, ResultSet, RunType
from playsearch.paginator import collect_apps, page_plan

ENDPOINT = "http://localhost:3000/api/apps"


def _page(*app_ids, updated="January 2, 2023"):
    return [AppRecord(app_id=app_id, title=app_id.upper(), updated=updated) for app_id in app_ids]


class TestPagePlan:
    """Tests for page_plan."""

    def test_single_page(self):
        """A count within the page cap needs one page."""
        assert list(page_plan(5)) == [(0, 5)]

    def test_three_pages(self):
        """120 apps are fetched as 50, 50 and 20."""
        assert list(page_plan(120)) == [(0, 50), (50, 50), (100, 20)]

    def test_exact_multiple(self):
        """An exact multiple of the cap has no empty trailing page."""
        assert list(page_plan(100)) == [(0, 50), (50, 50)]

    def test_zero(self):
        """A zero count plans no pages."""
        assert list(page_plan(0)) == []


class TestCollectApps:
    """Tests for collect_apps."""

    @patch("playsearch.paginator.fetch_apps")
    def test_one_request_for_five(self, mock_fetch):
        """Five apps take a single request."""
        mock_fetch.return_value = _page("a", "b")
        results = ResultSet()

        added = collect_apps(RunType.SEARCH, "calculator", 5, ENDPOINT, results)

        assert added == 2
        mock_fetch.assert_called_once()
        params = mock_fetch.call_args.args[1]
        assert params == {"fullDetail": "true", "start": "0", "num": "5", "q": "calculator"}

    @patch("playsearch.paginator.fetch_apps")
    def test_three_requests_for_120(self, mock_fetch):
        """120 apps take three requests at offsets 0, 50 and 100."""
        mock_fetch.side_effect = [_page("a"), _page("b"), _page("c")]
        results = ResultSet()

        collect_apps(RunType.TOP, "GAME_ACTION", 120, ENDPOINT, results)

        calls = [c.args[1] for c in mock_fetch.call_args_list]
        assert [p["start"] for p in calls] == ["0", "50", "100"]
        assert [p["num"] for p in calls] == ["50", "50", "20"]
        assert all(p["category"] == "GAME_ACTION" for p in calls)

    @patch("playsearch.paginator.fetch_apps")
    def test_zero_count_makes_no_request(self, mock_fetch):
        """A zero count makes no request."""
        results = ResultSet()
        assert collect_apps(RunType.SEARCH, "x", 0, ENDPOINT, results) == 0
        mock_fetch.assert_not_called()

    @patch("playsearch.paginator.fetch_apps")
    def test_duplicates_across_pages_are_dropped(self, mock_fetch):
        """An app repeated on a later page keeps its first copy."""
        first = _page("a", "b")
        second = [AppRecord(app_id="b", title="changed"), *_page("c")]
        mock_fetch.side_effect = [first, second]
        results = ResultSet()

        added = collect_apps(RunType.SEARCH, "x", 100, ENDPOINT, results)

        assert added == 3
        assert [r.app_id for r in results] == ["a", "b", "c"]
        assert [r.title for r in results][1] == "B"

    @patch("playsearch.paginator.fetch_apps")
    def test_duplicate_of_earlier_line_is_dropped(self, mock_fetch):
        """An app collected by an earlier line is not added or normalized again."""
        results = ResultSet()
        results.add(AppRecord(app_id="a", updated="raw"))
        mock_fetch.return_value = _page("a", "b")

        added = collect_apps(RunType.SEARCH, "x", 5, ENDPOINT, results)

        assert added == 1
        assert next(iter(results)).updated == "raw"

    @patch("playsearch.paginator.fetch_apps")
    def test_dates_normalized(self, mock_fetch):
        """Dates are normalized; unparseable ones are kept raw."""
        mock_fetch.return_value = _page("a") + _page("b", updated="Smarch 1, 2020")
        results = ResultSet()

        collect_apps(RunType.SEARCH, "x", 5, ENDPOINT, results)

        assert [r.updated for r in results] == ["2023-01-02", "Smarch 1, 2020"]

    @patch("playsearch.paginator.fetch_apps")
    def test_fetch_error_propagates(self, mock_fetch):
        """FetchError stops the line without further requests."""
        mock_fetch.side_effect = [_page("a"), FetchError(ENDPOINT, 4, "refused")]
        results = ResultSet()

        with pytest.raises(FetchError):
            collect_apps(RunType.SEARCH, "x", 120, ENDPOINT, results)
        assert mock_fetch.call_count == 2

    @patch("playsearch.paginator.fetch_apps")
    def test_decode_error_propagates(self, mock_fetch):
        """DecodeError is not swallowed."""
        mock_fetch.side_effect = DecodeError("bad body")
        with pytest.raises(DecodeError):
            collect_apps(RunType.SEARCH, "x", 5, ENDPOINT, ResultSet())

    @patch("playsearch.paginator.fetch_apps")
    def test_policy_and_sleep_passed_through(self, mock_fetch):
        """The retry policy and sleep reach fetch_apps."""
        mock_fetch.return_value = []
        policy = MagicMock()
        sleep = MagicMock()

        collect_apps(RunType.SEARCH, "x", 5, ENDPOINT, ResultSet(), policy, sleep)

        assert mock_fetch.call_args.args[0] == ENDPOINT
        assert mock_fetch.call_args.args[2] is policy
        assert mock_fetch.call_args.args[3] is sleep
