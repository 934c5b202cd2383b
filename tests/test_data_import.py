"""
Tests for Layer 1: feed client, review ingestion and review filters
Network access is always mocked
"""
import sys
import os
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest
import requests

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from layer_1_data_import.scraper import AppStoreFeedClient, parse_entry
from layer_1_data_import.import_reviews import ReviewIngestor
from layer_1_data_import.filters import (
    filter_by_date_range,
    filter_by_version,
    list_versions,
    UNKNOWN_VERSION,
)
from models.review import AppInfo, Review, build_rating_distribution, parse_review_date
from utils.errors import AnalysisCancelled, AppNotFoundError, FeedPageError, NetworkError

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def make_entry(i, days_ago=1, rating=4, version="2.1.0"):
    date = NOW - timedelta(days=days_ago)
    return {
        "author": {"name": {"label": f"user_{i}"}},
        "im:version": {"label": version},
        "im:rating": {"label": str(rating)},
        "id": {"label": f"id_{i}"},
        "title": {"label": "Title"},
        "content": {"label": f"Review text {i}", "attributes": {"type": "text"}},
        "updated": {"label": date.strftime("%Y-%m-%dT%H:%M:%S-07:00")},
    }


def make_page(start, count, days_ago=1, rating=4):
    return [make_entry(start + i, days_ago=days_ago, rating=rating) for i in range(count)]


def make_ingestor(pages):
    """Ingestor over a fake client whose fetch_page returns/raises the given items in order"""
    client = Mock()
    client.fetch_page.side_effect = pages
    ingestor = ReviewIngestor(client=client, page_delay=0, clock=lambda: NOW)
    return ingestor, client


def make_review(i, days_ago=0, rating=4, version=None):
    return Review(
        id=f"r{i}", author="a", rating=rating, text="t",
        date=NOW - timedelta(days=days_ago), version=version,
    )


class TestParseEntry:
    """Test feed entry parsing"""

    def test_parses_all_fields(self):
        review = parse_entry(make_entry(7, days_ago=2, rating=5, version="3.0"))
        assert review.id == "id_7"
        assert review.author == "user_7"
        assert review.rating == 5
        assert review.text == "Review text 7"
        assert review.version == "3.0"
        assert review.date.tzinfo is not None

    def test_skips_entries_without_rating(self):
        app_entry = {"id": {"label": "app"}, "im:name": {"label": "Some App"}}
        assert parse_entry(app_entry) is None

    def test_skips_bad_date(self):
        entry = make_entry(1)
        entry["updated"] = {"label": "not a date"}
        assert parse_entry(entry) is None

    def test_missing_version_is_none(self):
        entry = make_entry(1)
        del entry["im:version"]
        assert parse_entry(entry).version is None

    def test_parse_review_date_handles_z_suffix(self):
        parsed = parse_review_date("2026-01-02T03:04:05Z")
        assert parsed == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestAppStoreFeedClient:
    """Test HTTP handling of the feed client"""

    def _response(self, status=200, payload=None, json_error=False):
        response = Mock()
        response.ok = 200 <= status < 300
        response.status_code = status
        if json_error:
            response.json.side_effect = ValueError("bad json")
        else:
            response.json.return_value = payload
        return response

    @patch('layer_1_data_import.scraper.requests.get')
    def test_fetch_page_returns_entries(self, mock_get):
        mock_get.return_value = self._response(payload={"feed": {"entry": make_page(0, 3)}})
        entries = AppStoreFeedClient(country="br", timeout=5).fetch_page("123", 2)
        assert len(entries) == 3
        url = mock_get.call_args[0][0]
        assert "/br/rss/customerreviews/page=2/id=123/" in url
        assert mock_get.call_args[1]["timeout"] == 5

    @patch('layer_1_data_import.scraper.requests.get')
    def test_single_entry_object_is_wrapped(self, mock_get):
        mock_get.return_value = self._response(payload={"feed": {"entry": make_entry(1)}})
        assert len(AppStoreFeedClient().fetch_page("123", 1)) == 1

    @patch('layer_1_data_import.scraper.requests.get')
    def test_empty_feed(self, mock_get):
        mock_get.return_value = self._response(payload={"feed": {}})
        assert AppStoreFeedClient().fetch_page("123", 1) == []

    @patch('layer_1_data_import.scraper.requests.get')
    def test_non_2xx_raises_feed_page_error(self, mock_get):
        mock_get.return_value = self._response(status=503)
        with pytest.raises(FeedPageError) as exc_info:
            AppStoreFeedClient().fetch_page("123", 4)
        assert exc_info.value.page == 4

    @patch('layer_1_data_import.scraper.requests.get')
    def test_timeout_raises_feed_page_error(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")
        with pytest.raises(FeedPageError):
            AppStoreFeedClient().fetch_page("123", 1)

    @patch('layer_1_data_import.scraper.requests.get')
    def test_bad_json_raises_feed_page_error(self, mock_get):
        mock_get.return_value = self._response(json_error=True)
        with pytest.raises(FeedPageError):
            AppStoreFeedClient().fetch_page("123", 1)

    @patch('layer_1_data_import.scraper.requests.get')
    def test_lookup_app(self, mock_get):
        mock_get.return_value = self._response(payload={"results": [{
            "trackId": 123,
            "trackName": "Some App",
            "artistName": "Some Dev",
            "artworkUrl100": "icon.png",
            "trackViewUrl": "https://apps.apple.com/app/id123",
            "averageUserRating": 4.5,
            "userRatingCount": 9876,
        }]})
        app = AppStoreFeedClient().lookup_app("123")
        assert app.id == "123"
        assert app.name == "Some App"
        assert app.icon == "icon.png"
        assert app.average_rating == 4.5
        assert app.total_reviews == 9876

    @patch('layer_1_data_import.scraper.requests.get')
    def test_lookup_app_not_found(self, mock_get):
        mock_get.return_value = self._response(payload={"results": []})
        with pytest.raises(AppNotFoundError):
            AppStoreFeedClient().lookup_app("999")

    @patch('layer_1_data_import.scraper.requests.get')
    def test_lookup_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("down")
        with pytest.raises(NetworkError):
            AppStoreFeedClient().lookup_app("123")


class TestReviewIngestor:
    """Test the paged, time-windowed ingestion policy"""

    def test_short_page_is_last_page(self):
        ingestor, client = make_ingestor([
            make_page(0, 50),
            make_page(50, 30),
            FeedPageError(3, "timed out"),
        ])
        reviews, distribution = ingestor.fetch_reviews("123")
        assert len(reviews) == 80
        assert client.fetch_page.call_count == 2
        assert [b.count for b in distribution] == [0, 0, 0, 80, 0]

    def test_stops_after_two_consecutive_failures(self):
        ingestor, client = make_ingestor([
            make_page(0, 50),
            FeedPageError(2, "boom"),
            [],
            make_page(100, 50),
        ])
        reviews, _ = ingestor.fetch_reviews("123")
        assert len(reviews) == 50
        assert client.fetch_page.call_count == 3

    def test_failure_counter_resets_after_good_page(self):
        ingestor, client = make_ingestor([
            FeedPageError(1, "boom"),
            make_page(0, 50),
            FeedPageError(3, "boom"),
            make_page(50, 10),
        ])
        reviews, _ = ingestor.fetch_reviews("123")
        assert len(reviews) == 60
        assert client.fetch_page.call_count == 4

    def test_page_without_rated_entries_counts_as_empty(self):
        ingestor, client = make_ingestor([
            [{"id": {"label": "app metadata"}}],
            [],
        ])
        reviews, distribution = ingestor.fetch_reviews("123")
        assert reviews == []
        assert sum(b.count for b in distribution) == 0
        assert client.fetch_page.call_count == 2

    def test_truncates_on_first_stale_page(self):
        page_two = make_page(50, 40, days_ago=300) + make_page(90, 10, days_ago=400)
        ingestor, client = make_ingestor([
            make_page(0, 50),
            page_two,
            make_page(100, 50),
        ])
        reviews, _ = ingestor.fetch_reviews("123")
        assert len(reviews) == 90
        assert client.fetch_page.call_count == 2

    def test_no_review_older_than_one_year(self):
        mixed = make_page(0, 25, days_ago=10) + make_page(25, 25, days_ago=366)
        ingestor, _ = make_ingestor([mixed])
        reviews, _ = ingestor.fetch_reviews("123")
        cutoff = NOW - timedelta(days=365)
        assert len(reviews) == 25
        assert all(r.date >= cutoff for r in reviews)

    def test_hard_cap_of_ten_pages(self):
        pages = [make_page(i * 50, 50) for i in range(12)]
        ingestor, client = make_ingestor(pages)
        reviews, _ = ingestor.fetch_reviews("123")
        assert len(reviews) == 500
        assert client.fetch_page.call_count == 10

    def test_cancel_between_pages(self):
        event = threading.Event()
        event.set()
        ingestor, client = make_ingestor([make_page(0, 50)])
        with pytest.raises(AnalysisCancelled):
            ingestor.fetch_reviews("123", cancel_event=event)
        client.fetch_page.assert_not_called()

    def test_fetch_app_details_passes_lifetime_aggregates_through(self):
        ingestor, client = make_ingestor([make_page(0, 3, rating=2)])
        client.lookup_app.return_value = AppInfo(
            id="123", name="App", developer="Dev", average_rating=4.7, total_reviews=100000,
        )
        details = ingestor.fetch_app_details("123")
        assert details.app.average_rating == 4.7
        assert details.app.total_reviews == 100000
        assert len(details.reviews) == 3
        assert [b.count for b in details.distribution] == [0, 3, 0, 0, 0]
        assert details.to_dict()["app"]["totalReviews"] == 100000


class TestRatingDistribution:
    """Test rating distribution over ingested reviews"""

    def test_five_buckets(self):
        reviews = [make_review(i, rating=r) for i, r in enumerate([1, 5, 5, 3])]
        distribution = build_rating_distribution(reviews)
        assert [b.stars for b in distribution] == [1, 2, 3, 4, 5]
        assert [b.count for b in distribution] == [1, 0, 1, 0, 2]

    def test_empty(self):
        assert [b.count for b in build_rating_distribution([])] == [0, 0, 0, 0, 0]


class TestFilters:
    """Test date range and version filters"""

    def test_filter_by_date_range(self):
        reviews = [make_review(1, days_ago=3), make_review(2, days_ago=10), make_review(3, days_ago=100)]
        assert [r.id for r in filter_by_date_range(reviews, "7days", now=NOW)] == ["r1"]
        assert [r.id for r in filter_by_date_range(reviews, "1month", now=NOW)] == ["r1", "r2"]
        assert len(filter_by_date_range(reviews, "1year", now=NOW)) == 3

    def test_unknown_date_range(self):
        with pytest.raises(ValueError):
            filter_by_date_range([], "2weeks")

    def test_list_versions(self):
        reviews = [
            make_review(1, version="1.9.0"),
            make_review(2, version="1.10.0"),
            make_review(3),
            make_review(4, version="1.9.0"),
        ]
        assert list_versions(reviews) == ["1.10.0", "1.9.0", UNKNOWN_VERSION]

    def test_filter_by_version(self):
        reviews = [make_review(1, version="2.0"), make_review(2)]
        assert [r.id for r in filter_by_version(reviews, "2.0")] == ["r1"]
        assert [r.id for r in filter_by_version(reviews, UNKNOWN_VERSION)] == ["r2"]
        assert len(filter_by_version(reviews, "all")) == 2
