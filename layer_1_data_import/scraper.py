"""
Client for the public App Store review feed and app lookup
Using the iTunes customer-reviews RSS (JSON) and lookup APIs
"""
from typing import Any, Dict, List, Optional

import requests

from config.settings import settings
from models.review import AppInfo, Review, parse_review_date
from utils.errors import AppNotFoundError, FeedPageError, NetworkError
from utils.logger import get_logger

logger = get_logger(__name__)


def _label(entry: Dict[str, Any], *path: str) -> Optional[str]:
    """Walk Apple's nested {"key": {"label": ...}} structure"""
    node: Any = entry
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    if isinstance(node, dict):
        node = node.get("label")
    return node if isinstance(node, str) else None


def parse_entry(entry: Dict[str, Any]) -> Optional[Review]:
    """
    Parse one feed entry into a Review

    Entries without a rating (Apple puts the app itself first on page 1)
    or with an unreadable rating/date are skipped.

    Returns:
        Review, or None if the entry is not a usable review
    """
    rating_label = _label(entry, "im:rating")
    if not rating_label:
        return None

    try:
        rating = int(rating_label)
        date = parse_review_date(_label(entry, "updated"))
    except (TypeError, ValueError) as e:
        logger.warning(f"Skipping feed entry {_label(entry, 'id')}: {e}")
        return None

    return Review(
        id=_label(entry, "id") or "",
        author=_label(entry, "author", "name") or "",
        rating=rating,
        text=_label(entry, "content") or "",
        date=date,
        version=_label(entry, "im:version") or None,
    )


class AppStoreFeedClient:
    """Fetches review feed pages and app metadata from the App Store"""

    def __init__(self, country: str = None, timeout: float = None):
        self.country = country or settings.APP_STORE_COUNTRY
        self.timeout = timeout or settings.FEED_TIMEOUT_SECONDS

    def fetch_page(self, app_id: str, page: int) -> List[Dict[str, Any]]:
        """
        Fetch the raw entries of one review page (most recent first)

        Args:
            app_id: Numeric App Store id
            page: 1-based page number

        Returns:
            List of raw feed entries (possibly empty)

        Raises:
            FeedPageError: On network error, timeout, non-2xx status or bad JSON
        """
        url = settings.reviews_url(app_id, page, self.country)
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FeedPageError(page, f"request failed: {e}") from e

        if not response.ok:
            raise FeedPageError(page, f"returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise FeedPageError(page, "response is not valid JSON") from e

        feed = data.get("feed") if isinstance(data, dict) else None
        entries = feed.get("entry") if isinstance(feed, dict) else None
        if not entries:
            return []
        # A page with a single entry comes back as an object, not a list
        if isinstance(entries, dict):
            return [entries]
        return [entry for entry in entries if isinstance(entry, dict)]

    def lookup_app(self, app_id: str) -> AppInfo:
        """
        Fetch app metadata, including the store's lifetime rating aggregates

        Raises:
            NetworkError: If the lookup request fails
            AppNotFoundError: If no app has this id
        """
        try:
            response = requests.get(
                settings.APP_STORE_LOOKUP_URL,
                params={"id": app_id, "country": self.country},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise NetworkError(f"App lookup failed for {app_id}: {e}") from e

        results = data.get("results") or []
        if not results:
            raise AppNotFoundError(f"App not found: {app_id}")

        app = results[0]
        return AppInfo(
            id=str(app.get("trackId", app_id)),
            name=app.get("trackName", ""),
            developer=app.get("artistName", "Unknown"),
            icon=app.get("artworkUrl512") or app.get("artworkUrl100") or "",
            store="App Store",
            store_url=app.get("trackViewUrl", ""),
            average_rating=float(app.get("averageUserRating") or 0),
            total_reviews=int(app.get("userRatingCount") or 0),
        )
