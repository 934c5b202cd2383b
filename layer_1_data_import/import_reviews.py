"""
Review ingestion: walk the paged feed and keep the last 12 months of reviews

The feed is ordered most recent first, so the walk stops as soon as a page
contains a review older than the cutoff. It also stops after a short page
(the last one), after 2 failed or empty pages in a row, or at the page cap.
"""
import threading
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from config.settings import settings
from models.review import AppDetails, RatingBucket, Review, build_rating_distribution
from layer_1_data_import.scraper import AppStoreFeedClient, parse_entry
from utils.errors import AnalysisCancelled, FeedPageError
from utils.logger import get_logger

logger = get_logger(__name__)

REVIEW_WINDOW = relativedelta(years=1)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReviewIngestor:
    """Fetch the in-window reviews of an app from the paged review feed"""

    def __init__(
        self,
        client: Optional[AppStoreFeedClient] = None,
        max_pages: int = None,
        page_size: int = None,
        max_empty_pages: int = None,
        page_delay: float = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.client = client or AppStoreFeedClient()
        self.max_pages = max_pages or settings.FEED_MAX_PAGES
        self.page_size = page_size or settings.FEED_PAGE_SIZE
        self.max_empty_pages = max_empty_pages or settings.FEED_MAX_EMPTY_PAGES
        self.page_delay = settings.FEED_PAGE_DELAY if page_delay is None else page_delay
        self.clock = clock

    def cutoff(self) -> datetime:
        """Oldest review date kept (now minus one year)"""
        return self.clock() - REVIEW_WINDOW

    def fetch_reviews(
        self,
        app_id: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[List[Review], List[RatingBucket]]:
        """
        Fetch reviews from the last 12 months

        Args:
            app_id: Numeric App Store id
            cancel_event: When set, the walk stops before the next page

        Returns:
            Tuple of (reviews, rating distribution over those reviews)

        Raises:
            AnalysisCancelled: If cancel_event is set during the walk
        """
        cutoff = self.cutoff()
        logger.info(f"Fetching App Store reviews from the last 12 months (since {cutoff.date()})...")

        all_reviews: List[Review] = []
        page = 1
        consecutive_empty_pages = 0

        while page <= self.max_pages and consecutive_empty_pages < self.max_empty_pages:
            if cancel_event is not None and cancel_event.is_set():
                raise AnalysisCancelled(f"Review import cancelled before page {page}")
            if page > 1 and self.page_delay > 0:
                time.sleep(self.page_delay)

            try:
                entries = self.client.fetch_page(app_id, page)
            except FeedPageError as e:
                logger.warning(f"Error fetching page {page}: {e}")
                consecutive_empty_pages += 1
                page += 1
                continue

            page_reviews = [review for review in map(parse_entry, entries) if review is not None]
            if not page_reviews:
                logger.info(f"Page {page} has no reviews")
                consecutive_empty_pages += 1
                page += 1
                continue

            in_window = [review for review in page_reviews if review.date >= cutoff]
            all_reviews.extend(in_window)
            consecutive_empty_pages = 0
            logger.info(f"✓ Page {page}: +{len(in_window)} reviews from last 12 months (Total: {len(all_reviews)})")

            if len(in_window) < len(page_reviews):
                logger.info(f"→ Found {len(page_reviews) - len(in_window)} reviews older than 1 year, stopping")
                break

            if len(entries) < self.page_size:
                logger.info(f"→ Reached last page ({len(entries)} < {self.page_size} entries)")
                break

            page += 1

        if consecutive_empty_pages >= self.max_empty_pages:
            logger.warning(f"Stopped after {consecutive_empty_pages} consecutive failed or empty pages")

        logger.info(f"✓ Total App Store reviews fetched (last 12 months): {len(all_reviews)}")
        return all_reviews, build_rating_distribution(all_reviews)

    def fetch_app_details(
        self,
        app_id: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> AppDetails:
        """
        Fetch app metadata plus its in-window reviews and rating distribution

        The app's lifetime rating aggregates are passed through as the
        store reports them; the distribution only covers fetched reviews.
        """
        app = self.client.lookup_app(app_id)
        reviews, distribution = self.fetch_reviews(app_id, cancel_event=cancel_event)
        return AppDetails(app=app, reviews=reviews, distribution=distribution)


def fetch_reviews(app_id: str) -> Tuple[List[Review], List[RatingBucket]]:
    """Fetch reviews with the default client and settings"""
    return ReviewIngestor().fetch_reviews(app_id)
