"""
Layer 1: Data Import
- App Store feed client (review RSS pages + app lookup)
- Review ingestor (last 12 months, truncate on first stale page)
- Date range and version filters
"""
from .scraper import AppStoreFeedClient, parse_entry
from .import_reviews import ReviewIngestor, fetch_reviews
from .filters import filter_by_date_range, filter_by_version, list_versions, DATE_RANGES

__all__ = [
    'AppStoreFeedClient',
    'parse_entry',
    'ReviewIngestor',
    'fetch_reviews',
    'filter_by_date_range',
    'filter_by_version',
    'list_versions',
    'DATE_RANGES',
]
