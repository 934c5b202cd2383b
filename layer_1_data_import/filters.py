"""
Review filters: recent date ranges and app versions
"""
import re
from datetime import datetime, timezone
from typing import List

from dateutil.relativedelta import relativedelta

from models.review import Review

UNKNOWN_VERSION = "Desconhecida"
ALL_VERSIONS = "all"

DATE_RANGES = {
    "7days": relativedelta(days=7),
    "15days": relativedelta(days=15),
    "1month": relativedelta(months=1),
    "3months": relativedelta(months=3),
    "6months": relativedelta(months=6),
    "1year": relativedelta(years=1),
}


def filter_by_date_range(reviews: List[Review], date_range: str, now: datetime = None) -> List[Review]:
    """
    Keep reviews newer than a named range ("7days" ... "1year")

    "1year" is the ingestion window itself, so it returns every review.

    Raises:
        ValueError: If the range name is unknown
    """
    if date_range not in DATE_RANGES:
        raise ValueError(f"Unknown date range '{date_range}'. Options: {', '.join(DATE_RANGES)}")
    if date_range == "1year":
        return list(reviews)

    cutoff = (now or datetime.now(timezone.utc)) - DATE_RANGES[date_range]
    return [review for review in reviews if review.date >= cutoff]


def _version_key(version: str):
    return [(0, int(part), "") if part.isdigit() else (1, 0, part) for part in re.split(r"(\d+)", version) if part]


def list_versions(reviews: List[Review]) -> List[str]:
    """Distinct app versions, newest first, with the unknown version last"""
    versions = {review.version or UNKNOWN_VERSION for review in reviews}
    known = sorted((v for v in versions if v != UNKNOWN_VERSION), key=_version_key, reverse=True)
    return known + ([UNKNOWN_VERSION] if UNKNOWN_VERSION in versions else [])


def filter_by_version(reviews: List[Review], version: str) -> List[Review]:
    """Keep reviews of one app version ("all" keeps everything)"""
    if version == ALL_VERSIONS:
        return list(reviews)
    return [review for review in reviews if (review.version or UNKNOWN_VERSION) == version]
