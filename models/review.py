"""
Review data model
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


def parse_review_date(value) -> datetime:
    """Parse an ISO-8601 timestamp (as served by the feed) into an aware datetime"""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Review:
    """Review data model (immutable once fetched)"""
    id: str
    author: str
    rating: int  # 1-5 stars
    text: str
    date: datetime
    version: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert review to its wire shape"""
        data = {
            "id": self.id,
            "author": self.author,
            "rating": self.rating,
            "text": self.text,
            "date": self.date.isoformat(),
        }
        if self.version:
            data["version"] = self.version
        return data


@dataclass(frozen=True)
class RatingBucket:
    """Number of ingested reviews with a given star rating"""
    stars: int
    count: int

    def to_dict(self) -> dict:
        return {"stars": self.stars, "count": self.count}


def build_rating_distribution(reviews: List[Review]) -> List[RatingBucket]:
    """
    Count reviews per star rating

    Always returns five buckets (1 to 5 stars), computed strictly over
    the given reviews.
    """
    return [
        RatingBucket(stars=stars, count=sum(1 for r in reviews if r.rating == stars))
        for stars in range(1, 6)
    ]


@dataclass
class AppInfo:
    """App metadata with the store's lifetime rating aggregates"""
    id: str
    name: str
    developer: str
    icon: str = ""
    store: str = "App Store"
    store_url: str = ""
    average_rating: float = 0.0
    total_reviews: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "developer": self.developer,
            "icon": self.icon,
            "store": self.store,
            "storeUrl": self.store_url,
            "averageRating": self.average_rating,
            "totalReviews": self.total_reviews,
        }


@dataclass
class AppDetails:
    """App metadata plus the ingested reviews and their rating distribution"""
    app: AppInfo
    reviews: List[Review] = field(default_factory=list)
    distribution: List[RatingBucket] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "app": self.app.to_dict(),
            "reviews": [review.to_dict() for review in self.reviews],
            "distribution": [bucket.to_dict() for bucket in self.distribution],
        }
