"""
Analytics data models: sentiment results and review clusters
"""
from dataclasses import dataclass, field
from typing import List, Optional

from models.review import Review

POSITIVE = "positive"
NEUTRAL = "neutral"
NEGATIVE = "negative"

SENTIMENTS = (POSITIVE, NEUTRAL, NEGATIVE)

# Cluster kinds; also the name of the key field in each wire shape
WORD = "word"
TOPIC = "topic"
PHRASE = "phrase"
THEME = "theme"


@dataclass(frozen=True)
class SentimentResult:
    """Sentiment label plus the score (-1 to 1) it was derived from"""
    sentiment: str
    score: float

    def to_dict(self) -> dict:
        return {"sentiment": self.sentiment, "score": self.score}


@dataclass
class SentimentDistribution:
    """Per-label review counts"""
    positive: int = 0
    neutral: int = 0
    negative: int = 0

    def add(self, sentiment: str):
        if sentiment not in SENTIMENTS:
            raise ValueError(f"Unknown sentiment label: {sentiment}")
        setattr(self, sentiment, getattr(self, sentiment) + 1)

    @property
    def total(self) -> int:
        return self.positive + self.neutral + self.negative

    def to_dict(self) -> dict:
        return {"positive": self.positive, "neutral": self.neutral, "negative": self.negative}


@dataclass
class Cluster:
    """
    A named group of reviews (word, topic, phrase or theme)

    `count` is the number of assignments to the cluster; `sentiment`
    always sums to it and `avg_rating` is averaged over all of them,
    while `reviews` only holds a bounded sample (except for themes,
    which keep every review).
    """
    kind: str
    key: str
    count: int = 0
    sentiment: SentimentDistribution = field(default_factory=SentimentDistribution)
    avg_rating: float = 0.0
    reviews: List[Review] = field(default_factory=list)
    keywords: Optional[List[str]] = None
    description: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert cluster to its wire shape"""
        data = {self.kind: self.key}
        if self.kind == THEME:
            data["description"] = self.description or ""
        if self.kind == TOPIC:
            data["keywords"] = list(self.keywords or [])
        data.update({
            "count": self.count,
            "sentiment": self.sentiment.to_dict(),
            "avgRating": self.avg_rating,
            "reviews": [review.to_dict() for review in self.reviews],
        })
        return data


class ClusterAccumulator:
    """Builds one Cluster: counts, sentiment, rating total and a bounded sample"""

    def __init__(self, kind: str, key: str, sample_limit: Optional[int], **extra):
        self.cluster = Cluster(kind=kind, key=key, **extra)
        self.sample_limit = sample_limit
        self.total_rating = 0

    def add(self, review: Review, sentiment: str, sample: bool = True):
        self.cluster.count += 1
        self.cluster.sentiment.add(sentiment)
        self.total_rating += review.rating
        if not sample:
            return
        if self.sample_limit is None or len(self.cluster.reviews) < self.sample_limit:
            self.cluster.reviews.append(review)

    def build(self) -> Cluster:
        if self.cluster.count:
            self.cluster.avg_rating = self.total_rating / self.cluster.count
        return self.cluster


def sort_by_count(clusters: List[Cluster]) -> List[Cluster]:
    """Sort clusters by count, descending (stable, so ties keep first-seen order)"""
    return sorted(clusters, key=lambda c: c.count, reverse=True)
