"""
Recurring phrase clusters (sentence-level deduplication)
"""
import re
from typing import Dict, List

from models.analytics import PHRASE, Cluster, sort_by_count
from models.review import Review
from layer_2_review_analytics.sentiment import score_review

MIN_PHRASE_LENGTH = 10
MAX_PHRASE_LENGTH = 100  # exclusive
MIN_PHRASE_COUNT = 2
MAX_PHRASE_CLUSTERS = 30
SAMPLES_PER_PHRASE = 3

_SENTENCE_END = re.compile(r"[.!?]+")


def split_sentences(text: str) -> List[str]:
    """Split text on . ! ? and keep sentences of a usable length"""
    sentences = (s.strip() for s in _SENTENCE_END.split(text or ""))
    return [s for s in sentences if MIN_PHRASE_LENGTH <= len(s) < MAX_PHRASE_LENGTH]


def extract_phrase_clusters(reviews: List[Review]) -> List[Cluster]:
    """
    Find sentences that recur across reviews

    Sentences are compared case-insensitively; the first casing seen is the
    one displayed.

    Args:
        reviews: Reviews to analyse

    Returns:
        Up to 30 phrases seen at least twice, by count descending
    """
    phrases: Dict[str, Cluster] = {}

    for review in reviews:
        sentiment = score_review(review).sentiment
        for sentence in split_sentences(review.text):
            normalized = sentence.lower()
            cluster = phrases.get(normalized)
            if cluster is None:
                cluster = phrases[normalized] = Cluster(kind=PHRASE, key=sentence)

            cluster.count += 1
            cluster.sentiment.add(sentiment)
            cluster.avg_rating = (cluster.avg_rating * (cluster.count - 1) + review.rating) / cluster.count

            if len(cluster.reviews) < SAMPLES_PER_PHRASE and review not in cluster.reviews:
                cluster.reviews.append(review)

    recurring = [c for c in phrases.values() if c.count >= MIN_PHRASE_COUNT]
    return sort_by_count(recurring)[:MAX_PHRASE_CLUSTERS]
