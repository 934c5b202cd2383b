"""
Rule-based topic clusters (non-exclusive keyword matching)
"""
from typing import Dict, List, Optional

from models.analytics import TOPIC, Cluster, ClusterAccumulator, sort_by_count
from models.review import Review
from layer_2_review_analytics.sentiment import score_review
from layer_2_review_analytics.topic_config import TOPICS, SAMPLES_PER_TOPIC


def matches_topic(text: str, keywords: List[str]) -> bool:
    lower_text = (text or "").lower()
    return any(keyword in lower_text for keyword in keywords)


def extract_topic_clusters(
    reviews: List[Review],
    topics: Optional[Dict[str, List[str]]] = None,
) -> List[Cluster]:
    """
    Match every review against every topic

    A review can land in zero, one or several topics. Topics without any
    match are left out.

    Args:
        reviews: Reviews to analyse
        topics: Topic taxonomy (defaults to TOPICS)

    Returns:
        Topic clusters sorted by count, descending
    """
    taxonomy = topics if topics is not None else TOPICS
    sentiments = [score_review(review).sentiment for review in reviews]

    clusters = []
    for topic, keywords in taxonomy.items():
        accumulator = ClusterAccumulator(TOPIC, topic, SAMPLES_PER_TOPIC, keywords=list(keywords))
        for review, sentiment in zip(reviews, sentiments):
            if matches_topic(review.text, keywords):
                accumulator.add(review, sentiment)

        if accumulator.cluster.count > 0:
            clusters.append(accumulator.build())

    return sort_by_count(clusters)
