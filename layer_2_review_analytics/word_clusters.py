"""
Word frequency clusters with sentiment breakdown
"""
import re
from typing import Dict, List

from models.analytics import WORD, Cluster, ClusterAccumulator, sort_by_count
from models.review import Review
from layer_2_review_analytics.sentiment import score_review

MAX_WORD_CLUSTERS = 50
SAMPLES_PER_WORD = 5
MIN_WORD_LENGTH = 4

# Common stopwords in Portuguese and English
STOPWORDS = frozenset({
    'o', 'a', 'de', 'da', 'do', 'em', 'um', 'uma', 'os', 'as', 'dos', 'das', 'para', 'com', 'por',
    'é', 'que', 'não', 'e', 'no', 'na', 'se', 'mais', 'muito', 'bem', 'mas', 'como', 'quando',
    'the', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'is', 'are',
    'was', 'were', 'be', 'been', 'being', 'have', 'has', 'had', 'does', 'did', 'will', 'would',
    'app', 'aplicativo', 'this', 'that', 'it', 'its',
})

# \w is unicode-aware, so accented letters survive
_PUNCTUATION = re.compile(r"[^\w\s]")


def tokenize(text: str) -> List[str]:
    """Lowercase, strip punctuation and drop short words and stopwords"""
    cleaned = _PUNCTUATION.sub("", (text or "").lower())
    return [
        word for word in cleaned.split()
        if len(word) >= MIN_WORD_LENGTH and word not in STOPWORDS
    ]


def extract_word_clusters(reviews: List[Review]) -> List[Cluster]:
    """
    Count word occurrences across reviews

    Every occurrence counts, so a word repeated in one review adds to the
    count (and sentiment) once per occurrence.

    Args:
        reviews: Reviews to analyse

    Returns:
        Top 50 word clusters by count, descending
    """
    accumulators: Dict[str, ClusterAccumulator] = {}

    for review in reviews:
        sentiment = score_review(review).sentiment
        seen = set()
        for word in tokenize(review.text):
            accumulator = accumulators.get(word)
            if accumulator is None:
                accumulator = accumulators[word] = ClusterAccumulator(WORD, word, SAMPLES_PER_WORD)
            # sample each review once per word
            accumulator.add(review, sentiment, sample=word not in seen)
            seen.add(word)

    clusters = [accumulator.build() for accumulator in accumulators.values()]
    return sort_by_count(clusters)[:MAX_WORD_CLUSTERS]
