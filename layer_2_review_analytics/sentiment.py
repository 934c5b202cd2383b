"""
Rating + keyword sentiment scorer (Portuguese and English)
"""
from typing import Dict, Iterable, List

from models.analytics import POSITIVE, NEUTRAL, NEGATIVE, SentimentResult
from models.review import Review

POSITIVE_KEYWORDS = (
    'love', 'great', 'awesome', 'excellent', 'perfect', 'amazing', 'best',
    'fantastic', 'wonderful', 'good', 'nice', 'helpful', 'easy', 'beautiful',
    'amo', 'ótimo', 'excelente', 'perfeito', 'maravilhoso', 'melhor', 'bom',
    'incrível', 'fantástico', 'útil', 'fácil', 'lindo', 'adorei', 'amei',
)

NEGATIVE_KEYWORDS = (
    'hate', 'bad', 'terrible', 'awful', 'horrible', 'worst', 'poor', 'crash',
    'bug', 'broken', 'slow', 'useless', 'waste', 'disappointed', 'frustrated',
    'odeio', 'ruim', 'péssimo', 'horrível', 'pior', 'lixo', 'travando',
    'quebrado', 'lento', 'inútil', 'decepcionado', 'frustrado',
)

# Rating carries 70% of the score, keywords at most 30%
RATING_WEIGHT = 0.7
KEYWORD_CAP = 0.3
LABEL_THRESHOLD = 0.2


def _count_keywords(text: str, keywords: Iterable[str]) -> int:
    return sum(1 for keyword in keywords if keyword in text)


def score(text: str, rating: int) -> SentimentResult:
    """
    Score one review

    The rating sets a base of +0.7 (4-5 stars), 0 (3 stars) or -0.7 (1-2
    stars). Each lexicon term found in the text moves the score by 0.1,
    capped at +/-0.3, so only 3-star reviews can be labelled by their text.

    Args:
        text: Review body
        rating: Star rating (1-5)

    Returns:
        SentimentResult with label and score
    """
    lower_text = (text or "").lower()
    positive_count = _count_keywords(lower_text, POSITIVE_KEYWORDS)
    negative_count = _count_keywords(lower_text, NEGATIVE_KEYWORDS)

    if rating >= 4:
        base = RATING_WEIGHT
    elif rating == 3:
        base = 0.0
    else:
        base = -RATING_WEIGHT

    keyword_score = (positive_count - negative_count) / 10
    keyword_score = max(-KEYWORD_CAP, min(KEYWORD_CAP, keyword_score))
    total = base + keyword_score

    if total > LABEL_THRESHOLD:
        sentiment = POSITIVE
    elif total < -LABEL_THRESHOLD:
        sentiment = NEGATIVE
    else:
        sentiment = NEUTRAL

    return SentimentResult(sentiment=sentiment, score=total)


def score_review(review: Review) -> SentimentResult:
    return score(review.text, review.rating)


def summarize_sentiment(reviews: List[Review]) -> Dict[str, float]:
    """
    Count labels over a set of reviews and average their scores

    Returns:
        Dictionary with positive, neutral, negative counts and averageScore
    """
    summary = {POSITIVE: 0, NEUTRAL: 0, NEGATIVE: 0, "averageScore": 0.0}
    if not reviews:
        return summary

    total_score = 0.0
    for review in reviews:
        result = score_review(review)
        summary[result.sentiment] += 1
        total_score += result.score

    summary["averageScore"] = total_score / len(reviews)
    return summary


def sentiment_by_rating(reviews: List[Review]) -> Dict[int, Dict[str, float]]:
    """Sentiment summary for each star rating (1 to 5)"""
    return {
        stars: summarize_sentiment([r for r in reviews if r.rating == stars])
        for stars in range(1, 6)
    }
