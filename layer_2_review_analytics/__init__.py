"""
Layer 2: Local review analytics
- Sentiment scorer (rating + bilingual keyword lexicon)
- Word clusters (frequent words)
- Topic clusters (fixed 8-topic taxonomy, non-exclusive)
- Phrase clusters (recurring sentences)
"""
from .sentiment import score, score_review, summarize_sentiment, sentiment_by_rating
from .word_clusters import extract_word_clusters, tokenize
from .topic_config import TOPICS, get_topic_list, get_topic_keywords
from .topic_clusters import extract_topic_clusters
from .phrase_clusters import extract_phrase_clusters, split_sentences

__all__ = [
    'score',
    'score_review',
    'summarize_sentiment',
    'sentiment_by_rating',
    'extract_word_clusters',
    'tokenize',
    'TOPICS',
    'get_topic_list',
    'get_topic_keywords',
    'extract_topic_clusters',
    'extract_phrase_clusters',
    'split_sentences',
]
