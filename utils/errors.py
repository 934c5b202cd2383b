"""
Exceptions raised by the review analytics pipeline
"""


class ReviewAnalyticsError(Exception):
    """Base exception for all pipeline errors."""
    pass


class NetworkError(ReviewAnalyticsError):
    """Raised when the review feed or an LLM provider is unreachable or times out."""
    pass


class FeedPageError(NetworkError):
    """Raised when a single review feed page cannot be fetched or decoded."""

    def __init__(self, page: int, message: str):
        super().__init__(f"Page {page}: {message}")
        self.page = page


class AppNotFoundError(ReviewAnalyticsError):
    """Raised when the store lookup returns no app for an id."""
    pass


class ProviderNotConfigured(ReviewAnalyticsError):
    """Raised when neither a Gemini nor an OpenAI API key is configured."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "AI service not configured. Set GEMINI_API_KEY "
               "(free at https://aistudio.google.com/app/apikey) or OPENAI_API_KEY."
        )


class ResponseParseError(ReviewAnalyticsError):
    """Raised when an LLM response is empty, malformed, truncated or of the wrong shape."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class InvalidThemeStructure(ResponseParseError):
    """Raised when a discovered theme lacks a name or a description."""
    pass


class AnalysisCancelled(ReviewAnalyticsError):
    """Raised when a caller cancels an ingestion or theme analysis between units of work."""
    pass
