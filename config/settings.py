"""
Application settings and configuration

This file contains all the settings for the review analytics pipeline.
Think of it like a control panel where you can adjust how the system works.

Most settings can be changed by creating a .env file in the project root.
If a setting isn't in .env, it uses the default value shown here.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file (if it exists)
# This lets you configure the app without changing code
load_dotenv()


class Settings:
    """
    Application configuration settings

    This class holds all the configuration for the entire application.
    You can change these values by setting environment variables in a .env file.
    """

    # ============================================================
    # App Store Feed Settings
    # ============================================================
    # Reviews come from the public App Store customer-reviews RSS feed.
    # The feed is paged (50 reviews per page, most recent first) and
    # Apple only serves the first 10 pages.
    APP_STORE_COUNTRY = os.getenv("APP_STORE_COUNTRY", "br")
    APP_STORE_REVIEWS_URL = os.getenv(
        "APP_STORE_REVIEWS_URL",
        "https://itunes.apple.com/{country}/rss/customerreviews/page={page}/id={app_id}/sortby=mostrecent/json"
    )
    APP_STORE_LOOKUP_URL = os.getenv("APP_STORE_LOOKUP_URL", "https://itunes.apple.com/lookup")
    FEED_MAX_PAGES = int(os.getenv("FEED_MAX_PAGES", "10"))  # Hard cap imposed by Apple
    FEED_PAGE_SIZE = int(os.getenv("FEED_PAGE_SIZE", "50"))  # A shorter page means no more pages
    FEED_MAX_EMPTY_PAGES = int(os.getenv("FEED_MAX_EMPTY_PAGES", "2"))  # Stop after this many failures in a row
    FEED_TIMEOUT_SECONDS = float(os.getenv("FEED_TIMEOUT_SECONDS", "30"))  # Per page request
    FEED_PAGE_DELAY = float(os.getenv("FEED_PAGE_DELAY", "0.5"))  # Wait between pages (be nice to Apple)

    # ============================================================
    # LLM Provider Settings
    # ============================================================
    # Theme discovery needs an AI model. Two providers are supported:
    # - Gemini (free tier available at https://aistudio.google.com/app/apikey)
    # - OpenAI
    # If both keys are set, Gemini is used.
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))  # Per provider call

    # ============================================================
    # Theme Discovery Settings
    # ============================================================
    # Phase 1 reads a random sample of reviews to find the themes,
    # phase 2 sorts every review into those themes in small batches.
    THEME_SAMPLE_SIZE = int(os.getenv("THEME_SAMPLE_SIZE", "100"))
    THEME_BATCH_SIZE = int(os.getenv("THEME_BATCH_SIZE", "15"))
    LLM_BATCH_DELAY = float(os.getenv("LLM_BATCH_DELAY", "1.0"))  # Wait between batches (rate limits)

    # ============================================================
    # Logging Settings
    # ============================================================
    # How much detail to log
    # Options: DEBUG (very detailed), INFO (normal), WARNING (only problems), ERROR (only errors)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "")  # Empty = console only

    @staticmethod
    def reviews_url(app_id: str, page: int, country: str = None) -> str:
        """
        Build the RSS feed URL for one page of reviews

        Args:
            app_id: Numeric App Store id
            page: 1-based page number
            country: Store front (defaults to APP_STORE_COUNTRY)

        Returns:
            The page URL
        """
        return Settings.APP_STORE_REVIEWS_URL.format(
            country=country or Settings.APP_STORE_COUNTRY,
            page=page,
            app_id=app_id,
        )


# Global settings instance
settings = Settings()
