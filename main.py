"""
Main entry point for the application

This is the main file that runs the entire analysis. It works in 3 steps:
1. Get the app's reviews from the last 12 months from the App Store
2. Score sentiment and build word, topic and phrase clusters
3. Optionally discover themes with AI (needs GEMINI_API_KEY or OPENAI_API_KEY)

The report is printed to stdout as JSON. Nothing is saved to disk.

Usage:
    python main.py <app_id> [--themes] [--range 3months] [--version 1.2.3] [--debug]
"""
import json
import sys
from typing import Dict, List, Optional, Tuple

from layer_1_data_import.import_reviews import ReviewIngestor
from layer_1_data_import.filters import filter_by_date_range, filter_by_version, list_versions, ALL_VERSIONS
from layer_2_review_analytics.sentiment import summarize_sentiment
from layer_2_review_analytics.word_clusters import extract_word_clusters
from layer_2_review_analytics.topic_clusters import extract_topic_clusters
from layer_2_review_analytics.phrase_clusters import extract_phrase_clusters
from layer_3_theme_extraction.theme_discovery import ThemeDiscoveryEngine
from models.review import build_rating_distribution
from utils.llm_client import ProviderConfig
from utils.logger import get_logger, set_log_level

# Set up logging so we can see what's happening
logger = get_logger(__name__)


# Options that take a value, as --name value or --name=value
VALUE_OPTIONS = ("range", "version")


def _parse_args(args: List[str]) -> Tuple[List[str], Dict[str, str]]:
    """Split the command line into positional arguments and --options"""
    positional = []
    options = {}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg.startswith("--"):
            name, has_value, value = arg[2:].partition("=")
            if name in VALUE_OPTIONS and not has_value and i + 1 < len(args):
                i += 1
                value = args[i]
            options[name] = value
        else:
            positional.append(arg)
        i += 1
    return positional, options


def build_report(
    app_id: str,
    with_themes: bool = False,
    date_range: str = "1year",
    version: str = ALL_VERSIONS,
    ingestor: Optional[ReviewIngestor] = None,
    theme_engine: Optional[ThemeDiscoveryEngine] = None,
    provider_config: Optional[ProviderConfig] = None,
) -> dict:
    """
    Run the whole analysis for one app

    Args:
        app_id: Numeric App Store id
        with_themes: Also run the AI theme analysis
        date_range: Only analyse reviews in this range (7days ... 1year)
        version: Only analyse reviews of this app version ("all" for every version)

    Returns:
        JSON-serialisable report
    """
    # ============================================================
    # STEP 1: Import Reviews
    # ============================================================
    logger.info("=" * 60)
    logger.info("STEP 1: Importing Reviews")
    logger.info("=" * 60)

    details = (ingestor or ReviewIngestor()).fetch_app_details(app_id)
    reviews = filter_by_version(filter_by_date_range(details.reviews, date_range), version)
    logger.info(f"Analysing {len(reviews)} of {len(details.reviews)} reviews "
                f"(range={date_range}, version={version})")

    # ============================================================
    # STEP 2: Sentiment + local clusters
    # ============================================================
    logger.info("=" * 60)
    logger.info("STEP 2: Sentiment and clustering")
    logger.info("=" * 60)

    report = {
        "app": details.app.to_dict(),
        "distribution": [bucket.to_dict() for bucket in build_rating_distribution(reviews)],
        "versions": list_versions(details.reviews),
        "reviewCount": len(reviews),
        "sentiment": summarize_sentiment(reviews),
        "words": [c.to_dict() for c in extract_word_clusters(reviews)],
        "topics": [c.to_dict() for c in extract_topic_clusters(reviews)],
        "phrases": [c.to_dict() for c in extract_phrase_clusters(reviews)],
    }

    # ============================================================
    # STEP 3: AI themes (optional)
    # ============================================================
    if with_themes:
        logger.info("=" * 60)
        logger.info("STEP 3: Discovering themes with AI")
        logger.info("=" * 60)
        engine = theme_engine or ThemeDiscoveryEngine()
        themes = engine.discover_themes(reviews, provider_config or ProviderConfig.from_settings())
        report["themes"] = [c.to_dict() for c in themes]

    return report


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - parse the command line, run the analysis, print JSON

    Returns:
        0 on success, 1 on error
    """
    args = sys.argv[1:] if argv is None else argv
    positional, options = _parse_args(args)
    unknown = set(options) - set(VALUE_OPTIONS) - {"themes", "debug"}
    if not positional or unknown:
        if unknown:
            print(f"Unknown option(s): {', '.join('--' + name for name in sorted(unknown))}", file=sys.stderr)
        print(__doc__.strip().splitlines()[-1].strip(), file=sys.stderr)
        return 1

    if "debug" in options:
        set_log_level("DEBUG")

    try:
        report = build_report(
            positional[0],
            with_themes="themes" in options,
            date_range=options.get("range") or "1year",
            version=options.get("version") or ALL_VERSIONS,
        )
    except Exception as e:
        # If something goes wrong, log the error and return 1 (error code)
        logger.error(f"Error in analysis workflow: {e}", exc_info=True)
        return 1

    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


# This part runs when you execute this file directly (not when imported)
if __name__ == "__main__":
    sys.exit(main())
