"""
Two-phase AI theme analysis

Phase 1 (discovery) asks the LLM for the main themes of a random review
sample. Phase 2 (categorization) sends every review, in small batches, to
be mapped onto those themes. The run moves through fixed stages:

    SAMPLING -> DISCOVERY -> CATEGORIZING (batch by batch) -> AGGREGATING -> DONE

Discovery failures are fatal. A failed categorization batch is not: its
reviews are put in the "Outros" bucket and the next batch runs, so every
input review ends up in exactly one theme.
"""
import random
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.settings import settings
from models.analytics import POSITIVE, NEUTRAL, NEGATIVE, THEME, Cluster, ClusterAccumulator, sort_by_count
from models.review import Review
from layer_3_theme_extraction.prompts import build_discovery_prompt, build_categorization_prompt
from layer_3_theme_extraction.theme_config import (
    FALLBACK_THEME,
    FALLBACK_DESCRIPTION,
    DISCOVERY_SYSTEM_PROMPT,
    DISCOVERY_TEMPERATURE,
    DISCOVERY_MAX_TOKENS,
    CATEGORIZATION_SYSTEM_PROMPT,
    CATEGORIZATION_TEMPERATURE,
    CATEGORIZATION_MAX_TOKENS,
)
from utils.errors import (
    AnalysisCancelled,
    InvalidThemeStructure,
    NetworkError,
    ProviderNotConfigured,
    ResponseParseError,
)
from utils.json_extract import parse_json_array
from utils.llm_client import LLMProvider, ProviderConfig, select_provider
from utils.logger import get_logger

logger = get_logger(__name__)


class ThemeAnalysisStage(Enum):
    SAMPLING = "sampling"
    DISCOVERY = "discovery"
    CATEGORIZING = "categorizing"
    AGGREGATING = "aggregating"
    DONE = "done"


@dataclass(frozen=True)
class DiscoveredTheme:
    """A theme proposed by the LLM in phase 1"""
    name: str
    description: str


@dataclass
class BatchOutcome:
    """Result of categorizing one batch: (review, theme name) pairs"""
    batch_number: int
    assignments: List[Tuple[Review, str]] = field(default_factory=list)
    fell_back: bool = False
    error: Optional[str] = None


def rating_sentiment(rating: int) -> str:
    """Sentiment used inside theme buckets (rating only, no keywords)"""
    if rating >= 4:
        return POSITIVE
    if rating == 3:
        return NEUTRAL
    return NEGATIVE


def resolve_theme(name: Any, themes: List[DiscoveredTheme]) -> str:
    """
    Map a theme name returned by the LLM onto a discovered theme

    Exact match first, then case-insensitive containment in either
    direction (first discovered theme wins), otherwise the fallback theme.
    Overlapping names such as "Suporte" and "Suporte Técnico" can resolve
    to whichever comes first.
    """
    if not isinstance(name, str) or not name.strip():
        return FALLBACK_THEME

    for theme in themes:
        if theme.name == name:
            return theme.name
    if name == FALLBACK_THEME:
        return FALLBACK_THEME

    lowered = name.lower()
    for theme in themes:
        theme_lower = theme.name.lower()
        if theme_lower in lowered or lowered in theme_lower:
            return theme.name

    return FALLBACK_THEME


def _parse_index(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


class ThemeDiscoveryEngine:
    """Discover themes in reviews with an LLM and categorize every review into them"""

    def __init__(
        self,
        provider_factory: Callable[[ProviderConfig], LLMProvider] = select_provider,
        rng: Optional[random.Random] = None,
        sample_size: Optional[int] = None,
        batch_size: Optional[int] = None,
        batch_delay: Optional[float] = None,
    ):
        """
        Initialize engine

        Args:
            provider_factory: Builds the LLM provider from a ProviderConfig
            rng: Source of randomness for sampling (seed it for repeatable runs)
            sample_size: Max reviews read during discovery (default from settings)
            batch_size: Reviews per categorization prompt (default from settings)
            batch_delay: Seconds to wait between batches (default from settings)
        """
        self.provider_factory = provider_factory
        self.rng = rng or random.Random()
        self.sample_size = sample_size or settings.THEME_SAMPLE_SIZE
        self.batch_size = batch_size or settings.THEME_BATCH_SIZE
        self.batch_delay = settings.LLM_BATCH_DELAY if batch_delay is None else batch_delay

    def discover_themes(
        self,
        reviews: List[Review],
        provider_config: Optional[ProviderConfig] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Cluster]:
        """
        Run the full theme analysis

        Args:
            reviews: Reviews to analyse
            provider_config: LLM credentials (defaults to the environment)
            cancel_event: When set, the run stops before the next batch

        Returns:
            Theme clusters sorted by count, descending; counts add up to len(reviews)

        Raises:
            ProviderNotConfigured: If no provider key is configured
            NetworkError, ResponseParseError, InvalidThemeStructure: If discovery fails
            AnalysisCancelled: If cancel_event is set during the run
        """
        config = provider_config or ProviderConfig.from_settings()
        if not config.is_configured:
            raise ProviderNotConfigured()
        provider = self.provider_factory(config)

        if not reviews:
            logger.info("No reviews to analyse for themes")
            return []

        logger.info(f"Analyzing {len(reviews)} reviews for themes using {provider.name}...")

        stage = ThemeAnalysisStage.SAMPLING
        sample = self.sample_reviews(reviews)

        stage = self._advance(stage, ThemeAnalysisStage.DISCOVERY)
        themes = self.discover(provider, sample)
        logger.info(f"Discovered {len(themes)} themes: {', '.join(t.name for t in themes)}")

        stage = self._advance(stage, ThemeAnalysisStage.CATEGORIZING)
        buckets = self._create_buckets(themes)
        batches = [reviews[i:i + self.batch_size] for i in range(0, len(reviews), self.batch_size)]

        for batch_number, batch in enumerate(batches, 1):
            if cancel_event is not None and cancel_event.is_set():
                raise AnalysisCancelled(f"Theme analysis cancelled before batch {batch_number}/{len(batches)}")

            outcome = self.categorize_batch(provider, themes, batch, batch_number)
            for review, theme_name in outcome.assignments:
                buckets[theme_name].add(review, rating_sentiment(review.rating))
            logger.info(f"Processed batch {batch_number}/{len(batches)}")

            if batch_number < len(batches) and self.batch_delay > 0:
                time.sleep(self.batch_delay)

        stage = self._advance(stage, ThemeAnalysisStage.AGGREGATING)
        clusters = self.aggregate(buckets)

        self._advance(stage, ThemeAnalysisStage.DONE)
        logger.info(f"✓ Theme analysis complete: {len(clusters)} themes identified")
        return clusters

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #
    def sample_reviews(self, reviews: List[Review]) -> List[Review]:
        """Random sample (without replacement) of up to sample_size reviews"""
        return self.rng.sample(list(reviews), min(len(reviews), self.sample_size))

    def discover(self, provider: LLMProvider, sample: List[Review]) -> List[DiscoveredTheme]:
        """
        Phase 1: ask the provider for the themes present in the sample

        Raises:
            NetworkError: If the provider call fails
            ResponseParseError: If the response is not a JSON array
            InvalidThemeStructure: If a theme lacks a name or description
        """
        prompt = build_discovery_prompt(sample)
        try:
            raw_response = provider.complete(
                prompt,
                system_prompt=DISCOVERY_SYSTEM_PROMPT,
                temperature=DISCOVERY_TEMPERATURE,
                max_tokens=DISCOVERY_MAX_TOKENS,
            )
        except NetworkError as e:
            logger.error(f"{provider.name} API error during theme discovery: {e}")
            raise NetworkError(
                f"Failed to discover themes: {e}. Check the API key, quota and network access "
                f"of the configured provider, or configure GEMINI_API_KEY instead."
            ) from e
        except ResponseParseError as e:
            logger.error(f"Unexpected response from {provider.name} during theme discovery: {e}")
            raise ResponseParseError(
                f"Failed to discover themes: {e}. Retry the analysis.", raw=e.raw
            ) from e

        logger.debug(f"Attempting to parse themes from: {raw_response[:300]}")
        try:
            items = parse_json_array(raw_response)
        except ResponseParseError as e:
            logger.error(f"Failed to parse themes JSON: {e}\nOriginal text: {raw_response[:500]}")
            raise ResponseParseError(
                f"Failed to parse theme discovery results: {e}. Retry the analysis.", raw=raw_response
            ) from e

        themes = []
        seen = set()
        for item in items:
            if not isinstance(item, dict) or not _non_empty(item.get("theme")) or not _non_empty(item.get("description")):
                logger.error(f"Invalid theme structure: {item}")
                raise InvalidThemeStructure(
                    f"Invalid theme structure returned by AI: {item!r}. Retry the analysis.",
                    raw=raw_response,
                )
            name = item["theme"].strip()
            if name in seen:
                continue
            seen.add(name)
            themes.append(DiscoveredTheme(name=name, description=item["description"].strip()))

        return themes

    def categorize_batch(
        self,
        provider: LLMProvider,
        themes: List[DiscoveredTheme],
        batch: List[Review],
        batch_number: int,
    ) -> BatchOutcome:
        """
        Phase 2: map one batch of reviews onto the discovered themes

        Never raises for provider or parsing problems: the whole batch falls
        back to "Outros" instead.
        """
        prompt = build_categorization_prompt(themes, batch)
        try:
            raw_response = provider.complete(
                prompt,
                system_prompt=CATEGORIZATION_SYSTEM_PROMPT,
                temperature=CATEGORIZATION_TEMPERATURE,
                max_tokens=CATEGORIZATION_MAX_TOKENS,
            )
            mappings = parse_json_array(raw_response)
        except (NetworkError, ResponseParseError) as e:
            logger.warning(f"Categorization failed for batch {batch_number}: {e}. Assigning to \"{FALLBACK_THEME}\".")
            return BatchOutcome(
                batch_number=batch_number,
                assignments=[(review, FALLBACK_THEME) for review in batch],
                fell_back=True,
                error=str(e),
            )

        outcome = BatchOutcome(batch_number=batch_number)
        assigned = set()
        for mapping in mappings:
            if not isinstance(mapping, dict):
                logger.warning(f"Ignoring malformed mapping in batch {batch_number}: {mapping!r}")
                continue

            index = _parse_index(mapping.get("index"))
            if index is None or not 0 <= index < len(batch):
                logger.warning(f"Review not found at index {mapping.get('index')!r} in batch {batch_number}")
                continue
            if index in assigned:
                logger.debug(f"Duplicate mapping for index {index} in batch {batch_number}, keeping the first")
                continue

            assigned.add(index)
            outcome.assignments.append((batch[index], resolve_theme(mapping.get("theme"), themes)))

        missing = [i for i in range(len(batch)) if i not in assigned]
        if missing:
            logger.warning(
                f"{len(missing)} reviews in batch {batch_number} were not categorized. "
                f"Assigning to \"{FALLBACK_THEME}\"."
            )
            outcome.assignments.extend((batch[i], FALLBACK_THEME) for i in missing)

        return outcome

    def aggregate(self, buckets: Dict[str, ClusterAccumulator]) -> List[Cluster]:
        """Drop empty buckets, compute averages and sort by count"""
        clusters = [bucket.build() for bucket in buckets.values() if bucket.cluster.count > 0]
        return sort_by_count(clusters)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _create_buckets(themes: List[DiscoveredTheme]) -> Dict[str, ClusterAccumulator]:
        buckets = {
            theme.name: ClusterAccumulator(THEME, theme.name, None, description=theme.description)
            for theme in themes
        }
        buckets.setdefault(
            FALLBACK_THEME,
            ClusterAccumulator(THEME, FALLBACK_THEME, None, description=FALLBACK_DESCRIPTION),
        )
        return buckets

    @staticmethod
    def _advance(current: ThemeAnalysisStage, nxt: ThemeAnalysisStage) -> ThemeAnalysisStage:
        logger.debug(f"Theme analysis stage: {current.value} -> {nxt.value}")
        return nxt


def _non_empty(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def discover_themes(
    reviews: List[Review],
    provider_config: Optional[ProviderConfig] = None,
    rng: Optional[random.Random] = None,
) -> List[Cluster]:
    """Convenience wrapper: run a theme analysis with default engine settings"""
    return ThemeDiscoveryEngine(rng=rng).discover_themes(reviews, provider_config)
