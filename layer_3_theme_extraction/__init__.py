"""
Layer 3: AI theme analysis (LLM discovery + batched categorization)
"""
from .theme_config import FALLBACK_THEME, FALLBACK_DESCRIPTION
from .prompts import build_discovery_prompt, build_categorization_prompt
from .theme_discovery import (
    ThemeDiscoveryEngine,
    ThemeAnalysisStage,
    DiscoveredTheme,
    BatchOutcome,
    discover_themes,
    resolve_theme,
    rating_sentiment,
)

__all__ = [
    'FALLBACK_THEME',
    'FALLBACK_DESCRIPTION',
    'build_discovery_prompt',
    'build_categorization_prompt',
    'ThemeDiscoveryEngine',
    'ThemeAnalysisStage',
    'DiscoveredTheme',
    'BatchOutcome',
    'discover_themes',
    'resolve_theme',
    'rating_sentiment',
]
