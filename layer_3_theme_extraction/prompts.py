"""
Prompt builders for the two theme analysis phases
"""
from typing import List, Sequence

from models.review import Review
from layer_3_theme_extraction.theme_config import (
    FALLBACK_THEME,
    FALLBACK_DESCRIPTION,
    DISCOVERY_TEXT_LIMIT,
    CATEGORIZATION_TEXT_LIMIT,
    MIN_THEMES,
    MAX_THEMES,
)


def truncate(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def build_discovery_prompt(sample: Sequence[Review]) -> str:
    """
    Build the phase 1 prompt asking for the main themes of a review sample

    Args:
        sample: Sampled reviews

    Returns:
        Theme discovery prompt string
    """
    reviews_text = "\n".join(
        f"{i}. [{review.rating}★] {truncate(review.text, DISCOVERY_TEXT_LIMIT)}"
        for i, review in enumerate(sample, 1)
    )

    return f"""Analise estes reviews de app e identifique os principais temas/tópicos sendo discutidos. Para cada tema, forneça um nome conciso (2-4 palavras em português) e uma breve descrição.

Reviews:
{reviews_text}

Retorne um array JSON com esta estrutura:
[
  {{
    "theme": "Nome do Tema",
    "description": "Breve descrição do que este tema cobre"
  }}
]

Importante:
- Identifique {MIN_THEMES}-{MAX_THEMES} temas significativos
- Temas devem ser específicos e práticos
- Foque no que os usuários estão realmente discutindo
- Use nomes claros e descritivos em português
- Responda APENAS com JSON válido, sem outro texto"""


def build_categorization_prompt(themes: Sequence, batch: List[Review]) -> str:
    """
    Build the phase 2 prompt mapping a batch of reviews (by index) to themes

    Args:
        themes: Discovered themes (objects with name and description)
        batch: Reviews of this batch, indexed from 0

    Returns:
        Categorization prompt string
    """
    themes_text = "\n".join(
        f"{i}. {theme.name}: {theme.description}"
        for i, theme in enumerate(themes, 1)
    )
    reviews_text = "\n".join(
        f"[{i}] [{review.rating}★] {truncate(review.text, CATEGORIZATION_TEXT_LIMIT)}"
        for i, review in enumerate(batch)
    )

    return f"""Categorize cada review em UM dos temas abaixo. Responda com um array JSON mapeando índices de reviews para nomes de temas.

Temas:
{themes_text}
{len(themes) + 1}. {FALLBACK_THEME}: {FALLBACK_DESCRIPTION}

Reviews para categorizar:
{reviews_text}

Responda com array JSON: [{{"index": 0, "theme": "Nome do Tema"}}, ...]
Responda APENAS com JSON válido, sem outro texto."""
