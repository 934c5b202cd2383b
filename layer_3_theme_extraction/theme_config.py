"""
Theme discovery configuration
Prompt limits, generation parameters and the "Outros" fallback theme
"""

# Fallback theme for reviews that cannot be categorized
FALLBACK_THEME = "Outros"
FALLBACK_DESCRIPTION = "Reviews que não se encaixam claramente em outras categorias"

# How much of each review goes into a prompt
DISCOVERY_TEXT_LIMIT = 200
CATEGORIZATION_TEXT_LIMIT = 150

# Expected number of discovered themes (asked for in the prompt, not enforced)
MIN_THEMES = 5
MAX_THEMES = 12

DISCOVERY_TEMPERATURE = 0.3
DISCOVERY_MAX_TOKENS = 1000
CATEGORIZATION_TEMPERATURE = 0.1
CATEGORIZATION_MAX_TOKENS = 1500

DISCOVERY_SYSTEM_PROMPT = (
    "Você é um especialista em análise de feedback de usuários e identificação de temas principais. "
    "Sempre responda apenas com JSON válido."
)
CATEGORIZATION_SYSTEM_PROMPT = (
    "Você é um especialista em categorizar feedback de usuários. "
    "Sempre responda apenas com JSON válido."
)
