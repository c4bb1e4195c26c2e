"""
Static analysis tables shared by the NLP engine, clause detector and scorer.

Everything here is immutable after import; tunable sizes and limits live
in ``config.settings`` instead.
"""

from __future__ import annotations

from types import MappingProxyType

# =============================================================================
# LANGUAGES
# =============================================================================

STOPWORDS_EN = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "up", "about", "into", "through", "during",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had",
    "do", "does", "did", "will", "would", "should", "could", "may", "might",
    "can", "this", "that", "these", "those", "i", "you", "he", "she", "it",
    "we", "they", "what", "which", "who", "when", "where", "why", "how",
})

STOPWORDS_FR = frozenset({
    "le", "la", "les", "un", "une", "des", "de", "du", "et", "ou", "mais",
    "dans", "sur", "à", "pour", "par", "avec", "sans", "sous", "vers",
    "est", "sont", "était", "étaient", "être", "avoir", "a", "avons", "ont",
    "ce", "cette", "ces", "cet", "je", "tu", "il", "elle", "nous", "vous",
    "ils", "elles", "qui", "que", "quoi", "dont", "où", "quand", "comment",
})

# Policies routinely mix both languages, so tokenization drops either set.
DEFAULT_STOPWORDS = STOPWORDS_EN | STOPWORDS_FR

# Iteration order decides ties in language detection.
LANGUAGE_MARKERS: MappingProxyType = MappingProxyType({
    "en": ("the", "and", "you", "that", "this", "with", "for", "are"),
    "fr": ("le", "la", "de", "et", "vous", "que", "pour", "dans"),
    "de": ("der", "die", "das", "und", "sie", "ist", "für", "mit"),
    "es": ("el", "la", "de", "que", "los", "para", "con", "por"),
    "it": ("il", "di", "che", "per", "con", "una", "sono", "della"),
})

LANGUAGE_SAMPLE_SIZE = 1000

# =============================================================================
# NLP
# =============================================================================

SUMMARY_IMPORTANT_WORDS: tuple[str, ...] = (
    "must", "will", "may", "collect", "share", "use", "rights", "data", "information",
)

SUMMARY_WEIGHTS = MappingProxyType({
    "position": 0.4,
    "length": 0.3,
    "keyword": 0.3,
})

ENTITY_LIMIT = 10

# =============================================================================
# SCORING
# =============================================================================

BASE_SCORE = 50

MULTIPLIERS = MappingProxyType({
    "HAS_PRIVACY_POLICY": 1.10,
    "HAS_COOKIE_POLICY": 1.05,
    "CLEAR_LANGUAGE": 1.15,
    "SHORT_DOCUMENT": 1.10,
    "EASY_TO_FIND": 1.05,
})

PENALTIES = MappingProxyType({
    "VAGUE_LANGUAGE": -10,
    "VERY_LONG": -15,
    "HARD_TO_FIND": -10,
    "NO_CONTACT_INFO": -5,
    "OUTDATED": -10,
    "HARD_TO_READ": -10,
})

# Flat penalties stacked on top of the weight-proportional clause penalty.
CRITICAL_CLAUSE_PENALTIES = MappingProxyType({
    "DATA_SELLING": 15,
    "MANDATORY_ARBITRATION": 10,
    "SENSITIVE_DATA_COLLECTION": 12,
    "INTERNATIONAL_TRANSFER": 8,
})

SHORT_DOCUMENT_WORDS = 5000
VERY_LONG_DOCUMENT_WORDS = 10000
COMPLETE_DOCUMENT_WORDS = 500
OUTDATED_AFTER_YEARS = 2

CLEAR_LANGUAGE_MIN_SCORE = 60
HARD_TO_READ_MAX_SCORE = 30

VAGUE_TERMS = frozenset({"may", "might", "could", "possible", "sometimes", "generally"})
VAGUE_KEYWORD_THRESHOLD = 5

RISK_LEVELS = MappingProxyType({
    "LOW": MappingProxyType({
        "min": 70,
        "label": "Low",
        "color": "#22c55e",
        "icon": "✓",
        "description": "Transparent and respectful policy",
    }),
    "MEDIUM": MappingProxyType({
        "min": 40,
        "label": "Medium",
        "color": "#f59e0b",
        "icon": "!",
        "description": "A few clauses worth watching",
    }),
    "HIGH": MappingProxyType({
        "min": 0,
        "label": "High",
        "color": "#ef4444",
        "icon": "⚠",
        "description": "Many concerning clauses",
    }),
})

MARKET_AVERAGE_SCORE = 55

# (minimum score, percentile), checked top-down.
MARKET_PERCENTILES: tuple[tuple[int, int], ...] = (
    (90, 95),
    (80, 85),
    (70, 70),
    (60, 55),
    (50, 40),
    (40, 25),
    (30, 15),
)
