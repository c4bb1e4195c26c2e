"""
Rule-based NLP engine for legal documents.

No trained models: every step is a deterministic regex or counting pass.

    raw text -> normalize -> tokens / sentences -> stats, keywords,
    readability, entities, summary, language

Example:
    >>> from privacy_guard.nlp_engine import analyze_document
    >>> result = analyze_document(policy_text)
    >>> result.readability.difficulty
    <Difficulty.DIFFICULT: 'difficult'>
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

from config.settings import settings
from privacy_guard.constants import (
    DEFAULT_STOPWORDS,
    ENTITY_LIMIT,
    LANGUAGE_MARKERS,
    LANGUAGE_SAMPLE_SIZE,
    SUMMARY_IMPORTANT_WORDS,
    SUMMARY_WEIGHTS,
)
from privacy_guard.exceptions import InvalidDocumentError
from privacy_guard.models import (
    Difficulty,
    Entities,
    Keyword,
    NLPResult,
    Readability,
    TextStats,
)

logger = logging.getLogger(__name__)

# =============================================================================
# PATTERNS
# =============================================================================

_HTML_TAG = re.compile(r"<[^>]*>")
_HTML_ENTITY = re.compile(r"&[a-z]+;", re.IGNORECASE)
_URL = re.compile(r"https?://\S*", re.IGNORECASE)
_EMAIL = re.compile(r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\s'-]")
_SENTENCE_BREAK = re.compile(r"[.!?]+")
_VOWEL_GROUP = re.compile(r"[aeiouy]+")

ORGANIZATION_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\s+(?:Inc|Corp|Ltd|LLC|GmbH|SA|SAS)\b\.?"),
    re.compile(r"[A-Z][A-Z]+(?:\s+[A-Z]+)*"),
)
DATE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}"),
    re.compile(r"\d{4}[/\-]\d{1,2}[/\-]\d{1,2}"),
    re.compile(
        r"(?:January|February|March|April|May|June|July|August|September|"
        r"October|November|December)\s+\d{1,2},?\s+\d{4}",
        re.IGNORECASE,
    ),
)
AMOUNT_PATTERN = re.compile(r"[$€£]\s*\d+(?:[,.]\d+)*(?:\.\d{2})?")
PHONE_PATTERN = re.compile(r"(?:\+\d{1,3})?\s*\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}")


# =============================================================================
# HELPERS
# =============================================================================

def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (not banker's rounding)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def truncate_document(text: str, limit: Optional[int] = None) -> str:
    """Cut text to the document size ceiling. Oversize input is not an error."""
    limit = limit or settings.MAX_DOCUMENT_SIZE
    if len(text) > limit:
        logger.warning(f"Document truncated from {len(text):,} to {limit:,} characters")
        return text[:limit]
    return text


def _strip_markup(text: str) -> str:
    text = _HTML_ENTITY.sub(" ", _HTML_TAG.sub(" ", text))
    return _WHITESPACE.sub(" ", text).strip()


def _dedupe(items: Iterable[str], limit: int = ENTITY_LIMIT) -> list[str]:
    return list(dict.fromkeys(items))[:limit]


def _require_text(text: object, field: str = "text") -> str:
    if not isinstance(text, str):
        raise InvalidDocumentError("Document text must be a string", field=field, value=text)
    return text


# =============================================================================
# NORMALIZATION & SEGMENTATION
# =============================================================================

def normalize_text(text: str) -> str:
    """
    Strip markup, entities, URLs and emails, then collapse whitespace.
    
    Args:
        text: Raw document text.
    
    Returns:
        Cleaned single-line text, possibly empty.
    """
    text = _HTML_TAG.sub(" ", text)
    text = _HTML_ENTITY.sub(" ", text)
    text = _URL.sub(" ", text)
    text = _EMAIL.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str, stopwords: frozenset[str] = DEFAULT_STOPWORDS) -> list[str]:
    """Lowercase, drop punctuation, stopwords and tokens of two characters or fewer."""
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [
        token for token in cleaned.split()
        if len(token) > 2 and token not in stopwords
    ]


def split_sentences(text: str, min_length: Optional[int] = None) -> list[str]:
    """
    Split text on runs of terminal punctuation.
    
    Args:
        text: Normalized text.
        min_length: Minimum sentence length in characters. Defaults to the
            configured MIN_SENTENCE_LENGTH; pass 0 to keep every non-empty
            candidate.
    
    Returns:
        Trimmed sentences in document order.
    """
    if min_length is None:
        min_length = settings.MIN_SENTENCE_LENGTH
    sentences = (part.strip() for part in _SENTENCE_BREAK.split(text))
    return [s for s in sentences if s and len(s) >= min_length]


# =============================================================================
# METRICS
# =============================================================================

def calculate_stats(tokens: list[str], sentences: list[str]) -> TextStats:
    word_count = len(tokens)
    unique_words = len(set(tokens))
    return TextStats(
        word_count=word_count,
        sentence_count=len(sentences),
        unique_word_count=unique_words,
        avg_words_per_sentence=round_half_up(word_count / max(len(sentences), 1), 1),
        vocabulary_richness=round_half_up(unique_words / max(word_count, 1), 2),
    )


def extract_keywords(tokens: list[str], top_n: Optional[int] = None) -> list[Keyword]:
    """
    Rank tokens by raw frequency.
    
    Ties keep first-occurrence order: Counter preserves insertion order and
    ``most_common`` sorts stably.
    """
    top_n = top_n or settings.KEYWORD_TOP_N
    if not tokens:
        return []
    total = len(tokens)
    return [
        Keyword(word=word, count=count, relevance=count / total)
        for word, count in Counter(tokens).most_common(top_n)
    ]


def estimate_syllables(word: str) -> int:
    """Estimate syllables from vowel groups. Always at least 1."""
    word = word.lower()
    if len(word) <= 3:
        return 1
    count = len(_VOWEL_GROUP.findall(word)) or 1
    if word.endswith("e"):
        count -= 1
    if word.endswith("le") and len(word) > 2:
        count += 1
    return max(1, count)


def classify_difficulty(score: float) -> Difficulty:
    if score >= 70:
        return Difficulty.EASY
    if score >= 50:
        return Difficulty.MEDIUM
    if score >= 30:
        return Difficulty.DIFFICULT
    return Difficulty.VERY_DIFFICULT


def calculate_readability(sentences: list[str], tokens: list[str]) -> Readability:
    """
    Flesch Reading Ease over tokens and sentences, clamped to [0, 100].
    
    score = 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)
    """
    total_syllables = sum(estimate_syllables(token) for token in tokens)
    avg_words = len(tokens) / max(len(sentences), 1)
    avg_syllables = total_syllables / max(len(tokens), 1)
    
    score = 206.835 - 1.015 * avg_words - 84.6 * avg_syllables
    score = max(0.0, min(100.0, score))
    
    return Readability(
        score=int(round_half_up(score)),
        difficulty=classify_difficulty(score),
        avg_words_per_sentence=round_half_up(avg_words, 1),
        avg_syllables_per_word=round_half_up(avg_syllables, 1),
    )


# =============================================================================
# ENTITIES
# =============================================================================

def extract_entities(text: str) -> Entities:
    """
    Pattern-based entity extraction.
    
    Runs on text that still contains emails and URLs. Categories are not
    cross-checked, so an acronym may also show up as an organization.
    """
    organizations = [
        match.group(0)
        for pattern in ORGANIZATION_PATTERNS
        for match in pattern.finditer(text)
        if len(match.group(0)) > 2
    ]
    dates = [
        match.group(0)
        for pattern in DATE_PATTERNS
        for match in pattern.finditer(text)
    ]
    amounts = [match.group(0) for match in AMOUNT_PATTERN.finditer(text)]
    emails = [match.group(0) for match in _EMAIL.finditer(text)]
    phones = [match.group(0).strip() for match in PHONE_PATTERN.finditer(text)]
    
    return Entities(
        organizations=_dedupe(organizations),
        dates=_dedupe(dates),
        amounts=_dedupe(amounts),
        emails=_dedupe(emails),
        phones=_dedupe(phones),
    )


# =============================================================================
# SUMMARY & LANGUAGE
# =============================================================================

def _summary_score(sentence: str, position: float) -> float:
    position_score = 1 - position
    
    length = len(sentence.split())
    length_score = 1.0 if 10 < length < 30 else 0.5
    
    lowered = sentence.lower()
    keyword_score = sum(0.2 for word in SUMMARY_IMPORTANT_WORDS if word in lowered)
    
    return (
        position_score * SUMMARY_WEIGHTS["position"]
        + length_score * SUMMARY_WEIGHTS["length"]
        + keyword_score * SUMMARY_WEIGHTS["keyword"]
    )


def generate_summary(
    sentences: list[str],
    max_sentences: Optional[int] = None,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> list[str]:
    """
    Pick the most representative sentences.
    
    When few enough sentences fit the length window they are returned in
    document order. Otherwise the top-scoring ones are returned ordered by
    score, highest first.
    
    Args:
        sentences: Document sentences in order.
        max_sentences: Summary size.
        min_length: Shortest eligible sentence in characters.
        max_length: Longest eligible sentence in characters.
    
    Returns:
        Selected sentences.
    """
    max_sentences = max_sentences or settings.SUMMARY_MAX_SENTENCES
    min_length = settings.MIN_SENTENCE_LENGTH if min_length is None else min_length
    max_length = max_length or settings.MAX_SENTENCE_LENGTH
    
    candidates = [s for s in sentences if min_length <= len(s) <= max_length]
    if len(candidates) <= max_sentences:
        return candidates
    
    first_index: dict[str, int] = {}
    for index, sentence in enumerate(sentences):
        first_index.setdefault(sentence, index)
    
    total = len(sentences)
    scored = [
        (sentence, _summary_score(sentence, first_index[sentence] / total))
        for sentence in candidates
    ]
    scored.sort(key=lambda item: item[1], reverse=True)
    return [sentence for sentence, _ in scored[:max_sentences]]


def detect_language(text: str) -> str:
    """
    Vote on the language from marker-word counts in the first 1000 characters.
    
    Ties go to the language listed first in LANGUAGE_MARKERS.
    """
    sample = text[:LANGUAGE_SAMPLE_SIZE].lower()
    scores = {
        language: sum(
            len(re.findall(rf"\b{re.escape(marker)}\b", sample))
            for marker in markers
        )
        for language, markers in LANGUAGE_MARKERS.items()
    }
    return max(scores, key=scores.get)


# =============================================================================
# ENGINE
# =============================================================================

class NLPEngine:
    """
    Stateless document analyzer.
    
    Holds only read-only configuration, so a single instance may be shared
    across threads.
    
    Attributes:
        stopwords: Words dropped during tokenization.
        max_document_size: Truncation ceiling in characters.
        keyword_top_n: Number of keywords to return.
    """
    
    def __init__(
        self,
        stopwords: frozenset[str] = DEFAULT_STOPWORDS,
        max_document_size: Optional[int] = None,
        keyword_top_n: Optional[int] = None,
    ) -> None:
        self.stopwords = stopwords
        self.max_document_size = max_document_size or settings.MAX_DOCUMENT_SIZE
        self.keyword_top_n = keyword_top_n or settings.KEYWORD_TOP_N
    
    def analyze_document(
        self,
        text: str,
        language_hint: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> NLPResult:
        """
        Run the full NLP pass over a document.
        
        Args:
            text: Plain document text.
            language_hint: Language code; detected from the text when omitted.
            timestamp: Analysis time; defaults to now.
        
        Returns:
            NLPResult for the (possibly truncated) text.
        
        Raises:
            InvalidDocumentError: If text or language_hint has the wrong type.
        """
        text = truncate_document(_require_text(text), self.max_document_size)
        if language_hint is not None and not isinstance(language_hint, str):
            raise InvalidDocumentError(
                "Language hint must be a string", field="language_hint", value=language_hint
            )
        
        cleaned = normalize_text(text)
        tokens = tokenize(cleaned, self.stopwords)
        sentences = split_sentences(cleaned)
        
        result = NLPResult(
            stats=calculate_stats(tokens, sentences),
            keywords=extract_keywords(tokens, self.keyword_top_n),
            readability=calculate_readability(sentences, tokens),
            entities=extract_entities(_strip_markup(text)),
            sentences=sentences,
            language=language_hint or detect_language(cleaned),
            timestamp=timestamp or datetime.now(),
        )
        
        logger.debug(
            f"NLP analysis: {result.stats.word_count} words, "
            f"{result.stats.sentence_count} sentences, "
            f"readability {result.readability.score}"
        )
        return result


def analyze_document(
    text: str,
    language_hint: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> NLPResult:
    """Analyze a document with a default-configured NLPEngine."""
    return NLPEngine().analyze_document(text, language_hint, timestamp)


__all__ = [
    "NLPEngine",
    "analyze_document",
    "calculate_readability",
    "calculate_stats",
    "classify_difficulty",
    "detect_language",
    "estimate_syllables",
    "extract_entities",
    "extract_keywords",
    "generate_summary",
    "normalize_text",
    "round_half_up",
    "split_sentences",
    "tokenize",
    "truncate_document",
]
