"""
Sensitive clause detection over a static catalog.

Each catalog entry is matched independently against the normalized text:
keywords as whole-word, case-insensitive literals over the whole text and
patterns as regular expressions within each sentence. A clause counts as
detected when either produces a match.

Example:
    >>> from privacy_guard.clause_detector import detect_clauses
    >>> result = detect_clauses("We may sell your personal information.")
    >>> sorted(result.detections)
    ['DATA_SELLING']
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from types import MappingProxyType
from typing import Optional, Sequence, Union

from privacy_guard.clause_catalog import (
    CLAUSE_CATALOG,
    DEFAULT_CLAUSE_SUMMARY,
    ClauseDefinition,
)
from privacy_guard.exceptions import InvalidDocumentError
from privacy_guard.models import (
    ClauseDetection,
    ClauseDetectionResult,
    ClauseReport,
    ClauseReportItem,
    RetentionInfo,
    WeightTotals,
)
from privacy_guard.nlp_engine import normalize_text, split_sentences, truncate_document

logger = logging.getLogger(__name__)

MAX_EXAMPLE_SENTENCES = 3
MAX_REPORT_EXAMPLES = 2

# Confidence weights: patterns are the strongest signal, then keywords,
# then sentence coverage. The sum is normalized by CONFIDENCE_SCALE.
PATTERN_CONFIDENCE = 0.5
KEYWORD_CONFIDENCE = 0.3
SENTENCE_CONFIDENCE = 0.2
CONFIDENCE_SCALE = 5

PERMISSION_PATTERNS: MappingProxyType = MappingProxyType({
    "camera": re.compile(r"camera|webcam|photo|image capture", re.IGNORECASE),
    "microphone": re.compile(r"microphone|audio|voice|recording", re.IGNORECASE),
    "location": re.compile(r"location|gps|geolocation|position", re.IGNORECASE),
    "contacts": re.compile(r"contacts|address book|phonebook", re.IGNORECASE),
    "storage": re.compile(r"files|storage|documents|photos", re.IGNORECASE),
    "notifications": re.compile(r"notification|push|alert", re.IGNORECASE),
    "cookies": re.compile(r"cookies|tracking|pixels", re.IGNORECASE),
    "clipboard": re.compile(r"clipboard|copy|paste", re.IGNORECASE),
})

KNOWN_THIRD_PARTIES: tuple[str, ...] = (
    "Google Analytics", "Facebook", "Meta", "Twitter", "Instagram",
    "Amazon", "AWS", "Microsoft", "Azure", "Cloudflare",
    "Stripe", "PayPal", "Mailchimp", "SendGrid", "Intercom",
    "Hotjar", "Mixpanel", "Segment", "Amplitude",
)

RETENTION_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"(\d+)\s*(?:days?|jours?)\b", re.IGNORECASE),
    re.compile(r"(\d+)\s*(?:months?|mois)\b", re.IGNORECASE),
    re.compile(r"(\d+)\s*(?:years?|ans?|années?)\b", re.IGNORECASE),
    re.compile(r"(?:for|pendant|durant)\s*(\d+)", re.IGNORECASE),
)


@lru_cache(maxsize=512)
def _literal_pattern(phrase: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(phrase)}\b", re.IGNORECASE)


def calculate_confidence(keyword_count: int, pattern_count: int, sentence_count: int) -> float:
    """Detection strength in [0, 1]."""
    raw = (
        pattern_count * PATTERN_CONFIDENCE
        + keyword_count * KEYWORD_CONFIDENCE
        + sentence_count * SENTENCE_CONFIDENCE
    )
    return min(1.0, raw / CONFIDENCE_SCALE)


class ClauseDetector:
    """
    Scans documents for the clauses in a catalog.
    
    The detector keeps no per-document state; the catalog is read-only,
    so one instance can serve concurrent callers.
    
    Attributes:
        catalog: Mapping of clause id to ClauseDefinition, in scan order.
    """
    
    def __init__(
        self,
        catalog: MappingProxyType = CLAUSE_CATALOG,
        max_document_size: Optional[int] = None,
    ) -> None:
        self.catalog = catalog
        self.max_document_size = max_document_size
    
    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------
    
    @staticmethod
    def find_keyword_matches(text: str, keywords: Sequence[str]) -> list[str]:
        """Every whole-word occurrence of every keyword."""
        matches: list[str] = []
        for keyword in keywords:
            matches.extend(_literal_pattern(keyword).findall(text))
        return matches
    
    @staticmethod
    def find_pattern_matches(
        segments: Union[str, Sequence[str]], patterns: Sequence[re.Pattern]
    ) -> list[str]:
        """
        The first match of each pattern that matches any segment.
        
        Patterns run one sentence segment at a time, so a ``.*`` never
        spans a sentence boundary.
        """
        if isinstance(segments, str):
            segments = (segments,)
        
        matches: list[str] = []
        for pattern in patterns:
            found = next(filter(None, map(pattern.search, segments)), None)
            if found:
                matches.append(found.group(0))
        return matches
    
    @staticmethod
    def find_containing_sentence(match: str, sentences: Sequence[str]) -> Optional[str]:
        needle = match.lower()
        return next((s for s in sentences if needle in s.lower()), None)
    
    def detect_clause(
        self,
        definition: ClauseDefinition,
        text: str,
        sentences: Sequence[str],
        segments: Optional[Sequence[str]] = None,
    ) -> Optional[ClauseDetection]:
        """
        Match one catalog entry.
        
        Args:
            definition: Catalog entry to look for.
            text: Normalized document text.
            sentences: Sentence candidates for example lookup.
            segments: Sentence segments of text for pattern matching;
                split from text when omitted.
        
        Returns:
            ClauseDetection, or None when nothing matched.
        """
        if segments is None:
            segments = split_sentences(text, min_length=0)
        
        keyword_matches = self.find_keyword_matches(text, definition.keywords)
        pattern_matches = self.find_pattern_matches(segments, definition.patterns)
        all_matches = keyword_matches + pattern_matches
        
        if not all_matches:
            return None
        
        matched_sentences: list[str] = []
        for match in dict.fromkeys(m.lower() for m in all_matches):
            sentence = self.find_containing_sentence(match, sentences)
            if sentence and sentence not in matched_sentences:
                matched_sentences.append(sentence)
        
        return ClauseDetection(
            type=definition.id,
            weight=definition.weight,
            confidence=calculate_confidence(
                len(keyword_matches), len(pattern_matches), len(matched_sentences)
            ),
            match_count=len(all_matches),
            example_sentences=matched_sentences[:MAX_EXAMPLE_SENTENCES],
            summary_text=definition.summary or DEFAULT_CLAUSE_SUMMARY,
        )
    
    def detect_all(
        self,
        text: str,
        sentences: Optional[Sequence[str]] = None,
    ) -> ClauseDetectionResult:
        """
        Run every catalog entry against a document.
        
        Example sentences are looked up in the given sentences first and
        then in every segment of the text regardless of length, so short
        statements are not missed.
        
        Args:
            text: Document text; normalized and truncated here.
            sentences: Sentences from the NLP engine, if already computed.
        
        Returns:
            ClauseDetectionResult with detections in catalog order.
        
        Raises:
            InvalidDocumentError: If text is not a string or sentences is not a sequence.
        """
        if not isinstance(text, str):
            raise InvalidDocumentError("Document text must be a string", field="text", value=text)
        if sentences is not None and (
            isinstance(sentences, str) or not isinstance(sentences, (list, tuple))
        ):
            raise InvalidDocumentError(
                "Sentences must be a list of strings", field="sentences", value=sentences
            )
        
        normalized = normalize_text(truncate_document(text, self.max_document_size))
        segments = split_sentences(normalized, min_length=0)
        candidates = list(dict.fromkeys([*(sentences or []), *segments]))
        
        detections: dict[str, ClauseDetection] = {}
        totals = WeightTotals()
        highlighted: list[str] = []
        
        for clause_id, definition in self.catalog.items():
            detection = self.detect_clause(definition, normalized, candidates, segments)
            if detection is None:
                continue
            
            detections[clause_id] = detection
            if definition.weight > 0:
                totals.negative += definition.weight
            elif definition.weight < 0:
                totals.positive += abs(definition.weight)
            highlighted.extend(detection.example_sentences)
        
        logger.debug(
            f"Clause detection: {len(detections)} clause(s) "
            f"{list(detections)} (negative={totals.negative}, positive={totals.positive})"
        )
        
        return ClauseDetectionResult(
            detections=detections,
            total_weight=totals,
            highlighted_sentences=list(dict.fromkeys(highlighted)),
        )
    
    # -------------------------------------------------------------------------
    # Reporting & utilities
    # -------------------------------------------------------------------------
    
    @staticmethod
    def build_report(result: ClauseDetectionResult) -> ClauseReport:
        """Group detections by severity: critical >= 8, important >= 5, moderate > 0."""
        report = ClauseReport()
        for clause_id, detection in result.detections.items():
            item = ClauseReportItem(
                type=clause_id,
                summary=detection.summary_text,
                confidence=detection.confidence,
                weight=detection.weight,
                examples=detection.example_sentences[:MAX_REPORT_EXAMPLES],
            )
            if detection.weight >= 8:
                report.critical.append(item)
            elif detection.weight >= 5:
                report.important.append(item)
            elif detection.weight > 0:
                report.moderate.append(item)
            else:
                report.positive.append(item)
        return report
    
    @staticmethod
    def analyze_permissions(text: str) -> list[str]:
        """Device and browser permission categories mentioned in the text."""
        return [
            permission for permission, pattern in PERMISSION_PATTERNS.items()
            if pattern.search(text)
        ]
    
    @staticmethod
    def detect_third_parties(text: str) -> list[str]:
        """Known third-party services named in the text."""
        return [
            service for service in KNOWN_THIRD_PARTIES
            if _literal_pattern(service).search(text)
        ]
    
    @staticmethod
    def analyze_retention_period(text: str) -> RetentionInfo:
        """
        Find the first stated retention duration.
        
        Patterns are tried in order (days, months, years, "for N") and the
        first one that matches wins.
        """
        normalized = normalize_text(text)
        for pattern in RETENTION_PATTERNS:
            match = pattern.search(normalized)
            if match:
                duration = match.group(0)
                sentences = [
                    s for s in split_sentences(normalized, min_length=0)
                    if duration in s
                ]
                return RetentionInfo(
                    found=True,
                    duration=duration,
                    sentences=sentences[:MAX_EXAMPLE_SENTENCES],
                )
        return RetentionInfo()


def detect_clauses(
    text: str,
    sentences: Optional[Sequence[str]] = None,
) -> ClauseDetectionResult:
    """Detect clauses with the default catalog."""
    return ClauseDetector().detect_all(text, sentences)


__all__ = [
    "KNOWN_THIRD_PARTIES",
    "PERMISSION_PATTERNS",
    "ClauseDetector",
    "calculate_confidence",
    "detect_clauses",
]
