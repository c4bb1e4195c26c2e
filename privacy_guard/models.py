"""
Domain models for Privacy Guard.

This module defines Pydantic models for every record exchanged between
the NLP engine, the clause detector, the risk scorer and their callers.
Python attributes are snake_case; serialized output (``to_dict``) uses
camelCase aliases so it can be handed to non-Python consumers as-is.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base model with camelCase serialization aliases."""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    
    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class Difficulty(str, Enum):
    """Readability difficulty classes."""
    
    EASY = "easy"
    MEDIUM = "medium"
    DIFFICULT = "difficult"
    VERY_DIFFICULT = "very_difficult"


class RiskLevelName(str, Enum):
    """Coarse risk classification derived from the score."""
    
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# =============================================================================
# NLP
# =============================================================================

class TextStats(Record):
    """Token and sentence counts for a document."""
    
    word_count: int = 0
    sentence_count: int = 0
    unique_word_count: int = 0
    avg_words_per_sentence: float = 0.0
    vocabulary_richness: float = 0.0


class Keyword(Record):
    """A ranked term with its raw frequency and share of all tokens."""
    
    word: str
    count: int
    relevance: float


class Readability(Record):
    """
    Flesch Reading Ease style readability result.
    
    Attributes:
        score: Rounded ease score, higher is easier.
        difficulty: Difficulty class derived from the score.
        avg_words_per_sentence: Mean tokens per sentence (1 decimal).
        avg_syllables_per_word: Mean estimated syllables per token (1 decimal).
    """
    
    score: int = Field(..., ge=0, le=100)
    difficulty: Difficulty
    avg_words_per_sentence: float
    avg_syllables_per_word: float


class Entities(Record):
    """Pattern-extracted entities, each list deduplicated and capped."""
    
    organizations: list[str] = Field(default_factory=list)
    dates: list[str] = Field(default_factory=list)
    amounts: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)


class NLPResult(Record):
    """
    Complete output of the NLP engine for one document.
    
    Attributes:
        stats: Word and sentence statistics.
        keywords: Frequency-ranked keywords.
        readability: Readability score and class.
        entities: Extracted organizations, dates, amounts, emails, phones.
        sentences: Sentences at or above the minimum sentence length.
        language: Language code used for the analysis.
        timestamp: When the analysis ran.
    """
    
    stats: TextStats
    keywords: list[Keyword] = Field(default_factory=list)
    readability: Readability
    entities: Entities = Field(default_factory=Entities)
    sentences: list[str] = Field(default_factory=list)
    language: str
    timestamp: datetime


# =============================================================================
# CLAUSES
# =============================================================================

class ClauseDetection(Record):
    """
    A detected clause from the catalog.
    
    Attributes:
        type: Catalog id of the clause.
        weight: Signed catalog weight.
        confidence: Heuristic detection strength.
        match_count: Total keyword and pattern matches.
        example_sentences: Up to three sentences containing a match.
        summary_text: Canned explanation of the clause.
    """
    
    type: str
    weight: int
    confidence: float = Field(..., ge=0.0, le=1.0)
    match_count: int = Field(..., ge=1)
    example_sentences: list[str] = Field(default_factory=list, max_length=3)
    summary_text: str


class WeightTotals(Record):
    """Aggregated clause weights split by sign."""
    
    positive: int = 0
    negative: int = 0


class ClauseDetectionResult(Record):
    """All clause detections for one document."""
    
    detections: dict[str, ClauseDetection] = Field(default_factory=dict)
    total_weight: WeightTotals = Field(default_factory=WeightTotals)
    highlighted_sentences: list[str] = Field(default_factory=list)
    
    @computed_field(alias="clauseCount")
    @property
    def clause_count(self) -> int:
        """Number of detected clauses."""
        return len(self.detections)
    
    def is_detected(self, clause_id: str) -> bool:
        return clause_id in self.detections


class ClauseReportItem(Record):
    """One clause in a severity-bucketed report."""
    
    type: str
    summary: str
    confidence: float
    weight: int
    examples: list[str] = Field(default_factory=list, max_length=2)


class ClauseReport(Record):
    """Detected clauses grouped by severity."""
    
    critical: list[ClauseReportItem] = Field(default_factory=list)
    important: list[ClauseReportItem] = Field(default_factory=list)
    moderate: list[ClauseReportItem] = Field(default_factory=list)
    positive: list[ClauseReportItem] = Field(default_factory=list)


class RetentionInfo(Record):
    """Retention duration found in a document, if any."""
    
    found: bool = False
    duration: Optional[str] = None
    sentences: list[str] = Field(default_factory=list)


# =============================================================================
# SCORING INPUTS
# =============================================================================

class DocumentMeta(Record):
    """
    Caller-supplied facts about the document.
    
    Attributes:
        has_privacy_policy: The page is a privacy policy.
        has_cookie_policy: The page covers cookies.
        has_contact_info: The page lists a way to contact the operator.
        word_count: Document length in words.
        is_complete: The extracted text is believed complete.
        hard_to_find: The policy link was hard to locate.
        is_outdated: The caller already flagged the policy as outdated.
        last_updated: Last update date, as text or a date value.
    """
    
    has_privacy_policy: bool = False
    has_cookie_policy: bool = False
    has_contact_info: bool = False
    word_count: int = 0
    is_complete: bool = False
    hard_to_find: bool = False
    is_outdated: bool = False
    last_updated: Optional[Union[datetime, date, str]] = None


class PageInfo(Record):
    """Caller-supplied facts about the page hosting the document."""
    
    easy_to_find: bool = False
    url: Optional[str] = None


# =============================================================================
# SCORING OUTPUTS
# =============================================================================

class RiskLevel(Record):
    """Risk level with its presentation attributes."""
    
    level: RiskLevelName
    label: str
    color: str
    icon: str
    description: str


class ClauseAdjustment(Record):
    type: str
    impact: Literal["positive", "negative"]
    weight: int
    summary: str


class ReadabilityAdjustment(Record):
    impact: int = 0
    reason: str = "N/A"


class MetadataAdjustment(Record):
    reason: str
    impact: int


class ScoreAdjustments(Record):
    clauses: list[ClauseAdjustment] = Field(default_factory=list)
    readability: ReadabilityAdjustment = Field(default_factory=ReadabilityAdjustment)
    metadata: list[MetadataAdjustment] = Field(default_factory=list)


class ScoreBreakdown(Record):
    """Explanation of what moved the score."""
    
    base_score: int
    adjustments: ScoreAdjustments = Field(default_factory=ScoreAdjustments)


class RiskAssessment(Record):
    """
    Final risk assessment of a document.
    
    Attributes:
        score: Transparency score, higher is safer.
        risk_level: Classification derived from the score.
        confidence: Heuristic confidence in the assessment.
        breakdown: Per-factor explanation.
        recommendations: Advice for the reader, never empty.
    """
    
    score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    confidence: float = Field(..., ge=0.0, le=1.0)
    breakdown: ScoreBreakdown
    recommendations: list[str] = Field(..., min_length=1)


class MarketComparison(Record):
    """Position of a score relative to the observed market average."""
    
    score: int
    market_average: int
    difference: int
    percentile: int
    comparison: str


# =============================================================================
# PIPELINE
# =============================================================================

class AnalysisReport(Record):
    """
    Outcome of the page analysis pipeline.
    
    A failed analysis is reported through ``errors`` with the missing
    stages left as None.
    """
    
    url: Optional[str] = None
    risk_assessment: Optional[RiskAssessment] = None
    summary: list[str] = Field(default_factory=list)
    clause_detection: Optional[ClauseDetectionResult] = None
    nlp_result: Optional[NLPResult] = None
    page_metadata: dict[str, Any] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
    analyzed_at: datetime = Field(default_factory=datetime.now)
    
    @property
    def success(self) -> bool:
        """Check if every stage completed."""
        return not self.errors and self.risk_assessment is not None
