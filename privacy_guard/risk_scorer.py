"""
Transparency score and risk level for an analyzed document.

The score starts at BASE_SCORE and is moved by, in order:

    1. multiplicative bonuses from document/page metadata
    2. clause penalties (weight-proportional, then flat per critical clause)
    3. document penalties (length, vague wording, findability, contact, age)
    4. readability adjustment

then clamped to [0, 100] and classified as LOW / MEDIUM / HIGH risk.

Note that the four critical clauses are penalized twice: once through the
aggregate weight and once through CRITICAL_CLAUSE_PENALTIES.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from types import MappingProxyType
from typing import Any, Callable, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from privacy_guard.constants import (
    BASE_SCORE,
    CLEAR_LANGUAGE_MIN_SCORE,
    COMPLETE_DOCUMENT_WORDS,
    CRITICAL_CLAUSE_PENALTIES,
    HARD_TO_READ_MAX_SCORE,
    MARKET_AVERAGE_SCORE,
    MARKET_PERCENTILES,
    MULTIPLIERS,
    OUTDATED_AFTER_YEARS,
    PENALTIES,
    RISK_LEVELS,
    SHORT_DOCUMENT_WORDS,
    VAGUE_KEYWORD_THRESHOLD,
    VAGUE_TERMS,
    VERY_LONG_DOCUMENT_WORDS,
)
from privacy_guard.exceptions import InvalidDocumentError, MissingFieldError
from privacy_guard.models import (
    ClauseAdjustment,
    ClauseDetectionResult,
    DocumentMeta,
    MarketComparison,
    MetadataAdjustment,
    NLPResult,
    PageInfo,
    Readability,
    ReadabilityAdjustment,
    RiskAssessment,
    RiskLevel,
    RiskLevelName,
    ScoreAdjustments,
    ScoreBreakdown,
)
from privacy_guard.nlp_engine import round_half_up

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

RECOMMENDATIONS = MappingProxyType({
    "READ_CAREFULLY": "⚠️ Read carefully before accepting",
    "USE_WITH_CAUTION": "🔴 Consider using this service with caution",
    "DATA_SELLING": "⚠️ Your data may be sold - check the opt-out options",
    "INTERNATIONAL_TRANSFER": "🌍 Data leaves the EU - make sure GDPR safeguards apply",
    "SENSITIVE_DATA_COLLECTION": "⚕️ Sensitive data is collected - check that it is necessary",
    "USER_RIGHTS": "✓ Your rights are listed - do not hesitate to exercise them",
    "TRANSPARENT": "✓ Policy is broadly transparent",
})

# Clause ids that add their own recommendation, in output order.
CLAUSE_RECOMMENDATIONS: tuple[str, ...] = (
    "DATA_SELLING",
    "INTERNATIONAL_TRANSFER",
    "SENSITIVE_DATA_COLLECTION",
    "USER_RIGHTS",
)


def _coerce(value: Any, model: Type[M], field: str) -> M:
    """Accept a model instance or its dict form; fail fast on anything else."""
    if value is None:
        raise MissingFieldError(field)
    if isinstance(value, model):
        return value
    if isinstance(value, dict):
        try:
            return model.model_validate(value)
        except PydanticValidationError as e:
            raise InvalidDocumentError(
                f"Invalid {field}: {e.error_count()} validation error(s)", field=field
            ) from e
    raise InvalidDocumentError(
        f"{field} must be a {model.__name__} or dict", field=field, value=value
    )


def _as_local_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def _years_before(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year - years)
    except ValueError:
        # February 29th
        return moment.replace(year=moment.year - years, day=28)


class RiskScorer:
    """
    Stateless risk scorer.
    
    Attributes:
        clock: Returns the current time; used only for the outdated check.
    """
    
    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.clock = clock or datetime.now
    
    def score(
        self,
        nlp_result: Union[NLPResult, dict],
        clause_detection: Union[ClauseDetectionResult, dict],
        document_meta: Union[DocumentMeta, dict],
        page_info: Union[PageInfo, dict],
    ) -> RiskAssessment:
        """
        Compute the risk assessment for one document.
        
        Args:
            nlp_result: Output of the NLP engine.
            clause_detection: Output of the clause detector.
            document_meta: Caller-supplied document facts.
            page_info: Caller-supplied page facts.
        
        Returns:
            RiskAssessment with score, level, confidence, breakdown and
            recommendations.
        
        Raises:
            MissingFieldError: If any input is None.
            InvalidDocumentError: If any input has the wrong structure.
        """
        nlp_result = _coerce(nlp_result, NLPResult, "nlp_result")
        clause_detection = _coerce(clause_detection, ClauseDetectionResult, "clause_detection")
        document_meta = _coerce(document_meta, DocumentMeta, "document_meta")
        page_info = _coerce(page_info, PageInfo, "page_info")
        
        raw = float(BASE_SCORE)
        raw = self.apply_positive_multipliers(raw, document_meta, page_info)
        raw = self.apply_clause_penalties(raw, clause_detection)
        raw = self.apply_document_penalties(raw, nlp_result, document_meta)
        raw = self.apply_readability_adjustment(raw, nlp_result.readability)
        
        score = int(max(0, min(100, round_half_up(raw))))
        risk_level = self.determine_risk_level(score)
        
        logger.debug(f"Risk score {score} ({risk_level.level.value}) from raw {raw:.2f}")
        
        return RiskAssessment(
            score=score,
            risk_level=risk_level,
            confidence=self.calculate_confidence(nlp_result, clause_detection, document_meta),
            breakdown=self.build_breakdown(nlp_result, clause_detection, document_meta),
            recommendations=self.generate_recommendations(score, clause_detection),
        )
    
    # -------------------------------------------------------------------------
    # Score steps
    # -------------------------------------------------------------------------
    
    @staticmethod
    def apply_positive_multipliers(
        score: float, document_meta: DocumentMeta, page_info: PageInfo
    ) -> float:
        if document_meta.has_privacy_policy:
            score *= MULTIPLIERS["HAS_PRIVACY_POLICY"]
        if document_meta.has_cookie_policy:
            score *= MULTIPLIERS["HAS_COOKIE_POLICY"]
        if document_meta.word_count < SHORT_DOCUMENT_WORDS:
            score *= MULTIPLIERS["SHORT_DOCUMENT"]
        if page_info.easy_to_find:
            score *= MULTIPLIERS["EASY_TO_FIND"]
        return score
    
    @staticmethod
    def apply_clause_penalties(score: float, clause_detection: ClauseDetectionResult) -> float:
        totals = clause_detection.total_weight
        if totals.negative > 0:
            score -= (totals.negative / 10) * 5
        if totals.positive > 0:
            score += totals.positive * 2
        
        for clause_id, penalty in CRITICAL_CLAUSE_PENALTIES.items():
            if clause_detection.is_detected(clause_id):
                score -= penalty
        return score
    
    def apply_document_penalties(
        self, score: float, nlp_result: NLPResult, document_meta: DocumentMeta
    ) -> float:
        if nlp_result.stats.word_count > VERY_LONG_DOCUMENT_WORDS:
            score += PENALTIES["VERY_LONG"]
        if self.has_vague_language(nlp_result):
            score += PENALTIES["VAGUE_LANGUAGE"]
        if document_meta.hard_to_find:
            score += PENALTIES["HARD_TO_FIND"]
        if not document_meta.has_contact_info:
            score += PENALTIES["NO_CONTACT_INFO"]
        if document_meta.last_updated and self.is_outdated(document_meta.last_updated):
            score += PENALTIES["OUTDATED"]
        return score
    
    @staticmethod
    def apply_readability_adjustment(score: float, readability: Readability) -> float:
        if readability.score >= CLEAR_LANGUAGE_MIN_SCORE:
            score *= MULTIPLIERS["CLEAR_LANGUAGE"]
        if readability.score < HARD_TO_READ_MAX_SCORE:
            score += PENALTIES["HARD_TO_READ"]
        return score
    
    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------
    
    @staticmethod
    def determine_risk_level(score: int) -> RiskLevel:
        """LOW for score >= 70, MEDIUM for 40-69, HIGH below 40."""
        if score >= RISK_LEVELS["LOW"]["min"]:
            name = RiskLevelName.LOW
        elif score >= RISK_LEVELS["MEDIUM"]["min"]:
            name = RiskLevelName.MEDIUM
        else:
            name = RiskLevelName.HIGH
        
        level = RISK_LEVELS[name.value]
        return RiskLevel(
            level=name,
            label=level["label"],
            color=level["color"],
            icon=level["icon"],
            description=level["description"],
        )
    
    @staticmethod
    def calculate_confidence(
        nlp_result: NLPResult,
        clause_detection: ClauseDetectionResult,
        document_meta: DocumentMeta,
    ) -> float:
        factors = (
            0.3 if document_meta.is_complete else 0.1,
            0.3 if clause_detection.clause_count > 0 else 0.1,
            0.2 if nlp_result.stats.word_count > COMPLETE_DOCUMENT_WORDS else 0.1,
            0.2 if document_meta.has_contact_info else 0.1,
        )
        return min(1.0, round(sum(factors), 2))
    
    # -------------------------------------------------------------------------
    # Explanations
    # -------------------------------------------------------------------------
    
    def build_breakdown(
        self,
        nlp_result: NLPResult,
        clause_detection: ClauseDetectionResult,
        document_meta: DocumentMeta,
    ) -> ScoreBreakdown:
        clauses = [
            ClauseAdjustment(
                type=clause_id,
                impact="negative" if detection.weight > 0 else "positive",
                weight=abs(detection.weight),
                summary=detection.summary_text,
            )
            for clause_id, detection in clause_detection.detections.items()
        ]
        
        readability_score = nlp_result.readability.score
        if readability_score >= CLEAR_LANGUAGE_MIN_SCORE:
            readability = ReadabilityAdjustment(impact=15, reason="Clear and accessible language")
        elif readability_score < HARD_TO_READ_MAX_SCORE:
            readability = ReadabilityAdjustment(impact=-10, reason="Complex and difficult language")
        else:
            readability = ReadabilityAdjustment(impact=0, reason="Average readability")
        
        metadata: list[MetadataAdjustment] = []
        if document_meta.has_privacy_policy:
            metadata.append(MetadataAdjustment(reason="Privacy policy present", impact=5))
        if document_meta.has_contact_info:
            metadata.append(MetadataAdjustment(reason="Contact information available", impact=5))
        if document_meta.is_outdated:
            metadata.append(MetadataAdjustment(reason="Outdated policy", impact=-10))
        
        return ScoreBreakdown(
            base_score=BASE_SCORE,
            adjustments=ScoreAdjustments(
                clauses=clauses,
                readability=readability,
                metadata=metadata,
            ),
        )
    
    @staticmethod
    def generate_recommendations(
        score: int, clause_detection: ClauseDetectionResult
    ) -> list[str]:
        recommendations: list[str] = []
        
        if score < RISK_LEVELS["LOW"]["min"]:
            recommendations.append(RECOMMENDATIONS["READ_CAREFULLY"])
        if score < RISK_LEVELS["MEDIUM"]["min"]:
            recommendations.append(RECOMMENDATIONS["USE_WITH_CAUTION"])
        
        for clause_id in CLAUSE_RECOMMENDATIONS:
            if clause_detection.is_detected(clause_id):
                recommendations.append(RECOMMENDATIONS[clause_id])
        
        if not recommendations:
            recommendations.append(RECOMMENDATIONS["TRANSPARENT"])
        return recommendations
    
    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    
    @staticmethod
    def has_vague_language(nlp_result: NLPResult) -> bool:
        """More than five top keywords are vague terms."""
        vague = sum(1 for k in nlp_result.keywords if k.word.lower() in VAGUE_TERMS)
        return vague > VAGUE_KEYWORD_THRESHOLD
    
    def is_outdated(self, last_updated: Union[datetime, date, str]) -> bool:
        """
        Check whether the last update is more than two years old.
        
        Unparseable dates count as not outdated.
        """
        if isinstance(last_updated, datetime):
            updated = last_updated
        elif isinstance(last_updated, date):
            updated = datetime.combine(last_updated, time())
        else:
            try:
                updated = datetime.fromisoformat(str(last_updated).strip().replace("Z", "+00:00"))
            except ValueError:
                logger.debug(f"Ignoring malformed last-updated date: {last_updated!r}")
                return False
        
        cutoff = _years_before(_as_local_naive(self.clock()), OUTDATED_AFTER_YEARS)
        return _as_local_naive(updated) < cutoff
    
    @staticmethod
    def compare_with_market(score: int) -> MarketComparison:
        """Place a score against the observed market average of 55."""
        difference = score - MARKET_AVERAGE_SCORE
        percentile = next(
            (pct for minimum, pct in MARKET_PERCENTILES if score >= minimum), 5
        )
        if difference > 10:
            comparison = "better than average"
        elif difference < -10:
            comparison = "worse than average"
        else:
            comparison = "average"
        
        return MarketComparison(
            score=score,
            market_average=MARKET_AVERAGE_SCORE,
            difference=difference,
            percentile=percentile,
            comparison=comparison,
        )


def score_risk(
    nlp_result: Union[NLPResult, dict],
    clause_detection: Union[ClauseDetectionResult, dict],
    document_meta: Union[DocumentMeta, dict],
    page_info: Union[PageInfo, dict],
) -> RiskAssessment:
    """Score a document with a default RiskScorer."""
    return RiskScorer().score(nlp_result, clause_detection, document_meta, page_info)


__all__ = [
    "RECOMMENDATIONS",
    "RiskScorer",
    "score_risk",
]
