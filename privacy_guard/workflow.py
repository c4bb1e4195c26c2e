"""
LangGraph workflow for analyzing a legal page end to end.

This module wires the core components into a linear state machine:

    analyze_text -> detect_clauses -> score_risk -> summarize

Each node is a pure function of the AnalysisStateDict. A failing node
records the failure in ``errors`` and later nodes skip work whose inputs
are missing, so a failed analysis comes back as an explicit result
instead of an exception.

Example:
    >>> from privacy_guard.workflow import run_analysis
    >>> report = run_analysis(policy_text, {"title": "Privacy Policy", "url": url})
    >>> report.risk_assessment.risk_level.level
    <RiskLevelName.MEDIUM: 'MEDIUM'>
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, TypedDict

from langgraph.graph import END, StateGraph

from config.settings import settings
from privacy_guard.clause_detector import ClauseDetector
from privacy_guard.constants import COMPLETE_DOCUMENT_WORDS
from privacy_guard.exceptions import AnalysisError, InvalidDocumentError, MissingFieldError
from privacy_guard.models import (
    AnalysisReport,
    ClauseDetectionResult,
    DocumentMeta,
    NLPResult,
    PageInfo,
    RiskAssessment,
)
from privacy_guard.nlp_engine import NLPEngine, generate_summary
from privacy_guard.risk_scorer import RiskScorer

logger = logging.getLogger(__name__)

# =============================================================================
# STATE
# =============================================================================

class AnalysisStateDict(TypedDict, total=False):
    """State carried between workflow nodes."""
    raw_text: str
    page_metadata: dict[str, Any]
    nlp_result: Optional[NLPResult]
    clause_detection: Optional[ClauseDetectionResult]
    risk_assessment: Optional[RiskAssessment]
    summary: list[str]
    errors: list[str]
    metadata: dict[str, Any]


def _record_failure(errors: list[str], stage: str, error: Exception) -> None:
    failure = AnalysisError(f"{stage} failed: {error}", stage=stage)
    logger.error(str(failure))
    errors.append(str(failure))


# =============================================================================
# PAGE FACTS
# =============================================================================

def build_document_meta(
    page_metadata: dict[str, Any],
    nlp_result: NLPResult,
    scorer: Optional[RiskScorer] = None,
) -> DocumentMeta:
    """
    Derive document facts from page metadata and the NLP result.
    
    Args:
        page_metadata: Facts from the page extractor (title, has_contact_info,
            last_updated, ...).
        nlp_result: NLP analysis of the page text.
        scorer: Scorer whose clock decides whether the page is outdated.
    
    Returns:
        DocumentMeta ready for scoring.
    """
    title = (page_metadata.get("title") or "").lower()
    last_updated = page_metadata.get("last_updated")
    word_count = nlp_result.stats.word_count
    scorer = scorer or RiskScorer()
    
    return DocumentMeta(
        has_privacy_policy="privacy" in title,
        has_cookie_policy="cookie" in title,
        has_contact_info=bool(page_metadata.get("has_contact_info", False)),
        word_count=word_count,
        is_complete=word_count > COMPLETE_DOCUMENT_WORDS,
        hard_to_find=False,
        is_outdated=bool(last_updated) and scorer.is_outdated(last_updated),
        last_updated=last_updated,
    )


def build_page_info(page_metadata: dict[str, Any]) -> PageInfo:
    return PageInfo(
        easy_to_find=bool(page_metadata.get("easy_to_find", False)),
        url=page_metadata.get("url"),
    )


# =============================================================================
# WORKFLOW NODES
# =============================================================================

def analyze_text(state: AnalysisStateDict) -> AnalysisStateDict:
    """
    Run the NLP engine over the page text.
    
    Args:
        state: Current workflow state containing raw_text.
    
    Returns:
        Updated state with nlp_result populated.
    """
    logger.info("🔍 Analyzing document text")
    
    text = state.get("raw_text", "")
    errors: list[str] = list(state.get("errors", []))
    metadata: dict[str, Any] = dict(state.get("metadata", {}))
    page_metadata = state.get("page_metadata", {})
    
    if not text or not text.strip():
        logger.warning("Empty document text provided")
        errors.append("Empty document text provided")
        return {**state, "nlp_result": None, "errors": errors}
    
    language = page_metadata.get("language") or settings.DEFAULT_LANGUAGE
    
    try:
        nlp_result = NLPEngine().analyze_document(text, language)
    except Exception as e:
        _record_failure(errors, "analyze_text", e)
        return {**state, "nlp_result": None, "errors": errors}
    
    metadata["nlp_timestamp"] = datetime.now().isoformat()
    metadata["text_length"] = len(text)
    metadata["truncated"] = len(text) > settings.MAX_DOCUMENT_SIZE
    metadata["word_count"] = nlp_result.stats.word_count
    
    logger.info(
        f"NLP complete: {nlp_result.stats.word_count} words, "
        f"{nlp_result.stats.sentence_count} sentences, "
        f"readability {nlp_result.readability.score} ({nlp_result.readability.difficulty.value})"
    )
    
    return {
        **state,
        "nlp_result": nlp_result,
        "errors": errors,
        "metadata": metadata,
    }


def detect_clauses(state: AnalysisStateDict) -> AnalysisStateDict:
    """
    Scan the text for sensitive clauses.
    
    Args:
        state: Workflow state with raw_text and nlp_result.
    
    Returns:
        State with clause_detection populated.
    """
    logger.info("🚨 Detecting sensitive clauses")
    
    errors: list[str] = list(state.get("errors", []))
    metadata: dict[str, Any] = dict(state.get("metadata", {}))
    nlp_result = state.get("nlp_result")
    
    if nlp_result is None:
        logger.warning("No NLP result to detect clauses from")
        return state
    
    try:
        detection = ClauseDetector().detect_all(state["raw_text"], nlp_result.sentences)
    except Exception as e:
        _record_failure(errors, "detect_clauses", e)
        return {**state, "clause_detection": None, "errors": errors}
    
    metadata["clause_count"] = detection.clause_count
    if detection.total_weight.negative:
        logger.warning(
            f"⚠️  Found {detection.clause_count} clause(s): {', '.join(detection.detections)}"
        )
    else:
        logger.info(f"Found {detection.clause_count} clause(s)")
    
    return {
        **state,
        "clause_detection": detection,
        "errors": errors,
        "metadata": metadata,
    }


def score_risk(state: AnalysisStateDict) -> AnalysisStateDict:
    """
    Combine NLP results, clause detections and page facts into a score.
    
    Args:
        state: Workflow state with nlp_result and clause_detection.
    
    Returns:
        State with risk_assessment populated.
    """
    logger.info("🎯 Scoring risk")
    
    errors: list[str] = list(state.get("errors", []))
    metadata: dict[str, Any] = dict(state.get("metadata", {}))
    nlp_result = state.get("nlp_result")
    detection = state.get("clause_detection")
    
    if nlp_result is None or detection is None:
        logger.warning("Missing analysis results, skipping scoring")
        return state
    
    page_metadata = state.get("page_metadata", {})
    scorer = RiskScorer()
    
    try:
        assessment = scorer.score(
            nlp_result,
            detection,
            build_document_meta(page_metadata, nlp_result, scorer),
            build_page_info(page_metadata),
        )
    except Exception as e:
        _record_failure(errors, "score_risk", e)
        return {**state, "risk_assessment": None, "errors": errors}
    
    metadata["score"] = assessment.score
    metadata["risk_level"] = assessment.risk_level.level.value
    
    logger.info(f"Score {assessment.score}/100 - {assessment.risk_level.level.value} risk")
    
    return {
        **state,
        "risk_assessment": assessment,
        "errors": errors,
        "metadata": metadata,
    }


def summarize(state: AnalysisStateDict) -> AnalysisStateDict:
    """
    Build the extractive summary. Terminal node.
    
    Args:
        state: Final workflow state.
    
    Returns:
        State with summary populated.
    """
    logger.info("📄 Generating summary")
    
    errors = state.get("errors", [])
    metadata: dict[str, Any] = dict(state.get("metadata", {}))
    nlp_result = state.get("nlp_result")
    
    summary = (
        generate_summary(nlp_result.sentences, settings.SUMMARY_MAX_SENTENCES)
        if nlp_result is not None else []
    )
    
    if errors:
        logger.warning(f"⚠️  {len(errors)} error(s) occurred during analysis")
    
    metadata["completed_at"] = datetime.now().isoformat()
    metadata["error_count"] = len(errors)
    
    return {
        **state,
        "summary": summary,
        "metadata": metadata,
    }


# =============================================================================
# WORKFLOW DEFINITION
# =============================================================================

def create_workflow() -> StateGraph:
    """
    Create and configure the page analysis workflow.
    
    The workflow consists of four nodes:
    1. analyze_text: NLP pass over the page text
    2. detect_clauses: Sensitive clause scan
    3. score_risk: Transparency score and risk level
    4. summarize: Extractive summary
    
    Returns:
        Configured StateGraph ready for compilation.
    """
    wf = StateGraph(AnalysisStateDict)
    
    wf.add_node("analyze_text", analyze_text)
    wf.add_node("detect_clauses", detect_clauses)
    wf.add_node("score_risk", score_risk)
    wf.add_node("summarize", summarize)
    
    wf.set_entry_point("analyze_text")
    
    wf.add_edge("analyze_text", "detect_clauses")
    wf.add_edge("detect_clauses", "score_risk")
    wf.add_edge("score_risk", "summarize")
    wf.add_edge("summarize", END)
    
    return wf


def create_initial_state(
    raw_text: str,
    page_metadata: Optional[dict[str, Any]] = None,
) -> AnalysisStateDict:
    """
    Create a properly initialized state for the workflow.
    
    Args:
        raw_text: The page text to analyze.
        page_metadata: Facts from the page extractor.
    
    Returns:
        Initial AnalysisStateDict ready for workflow invocation.
    
    Raises:
        MissingFieldError: If raw_text is None.
        InvalidDocumentError: If raw_text or page_metadata has the wrong type.
    """
    if raw_text is None:
        raise MissingFieldError("raw_text")
    if not isinstance(raw_text, str):
        raise InvalidDocumentError("Document text must be a string", field="raw_text", value=raw_text)
    if page_metadata is not None and not isinstance(page_metadata, dict):
        raise InvalidDocumentError(
            "Page metadata must be a dict", field="page_metadata", value=page_metadata
        )
    
    return {
        "raw_text": raw_text,
        "page_metadata": dict(page_metadata or {}),
        "nlp_result": None,
        "clause_detection": None,
        "risk_assessment": None,
        "summary": [],
        "errors": [],
        "metadata": {
            "created_at": datetime.now().isoformat(),
        },
    }


def run_analysis(
    raw_text: str,
    page_metadata: Optional[dict[str, Any]] = None,
) -> AnalysisReport:
    """
    Analyze one page and package the outcome.
    
    Args:
        raw_text: Plain text of the legal page.
        page_metadata: Facts from the page extractor.
    
    Returns:
        AnalysisReport; check ``success`` and ``errors`` for failures.
    """
    result = app.invoke(create_initial_state(raw_text, page_metadata))
    
    return AnalysisReport(
        url=result["page_metadata"].get("url"),
        risk_assessment=result.get("risk_assessment"),
        summary=result.get("summary", []),
        clause_detection=result.get("clause_detection"),
        nlp_result=result.get("nlp_result"),
        page_metadata=result["page_metadata"],
        errors=result.get("errors", []),
    )


# Create and compile the workflow
workflow = create_workflow()
app = workflow.compile()


__all__ = [
    "AnalysisStateDict",
    "app",
    "build_document_meta",
    "build_page_info",
    "create_initial_state",
    "create_workflow",
    "run_analysis",
    "workflow",
]
