"""
Privacy Guard - Core Module

Rule-based risk analysis for privacy policies and terms of service.

This package provides:
    - NLPEngine: normalization, tokenization, statistics, keywords,
      readability, entities, summaries and language detection
    - ClauseDetector: sensitive clause scan over a static catalog
    - RiskScorer: bounded transparency score, risk level and advice
    - Workflow: LangGraph pipeline tying the three together for a page
    - Models: Pydantic records for every input and output
    - Exceptions: Custom exception hierarchy for error handling

Example:
    >>> from privacy_guard import analyze_document, detect_clauses, score_risk
    >>> 
    >>> nlp = analyze_document(policy_text)
    >>> clauses = detect_clauses(policy_text, nlp.sentences)
    >>> assessment = score_risk(nlp, clauses, DocumentMeta(), PageInfo())
    >>> print(assessment.risk_level.label)
"""

from privacy_guard.nlp_engine import NLPEngine, analyze_document, generate_summary
from privacy_guard.clause_catalog import CLAUSE_CATALOG, ClauseDefinition
from privacy_guard.clause_detector import ClauseDetector, detect_clauses
from privacy_guard.risk_scorer import RiskScorer, score_risk
from privacy_guard.workflow import (
    app,
    AnalysisStateDict,
    create_workflow,
    create_initial_state,
    run_analysis,
)
from privacy_guard.models import (
    AnalysisReport,
    ClauseDetection,
    ClauseDetectionResult,
    ClauseReport,
    Difficulty,
    DocumentMeta,
    Entities,
    Keyword,
    MarketComparison,
    NLPResult,
    PageInfo,
    Readability,
    RetentionInfo,
    RiskAssessment,
    RiskLevel,
    RiskLevelName,
    TextStats,
)
from privacy_guard.exceptions import (
    PrivacyGuardException,
    InvalidDocumentError,
    MissingFieldError,
    ClauseCatalogError,
    AnalysisError,
)

__version__ = "1.0.0"
__author__ = "Privacy Guard Team"

__all__ = [
    # Core components
    "NLPEngine",
    "analyze_document",
    "generate_summary",
    "CLAUSE_CATALOG",
    "ClauseDefinition",
    "ClauseDetector",
    "detect_clauses",
    "RiskScorer",
    "score_risk",
    # Workflow
    "app",
    "AnalysisStateDict",
    "create_workflow",
    "create_initial_state",
    "run_analysis",
    # Models
    "AnalysisReport",
    "ClauseDetection",
    "ClauseDetectionResult",
    "ClauseReport",
    "Difficulty",
    "DocumentMeta",
    "Entities",
    "Keyword",
    "MarketComparison",
    "NLPResult",
    "PageInfo",
    "Readability",
    "RetentionInfo",
    "RiskAssessment",
    "RiskLevel",
    "RiskLevelName",
    "TextStats",
    # Exceptions
    "PrivacyGuardException",
    "InvalidDocumentError",
    "MissingFieldError",
    "ClauseCatalogError",
    "AnalysisError",
]
