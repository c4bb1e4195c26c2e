"""
Unit tests for the risk scorer.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

pytestmark = pytest.mark.unit


@pytest.fixture
def favorable_meta():
    """Metadata that earns every multiplicative bonus."""
    from privacy_guard.models import DocumentMeta
    
    return DocumentMeta(
        has_privacy_policy=True,
        has_cookie_policy=True,
        has_contact_info=True,
        word_count=1200,
        is_complete=True,
    )


@pytest.fixture
def scorer(fixed_clock):
    from privacy_guard.risk_scorer import RiskScorer
    
    return RiskScorer(clock=fixed_clock)


class TestScenarios:
    """End-to-end scoring scenarios."""
    
    def test_clean_policy_scores_low_risk(
        self, scorer, neutral_text, favorable_meta, make_nlp_result
    ):
        """Verify a clause-free, well-presented policy is LOW risk."""
        from privacy_guard.clause_detector import detect_clauses
        from privacy_guard.models import PageInfo, RiskLevelName
        
        detection = detect_clauses(neutral_text)
        assert detection.clause_count == 0
        
        assessment = scorer.score(
            make_nlp_result(readability_score=75),
            detection,
            favorable_meta,
            PageInfo(easy_to_find=True),
        )
        
        assert assessment.score > 50
        assert assessment.score == 77
        assert assessment.risk_level.level == RiskLevelName.LOW
        assert assessment.recommendations == ["✓ Policy is broadly transparent"]
    
    def test_data_selling_scores_high_risk(self, scorer, data_selling_text):
        """Verify data selling with no bonuses is HIGH risk."""
        from privacy_guard.clause_detector import detect_clauses
        from privacy_guard.models import DocumentMeta, PageInfo, RiskLevelName
        from privacy_guard.nlp_engine import analyze_document
        
        nlp = analyze_document(data_selling_text)
        detection = detect_clauses(data_selling_text, nlp.sentences)
        
        assessment = scorer.score(nlp, detection, DocumentMeta(word_count=6000), PageInfo())
        
        # 50 - 18/10*5 - 15 (flat) - 5 (no contact)
        assert assessment.score <= 50 - 15 - 9
        assert assessment.score == 21
        assert assessment.risk_level.level == RiskLevelName.HIGH
        assert "⚠️ Your data may be sold - check the opt-out options" in assessment.recommendations
        assert "🔴 Consider using this service with caution" in assessment.recommendations
    
    def test_user_rights_adds_exactly_ten(
        self, scorer, favorable_meta, make_nlp_result
    ):
        """Verify a lone USER_RIGHTS clause adds 5 * 2 points."""
        from privacy_guard.clause_detector import detect_clauses
        from privacy_guard.models import ClauseDetectionResult, PageInfo
        from privacy_guard.risk_scorer import RECOMMENDATIONS
        
        detection = detect_clauses("You have the right to access your account at any time.")
        assert list(detection.detections) == ["USER_RIGHTS"]
        assert detection.total_weight.positive == 5
        
        assert scorer.apply_clause_penalties(50.0, detection) == 60.0
        
        nlp = make_nlp_result(readability_score=50)
        page = PageInfo(easy_to_find=True)
        with_rights = scorer.score(nlp, detection, favorable_meta, page)
        without = scorer.score(nlp, ClauseDetectionResult(), favorable_meta, page)
        
        assert with_rights.score == 77
        assert without.score == 67
        assert RECOMMENDATIONS["USER_RIGHTS"] in with_rights.recommendations
        assert RECOMMENDATIONS["READ_CAREFULLY"] not in with_rights.recommendations
    
    def test_critical_clauses_double_penalized(self, scorer):
        """Verify flat penalties stack on top of the weight penalty."""
        from privacy_guard.clause_detector import detect_clauses
        
        detection = detect_clauses("Disputes are settled by binding arbitration.")
        assert list(detection.detections) == ["MANDATORY_ARBITRATION"]
        
        # 9/10*5 weight penalty plus the flat 10
        assert scorer.apply_clause_penalties(50.0, detection) == pytest.approx(50 - 4.5 - 10)


class TestScoreSteps:
    """Tests for individual scoring steps."""
    
    def test_multipliers_apply_in_sequence(self, scorer, favorable_meta):
        from privacy_guard.models import PageInfo
        
        score = scorer.apply_positive_multipliers(50.0, favorable_meta, PageInfo(easy_to_find=True))
        
        assert score == pytest.approx(50 * 1.10 * 1.05 * 1.10 * 1.05)
    
    def test_document_penalties(self, scorer, make_nlp_result, fixed_clock):
        from privacy_guard.models import DocumentMeta
        
        meta = DocumentMeta(hard_to_find=True, last_updated="2019-01-01")
        
        score = scorer.apply_document_penalties(100.0, make_nlp_result(word_count=12000), meta)
        
        # very long, hard to find, no contact, outdated
        assert score == 100 - 15 - 10 - 5 - 10
    
    def test_vague_language_penalty(self, scorer, make_nlp_result):
        from privacy_guard.models import DocumentMeta, Keyword
        
        words = ["may", "might", "could", "possible", "sometimes", "generally"]
        keywords = [Keyword(word=w, count=10, relevance=0.01) for w in words]
        nlp = make_nlp_result(keywords=keywords)
        
        assert scorer.has_vague_language(nlp) is True
        assert scorer.has_vague_language(make_nlp_result(keywords=keywords[:5])) is False
        assert scorer.apply_document_penalties(
            50.0, nlp, DocumentMeta(has_contact_info=True)
        ) == 40.0
    
    @pytest.mark.parametrize("readability, expected", [
        (60, 50 * 1.15),
        (45, 50.0),
        (29, 40.0),
    ])
    def test_readability_adjustment(self, scorer, make_nlp_result, readability, expected):
        nlp = make_nlp_result(readability_score=readability)
        
        assert scorer.apply_readability_adjustment(50.0, nlp.readability) == pytest.approx(expected)
    
    def test_score_clamped(self, scorer, make_nlp_result):
        """Verify extreme penalties clamp at zero."""
        from privacy_guard.clause_detector import detect_clauses
        from privacy_guard.models import DocumentMeta, PageInfo
        
        detection = detect_clauses(
            "We sell your data. Disputes use binding arbitration. We collect biometric data. "
            "Data is transferred outside the EU."
        )
        nlp = make_nlp_result(word_count=20000, readability_score=10)
        meta = DocumentMeta(word_count=20000, hard_to_find=True)
        
        assessment = scorer.score(nlp, detection, meta, PageInfo())
        
        assert assessment.score == 0


class TestRiskLevel:
    """Tests for risk classification."""
    
    @pytest.mark.parametrize("score", range(0, 101))
    def test_level_is_pure_function_of_score(self, score: int):
        from privacy_guard.models import RiskLevelName
        from privacy_guard.risk_scorer import RiskScorer
        
        level = RiskScorer.determine_risk_level(score).level
        
        if score >= 70:
            assert level == RiskLevelName.LOW
        elif score >= 40:
            assert level == RiskLevelName.MEDIUM
        else:
            assert level == RiskLevelName.HIGH
    
    def test_level_presentation(self):
        from privacy_guard.risk_scorer import RiskScorer
        
        level = RiskScorer.determine_risk_level(10)
        
        assert level.label == "High"
        assert level.color == "#ef4444"
        assert level.icon == "⚠"


class TestConfidence:
    """Tests for overall confidence."""
    
    def test_minimum_and_maximum(self, scorer, make_nlp_result, favorable_meta):
        from privacy_guard.clause_detector import detect_clauses
        from privacy_guard.models import ClauseDetectionResult, DocumentMeta
        
        low = scorer.calculate_confidence(
            make_nlp_result(word_count=100), ClauseDetectionResult(), DocumentMeta()
        )
        high = scorer.calculate_confidence(
            make_nlp_result(word_count=1200),
            detect_clauses("Disputes go to binding arbitration."),
            favorable_meta,
        )
        
        assert low == pytest.approx(0.4)
        assert high == 1.0
    
    def test_assessment_confidence_bounded(self, scorer, sample_policy_text):
        from privacy_guard.clause_detector import detect_clauses
        from privacy_guard.models import DocumentMeta, PageInfo
        from privacy_guard.nlp_engine import analyze_document
        
        nlp = analyze_document(sample_policy_text)
        assessment = scorer.score(
            nlp, detect_clauses(sample_policy_text, nlp.sentences), DocumentMeta(), PageInfo()
        )
        
        assert 0.0 <= assessment.confidence <= 1.0
        assert 0 <= assessment.score <= 100
        assert isinstance(assessment.score, int)
        assert assessment.recommendations


class TestOutdated:
    """Tests for the last-updated check."""
    
    @pytest.mark.parametrize("value, expected", [
        ("2020-01-15", True),
        ("2024-10-18", True),
        ("2025-06-01", False),
        ("2025-06-01T10:00:00Z", False),
        (date(2023, 1, 1), True),
        (datetime(2026, 1, 1), False),
        ("not a date", False),
        ("March 2021", False),
    ])
    def test_is_outdated(self, scorer, value, expected):
        assert scorer.is_outdated(value) is expected
    
    @pytest.mark.parametrize("value, expected", [
        ("2010-01-01", True),
        ("2025-06-01T10:00:00+02:00", False),
        (date(2026, 1, 1), False),
        (datetime(2024, 10, 1, tzinfo=timezone(timedelta(hours=-5))), True),
        ("garbage", False),
    ])
    def test_timezone_aware_clock(self, value, expected):
        """Verify an aware clock compares against naive and aware dates alike."""
        from privacy_guard.risk_scorer import RiskScorer
        
        scorer = RiskScorer(clock=lambda: datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))
        
        assert scorer.is_outdated(value) is expected
    
    def test_malformed_date_not_penalized(self, scorer, make_nlp_result):
        from privacy_guard.models import DocumentMeta
        
        meta = DocumentMeta(has_contact_info=True, last_updated="yesterday-ish")
        
        assert scorer.apply_document_penalties(50.0, make_nlp_result(), meta) == 50.0


class TestBreakdown:
    """Tests for the score breakdown."""
    
    def test_breakdown_contents(self, scorer, data_selling_text, favorable_meta):
        from privacy_guard.clause_detector import detect_clauses
        from privacy_guard.models import PageInfo
        from privacy_guard.nlp_engine import analyze_document
        
        nlp = analyze_document(data_selling_text)
        assessment = scorer.score(
            nlp, detect_clauses(data_selling_text), favorable_meta, PageInfo()
        )
        breakdown = assessment.breakdown
        
        assert breakdown.base_score == 50
        assert {c.type for c in breakdown.adjustments.clauses} == {
            "THIRD_PARTY_SHARING", "DATA_SELLING"
        }
        assert all(c.impact == "negative" for c in breakdown.adjustments.clauses)
        assert breakdown.adjustments.readability.impact == 0
        assert [m.impact for m in breakdown.adjustments.metadata] == [5, 5]


class TestInputValidation:
    """Tests for fail-fast input handling."""
    
    def test_missing_meta_raises(self, scorer, make_nlp_result):
        from privacy_guard.exceptions import MissingFieldError
        from privacy_guard.models import ClauseDetectionResult, PageInfo
        
        with pytest.raises(MissingFieldError) as exc_info:
            scorer.score(make_nlp_result(), ClauseDetectionResult(), None, PageInfo())
        
        assert exc_info.value.details["field"] == "document_meta"
    
    def test_wrong_type_raises(self, scorer, make_nlp_result):
        from privacy_guard.exceptions import InvalidDocumentError
        from privacy_guard.models import ClauseDetectionResult, DocumentMeta
        
        with pytest.raises(InvalidDocumentError):
            scorer.score(make_nlp_result(), ClauseDetectionResult(), DocumentMeta(), "page")
    
    def test_accepts_dict_inputs(self, scorer, make_nlp_result):
        """Verify camelCase dicts from external callers are accepted."""
        from privacy_guard.models import ClauseDetectionResult
        
        nlp = make_nlp_result()
        assessment = scorer.score(
            nlp.to_dict(),
            ClauseDetectionResult().to_dict(),
            {"hasPrivacyPolicy": True, "hasContactInfo": True, "wordCount": 1200},
            {"easyToFind": False, "url": "https://example.com/privacy"},
        )
        
        assert assessment == scorer.score(
            nlp,
            ClauseDetectionResult(),
            {"has_privacy_policy": True, "has_contact_info": True, "word_count": 1200},
            {},
        )
    
    def test_identical_inputs_give_identical_results(self, scorer, sample_policy_text):
        from privacy_guard.clause_detector import detect_clauses
        from privacy_guard.models import DocumentMeta, PageInfo
        from privacy_guard.nlp_engine import analyze_document
        
        nlp = analyze_document(sample_policy_text, "en", timestamp=datetime(2026, 1, 1))
        detection = detect_clauses(sample_policy_text, nlp.sentences)
        meta = DocumentMeta(has_contact_info=True, last_updated="2021-03-03")
        
        assert scorer.score(nlp, detection, meta, PageInfo()) == scorer.score(
            nlp, detection, meta, PageInfo()
        )


class TestMarketComparison:
    """Tests for market comparison."""
    
    @pytest.mark.parametrize("score, percentile, comparison", [
        (95, 95, "better than average"),
        (66, 55, "better than average"),
        (55, 40, "average"),
        (45, 25, "average"),
        (44, 25, "worse than average"),
        (10, 5, "worse than average"),
    ])
    def test_compare_with_market(self, score, percentile, comparison):
        from privacy_guard.risk_scorer import RiskScorer
        
        result = RiskScorer.compare_with_market(score)
        
        assert result.market_average == 55
        assert result.difference == score - 55
        assert result.percentile == percentile
        assert result.comparison == comparison
