"""
Pytest fixtures shared across all test modules.
"""

from datetime import datetime
from pathlib import Path

import pytest


FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def sample_policy_text() -> str:
    """Bundled sample privacy policy with several sensitive clauses."""
    path = Path(__file__).resolve().parent.parent / "data" / "sample_policy.txt"
    return path.read_text(encoding="utf-8")


@pytest.fixture
def neutral_text() -> str:
    """Text that matches nothing in the clause catalog."""
    return (
        "This service lets you create an account to post short notes. "
        "Your notes remain visible only to you unless you publish them. "
        "We answer support questions by email within two business days. "
        "Our team works hard to improve the product every week."
    )


@pytest.fixture
def data_selling_text() -> str:
    return "We may sell your personal information to third party partners."


@pytest.fixture
def fixed_clock():
    """Clock returning a constant time, for outdated-date checks."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_nlp_result():
    """Factory for hand-built NLPResult objects."""
    from privacy_guard.models import Difficulty, NLPResult, Readability, TextStats
    
    def _make(
        word_count: int = 1200,
        readability_score: int = 50,
        keywords=None,
        sentences=None,
    ) -> NLPResult:
        return NLPResult(
            stats=TextStats(word_count=word_count, sentence_count=60),
            keywords=keywords or [],
            readability=Readability(
                score=readability_score,
                difficulty=Difficulty.MEDIUM,
                avg_words_per_sentence=20.0,
                avg_syllables_per_word=1.6,
            ),
            sentences=sentences or [],
            language="en",
            timestamp=FIXED_NOW,
        )
    
    return _make
