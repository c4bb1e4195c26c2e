"""
Unit tests for the clause catalog.
"""

import re
from dataclasses import FrozenInstanceError

import pytest

pytestmark = pytest.mark.unit


class TestCatalogContents:
    """Tests for the reference catalog."""
    
    def test_reference_weights(self):
        """Verify catalog ids and weights."""
        from privacy_guard.clause_catalog import CLAUSE_CATALOG
        
        weights = {cid: d.weight for cid, d in CLAUSE_CATALOG.items()}
        
        assert weights == {
            "THIRD_PARTY_SHARING": 8,
            "DATA_SELLING": 10,
            "TARGETED_ADVERTISING": 6,
            "DATA_RETENTION": 5,
            "INTERNATIONAL_TRANSFER": 7,
            "MANDATORY_ARBITRATION": 9,
            "LIABILITY_LIMITATION": 6,
            "SENSITIVE_DATA_COLLECTION": 9,
            "GEOLOCATION": 7,
            "USER_RIGHTS": -5,
        }
    
    def test_every_entry_is_complete(self):
        """Verify each entry carries keywords, compiled patterns and a summary."""
        from privacy_guard.clause_catalog import CLAUSE_CATALOG
        
        for clause_id, definition in CLAUSE_CATALOG.items():
            assert definition.id == clause_id
            assert definition.keywords
            assert all(isinstance(p, re.Pattern) for p in definition.patterns)
            assert definition.summary
    
    def test_only_user_rights_is_favorable(self):
        from privacy_guard.clause_catalog import CLAUSE_CATALOG
        
        favorable = [cid for cid, d in CLAUSE_CATALOG.items() if d.is_favorable]
        
        assert favorable == ["USER_RIGHTS"]


class TestCatalogImmutability:
    """Tests that the catalog cannot change after load."""
    
    def test_mapping_is_read_only(self):
        from privacy_guard.clause_catalog import CLAUSE_CATALOG
        
        with pytest.raises(TypeError):
            CLAUSE_CATALOG["NEW"] = None
    
    def test_definitions_are_frozen(self):
        from privacy_guard.clause_catalog import CLAUSE_CATALOG
        
        with pytest.raises(FrozenInstanceError):
            CLAUSE_CATALOG["DATA_SELLING"].weight = 0


class TestBuildCatalog:
    """Tests for catalog validation."""
    
    def test_duplicate_id_rejected(self):
        from privacy_guard.clause_catalog import ClauseDefinition, build_catalog
        from privacy_guard.exceptions import ClauseCatalogError
        
        row = ClauseDefinition(id="X", weight=1, keywords=("x",), patterns=(), summary="x")
        
        with pytest.raises(ClauseCatalogError) as exc_info:
            build_catalog([row, row])
        
        assert exc_info.value.details["clause_id"] == "X"
    
    def test_entry_without_matchers_rejected(self):
        from privacy_guard.clause_catalog import ClauseDefinition, build_catalog
        from privacy_guard.exceptions import ClauseCatalogError
        
        row = ClauseDefinition(id="EMPTY", weight=1, keywords=(), patterns=(), summary="")
        
        with pytest.raises(ClauseCatalogError):
            build_catalog([row])
    
    def test_new_clause_is_just_data(self):
        """Verify a custom catalog row is picked up by the detector."""
        from privacy_guard.clause_catalog import ClauseDefinition, build_catalog
        from privacy_guard.clause_detector import ClauseDetector
        
        catalog = build_catalog([
            ClauseDefinition(
                id="AUTO_RENEWAL",
                weight=4,
                keywords=("automatically renew",),
                patterns=(re.compile(r"renew.*subscription", re.IGNORECASE),),
                summary="Subscriptions renew automatically.",
            ),
        ])
        
        result = ClauseDetector(catalog).detect_all(
            "Plans automatically renew each month. We renew your subscription."
        )
        
        assert list(result.detections) == ["AUTO_RENEWAL"]
        assert result.total_weight.negative == 4
