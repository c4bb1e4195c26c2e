"""
Custom exceptions for Privacy Guard.

This module provides a hierarchy of domain-specific exceptions.
Expected absence of data (no clauses, no entities) is never an
exception; only structurally invalid input is.
"""

from __future__ import annotations

from typing import Any, Optional


class PrivacyGuardException(Exception):
    """
    Base exception for all Privacy Guard errors.
    
    Attributes:
        message: Human-readable error message.
        details: Optional additional context for debugging.
    """
    
    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidDocumentError(PrivacyGuardException):
    """Raised when an input has the wrong structure or type."""
    
    def __init__(
        self,
        message: str = "Invalid document input",
        field: Optional[str] = None,
        value: Optional[Any] = None,
    ) -> None:
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            # Truncate for readability
            text = repr(value)
            details["value"] = text[:100] + "..." if len(text) > 100 else text
        super().__init__(message, details)


class MissingFieldError(PrivacyGuardException):
    """Raised when a required input object or field is absent."""
    
    def __init__(
        self,
        field: str,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(
            message or f"Missing required field: {field}",
            {"field": field},
        )


class ClauseCatalogError(PrivacyGuardException):
    """Raised when the clause catalog configuration is invalid."""
    
    def __init__(
        self,
        message: str = "Invalid clause catalog entry",
        clause_id: Optional[str] = None,
    ) -> None:
        details = {"clause_id": clause_id} if clause_id else {}
        super().__init__(message, details)


class AnalysisError(PrivacyGuardException):
    """Raised when a pipeline stage fails."""
    
    def __init__(
        self,
        message: str = "Document analysis failed",
        stage: Optional[str] = None,
    ) -> None:
        details = {"stage": stage} if stage else {}
        super().__init__(message, details)
