"""
Catalog of sensitive clause definitions.

Each entry is pure data: adding a clause type means adding a row to
``_CATALOG_ROWS``, never a new branch in the detector. Weight sign:
positive weights increase risk, negative weights are user-favorable.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable

from privacy_guard.exceptions import ClauseCatalogError


@dataclass(frozen=True)
class ClauseDefinition:
    """
    A single sensitive clause type.
    
    Attributes:
        id: Stable identifier such as ``DATA_SELLING``.
        weight: Signed risk weight.
        keywords: Literal phrases matched case-insensitively on word boundaries.
        patterns: Compiled regular expressions.
        summary: Canned explanation shown when the clause is detected.
    """
    
    id: str
    weight: int
    keywords: tuple[str, ...]
    patterns: tuple[re.Pattern, ...]
    summary: str
    
    @property
    def is_favorable(self) -> bool:
        return self.weight < 0


def _compile(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


_CATALOG_ROWS: tuple[ClauseDefinition, ...] = (
    ClauseDefinition(
        id="THIRD_PARTY_SHARING",
        weight=8,
        keywords=(
            "share with third parties", "third party partners", "affiliate",
            "partenaires tiers", "partage avec des tiers", "partenaires commerciaux",
            "may share your information", "disclosure to third parties",
        ),
        patterns=_compile(
            r"share.*(?:with|to).*third[\s-]?part",
            r"disclose.*(?:to|with).*(?:third[\s-]?party|partner|affiliate)",
            r"partag.*(?:avec|aux).*(?:tiers|partenaires)",
        ),
        summary="Your data may be shared with third-party partners.",
    ),
    ClauseDefinition(
        id="DATA_SELLING",
        weight=10,
        keywords=(
            "sell your data", "sell personal information", "monetize",
            "vendre vos données", "commercialiser", "monétiser",
        ),
        patterns=_compile(
            r"sell.*(?:your|personal).*(?:data|information)",
            r"vend.*(?:vos|les).*donn[ée]es",
            r"commercialis.*donn[ée]es",
        ),
        summary="⚠️ Your personal data may be sold.",
    ),
    ClauseDefinition(
        id="TARGETED_ADVERTISING",
        weight=6,
        keywords=(
            "targeted advertising", "personalized ads", "behavioral advertising",
            "publicité ciblée", "publicité personnalisée", "publicité comportementale",
            "ad targeting", "profiling",
        ),
        patterns=_compile(
            r"(?:targeted|personalized|behavioral).*ad",
            r"ad.*(?:targeting|personalization)",
            r"publicit[ée].*(?:cibl[ée]e|personnalis[ée]e|comportementale)",
            r"profiling.*(?:for|to).*advertis",
        ),
        summary="Your data is used for targeted advertising.",
    ),
    ClauseDefinition(
        id="DATA_RETENTION",
        weight=5,
        keywords=(
            "retain", "retention period", "keep your data", "store for",
            "conservation", "durée de conservation", "conserver vos données",
        ),
        patterns=_compile(
            r"(?:retain|keep|store).*(?:for|up to|until)",
            r"retention.*period",
            r"conserv.*(?:pendant|durant|pour|jusqu)",
            r"dur[ée]e.*conservation",
        ),
        summary="Your data is kept for a specific retention period.",
    ),
    ClauseDefinition(
        id="INTERNATIONAL_TRANSFER",
        weight=7,
        keywords=(
            "international transfer", "outside the EU", "outside European Union",
            "third countries", "transfert international", "hors UE",
            "pays tiers", "États-Unis", "United States",
        ),
        patterns=_compile(
            r"transfer.*(?:outside|to).*(?:EU|European Union|EEA)",
            r"(?:international|cross-border).*transfer",
            r"transfert.*(?:hors|en dehors).*(?:UE|Union)",
            r"pays.*tiers",
        ),
        summary="⚠️ Your data may be transferred outside the EU.",
    ),
    ClauseDefinition(
        id="MANDATORY_ARBITRATION",
        weight=9,
        keywords=(
            "mandatory arbitration", "binding arbitration", "arbitration clause",
            "arbitrage obligatoire", "clause d'arbitrage", "arbitrage contraignant",
        ),
        patterns=_compile(
            r"(?:mandatory|binding).*arbitration",
            r"arbitration.*(?:clause|agreement)",
            r"arbitrage.*(?:obligatoire|contraignant)",
            r"clause.*arbitrage",
        ),
        summary="⚠️ A mandatory arbitration clause is present.",
    ),
    ClauseDefinition(
        id="LIABILITY_LIMITATION",
        weight=6,
        keywords=(
            "limitation of liability", "not liable", "no warranty",
            "limitation de responsabilité", "non responsable", "aucune garantie",
            "disclaimer",
        ),
        patterns=_compile(
            r"limitation.*(?:of|on).*liability",
            r"not.*liable.*for",
            r"no.*warranty",
            r"limitation.*responsabilit[ée]",
            r"non.*responsable",
        ),
        summary="The service provider limits its liability.",
    ),
    ClauseDefinition(
        id="SENSITIVE_DATA_COLLECTION",
        weight=9,
        keywords=(
            "biometric", "health data", "medical", "genetic",
            "biométrique", "données de santé", "médical", "génétique",
            "racial", "religious", "political", "sexual orientation",
        ),
        patterns=_compile(
            r"(?:biometric|health|medical|genetic).*(?:data|information)",
            r"donn[ée]es.*(?:biom[ée]triques?|sant[ée]|m[ée]dicales?|g[ée]n[ée]tiques?)",
            r"(?:racial|religious|political).*(?:data|beliefs)",
        ),
        summary="⚠️ Sensitive data is collected (health, biometrics, etc.).",
    ),
    ClauseDefinition(
        id="GEOLOCATION",
        weight=7,
        keywords=(
            "geolocation", "location data", "GPS", "precise location",
            "géolocalisation", "données de localisation", "position géographique",
        ),
        patterns=_compile(
            r"(?:geo)?location.*(?:data|tracking|services)",
            r"GPS",
            r"(?:track|collect).*(?:your )?location",
            r"g[ée]olocalisation",
            r"donn[ée]es.*localisation",
        ),
        summary="Geolocation data is collected.",
    ),
    ClauseDefinition(
        id="USER_RIGHTS",
        weight=-5,
        keywords=(
            "right to access", "right to deletion", "right to rectification",
            "droit d'accès", "droit à l'effacement", "droit de rectification",
            "data portability", "portabilité des données",
        ),
        patterns=_compile(
            r"right.*(?:access|deletion|erasure|rectification|portability)",
            r"droit.*(?:acc[èe]s|effacement|rectification|portabilit[ée])",
            r"you (?:can|may).*(?:delete|access|download).*data",
        ),
        summary="✓ Your rights of access and deletion are mentioned.",
    ),
)


def build_catalog(
    definitions: Iterable[ClauseDefinition],
) -> MappingProxyType:
    """
    Validate clause definitions and index them by id.
    
    Args:
        definitions: Clause rows in scan order.
    
    Returns:
        Read-only mapping of clause id to definition.
    
    Raises:
        ClauseCatalogError: On a duplicate id or an entry that can never match.
    """
    catalog: dict[str, ClauseDefinition] = {}
    for definition in definitions:
        if definition.id in catalog:
            raise ClauseCatalogError("Duplicate clause id", clause_id=definition.id)
        if not definition.keywords and not definition.patterns:
            raise ClauseCatalogError(
                "Clause has neither keywords nor patterns", clause_id=definition.id
            )
        catalog[definition.id] = definition
    return MappingProxyType(catalog)


CLAUSE_CATALOG = build_catalog(_CATALOG_ROWS)

DEFAULT_CLAUSE_SUMMARY = "Clause detected."


__all__ = [
    "CLAUSE_CATALOG",
    "DEFAULT_CLAUSE_SUMMARY",
    "ClauseDefinition",
    "build_catalog",
]
