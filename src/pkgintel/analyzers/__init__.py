"""
Analyzers module for curated package knowledge.

Provides the alternatives catalog, the trending categories and advisory
prioritization.
"""

from pkgintel.analyzers.alternatives import (
    KNOWN_ALTERNATIVES,
    estimate_migration_effort,
    get_known_alternatives,
    get_pros_and_cons,
)
from pkgintel.analyzers.security import prioritize, security_recommendation
from pkgintel.analyzers.trending import CATEGORY_PACKAGES, classify_trend, filter_by_framework

__all__ = [
    "KNOWN_ALTERNATIVES",
    "CATEGORY_PACKAGES",
    "estimate_migration_effort",
    "get_known_alternatives",
    "get_pros_and_cons",
    "classify_trend",
    "filter_by_framework",
    "prioritize",
    "security_recommendation",
]
