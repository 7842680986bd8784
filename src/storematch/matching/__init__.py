"""
Matching fundador ↔ local.

Store de recomendaciones y auto-match por reglas.
"""

from storematch.matching.store import RecommendationStore
from storematch.matching.engine import (
    AutoMatcher,
    AutoMatchRun,
    AutoMatchState,
    build_auto_match_query,
)

__all__ = [
    "RecommendationStore",
    "AutoMatcher",
    "AutoMatchRun",
    "AutoMatchState",
    "build_auto_match_query",
]
