"""
Modelos de datos del sistema.

- Founder: fundador con requisitos de local
- Property: local comercial y sus filtros de búsqueda
- Matching: recomendación persistida fundador ↔ local
"""

from storematch.models.founder import Founder
from storematch.models.property import (
    Property,
    NumericRange,
    PropertyFilter,
    FilterPreset,
    PaginatedResponse,
)
from storematch.models.matching import Matching, MatchingWithProperty

__all__ = [
    # Fundadores
    "Founder",
    # Locales
    "Property",
    "NumericRange",
    "PropertyFilter",
    "FilterPreset",
    "PaginatedResponse",
    # Matchings
    "Matching",
    "MatchingWithProperty",
]
