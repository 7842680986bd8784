"""
Consultas sobre locales.

El builder no depende de la base de datos; el fetcher paginado vive en
storematch.query.fetcher y se importa explícitamente.
"""

from storematch.query.builder import (
    Predicate,
    PropertyQuery,
    build_property_query,
    excluded_statuses,
    ilike_any,
)

__all__ = [
    "Predicate",
    "PropertyQuery",
    "build_property_query",
    "excluded_statuses",
    "ilike_any",
]
