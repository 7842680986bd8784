"""
Módulo de base de datos.

Provee acceso a Supabase y operaciones CRUD.
"""

from storematch.database.supabase_client import get_supabase_client, SupabaseClient
from storematch.database.repositories import (
    FounderRepository,
    PropertyRepository,
    MatchingRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "FounderRepository",
    "PropertyRepository",
    "MatchingRepository",
]
