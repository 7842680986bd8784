"""
Cliente de Supabase.

Singleton para conexión a la base de datos.
"""

from functools import lru_cache

import httpx
import structlog
from postgrest.exceptions import APIError
from supabase import create_client, Client

from storematch.config import get_settings

logger = structlog.get_logger()

# Errores del cliente que representan una falla del almacenamiento
STORE_ERRORS = (APIError, httpx.HTTPError)

# PostgREST: offset más allá del total de filas
RANGE_NOT_SATISFIABLE = "PGRST103"


def describe_error(error: Exception) -> str:
    """Mensaje legible de un error del cliente (APIError trae message y code)."""
    message = getattr(error, "message", None) or str(error)
    code = getattr(error, "code", None)
    return f"{message} ({code})" if code else message


class SupabaseClient:
    """Wrapper del cliente de Supabase con métodos de utilidad."""

    def __init__(self, client: Client):
        self._client = client

    @property
    def client(self) -> Client:
        """Acceso directo al cliente de Supabase."""
        return self._client

    def table(self, name: str):
        """Acceso a una tabla específica."""
        return self._client.table(name)


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """
    Obtiene el cliente de Supabase (singleton cacheado).

    Returns:
        SupabaseClient configurado

    Raises:
        ValueError: Si las credenciales no están configuradas
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "SUPABASE_URL y SUPABASE_KEY son requeridos. "
            "Configura las variables de entorno."
        )

    # Las escrituras de matchings necesitan la service key cuando RLS está activo
    key = settings.supabase_service_key or settings.supabase_key

    client = create_client(settings.supabase_url, key)
    logger.info(
        "Cliente de Supabase inicializado",
        url=settings.supabase_url,
        service_role=bool(settings.supabase_service_key),
    )

    return SupabaseClient(client)
