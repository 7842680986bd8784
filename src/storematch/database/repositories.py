"""
Repositorios para operaciones CRUD en Supabase.

Cada repositorio maneja una tabla/entidad específica.
Los errores del cliente (APIError, httpx) se propagan sin envolver;
la traducción a la jerarquía de storematch.exceptions la hacen los servicios.
"""

from typing import Optional

import structlog

from storematch.config import get_settings
from storematch.database.supabase_client import get_supabase_client, SupabaseClient
from storematch.models import Founder, Property
from storematch.query.builder import PropertyQuery, ilike_any

logger = structlog.get_logger()

FOUNDER_SEARCH_COLUMNS = ["name", "contact", "business_type"]
FOUNDER_LIST_KEYWORD_COLUMNS = ["name", "contact", "note"]

MATCHING_SELECT = (
    "matching_id, founder_id, property_id, matched_at, method, status, score, "
    "is_favorite, exclude_from_print, property:properties(*)"
)


class BaseRepository:
    """Clase base para repositorios."""

    TABLE: str = ""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client

    def _table(self):
        return self.client.table(self.TABLE)


class FounderRepository(BaseRepository):
    """Repositorio para fundadores (창업자)."""

    TABLE = "founders"

    def get_by_id(self, founder_id: int) -> Optional[dict]:
        """Obtiene un fundador por su ID."""
        response = (
            self._table()
            .select("*")
            .eq("founder_id", founder_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def get_many(self, founder_ids: list[int]) -> list[dict]:
        """
        Obtiene varios fundadores respetando el orden de los IDs pedidos.

        Los IDs que no existen se omiten.
        """
        if not founder_ids:
            return []
        response = (
            self._table()
            .select("*")
            .in_("founder_id", founder_ids)
            .execute()
        )
        by_id = {row["founder_id"]: row for row in response.data or []}
        return [by_id[fid] for fid in founder_ids if fid in by_id]

    def search(self, term: str, limit: Optional[int] = None) -> list[dict]:
        """Busca fundadores por nombre, contacto o rubro (más recientes primero)."""
        term = (term or "").strip()
        if not term:
            return []
        limit = limit or get_settings().founder_search_limit
        response = (
            self._table()
            .select("*")
            .or_(ilike_any(FOUNDER_SEARCH_COLUMNS, term))
            .order("received_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data

    def list_page(
        self,
        status: Optional[str] = None,
        keyword: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> tuple[list[dict], int]:
        """
        Lista fundadores con filtros opcionales.

        Returns:
            Tupla (filas, total)
        """
        query = self._table().select("*", count="exact")

        if status:
            query = query.eq("status", status)
        if keyword and keyword.strip():
            query = query.or_(ilike_any(FOUNDER_LIST_KEYWORD_COLUMNS, keyword))

        query = query.order("founder_id", desc=True)

        if page and page_size:
            start = (page - 1) * page_size
            query = query.range(start, start + page_size - 1)

        response = query.execute()
        return response.data or [], response.count or 0

    def create(self, founder: Founder) -> dict:
        """Registra un nuevo fundador."""
        response = self._table().insert(founder.to_db_dict()).execute()
        logger.info("Fundador creado", name=founder.name)
        return response.data[0] if response.data else {}

    def update(self, founder_id: int, updates: dict) -> dict:
        """Actualiza campos de un fundador."""
        response = (
            self._table()
            .update(updates)
            .eq("founder_id", founder_id)
            .execute()
        )
        return response.data[0] if response.data else {}

    def delete(self, founder_id: int) -> None:
        """Elimina un fundador."""
        self._table().delete().eq("founder_id", founder_id).execute()
        logger.info("Fundador eliminado", founder_id=founder_id)


class PropertyRepository(BaseRepository):
    """Repositorio para locales comerciales (매물)."""

    TABLE = "properties"

    def get_by_id(self, property_id: int) -> Optional[dict]:
        """Obtiene un local por su ID."""
        response = (
            self._table()
            .select("*")
            .eq("property_id", property_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def find(
        self,
        query: PropertyQuery,
        order_by: str = "received_at",
        asc: bool = False,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        columns: str = "*",
        with_count: bool = False,
    ):
        """
        Ejecuta un conjunto de predicados sobre la tabla de locales.

        El orden es estable: columna pedida y luego property_id ascendente.

        Returns:
            La respuesta de PostgREST (data y, si se pidió, count)
        """
        request = self._table().select(columns, count="exact" if with_count else None)
        request = query.apply(request)
        request = request.order(order_by, desc=not asc)
        if order_by != "property_id":
            request = request.order("property_id")
        if offset is not None and limit is not None:
            request = request.range(offset, offset + limit - 1)
        return request.execute()

    def count(self, query: PropertyQuery) -> int:
        """Cuenta las filas que cumplen los predicados, sin traerlas."""
        request = self._table().select("property_id", count="exact", head=True)
        response = query.apply(request).execute()
        return response.count or 0

    def create(self, prop: Property) -> dict:
        """Registra un nuevo local."""
        response = self._table().insert(prop.to_db_dict()).execute()
        logger.info(
            "Local creado",
            store_name=prop.store_name,
            beopjeongdong=prop.beopjeongdong,
        )
        return response.data[0] if response.data else {}

    def update(self, property_id: int, updates: dict) -> dict:
        """Actualiza campos de un local."""
        response = (
            self._table()
            .update(updates)
            .eq("property_id", property_id)
            .execute()
        )
        return response.data[0] if response.data else {}

    def update_status(self, property_id: int, status: str) -> dict:
        """Cambia el estado de un local."""
        logger.info("Estado de local actualizado", property_id=property_id, status=status)
        return self.update(property_id, {"status": status})

    def delete(self, property_id: int) -> None:
        """Elimina un local."""
        self._table().delete().eq("property_id", property_id).execute()
        logger.info("Local eliminado", property_id=property_id)


class MatchingRepository(BaseRepository):
    """Repositorio para matchings fundador ↔ local."""

    TABLE = "matchings"

    def get_by_founder(self, founder_id: int) -> list[dict]:
        """Obtiene los matchings de un fundador con su local (más recientes primero)."""
        response = (
            self._table()
            .select(MATCHING_SELECT)
            .eq("founder_id", founder_id)
            .order("matched_at", desc=True)
            .order("matching_id", desc=True)
            .execute()
        )
        return response.data or []

    def get_by_id(self, matching_id: int, columns: str = "*") -> Optional[dict]:
        """Obtiene un matching por su ID."""
        response = (
            self._table()
            .select(columns)
            .eq("matching_id", matching_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def insert_ignore_duplicates(self, rows: list[dict]) -> list[dict]:
        """
        Inserta matchings ignorando los pares (founder_id, property_id) existentes.

        Las filas en conflicto no se modifican.
        """
        response = (
            self._table()
            .upsert(rows, on_conflict="founder_id,property_id", ignore_duplicates=True)
            .execute()
        )
        return response.data or []

    def delete_pair(self, founder_id: int, property_id: int) -> list[dict]:
        """Elimina el matching de un par exacto. Devuelve las filas borradas."""
        response = (
            self._table()
            .delete()
            .match({"founder_id": founder_id, "property_id": property_id})
            .execute()
        )
        return response.data or []

    def update(self, matching_id: int, updates: dict) -> list[dict]:
        """Actualiza un matching por su ID. Devuelve las filas afectadas."""
        response = (
            self._table()
            .update(updates)
            .eq("matching_id", matching_id)
            .execute()
        )
        return response.data or []
