"""
Fetcher paginado de locales.

Aplica keyword, orden y paginación offset/limit sobre los predicados
del builder y devuelve items + total + cantidad de páginas.
"""

import asyncio
import math
from typing import Optional

import structlog
from postgrest.exceptions import APIError

from storematch.config import ORDERABLE_COLUMNS, get_settings
from storematch.database import PropertyRepository
from storematch.database.supabase_client import (
    RANGE_NOT_SATISFIABLE,
    STORE_ERRORS,
    describe_error,
)
from storematch.exceptions import StoreReadFailed, ValidationFailed
from storematch.models import PaginatedResponse, Property, PropertyFilter
from storematch.query.builder import build_property_query
from storematch.utils.generation import GenerationCounter

logger = structlog.get_logger()


def total_pages_for(total: int, page_size: int) -> int:
    """Siempre al menos una página, aunque no haya filas."""
    return max(1, math.ceil(total / page_size))


class PropertyFetcher:
    """
    Listados de locales con filtros.

    Los estados terminales (진행종료, 진행보류, 계약완료) se excluyen siempre.
    No reintenta: cualquier falla de lectura se propaga como StoreReadFailed.
    """

    def __init__(self, repo: Optional[PropertyRepository] = None):
        self.settings = get_settings()
        self.repo = repo or PropertyRepository()
        self._generation = GenerationCounter()

    def fetch_page(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        order_by: str = "received_at",
        asc: bool = False,
        filters: Optional[PropertyFilter] = None,
        keyword: Optional[str] = None,
    ) -> PaginatedResponse[Property]:
        """
        Obtiene una página de locales.

        Args:
            page: Número de página (desde 1)
            page_size: Filas por página (None = default de settings)
            order_by: received_at, area, deposit o rent
            asc: Orden ascendente
            filters: Filtros declarativos
            keyword: Texto libre

        Returns:
            PaginatedResponse; una página fuera de rango devuelve items vacíos
        """
        page_size = page_size if page_size is not None else self.settings.default_page_size
        self._validate_paging(page, page_size, order_by)

        query = build_property_query(filters, keyword)
        offset = (page - 1) * page_size

        try:
            try:
                response = self.repo.find(
                    query,
                    order_by=order_by,
                    asc=asc,
                    offset=offset,
                    limit=page_size,
                    with_count=True,
                )
                rows, total = response.data or [], response.count or 0
            except APIError as e:
                if e.code != RANGE_NOT_SATISFIABLE:
                    raise
                rows, total = [], self.repo.count(query)
        except STORE_ERRORS as e:
            logger.error("Error obteniendo locales", page=page, error=describe_error(e))
            raise StoreReadFailed("fetch_page", describe_error(e)) from e

        return PaginatedResponse[Property](
            items=[Property.model_validate(row) for row in rows],
            total=total,
            total_pages=total_pages_for(total, page_size),
        )

    def search(
        self,
        filters: Optional[PropertyFilter] = None,
        keyword: Optional[str] = None,
        order_by: str = "received_at",
        asc: bool = False,
    ) -> list[Property]:
        """Variante sin paginación: devuelve todo el resultado."""
        self._validate_order(order_by)
        query = build_property_query(filters, keyword)
        try:
            response = self.repo.find(query, order_by=order_by, asc=asc)
        except STORE_ERRORS as e:
            logger.error("Error buscando locales", error=describe_error(e))
            raise StoreReadFailed("search", describe_error(e)) from e
        return [Property.model_validate(row) for row in response.data or []]

    async def fetch_latest(self, **kwargs) -> Optional[PaginatedResponse[Property]]:
        """
        Como fetch_page, pero descarta la respuesta si mientras tanto
        se pidió otra página.

        Returns:
            La página, o None si la respuesta quedó obsoleta
        """
        token = self._generation.next()
        try:
            result = await asyncio.to_thread(self.fetch_page, **kwargs)
        except StoreReadFailed:
            if not self._generation.is_current(token):
                logger.debug("Error de request obsoleto descartado", token=token)
                return None
            raise

        if not self._generation.is_current(token):
            logger.debug("Respuesta obsoleta descartada", token=token)
            return None
        return result

    def cancel_pending(self) -> None:
        """Invalida cualquier fetch_latest en vuelo."""
        self._generation.invalidate()

    def _validate_paging(self, page: int, page_size: int, order_by: str) -> None:
        if page < 1:
            raise ValidationFailed(f"page debe ser >= 1 (recibido {page})")
        if page_size <= 0:
            raise ValidationFailed(f"page_size debe ser > 0 (recibido {page_size})")
        self._validate_order(order_by)

    def _validate_order(self, order_by: str) -> None:
        if order_by not in ORDERABLE_COLUMNS:
            raise ValidationFailed(
                f"order_by inválido: {order_by}. Opciones: {', '.join(ORDERABLE_COLUMNS)}"
            )
