"""
Auto-match entre fundadores y locales.

Selección por reglas, sin scoring ni ranking:
- Superficie dentro de ±tolerancia de la pedida
- Depósito y alquiler por debajo de los máximos del fundador
- Mismo rubro
- Local en estado disponible

Cada condición se aplica solo si el fundador tiene el dato cargado.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import structlog

from storematch.config import MATCH_METHOD_AUTO, get_settings
from storematch.database import FounderRepository, PropertyRepository
from storematch.database.supabase_client import STORE_ERRORS, describe_error
from storematch.exceptions import FounderNotFound, StoreReadFailed
from storematch.matching.store import RecommendationStore
from storematch.models import Founder
from storematch.query.builder import PropertyQuery

logger = structlog.get_logger()


class AutoMatchState(str, Enum):
    IDLE = "idle"
    FOUNDER_LOADED = "founder_loaded"
    CANDIDATES_COMPUTED = "candidates_computed"
    PERSISTED = "persisted"


@dataclass
class AutoMatchRun:
    """Resultado de una ejecución de auto-match."""

    founder_id: int
    state: AutoMatchState = AutoMatchState.IDLE
    founder: Optional[Founder] = None
    property_ids: list[int] = field(default_factory=list)
    inserted: int = 0


def build_auto_match_query(
    founder: Founder,
    tolerance_percentage: float = 20.0,
    status: str = "available",
) -> PropertyQuery:
    """
    Deriva los predicados de auto-match a partir de los requisitos del fundador.

    Ej: area=100 con tolerancia 20 → 80 <= area <= 120
    """
    query = PropertyQuery().where("eq", "status", status)

    if founder.area is not None:
        ratio = tolerance_percentage / 100
        query = query.where("gte", "area", founder.area * (1 - ratio))
        query = query.where("lte", "area", founder.area * (1 + ratio))

    if founder.deposit is not None:
        query = query.where("lte", "deposit", founder.deposit)

    if founder.rent is not None:
        query = query.where("lte", "rent", founder.rent)

    if founder.business_type:
        query = query.where("eq", "business_type", founder.business_type)

    return query


class AutoMatcher:
    """
    Ejecuta el auto-match de un fundador.

    Flujo:
    1. Cargar el fundador (Idle → FounderLoaded)
    2. Consultar todos los locales que cumplen (→ CandidatesComputed)
    3. Guardar los matchings con método '자동' (→ Persisted)
    """

    def __init__(
        self,
        founder_repo: Optional[FounderRepository] = None,
        property_repo: Optional[PropertyRepository] = None,
        store: Optional[RecommendationStore] = None,
    ):
        self.settings = get_settings()
        self.founder_repo = founder_repo or FounderRepository()
        self.property_repo = property_repo or PropertyRepository()
        self.store = store or RecommendationStore()

    def auto_match(self, founder_id: int) -> list[int]:
        """
        Busca locales para un fundador y los guarda como recomendaciones.

        Returns:
            IDs de los locales seleccionados (vacío si no hubo ninguno)
        """
        return self.run(founder_id).property_ids

    def run(self, founder_id: int) -> AutoMatchRun:
        """Igual que auto_match, pero devuelve el detalle de la ejecución."""
        result = AutoMatchRun(founder_id=founder_id)

        result.founder = self._load_founder(founder_id)
        result.state = AutoMatchState.FOUNDER_LOADED

        query = build_auto_match_query(
            result.founder,
            tolerance_percentage=self.settings.auto_match_tolerance_percentage,
            status=self.settings.auto_match_status,
        )
        try:
            response = self.property_repo.find(
                query, order_by="property_id", asc=True, columns="property_id"
            )
        except STORE_ERRORS as e:
            logger.error("Error buscando candidatos", founder_id=founder_id, error=describe_error(e))
            raise StoreReadFailed("auto_match", describe_error(e)) from e

        result.property_ids = [row["property_id"] for row in response.data or []]
        result.state = AutoMatchState.CANDIDATES_COMPUTED

        if not result.property_ids:
            logger.info("Auto-match sin candidatos", founder_id=founder_id)
            return result

        result.inserted = self.store.save(
            founder_id, result.property_ids, method=MATCH_METHOD_AUTO
        )
        result.state = AutoMatchState.PERSISTED

        logger.info(
            "Auto-match completado",
            founder_id=founder_id,
            candidates=len(result.property_ids),
            inserted=result.inserted,
        )
        return result

    def _load_founder(self, founder_id: int) -> Founder:
        try:
            row = self.founder_repo.get_by_id(founder_id)
        except STORE_ERRORS as e:
            logger.error("Error obteniendo fundador", founder_id=founder_id, error=describe_error(e))
            raise StoreReadFailed("get_founder", describe_error(e)) from e
        if row is None:
            raise FounderNotFound(founder_id)
        return Founder.model_validate(row)
