"""
Store de recomendaciones.

Persiste los matchings fundador ↔ local: alta idempotente, flags,
cambio de estado y cancelación.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog

from storematch.config import MATCH_METHOD_MANUAL, MATCH_METHODS, MATCHING_FLAGS
from storematch.database import MatchingRepository
from storematch.database.supabase_client import STORE_ERRORS, describe_error
from storematch.exceptions import (
    MatchingNotFound,
    SaveFailed,
    StoreReadFailed,
    StoreWriteFailed,
    ValidationFailed,
)
from storematch.models import Matching, MatchingWithProperty

logger = structlog.get_logger()


class RecommendationStore:
    """
    Operaciones sobre la tabla 'matchings'.

    Invariante: a lo sumo un matching por par (founder_id, property_id).
    Guardar un par existente no lo modifica ni falla.
    """

    def __init__(self, repo: Optional[MatchingRepository] = None):
        self.repo = repo or MatchingRepository()

    def list_for_founder(self, founder_id: int) -> list[MatchingWithProperty]:
        """
        Matchings de un fundador, más recientes primero.

        El local asociado viene siempre como objeto o None, nunca como lista.
        """
        if founder_id is None:
            raise ValidationFailed("founder_id es requerido")
        try:
            rows = self.repo.get_by_founder(founder_id)
        except STORE_ERRORS as e:
            logger.error("Error obteniendo matchings", founder_id=founder_id, error=describe_error(e))
            raise StoreReadFailed("list_matchings", describe_error(e)) from e
        return [MatchingWithProperty.model_validate(row) for row in rows]

    def save(
        self,
        founder_id: int,
        property_ids: list[int],
        method: str = MATCH_METHOD_MANUAL,
    ) -> int:
        """
        Guarda varios matchings en una sola operación.

        Los pares ya existentes se ignoran. El upsert es un único statement,
        por lo que un error no deja el lote aplicado a medias.

        Returns:
            Cantidad de filas nuevas insertadas
        """
        if founder_id is None:
            raise SaveFailed("founder_id es requerido")
        if not property_ids:
            raise SaveFailed("No hay locales seleccionados")
        if method not in MATCH_METHODS:
            raise SaveFailed(f"Método inválido: {method}")

        matched_at = datetime.now(timezone.utc).isoformat()
        unique_ids = list(dict.fromkeys(property_ids))
        rows = [
            Matching(
                founder_id=founder_id,
                property_id=property_id,
                matched_at=matched_at,
                method=method,
            ).to_db_dict()
            for property_id in unique_ids
        ]

        try:
            inserted = self.repo.insert_ignore_duplicates(rows)
        except STORE_ERRORS as e:
            logger.error(
                "Error guardando matchings",
                founder_id=founder_id,
                count=len(rows),
                error=describe_error(e),
            )
            raise StoreWriteFailed("save_matchings", describe_error(e)) from e

        logger.info(
            "Matchings guardados",
            founder_id=founder_id,
            requested=len(rows),
            inserted=len(inserted),
            method=method,
        )
        return len(inserted)

    def cancel(self, founder_id: int, property_id: int) -> bool:
        """
        Cancela la recomendación de un par exacto.

        Returns:
            True si existía y se borró, False si no había nada que borrar
        """
        if founder_id is None or property_id is None:
            raise ValidationFailed("founder_id y property_id son requeridos")
        try:
            deleted = self.repo.delete_pair(founder_id, property_id)
        except STORE_ERRORS as e:
            logger.error(
                "Error cancelando matching",
                founder_id=founder_id,
                property_id=property_id,
                error=describe_error(e),
            )
            raise StoreWriteFailed("cancel_matching", describe_error(e)) from e

        if deleted:
            logger.info("Matching cancelado", founder_id=founder_id, property_id=property_id)
        return bool(deleted)

    def toggle_flag(self, matching_id: int, field: str) -> bool:
        """
        Invierte un flag booleano (is_favorite o exclude_from_print).

        Un valor nulo cuenta como False. Sin bloqueo optimista:
        dos toggles concurrentes se resuelven por última escritura.

        Returns:
            El nuevo valor del flag
        """
        self._validate_flag(matching_id, field)
        try:
            row = self.repo.get_by_id(matching_id, columns=f"matching_id, {field}")
        except STORE_ERRORS as e:
            logger.error("Error leyendo flag", matching_id=matching_id, error=describe_error(e))
            raise StoreReadFailed("toggle_flag", describe_error(e)) from e
        if row is None:
            raise MatchingNotFound(matching_id)

        new_value = not bool(row.get(field))
        self.set_flag(matching_id, field, new_value)
        return new_value

    def set_flag(self, matching_id: int, field: str, value: bool) -> None:
        """Fija el valor de un flag."""
        self._validate_flag(matching_id, field)
        self._update(matching_id, {field: bool(value)}, operation="set_flag")
        logger.info("Flag de matching actualizado", matching_id=matching_id, field=field, value=value)

    def update_status(self, matching_id: int, status: str) -> None:
        """Cambia el estado de un matching."""
        if matching_id is None:
            raise ValidationFailed("matching_id es requerido")
        if not status or not status.strip():
            raise ValidationFailed("status no puede estar vacío")
        self._update(matching_id, {"status": status.strip()}, operation="update_status")
        logger.info("Estado de matching actualizado", matching_id=matching_id, status=status)

    def _update(self, matching_id: int, updates: dict, operation: str) -> None:
        try:
            updated = self.repo.update(matching_id, updates)
        except STORE_ERRORS as e:
            logger.error("Error actualizando matching", matching_id=matching_id, error=describe_error(e))
            raise StoreWriteFailed(operation, describe_error(e)) from e
        if not updated:
            raise MatchingNotFound(matching_id)

    @staticmethod
    def _validate_flag(matching_id: int, field: str) -> None:
        if matching_id is None:
            raise ValidationFailed("matching_id es requerido")
        if field not in MATCHING_FLAGS:
            raise ValidationFailed(
                f"Flag inválido: {field}. Opciones: {', '.join(MATCHING_FLAGS)}"
            )
