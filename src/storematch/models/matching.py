"""
Modelo de Matching.

Un matching es la recomendación persistida de un local para un fundador.
Existe a lo sumo uno por par (founder_id, property_id).
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storematch.config import DEFAULT_MATCHING_STATUS, MATCH_METHOD_MANUAL
from storematch.models.property import Property


class Matching(BaseModel):
    """Fila de la tabla 'matchings'."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    matching_id: Optional[int] = Field(None, description="ID generado por Supabase")
    founder_id: int = Field(..., description="FK al Founder")
    property_id: int = Field(..., description="FK al Property")

    matched_at: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Momento del matching",
    )
    method: Optional[str] = Field(MATCH_METHOD_MANUAL, description="'자동' o '수동'")
    status: Optional[str] = Field(DEFAULT_MATCHING_STATUS, description="Estado del matching")

    # Siempre 0: no hay motor de scoring
    score: Optional[float] = Field(0, description="Score del matching")

    is_favorite: Optional[bool] = Field(False, description="Marcado como favorito")
    exclude_from_print: Optional[bool] = Field(
        False, description="Excluido de la versión impresa"
    )

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        return self.model_dump(exclude={"matching_id"})


class MatchingWithProperty(Matching):
    """Matching con su local ya resuelto."""

    property: Optional[Property] = None

    @field_validator("property", mode="before")
    @classmethod
    def _normalize_join(cls, value):
        # El join de PostgREST puede devolver el local como lista
        if isinstance(value, list):
            return value[0] if value else None
        return value or None
