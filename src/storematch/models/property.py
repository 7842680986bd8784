"""
Modelo de Local comercial (상가 매물) y filtros de búsqueda.
"""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from storematch.config import DEFAULT_PROPERTY_STATUS

T = TypeVar("T")


class Property(BaseModel):
    """
    Local comercial disponible para alquilar.

    Se mapea directamente a la tabla 'properties' en Supabase.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    # Identificadores
    property_id: Optional[int] = Field(None, description="ID generado por Supabase")
    property_code: Optional[str] = Field(None, description="Código interno del local")
    received_at: Optional[str] = Field(None, description="Fecha de ingreso")

    # Ubicación
    sido: Optional[str] = Field(None, description="Provincia/ciudad (시도)")
    sigungu: Optional[str] = Field(None, description="Distrito (시군구)")
    beopjeongdong: Optional[str] = Field(None, description="Barrio legal (법정동)")
    jibun: Optional[str] = Field(None, description="Número catastral (지번)")

    # Datos del local
    store_name: Optional[str] = Field(None, description="Nombre comercial")
    business_type: Optional[str] = Field(None, description="Rubro (업종)")
    status: Optional[str] = Field(None, description="Estado del local")
    floor: Optional[str] = Field(None, description="Piso, ej: '1층', '지하'")
    area: Optional[float] = Field(None, description="Superficie")

    # Montos
    deposit: Optional[float] = Field(None, description="Depósito (보증금)")
    rent: Optional[float] = Field(None, description="Alquiler mensual (월세)")
    premium: Optional[float] = Field(None, description="Llave (권리금)")
    maintenance_fee: Optional[float] = Field(None, description="Expensas (관리비)")

    # Relaciones
    landlord_id: Optional[int] = Field(None, description="FK al propietario")
    business_owner_id: Optional[int] = Field(None, description="FK al comerciante actual")
    manager_id: Optional[int] = Field(None, description="FK al agente a cargo")

    # Otros
    notes: Optional[str] = Field(None, description="Notas libres")
    youtube_url: Optional[str] = Field(None, description="Video del local")

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        data = self.model_dump(exclude={"property_id"})
        if not data.get("received_at"):
            data["received_at"] = datetime.utcnow().isoformat()
        if not data.get("status"):
            data["status"] = DEFAULT_PROPERTY_STATUS
        return data


class NumericRange(BaseModel):
    """
    Rango cerrado con cotas opcionales.

    None significa "sin cota"; un 0 explícito es una cota real.
    """

    min: Optional[float] = None
    max: Optional[float] = None

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"Rango inválido: min={self.min} > max={self.max}")
        return self

    @property
    def is_set(self) -> bool:
        return self.min is not None or self.max is not None


class PropertyFilter(BaseModel):
    """Filtros declarativos sobre la tabla de locales."""

    area: NumericRange = Field(default_factory=NumericRange)
    deposit: NumericRange = Field(default_factory=NumericRange)
    rent: NumericRange = Field(default_factory=NumericRange)
    premium: NumericRange = Field(default_factory=NumericRange)

    floors: list[str] = Field(default_factory=list, description="Pisos aceptados")

    sido: Optional[str] = None
    sigungu: Optional[str] = None

    keyword: Optional[str] = Field(
        None, description="Texto libre sobre nombre, dirección, notas y código"
    )

    exclude_status: list[str] = Field(
        default_factory=list,
        description="Estados a excluir además de los terminales",
    )

    @field_validator("sido", "sigungu", "keyword", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        # "" equivale a "sin filtro"
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def ranges(self) -> dict[str, NumericRange]:
        return {
            "area": self.area,
            "deposit": self.deposit,
            "rent": self.rent,
            "premium": self.premium,
        }

    def active_count(self) -> int:
        """Cantidad de grupos de filtro activos."""
        count = sum(1 for r in self.ranges().values() if r.is_set)
        if self.floors:
            count += 1
        if self.keyword:
            count += 1
        if self.sido:
            count += 1
        if self.sigungu:
            count += 1
        return count


class FilterPreset(BaseModel):
    """Filtro guardado con nombre."""

    id: str = Field(..., description="Identificador del preset")
    name: str = Field(..., min_length=1)
    filter: PropertyFilter = Field(default_factory=PropertyFilter)
    created_at: str = Field(
        default_factory=lambda: datetime.utcnow().isoformat(),
    )


class PaginatedResponse(BaseModel, Generic[T]):
    """Página de resultados con el total de filas."""

    items: list[T] = Field(default_factory=list)
    total: int = 0
    total_pages: int = 1
