"""
Modelo de Fundador (창업자).

Representa a un potencial inquilino con sus requisitos de espacio
y presupuesto. Se carga externamente (formulario de ingreso);
el motor de matching solo lo lee.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Founder(BaseModel):
    """Fundador con requisitos de local."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    # Identificadores
    founder_id: Optional[int] = Field(None, description="ID generado por Supabase")
    name: Optional[str] = Field(None, description="Nombre del fundador")
    contact: Optional[str] = Field(None, description="Teléfono o contacto")

    # Requisitos de espacio y presupuesto
    area: Optional[float] = Field(None, description="Superficie deseada")
    deposit: Optional[float] = Field(None, description="Depósito máximo (보증금)")
    rent: Optional[float] = Field(None, description="Alquiler mensual máximo (월세)")
    premium: Optional[float] = Field(None, description="Llave máxima (권리금)")

    # Perfil
    business_type: Optional[str] = Field(None, description="Rubro (업종)")
    preferred_property: Optional[str] = Field(None, description="Local preferido")
    status: Optional[str] = Field(None, description="Estado del fundador")
    category: Optional[str] = Field(None, description="Categoría")
    floor: Optional[str] = Field(None, description="Piso preferido")
    note: Optional[str] = Field(None, description="Notas libres")

    received_at: Optional[str] = Field(None, description="Fecha de ingreso")

    @property
    def display_name(self) -> str:
        return self.name or f"창업자 #{self.founder_id}"

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        data = self.model_dump(exclude={"founder_id"})
        if not data.get("received_at"):
            data["received_at"] = datetime.utcnow().isoformat()
        return data
