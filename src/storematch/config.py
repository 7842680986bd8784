"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> storematch/ -> src/ -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(..., description="URL del proyecto Supabase")
    supabase_key: str = Field(..., description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Listados
    default_page_size: int = Field(20, gt=0, description="Tamaño de página por defecto")
    founder_search_limit: int = Field(
        10, gt=0, description="Máximo de fundadores devueltos por una búsqueda"
    )

    # Fundadores recientes
    recent_founders_limit: int = Field(
        10, gt=0, description="Cantidad de IDs recientes que se persisten"
    )
    recent_founders_display: int = Field(
        5, gt=0, description="Cantidad de recientes que se muestran"
    )

    # Auto-match
    auto_match_tolerance_percentage: float = Field(
        20.0, ge=0.0, lt=100.0, description="Tolerancia de superficie (±%)"
    )
    auto_match_status: str = Field(
        "available", description="Estado que debe tener un local para auto-match"
    )

    # Búsqueda
    search_debounce_seconds: float = Field(
        0.3, ge=0.0, description="Silencio antes de disparar la búsqueda"
    )

    # Estado local (recientes, presets)
    local_state_path: Path = Field(
        _PROJECT_ROOT / ".storematch_state.json",
        description="Archivo JSON para el estado local",
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema
PROPERTY_STATUSES = [
    "접수",
    "진행중",
    "계약완료",
    "진행종료",
    "진행보류",
]

# Estados terminales: nunca aparecen en los listados generales
BASELINE_EXCLUDED_STATUSES = ["진행종료", "진행보류", "계약완료"]

DEFAULT_PROPERTY_STATUS = "접수"

FLOOR_OPTIONS = ["지하", "1층", "2층", "3층", "4층이상"]

ORDERABLE_COLUMNS = ["received_at", "area", "deposit", "rent"]

MATCH_METHOD_AUTO = "자동"
MATCH_METHOD_MANUAL = "수동"
MATCH_METHODS = [MATCH_METHOD_AUTO, MATCH_METHOD_MANUAL]

DEFAULT_MATCHING_STATUS = "추천"

MATCHING_FLAGS = ["is_favorite", "exclude_from_print"]
