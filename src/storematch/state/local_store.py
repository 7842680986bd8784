"""
Estado local persistido.

Guarda en un archivo JSON la lista de fundadores recientes y los
presets de filtros. Cada operación lee y escribe el archivo completo.
"""

import json
import uuid
from pathlib import Path
from typing import Any, Optional

import structlog

from storematch.config import get_settings
from storematch.exceptions import ValidationFailed
from storematch.models import FilterPreset, PropertyFilter

logger = structlog.get_logger()

RECENT_FOUNDERS_KEY = "recentFounderIds"
FILTER_PRESETS_KEY = "filterPresets"


class JsonFileStore:
    """Key/value store respaldado por un archivo JSON."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or get_settings().local_state_path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning("Estado local corrupto, se ignora", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
        )

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self.path.write_text(
                json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
            )


class RecentFounders:
    """Fundadores seleccionados recientemente (más reciente primero)."""

    def __init__(self, store: JsonFileStore, limit: Optional[int] = None):
        self.store = store
        self.limit = limit or get_settings().recent_founders_limit

    def ids(self, count: Optional[int] = None) -> list[int]:
        raw = self.store.get(RECENT_FOUNDERS_KEY, [])
        if not isinstance(raw, list):
            return []
        ids = []
        for value in raw:
            try:
                ids.append(int(value))
            except (TypeError, ValueError):
                continue
        return ids[:count] if count is not None else ids

    def push(self, founder_id: int) -> list[int]:
        """Mueve el fundador al frente de la lista, sin duplicados."""
        ids = [founder_id] + [fid for fid in self.ids() if fid != founder_id]
        ids = ids[: self.limit]
        self.store.set(RECENT_FOUNDERS_KEY, ids)
        return ids

    def clear(self) -> None:
        self.store.delete(RECENT_FOUNDERS_KEY)


class FilterPresetStore:
    """Presets de filtros con nombre."""

    def __init__(self, store: JsonFileStore):
        self.store = store

    def all(self) -> list[FilterPreset]:
        raw = self.store.get(FILTER_PRESETS_KEY, [])
        presets = []
        for item in raw if isinstance(raw, list) else []:
            try:
                presets.append(FilterPreset.model_validate(item))
            except ValueError as e:
                logger.warning("Preset inválido ignorado", error=str(e))
        return presets

    def get(self, preset_id: str) -> Optional[FilterPreset]:
        return next((p for p in self.all() if p.id == preset_id), None)

    def save(self, name: str, filters: PropertyFilter) -> FilterPreset:
        name = (name or "").strip()
        if not name:
            raise ValidationFailed("El preset necesita un nombre")

        preset = FilterPreset(
            id=uuid.uuid4().hex,
            name=name,
            filter=filters.model_copy(deep=True),
        )
        presets = self.all() + [preset]
        self._write(presets)
        logger.info("Preset guardado", preset_id=preset.id, name=name)
        return preset

    def delete(self, preset_id: str) -> bool:
        presets = self.all()
        remaining = [p for p in presets if p.id != preset_id]
        if len(remaining) == len(presets):
            return False
        self._write(remaining)
        return True

    def _write(self, presets: list[FilterPreset]) -> None:
        self.store.set(FILTER_PRESETS_KEY, [p.model_dump(mode="json") for p in presets])
