"""
Constructor de consultas sobre locales.

Traduce un PropertyFilter declarativo a un conjunto de predicados
(rango, igualdad, pertenencia, exclusión y OR de ilike) listo para
aplicarse sobre un request builder de PostgREST. No hace I/O.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from storematch.config import BASELINE_EXCLUDED_STATUSES
from storematch.models import PropertyFilter

KEYWORD_COLUMNS = ["store_name", "beopjeongdong", "jibun", "notes", "property_code"]

RANGE_COLUMNS = ["area", "deposit", "rent", "premium"]


@dataclass(frozen=True)
class Predicate:
    """Un predicado sobre una columna (o un grupo OR si op == 'or')."""

    op: str
    column: Optional[str]
    value: Any

    def apply(self, request):
        """Agrega el predicado al request builder y lo devuelve."""
        if self.op == "eq":
            return request.eq(self.column, self.value)
        if self.op == "gte":
            return request.gte(self.column, self.value)
        if self.op == "lte":
            return request.lte(self.column, self.value)
        if self.op == "in":
            return request.in_(self.column, list(self.value))
        if self.op == "not_in":
            return request.not_.in_(self.column, list(self.value))
        if self.op == "or":
            return request.or_(self.value)
        raise ValueError(f"Operador no soportado: {self.op}")


@dataclass(frozen=True)
class PropertyQuery:
    """Conjunto inmutable de predicados combinados con AND."""

    predicates: tuple[Predicate, ...] = field(default_factory=tuple)

    def where(self, op: str, column: Optional[str], value: Any) -> "PropertyQuery":
        return PropertyQuery(self.predicates + (Predicate(op, column, value),))

    def apply(self, request):
        for predicate in self.predicates:
            request = predicate.apply(request)
        return request

    def __len__(self) -> int:
        return len(self.predicates)


def _quote(value: str) -> str:
    """Entrecomilla un valor para que ',', '(' y ')' no rompan el árbol lógico."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _escape_like(value: str) -> str:
    """Escapa los comodines de LIKE para que el keyword se busque literal."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def ilike_any(columns: list[str], keyword: str) -> str:
    """
    Arma el filtro OR de PostgREST: alguna columna contiene el keyword.

    Ej: store_name.ilike."%카페%",notes.ilike."%카페%"
    """
    pattern = _quote(f"%{_escape_like(keyword.strip())}%")
    return ",".join(f"{column}.ilike.{pattern}" for column in columns)


def excluded_statuses(extra: Optional[list[str]] = None) -> list[str]:
    """Estados terminales más los adicionales, sin duplicados y en orden."""
    statuses = list(BASELINE_EXCLUDED_STATUSES)
    for status in extra or []:
        if status and status not in statuses:
            statuses.append(status)
    return statuses


def build_property_query(
    filters: Optional[PropertyFilter] = None,
    keyword: Optional[str] = None,
) -> PropertyQuery:
    """
    Construye los predicados para un listado de locales.

    Args:
        filters: Filtros declarativos (None = sin filtros)
        keyword: Texto libre; tiene prioridad sobre filters.keyword

    Returns:
        PropertyQuery con la exclusión de estados terminales siempre incluida
    """
    filters = filters or PropertyFilter()
    query = PropertyQuery()

    for column in RANGE_COLUMNS:
        bounds = getattr(filters, column)
        if bounds.min is not None:
            query = query.where("gte", column, bounds.min)
        if bounds.max is not None:
            query = query.where("lte", column, bounds.max)

    if filters.floors:
        query = query.where("in", "floor", tuple(filters.floors))

    if filters.sido:
        query = query.where("eq", "sido", filters.sido)
    if filters.sigungu:
        query = query.where("eq", "sigungu", filters.sigungu)

    text = (keyword or "").strip() or filters.keyword
    if text:
        query = query.where("or", None, ilike_any(KEYWORD_COLUMNS, text))

    query = query.where(
        "not_in", "status", tuple(excluded_statuses(filters.exclude_status))
    )
    return query
