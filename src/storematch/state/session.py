"""
Estado de la pantalla de matching.

MatchSession es inmutable: cada transición devuelve una sesión nueva.
Solo los fundadores recientes y los presets se persisten (ver local_store).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storematch.config import ORDERABLE_COLUMNS
from storematch.exceptions import ValidationFailed
from storematch.matching.store import RecommendationStore
from storematch.models import PropertyFilter
from storematch.state.local_store import RecentFounders


class MatchSession(BaseModel):
    """Fundador actual, selección de locales y parámetros del listado."""

    model_config = ConfigDict(frozen=True)

    founder_id: Optional[int] = None
    selected_property_ids: tuple[int, ...] = ()
    filters: PropertyFilter = Field(default_factory=PropertyFilter)
    keyword: str = ""
    page: int = 1
    order_by: str = "received_at"
    asc: bool = False


def select_founder(
    session: MatchSession,
    founder_id: int,
    recent: Optional[RecentFounders] = None,
) -> MatchSession:
    """Cambia de fundador y limpia la selección. Lo registra como reciente si se pasa recent."""
    if recent is not None:
        recent.push(founder_id)
    return session.model_copy(update={"founder_id": founder_id, "selected_property_ids": ()})


def toggle_property(session: MatchSession, property_id: int) -> MatchSession:
    selected = session.selected_property_ids
    if property_id in selected:
        selected = tuple(pid for pid in selected if pid != property_id)
    else:
        selected = selected + (property_id,)
    return session.model_copy(update={"selected_property_ids": selected})


def clear_selection(session: MatchSession) -> MatchSession:
    return session.model_copy(update={"selected_property_ids": ()})


def apply_filters(
    session: MatchSession,
    filters: PropertyFilter,
    keyword: Optional[str] = None,
) -> MatchSession:
    """Aplica filtros nuevos y vuelve a la primera página."""
    update = {"filters": filters, "page": 1}
    if keyword is not None:
        update["keyword"] = keyword.strip()
    return session.model_copy(update=update)


def reset_filters(session: MatchSession) -> MatchSession:
    return apply_filters(session, PropertyFilter(), keyword="")


def change_page(session: MatchSession, page: int) -> MatchSession:
    if page < 1:
        raise ValidationFailed(f"page debe ser >= 1 (recibido {page})")
    return session.model_copy(update={"page": page})


def change_order(session: MatchSession, order_by: str, asc: bool = False) -> MatchSession:
    if order_by not in ORDERABLE_COLUMNS:
        raise ValidationFailed(f"order_by inválido: {order_by}")
    return session.model_copy(update={"order_by": order_by, "asc": asc, "page": 1})


def save_selection(session: MatchSession, store: RecommendationStore) -> MatchSession:
    """
    Guarda la selección actual como recomendaciones manuales.

    Si el guardado falla la sesión no cambia; si sale bien, la selección se limpia.
    """
    store.save(session.founder_id, list(session.selected_property_ids))
    return clear_selection(session)
