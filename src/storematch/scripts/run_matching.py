"""
Script para operar los matchings de un fundador.

Uso:
    python -m storematch.scripts.run_matching auto --founder 12
    python -m storematch.scripts.run_matching list --founder 12
    python -m storematch.scripts.run_matching save --founder 12 --properties 3,5,8
    python -m storematch.scripts.run_matching cancel --founder 12 --property 5
    python -m storematch.scripts.run_matching toggle --matching 40 --field is_favorite
    python -m storematch.scripts.run_matching status --matching 40 --status 계약
    python -m storematch.scripts.run_matching search 김
    python -m storematch.scripts.run_matching recent
"""

import argparse
import logging
import sys

import structlog

from storematch.config import MATCHING_FLAGS, get_settings
from storematch.database import FounderRepository
from storematch.database.supabase_client import STORE_ERRORS, describe_error
from storematch.exceptions import (
    FounderNotFound,
    NotFound,
    StoreAccessError,
    ValidationFailed,
)
from storematch.matching import AutoMatcher, RecommendationStore
from storematch.models import Founder
from storematch.state import JsonFileStore, RecentFounders

# Configurar logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
    force=True,
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


def _parse_ids(raw: str) -> list[int]:
    return [int(part) for part in raw.split(",") if part.strip()]


def _remember(founder_id: int) -> None:
    RecentFounders(JsonFileStore()).push(founder_id)


def _print_founder(founder: Founder) -> None:
    details = " | ".join(
        part for part in (founder.contact, founder.business_type) if part
    )
    print(f"[{founder.founder_id}] {founder.display_name} {details}".rstrip())


def cmd_auto(args) -> int:
    run = AutoMatcher().run(args.founder)
    _remember(args.founder)
    print(f"Estado: {run.state.value}")
    print(f"Candidatos: {len(run.property_ids)} (nuevos: {run.inserted})")
    for property_id in run.property_ids:
        print(f"  - {property_id}")
    return 0


def cmd_list(args) -> int:
    if FounderRepository().get_by_id(args.founder) is None:
        raise FounderNotFound(args.founder)
    matchings = RecommendationStore().list_for_founder(args.founder)
    _remember(args.founder)
    if not matchings:
        print("Sin recomendaciones.")
        return 0
    for m in matchings:
        prop = m.property
        name = (prop.store_name if prop else None) or "-"
        flags = []
        if m.is_favorite:
            flags.append("★")
        if m.exclude_from_print:
            flags.append("인쇄제외")
        print(
            f"[{m.matching_id}] {m.matched_at} {m.method}/{m.status} "
            f"local={m.property_id} {name} {' '.join(flags)}".rstrip()
        )
    return 0


def cmd_save(args) -> int:
    inserted = RecommendationStore().save(args.founder, args.properties)
    print(f"Matchings nuevos: {inserted}")
    return 0


def cmd_cancel(args) -> int:
    deleted = RecommendationStore().cancel(args.founder, args.property)
    print("Cancelado." if deleted else "No había matching para ese par.")
    return 0


def cmd_toggle(args) -> int:
    value = RecommendationStore().toggle_flag(args.matching, args.field)
    print(f"{args.field} = {value}")
    return 0


def cmd_status(args) -> int:
    RecommendationStore().update_status(args.matching, args.status)
    print(f"status = {args.status}")
    return 0


def cmd_search(args) -> int:
    rows = FounderRepository().search(args.term)
    for row in rows:
        _print_founder(Founder.model_validate(row))
    if not rows:
        print("Sin resultados.")
    return 0


def cmd_recent(args) -> int:
    ids = RecentFounders(JsonFileStore()).ids(settings.recent_founders_display)
    for row in FounderRepository().get_many(ids):
        _print_founder(Founder.model_validate(row))
    if not ids:
        print("Sin fundadores recientes.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Matchings entre fundadores y locales"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    auto = sub.add_parser("auto", help="Auto-match por reglas")
    auto.add_argument("--founder", type=int, required=True, help="ID del fundador")
    auto.set_defaults(func=cmd_auto)

    lst = sub.add_parser("list", help="Recomendaciones de un fundador")
    lst.add_argument("--founder", type=int, required=True, help="ID del fundador")
    lst.set_defaults(func=cmd_list)

    save = sub.add_parser("save", help="Guardar recomendaciones manuales")
    save.add_argument("--founder", type=int, required=True, help="ID del fundador")
    save.add_argument(
        "--properties",
        type=_parse_ids,
        required=True,
        help="IDs de locales separados por coma (ej: 3,5,8)",
    )
    save.set_defaults(func=cmd_save)

    cancel = sub.add_parser("cancel", help="Cancelar una recomendación")
    cancel.add_argument("--founder", type=int, required=True, help="ID del fundador")
    cancel.add_argument("--property", type=int, required=True, help="ID del local")
    cancel.set_defaults(func=cmd_cancel)

    toggle = sub.add_parser("toggle", help="Invertir un flag")
    toggle.add_argument("--matching", type=int, required=True, help="ID del matching")
    toggle.add_argument("--field", type=str, required=True, choices=MATCHING_FLAGS)
    toggle.set_defaults(func=cmd_toggle)

    status = sub.add_parser("status", help="Cambiar el estado de un matching")
    status.add_argument("--matching", type=int, required=True, help="ID del matching")
    status.add_argument("--status", type=str, required=True, help="Nuevo estado")
    status.set_defaults(func=cmd_status)

    search = sub.add_parser("search", help="Buscar fundadores")
    search.add_argument("term", type=str, help="Nombre, contacto o rubro")
    search.set_defaults(func=cmd_search)

    recent = sub.add_parser("recent", help="Fundadores usados recientemente")
    recent.set_defaults(func=cmd_recent)

    return parser


def main():
    """Entry point del script."""
    args = build_parser().parse_args()

    try:
        sys.exit(args.func(args))
    except (ValidationFailed, NotFound) as e:
        logger.warning("Operación rechazada", command=args.command, error=str(e))
        sys.exit(1)
    except StoreAccessError as e:
        logger.error("Error de almacenamiento", command=args.command, error=str(e))
        sys.exit(1)
    except STORE_ERRORS as e:
        logger.error("Error de Supabase", command=args.command, error=describe_error(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrumpido por usuario")
        sys.exit(130)


if __name__ == "__main__":
    main()
