"""
Script para listar locales con filtros y paginación.

Uso:
    python -m storematch.scripts.list_properties --page 2 --order-by area --asc
    python -m storematch.scripts.list_properties --keyword 카페 --sido 서울특별시
    python -m storematch.scripts.list_properties --area 30:60 --rent :300 --floors 1층,2층
    python -m storematch.scripts.list_properties --preset <id>
    python -m storematch.scripts.list_properties --area 30:60 --save-preset "강남 소형"
"""

import argparse
import logging
import sys
from typing import Optional

import structlog

from storematch.config import ORDERABLE_COLUMNS, get_settings
from storematch.exceptions import StoreAccessError, ValidationFailed
from storematch.models import NumericRange, PropertyFilter
from storematch.query.fetcher import PropertyFetcher
from storematch.state import FilterPresetStore, JsonFileStore

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


def parse_range(raw: Optional[str]) -> NumericRange:
    """'30:60' → [30, 60]; ':300' → [-, 300]; '30:' → [30, -]."""
    if not raw:
        return NumericRange()
    low, _, high = raw.partition(":")
    try:
        return NumericRange(
            min=float(low) if low.strip() else None,
            max=float(high) if high.strip() else None,
        )
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Rango inválido '{raw}': {e}")


def build_filter(args) -> PropertyFilter:
    return PropertyFilter(
        area=args.area,
        deposit=args.deposit,
        rent=args.rent,
        premium=args.premium,
        floors=[f.strip() for f in (args.floors or "").split(",") if f.strip()],
        sido=args.sido,
        sigungu=args.sigungu,
        exclude_status=[s.strip() for s in (args.exclude_status or "").split(",") if s.strip()],
    )


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Listado de locales comerciales")
    parser.add_argument("--page", type=int, default=1, help="Página (desde 1)")
    parser.add_argument("--page-size", type=int, default=None, help="Filas por página")
    parser.add_argument(
        "--order-by",
        type=str,
        default="received_at",
        choices=ORDERABLE_COLUMNS,
        help="Columna de orden",
    )
    parser.add_argument("--asc", action="store_true", help="Orden ascendente")
    parser.add_argument("--keyword", type=str, default=None, help="Texto libre")
    parser.add_argument("--area", type=parse_range, default=NumericRange(), help="min:max")
    parser.add_argument("--deposit", type=parse_range, default=NumericRange(), help="min:max")
    parser.add_argument("--rent", type=parse_range, default=NumericRange(), help="min:max")
    parser.add_argument("--premium", type=parse_range, default=NumericRange(), help="min:max")
    parser.add_argument("--floors", type=str, default=None, help="Pisos separados por coma")
    parser.add_argument("--sido", type=str, default=None)
    parser.add_argument("--sigungu", type=str, default=None)
    parser.add_argument(
        "--exclude-status",
        type=str,
        default=None,
        help="Estados extra a excluir, separados por coma",
    )
    parser.add_argument("--preset", type=str, default=None, help="ID de preset a aplicar")
    parser.add_argument("--save-preset", type=str, default=None, help="Guardar el filtro con este nombre")

    args = parser.parse_args()

    try:
        presets = FilterPresetStore(JsonFileStore())
        if args.preset:
            preset = presets.get(args.preset)
            if preset is None:
                logger.warning("Preset no encontrado", preset_id=args.preset)
                sys.exit(1)
            filters = preset.filter
        else:
            filters = build_filter(args)

        if args.save_preset:
            saved = presets.save(args.save_preset, filters)
            print(f"Preset guardado: {saved.id} ({saved.name})")

        result = PropertyFetcher().fetch_page(
            page=args.page,
            page_size=args.page_size,
            order_by=args.order_by,
            asc=args.asc,
            filters=filters,
            keyword=args.keyword,
        )
    except (ValidationFailed, ValueError) as e:
        logger.warning("Parámetros inválidos", error=str(e))
        sys.exit(1)
    except StoreAccessError as e:
        logger.error("Error de almacenamiento", error=str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrumpido por usuario")
        sys.exit(130)

    print(f"Total: {result.total} | Página {args.page}/{result.total_pages}")
    for prop in result.items:
        location = " ".join(
            part for part in (prop.sigungu, prop.beopjeongdong, prop.jibun) if part
        )
        print(
            f"[{prop.property_id}] {prop.store_name or '-'} | {location} | "
            f"{prop.floor or '-'} | {prop.area or '-'}㎡ | "
            f"{prop.deposit or 0}/{prop.rent or 0} | {prop.status or '-'}"
        )
    sys.exit(0)


if __name__ == "__main__":
    main()
