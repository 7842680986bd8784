"""
Configuración de pytest y fixtures compartidas.

FakeSupabase imita la superficie del cliente que usan los repositorios
(table → select/insert/upsert/update/delete → filtros → execute) sobre
tablas en memoria.
"""

import re
from typing import Any, Optional

import pytest
from postgrest.exceptions import APIError

from storematch.config import get_settings

PRIMARY_KEYS = {
    "founders": "founder_id",
    "properties": "property_id",
    "matchings": "matching_id",
}

JOINS = {
    "property:properties(*)": ("property", "properties", "property_id"),
}

_ILIKE_RE = re.compile(r'(\w+)\.ilike\."((?:[^"\\]|\\.)*)"')
_UNESCAPE_RE = re.compile(r"\\(.)")


def _ilike_literal(quoted: str) -> str:
    """Deshace el entrecomillado de PostgREST y el escape de LIKE de un patrón %...%."""
    like = _UNESCAPE_RE.sub(r"\1", quoted)
    return _UNESCAPE_RE.sub(r"\1", like[1:-1])


class FakeResponse:
    def __init__(self, data: list[dict], count: Optional[int] = None):
        self.data = data
        self.count = count


class FakeQuery:
    """Request builder en memoria, encadenable como el de postgrest-py."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.count_mode = None
        self.head = False
        self.payload: Any = None
        self.on_conflict = ""
        self.ignore_duplicates = False
        self.filters: list[tuple[str, str, Any]] = []
        self.orders: list[tuple[str, bool]] = []
        self.range_: Optional[tuple[int, int]] = None
        self.limit_: Optional[int] = None
        self._negate = False

    # Acciones
    def select(self, *columns, count=None, head=None):
        self.action = "select"
        self.columns = ",".join(columns) if columns else "*"
        self.count_mode = count
        self.head = bool(head)
        return self

    def insert(self, rows):
        self.action = "insert"
        self.payload = rows if isinstance(rows, list) else [rows]
        return self

    def upsert(self, rows, on_conflict="", ignore_duplicates=False):
        self.action = "upsert"
        self.payload = rows if isinstance(rows, list) else [rows]
        self.on_conflict = on_conflict
        self.ignore_duplicates = ignore_duplicates
        return self

    def update(self, data):
        self.action = "update"
        self.payload = data
        return self

    def delete(self):
        self.action = "delete"
        return self

    # Filtros
    def _add(self, op, column, value):
        if self._negate:
            op = f"not_{op}"
            self._negate = False
        self.filters.append((op, column, value))
        return self

    @property
    def not_(self):
        self._negate = True
        return self

    def eq(self, column, value):
        return self._add("eq", column, value)

    def gte(self, column, value):
        return self._add("gte", column, value)

    def lte(self, column, value):
        return self._add("lte", column, value)

    def in_(self, column, values):
        return self._add("in", column, list(values))

    def or_(self, expression):
        return self._add("or", None, expression)

    def match(self, query: dict):
        for column, value in query.items():
            self.eq(column, value)
        return self

    def order(self, column, desc=False, nullsfirst=None, foreign_table=None):
        self.orders.append((column, desc))
        return self

    def range(self, start, end):
        self.range_ = (start, end)
        return self

    def limit(self, size):
        self.limit_ = size
        return self

    # Ejecución
    def _matches(self, row: dict) -> bool:
        for op, column, value in self.filters:
            current = row.get(column) if column else None
            if op == "eq" and current != value:
                return False
            if op == "gte" and (current is None or current < value):
                return False
            if op == "lte" and (current is None or current > value):
                return False
            if op == "in" and current not in value:
                return False
            # NOT IN de SQL: un NULL tampoco pasa
            if op == "not_in" and (current is None or current in value):
                return False
            if op == "or":
                pairs = _ILIKE_RE.findall(value)
                if not any(
                    _ilike_literal(pattern).lower()
                    in str(row.get(col) or "").lower()
                    for col, pattern in pairs
                ):
                    return False
        return True

    def _sorted(self, rows: list[dict]) -> list[dict]:
        for column, desc in reversed(self.orders):
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            rows = missing + present if desc else present + missing
        return rows

    def _project(self, row: dict) -> dict:
        if self.columns.strip() == "*":
            return dict(row)
        result = {}
        for token in [c.strip() for c in self.columns.split(",")]:
            if token in JOINS:
                alias, table, key = JOINS[token]
                related = [dict(r) for r in self.db.tables[table] if r.get(key) == row.get(key)]
                # El join llega como lista, igual que en algunas respuestas de PostgREST
                result[alias] = related
            elif token:
                result[token] = row.get(token)
        return result

    def execute(self) -> FakeResponse:
        self.db.executed.append(self)
        if self.table in self.db.failures:
            raise self.db.failures[self.table]

        rows = self.db.tables[self.table]
        pk = PRIMARY_KEYS[self.table]

        if self.action in ("insert", "upsert"):
            inserted = []
            keys = [k.strip() for k in self.on_conflict.split(",") if k.strip()]
            for payload in self.payload:
                existing = None
                if keys:
                    existing = next(
                        (r for r in rows if all(r.get(k) == payload.get(k) for k in keys)),
                        None,
                    )
                if existing is not None:
                    if not self.ignore_duplicates:
                        existing.update(payload)
                        inserted.append(dict(existing))
                    continue
                row = dict(payload)
                row[pk] = self.db.next_id(self.table)
                rows.append(row)
                inserted.append(dict(row))
            return FakeResponse(inserted)

        selected = [r for r in rows if self._matches(r)]

        if self.action == "update":
            for row in selected:
                row.update(self.payload)
            return FakeResponse([dict(r) for r in selected])

        if self.action == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in selected]
            return FakeResponse([dict(r) for r in selected])

        total = len(selected)
        selected = self._sorted(selected)
        if self.range_ is not None:
            start, end = self.range_
            if start > 0 and start >= total:
                raise APIError(
                    {
                        "code": "PGRST103",
                        "message": "Requested range not satisfiable",
                        "details": f"An offset of {start} was requested, but there are only {total} rows.",
                        "hint": None,
                    }
                )
            selected = selected[start : end + 1]
        if self.limit_ is not None:
            selected = selected[: self.limit_]

        count = total if self.count_mode == "exact" else None
        data = [] if self.head else [self._project(r) for r in selected]
        return FakeResponse(data, count)


class FakeSupabase:
    """Cliente falso con tablas en memoria."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {name: [] for name in PRIMARY_KEYS}
        self.executed: list[FakeQuery] = []
        self.failures: dict[str, Exception] = {}
        self._ids = {name: 0 for name in PRIMARY_KEYS}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def next_id(self, table: str) -> int:
        self._ids[table] += 1
        return self._ids[table]

    def seed(self, table: str, rows: list[dict]) -> list[dict]:
        pk = PRIMARY_KEYS[table]
        for row in rows:
            row = dict(row)
            if pk not in row:
                row[pk] = self.next_id(table)
            else:
                self._ids[table] = max(self._ids[table], row[pk])
            self.tables[table].append(row)
        return self.tables[table]

    def fail(self, table: str, message: str = "boom", code: str = "XX000"):
        self.failures[table] = APIError({"code": code, "message": message, "details": None, "hint": None})


@pytest.fixture(autouse=True)
def settings_env(monkeypatch, tmp_path):
    """Variables mínimas para construir Settings sin un .env real."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test-key")
    monkeypatch.delenv("SUPABASE_SERVICE_KEY", raising=False)
    monkeypatch.setenv("LOCAL_STATE_PATH", str(tmp_path / "state.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def sample_founder():
    """Fundador de ejemplo con todos los requisitos cargados."""
    return {
        "founder_id": 1,
        "name": "김민수",
        "contact": "010-1234-5678",
        "area": 100,
        "deposit": 5000,
        "rent": 200,
        "premium": 3000,
        "business_type": "카페",
        "status": "상담중",
        "received_at": "2024-05-01T10:00:00",
    }


@pytest.fixture
def sample_property():
    """Local de ejemplo."""
    return {
        "property_id": 10,
        "property_code": "GN-0010",
        "received_at": "2024-05-02T09:00:00",
        "sido": "서울특별시",
        "sigungu": "강남구",
        "beopjeongdong": "역삼동",
        "jibun": "123-4",
        "store_name": "역삼 코너 카페",
        "business_type": "카페",
        "status": "available",
        "floor": "1층",
        "area": 95,
        "deposit": 4000,
        "rent": 180,
        "premium": 2000,
        "notes": "대로변 코너",
    }
