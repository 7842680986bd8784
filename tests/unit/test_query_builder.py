"""
Unit tests del builder de consultas.

Tests:
- Rangos con cotas explícitas (0 incluido)
- Pisos, ubicación y keyword
- Exclusión de estados terminales siempre presente
"""

import pytest

from storematch.config import BASELINE_EXCLUDED_STATUSES
from storematch.models import NumericRange, PropertyFilter
from storematch.query import build_property_query, excluded_statuses, ilike_any


def _ops(query):
    return [(p.op, p.column, p.value) for p in query.predicates]


class RecordingRequest:
    """Registra las llamadas que recibe un request builder."""

    def __init__(self):
        self.calls = []
        self._negate = False

    @property
    def not_(self):
        self._negate = True
        return self

    def __getattr__(self, name):
        def record(*args):
            prefix = "not_." if self._negate else ""
            self._negate = False
            self.calls.append((prefix + name, args))
            return self

        return record


@pytest.mark.unit
class TestBaselineExclusion:
    def test_no_filter_only_excludes_terminal_statuses(self):
        query = build_property_query()
        assert _ops(query) == [
            ("not_in", "status", tuple(BASELINE_EXCLUDED_STATUSES)),
        ]

    def test_extra_statuses_are_added_to_baseline(self):
        query = build_property_query(PropertyFilter(exclude_status=["접수", "진행종료"]))
        (op, column, value), = _ops(query)
        assert op == "not_in"
        assert value == ("진행종료", "진행보류", "계약완료", "접수")

    def test_excluded_statuses_keeps_order_without_duplicates(self):
        assert excluded_statuses(["계약완료", "진행중"]) == [
            "진행종료",
            "진행보류",
            "계약완료",
            "진행중",
        ]


@pytest.mark.unit
class TestRanges:
    def test_both_bounds(self):
        query = build_property_query(PropertyFilter(area=NumericRange(min=30, max=60)))
        assert ("gte", "area", 30) in _ops(query)
        assert ("lte", "area", 60) in _ops(query)

    def test_zero_is_a_real_bound(self):
        query = build_property_query(PropertyFilter(premium=NumericRange(min=0, max=0)))
        assert ("gte", "premium", 0) in _ops(query)
        assert ("lte", "premium", 0) in _ops(query)

    def test_unset_bound_is_skipped(self):
        query = build_property_query(PropertyFilter(rent=NumericRange(max=300)))
        ops = _ops(query)
        assert ("lte", "rent", 300) in ops
        assert not any(op == "gte" for op, _, _ in ops)

    def test_all_range_columns(self):
        filters = PropertyFilter(
            area=NumericRange(min=1),
            deposit=NumericRange(min=2),
            rent=NumericRange(min=3),
            premium=NumericRange(min=4),
        )
        columns = [c for op, c, _ in _ops(build_property_query(filters)) if op == "gte"]
        assert columns == ["area", "deposit", "rent", "premium"]


@pytest.mark.unit
class TestEqualityAndMembership:
    def test_floors_membership(self):
        query = build_property_query(PropertyFilter(floors=["1층", "지하"]))
        assert ("in", "floor", ("1층", "지하")) in _ops(query)

    def test_empty_floors_not_applied(self):
        query = build_property_query(PropertyFilter(floors=[]))
        assert not any(op == "in" for op, _, _ in _ops(query))

    def test_location_equality(self):
        query = build_property_query(PropertyFilter(sido="서울특별시", sigungu="강남구"))
        assert ("eq", "sido", "서울특별시") in _ops(query)
        assert ("eq", "sigungu", "강남구") in _ops(query)

    def test_blank_location_is_no_filter(self):
        query = build_property_query(PropertyFilter(sido="", sigungu="   "))
        assert len(query) == 1


@pytest.mark.unit
class TestKeyword:
    def test_keyword_builds_single_or_group(self):
        query = build_property_query(keyword="카페")
        or_groups = [value for op, _, value in _ops(query) if op == "or"]
        assert len(or_groups) == 1
        for column in ["store_name", "beopjeongdong", "jibun", "notes", "property_code"]:
            assert f'{column}.ilike."%카페%"' in or_groups[0]

    def test_empty_keyword_equals_no_keyword(self):
        assert build_property_query(keyword="") == build_property_query()
        assert build_property_query(PropertyFilter(keyword="")) == build_property_query()

    def test_explicit_keyword_wins_over_filter_keyword(self):
        query = build_property_query(PropertyFilter(keyword="치킨"), keyword="피자")
        (value,) = [v for op, _, v in _ops(query) if op == "or"]
        assert "피자" in value
        assert "치킨" not in value

    def test_filter_keyword_used_when_explicit_blank(self):
        query = build_property_query(PropertyFilter(keyword="치킨"), keyword="  ")
        (value,) = [v for op, _, v in _ops(query) if op == "or"]
        assert "치킨" in value

    def test_reserved_characters_are_quoted(self):
        expression = ilike_any(["store_name"], 'a,b(c)"d')
        assert expression == 'store_name.ilike."%a,b(c)\\"d%"'

    def test_like_wildcards_are_escaped(self):
        assert ilike_any(["store_name"], "A_1") == 'store_name.ilike."%A\\\\_1%"'
        assert ilike_any(["store_name"], "50%") == 'store_name.ilike."%50\\\\%%"'


@pytest.mark.unit
class TestApply:
    def test_apply_translates_every_predicate(self):
        filters = PropertyFilter(
            area=NumericRange(min=10, max=20),
            floors=["1층"],
            sido="서울특별시",
        )
        request = RecordingRequest()
        build_property_query(filters, keyword="카페").apply(request)
        names = [name for name, _ in request.calls]
        assert names == ["gte", "lte", "in_", "eq", "or_", "not_.in_"]
        assert request.calls[-1][1] == ("status", list(BASELINE_EXCLUDED_STATUSES))

    def test_query_is_immutable(self):
        base = build_property_query()
        extended = base.where("eq", "sido", "부산광역시")
        assert len(base) == 1
        assert len(extended) == 2
