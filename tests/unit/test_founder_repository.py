"""
Unit tests del repositorio de fundadores.
"""

import pytest

from storematch.database import FounderRepository


@pytest.fixture
def repo(fake_db):
    fake_db.seed(
        "founders",
        [
            {"founder_id": 1, "name": "김민수", "business_type": "카페", "received_at": "2024-01-01"},
            {"founder_id": 2, "name": "이영희", "business_type": "치킨", "received_at": "2024-03-01"},
            {"founder_id": 3, "name": "박카페", "business_type": "분식", "received_at": "2024-02-01"},
        ],
    )
    return FounderRepository(client=fake_db)


@pytest.mark.unit
class TestFounderRepository:
    def test_get_many_keeps_requested_order(self, repo):
        rows = repo.get_many([3, 99, 1])
        assert [r["founder_id"] for r in rows] == [3, 1]

    def test_get_many_empty(self, fake_db, repo):
        assert repo.get_many([]) == []
        assert fake_db.executed == []

    def test_search_by_name_or_business_type(self, repo):
        rows = repo.search("카페")
        assert [r["founder_id"] for r in rows] == [3, 1]

    def test_blank_search_returns_nothing(self, fake_db, repo):
        assert repo.search("  ") == []
        assert fake_db.executed == []

    def test_search_limit(self, fake_db, repo):
        repo.search("카페", limit=1)
        assert fake_db.executed[-1].limit_ == 1

    def test_list_page_with_count(self, repo):
        rows, total = repo.list_page(page=1, page_size=2)
        assert total == 3
        assert [r["founder_id"] for r in rows] == [3, 2]

    def test_get_by_id_missing(self, repo):
        assert repo.get_by_id(404) is None
