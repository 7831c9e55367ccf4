from datetime import datetime
from unittest.mock import MagicMock

from bson import ObjectId

from fakes import FakeRosterRepo
from staffhub.roster.filters import RosterFilters
from staffhub.roster.mongo_roster_repository import MongoRosterRepository
from staffhub.roster.service import RosterService

NOW = datetime(2026, 3, 10, 14, 0)


def _rows(n):
    return [{"_id": ObjectId(), "staffId": f"STF-{i:04d}", "createdAt": NOW} for i in range(n)]


def test_meta_reports_total_pages():
    service = RosterService(FakeRosterRepo(_rows(23)), clock=lambda: NOW)

    page = service.list_staffs(RosterFilters(page=1, limit=10))

    assert page.meta.to_dict() == {"total": 23, "page": 1, "limit": 10, "totalPage": 3}
    assert len(page.staffs) == 10


def test_rows_are_json_ready():
    service = RosterService(FakeRosterRepo(_rows(1)), clock=lambda: NOW)

    [row] = service.list_staffs(RosterFilters()).staffs

    assert isinstance(row["_id"], str)
    assert row["createdAt"] == NOW.isoformat()


def test_page_beyond_last_is_empty_with_same_total():
    service = RosterService(FakeRosterRepo(_rows(23)), clock=lambda: NOW)

    page = service.list_staffs(RosterFilters(page=9, limit=10))

    assert page.staffs == []
    assert page.meta.total == 23
    assert page.meta.total_page == 3


def test_empty_roster():
    page = RosterService(FakeRosterRepo([]), clock=lambda: NOW).list_staffs(RosterFilters())
    assert page.meta.to_dict() == {"total": 0, "page": 1, "limit": 10, "totalPage": 0}


def test_clock_is_passed_to_repository():
    repo = FakeRosterRepo([])
    RosterService(repo, clock=lambda: NOW).list_staffs(RosterFilters())
    assert repo.calls[0]["now"] == NOW


def _mongo_repo(aggregate_result):
    conn = MagicMock()
    collection = conn.db.__getitem__.return_value
    collection.aggregate.return_value = iter(aggregate_result)
    return MongoRosterRepository(conn), conn, collection


def test_mongo_repository_reads_facet():
    rows = _rows(2)
    repo, conn, collection = _mongo_repo([{"staffs": rows, "total": [{"total": 7}]}])

    result = repo.fetch_page(RosterFilters(), now=NOW)

    conn.db.__getitem__.assert_called_with("staffs")
    assert result.rows == rows
    assert result.total == 7
    pipeline = collection.aggregate.call_args[0][0]
    assert "$facet" in pipeline[-1]


def test_mongo_repository_zero_matches():
    repo, _, _ = _mongo_repo([{"staffs": [], "total": []}])

    result = repo.fetch_page(RosterFilters(), now=NOW)

    assert result.rows == []
    assert result.total == 0
