"""Tests for the sqlite and in-memory storage."""

import sqlite3
from datetime import datetime, timezone

import pytest

from data.database import Database, SqliteDecisionStore, SqliteReasoningLog
from data.memory_store import InMemoryDecisionStore, InMemoryReasoningLog
from infrastructure.events import ReasoningCategory, ReasoningEvent
from models.decision import DecisionRecord
from models.recommendation import CaptainPick, Chip, ChipAdvice, Confidence, Recommendation


def make_record(gameweek, summary="ok", captain=True):
    recommendation = Recommendation(
        transfers=[],
        captain=CaptainPick(1, "Salah", "Form") if captain else None,
        vice_captain=CaptainPick(2, "Haaland", "Backup") if captain else None,
        chip_advice=ChipAdvice(Chip.WILDCARD, "Fixture swing", "Keep the free hit"),
        confidence=Confidence.LOW,
        summary=summary,
        key_insights=["one"],
    )
    return DecisionRecord(gameweek=gameweek, recommendation=recommendation,
                          created_at=datetime.now(timezone.utc), strategy="narrative")


@pytest.fixture
def db(tmp_path):
    return Database(str(tmp_path / "nested" / "fpl.db"))


@pytest.fixture(params=["sqlite", "memory"])
def stores(request, db):
    if request.param == "sqlite":
        return SqliteReasoningLog(db), SqliteDecisionStore(db)
    return InMemoryReasoningLog(), InMemoryDecisionStore()


class TestDatabase:

    def test_schema_created(self, db):
        tables = {row['name'] for row in db.execute_query(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        )}

        assert {'reasoning_log', 'decisions'} <= tables

    def test_wal_journal_mode(self, db):
        assert db.execute_query("PRAGMA journal_mode")[0]['journal_mode'] == 'wal'

    def test_reopening_keeps_data(self, db):
        SqliteReasoningLog(db).append(ReasoningEvent(gameweek=3, message="kept"))

        reopened = Database(db.db_path)

        assert SqliteReasoningLog(reopened).query(3)[0].message == "kept"

    def test_execute_update_returns_rowcount(self, db):
        log = SqliteReasoningLog(db)
        log.append(ReasoningEvent(gameweek=1, message="a"))
        log.append(ReasoningEvent(gameweek=1, message="b"))

        assert db.execute_update("DELETE FROM reasoning_log WHERE gameweek = ?", (1,)) == 2

    def test_bad_sql_propagates(self, db):
        with pytest.raises(sqlite3.OperationalError):
            db.execute_query("SELECT * FROM missing_table")


class TestReasoningLogs:

    def test_newest_first_with_global_events(self, stores):
        log, _ = stores
        log.append(ReasoningEvent(gameweek=12, message="first"))
        log.append(ReasoningEvent(gameweek=None, message="global"))
        log.append(ReasoningEvent(gameweek=13, message="other week"))
        log.append(ReasoningEvent(gameweek=12, message="last", category=ReasoningCategory.ERROR))

        events = log.query(12)

        assert [e.message for e in events] == ["last", "global", "first"]
        assert events[0].category == ReasoningCategory.ERROR
        assert events[1].gameweek is None

    def test_clear_for_only_touches_one_gameweek(self, stores):
        log, _ = stores
        log.append(ReasoningEvent(gameweek=12, message="a"))
        log.append(ReasoningEvent(gameweek=12, message="b"))
        log.append(ReasoningEvent(gameweek=None, message="global"))
        log.append(ReasoningEvent(gameweek=11, message="c"))

        assert log.clear_for(12) == 2
        assert [e.message for e in log.query(12)] == ["global"]
        assert [e.message for e in log.query(11)] == ["c", "global"]

    def test_limit(self, stores):
        log, _ = stores
        for i in range(10):
            log.append(ReasoningEvent(gameweek=5, message=f"m{i}"))

        assert [e.message for e in log.query(5, limit=3)] == ["m9", "m8", "m7"]

    def test_timestamps_survive(self, stores):
        log, _ = stores
        stamp = datetime(2025, 9, 13, 10, 30, tzinfo=timezone.utc)
        log.append(ReasoningEvent(gameweek=4, message="x", timestamp=stamp))

        assert log.query(4)[0].timestamp == stamp


class TestDecisionStores:

    def test_save_assigns_id_and_round_trips(self, stores):
        _, store = stores
        record = make_record(12)

        saved = store.save(record)
        latest = store.latest(12)

        assert saved.id is not None
        assert latest.id == saved.id
        assert latest.recommendation == record.recommendation
        assert latest.strategy == "narrative"
        assert latest.created_at == record.created_at

    def test_latest_is_most_recent(self, stores):
        _, store = stores
        store.save(make_record(12, summary="first"))
        store.save(make_record(12, summary="second"))
        store.save(make_record(13, summary="other"))

        assert store.latest(12).recommendation.summary == "second"

    def test_missing_gameweek(self, stores):
        _, store = stores

        assert store.latest(30) is None
        assert store.recent() == []

    def test_recent(self, stores):
        _, store = stores
        for gw in (1, 2, 3):
            store.save(make_record(gw))

        assert [r.gameweek for r in store.recent(limit=2)] == [3, 2]

    def test_record_without_captain(self, stores):
        _, store = stores
        store.save(make_record(12, captain=False))

        assert store.latest(12).recommendation.captain is None
