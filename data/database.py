"""
Database interface for the FPL Analyzer.

Provides connection management plus the sqlite-backed reasoning log and
decision store.
"""

import sqlite3
import logging
from pathlib import Path
from typing import Optional, List, Dict, Any
from contextlib import contextmanager
import json
from datetime import datetime

from data.stores import DecisionStore, ReasoningLog
from infrastructure.events import ReasoningCategory, ReasoningEvent
from models.decision import DecisionRecord
from models.recommendation import Recommendation

logger = logging.getLogger('fpl_analyzer.database')


class Database:
    """Main database interface."""

    def __init__(self, db_path: str = "data/fpl_analyzer.db"):
        self.db_path = db_path
        self._ensure_database_exists()

    def _ensure_database_exists(self):
        """Create database and tables if they don't exist."""
        db_file = Path(self.db_path)
        db_file.parent.mkdir(parents=True, exist_ok=True)
        # Every statement in the schema is idempotent
        self.initialize_schema()

    def initialize_schema(self):
        """Initialize database schema from SQL file."""
        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, 'r') as f:
            schema_sql = f.read()

        with self.get_connection() as conn:
            conn.executescript(schema_sql)
            conn.commit()
        logger.debug(f"Database: Schema ready at {self.db_path}")

    @contextmanager
    def get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path, timeout=10.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def execute_query(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Execute a SELECT query and return results as list of dicts."""
        with self.get_connection() as conn:
            cursor = conn.execute(query, params)
            columns = [description[0] for description in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def execute_update(self, query: str, params: tuple = ()) -> int:
        """Execute an INSERT/UPDATE/DELETE query and return affected rows."""
        with self.get_connection() as conn:
            cursor = conn.execute(query, params)
            conn.commit()
            return cursor.rowcount

    def execute_insert(self, query: str, params: tuple = ()) -> int:
        """Execute an INSERT and return the new row id."""
        with self.get_connection() as conn:
            cursor = conn.execute(query, params)
            conn.commit()
            return cursor.lastrowid


class SqliteReasoningLog(ReasoningLog):
    """Reasoning log in the reasoning_log table."""

    def __init__(self, db: Database):
        self.db = db

    def append(self, event: ReasoningEvent) -> None:
        self.db.execute_update(
            """
            INSERT INTO reasoning_log (gameweek, message, category, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (event.gameweek, event.message, event.category.value, event.timestamp.isoformat())
        )

    def clear_for(self, gameweek: int) -> int:
        removed = self.db.execute_update(
            "DELETE FROM reasoning_log WHERE gameweek = ?", (gameweek,)
        )
        logger.debug(f"SqliteReasoningLog: Cleared {removed} events for GW{gameweek}")
        return removed

    def query(self, gameweek: int, limit: int = 50) -> List[ReasoningEvent]:
        # Row id is insertion order, which is emission order
        rows = self.db.execute_query(
            """
            SELECT gameweek, message, category, created_at
            FROM reasoning_log
            WHERE gameweek = ? OR gameweek IS NULL
            ORDER BY id DESC
            LIMIT ?
            """,
            (gameweek, limit)
        )
        return [
            ReasoningEvent(
                gameweek=row['gameweek'],
                message=row['message'],
                category=ReasoningCategory(row['category']),
                timestamp=datetime.fromisoformat(row['created_at']),
            )
            for row in rows
        ]


class SqliteDecisionStore(DecisionStore):
    """Decision snapshots in the decisions table."""

    def __init__(self, db: Database):
        self.db = db

    def save(self, record: DecisionRecord) -> DecisionRecord:
        recommendation = record.recommendation
        record_id = self.db.execute_insert(
            """
            INSERT INTO decisions (
                gameweek, strategy, recommendation, captain, vice_captain,
                confidence, summary, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.gameweek,
                record.strategy,
                json.dumps(recommendation.to_dict()),
                recommendation.captain.name if recommendation.captain else None,
                recommendation.vice_captain.name if recommendation.vice_captain else None,
                recommendation.confidence.value,
                recommendation.summary,
                record.created_at.isoformat(),
            )
        )
        logger.info(f"SqliteDecisionStore: Saved decision {record_id} for GW{record.gameweek}")
        return DecisionRecord(
            gameweek=record.gameweek,
            recommendation=recommendation,
            created_at=record.created_at,
            strategy=record.strategy,
            id=record_id,
        )

    def latest(self, gameweek: int) -> Optional[DecisionRecord]:
        rows = self.db.execute_query(
            """
            SELECT * FROM decisions
            WHERE gameweek = ?
            ORDER BY id DESC
            LIMIT 1
            """,
            (gameweek,)
        )
        return self._row_to_record(rows[0]) if rows else None

    def recent(self, limit: int = 20) -> List[DecisionRecord]:
        rows = self.db.execute_query(
            "SELECT * FROM decisions ORDER BY id DESC LIMIT ?", (limit,)
        )
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: Dict[str, Any]) -> DecisionRecord:
        return DecisionRecord(
            gameweek=row['gameweek'],
            recommendation=Recommendation.from_dict(json.loads(row['recommendation'])),
            created_at=datetime.fromisoformat(row['created_at']),
            strategy=row['strategy'],
            id=row['id'],
        )
