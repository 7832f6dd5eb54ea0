"""
Persistent usage counters and per-request usage log.
Uses SQLite with atomic UPSERT increments.
"""
import sqlite3
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from config import Config
from utils.logger import app_logger


@dataclass
class UsageTotals:
    """Running usage totals for one caller."""
    uid: str
    total_tokens: int
    total_requests: int
    updated_at: float

    def to_dict(self) -> dict:
        return {
            "id": self.uid,
            "totalTokens": self.total_tokens,
            "totalRequests": self.total_requests,
            "updatedAt": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(self.updated_at)),
        }


class UsageStore:
    """
    SQLite-backed usage store.

    usage_totals holds one row per caller; usage_logs holds one row per
    recorded request so reports can be cut by date and by optimizer.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the usage store.

        Args:
            db_path: Path to SQLite database file (default: Config.USAGE_DB_PATH)
        """
        if db_path is None:
            db_path = Config.USAGE_DB_PATH

        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._db_path = db_path
        self._local = threading.local()
        self._write_lock = threading.Lock()
        self._init_db()

        app_logger.info(f"Usage store initialized with SQLite: {self._db_path}")

    def _get_conn(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, 'conn'):
            self._local.conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._local.conn.row_factory = sqlite3.Row
        return self._local.conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_conn()
        cursor = conn.cursor()

        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA busy_timeout=5000")

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS usage_totals (
                uid TEXT PRIMARY KEY,
                total_tokens INTEGER NOT NULL DEFAULT 0,
                total_requests INTEGER NOT NULL DEFAULT 0,
                updated_at REAL NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS usage_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                uid TEXT NOT NULL,
                optimizer_id TEXT,
                optimizer_name TEXT,
                tokens INTEGER NOT NULL,
                requests INTEGER NOT NULL,
                created_at REAL NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_usage_logs_created_at
            ON usage_logs(created_at)
        """)

        conn.commit()

    @staticmethod
    def _row_to_totals(row: sqlite3.Row) -> UsageTotals:
        return UsageTotals(
            uid=row['uid'],
            total_tokens=row['total_tokens'],
            total_requests=row['total_requests'],
            updated_at=row['updated_at']
        )

    def increment_usage(
        self,
        uid: str,
        tokens: int,
        requests: int = 1,
        optimizer_id: Optional[str] = None,
        optimizer_name: Optional[str] = None
    ) -> UsageTotals:
        """
        Atomically add to a caller's totals, append a log row and return the new totals.

        Args:
            uid: Caller id
            tokens: Tokens to add
            requests: Requests to add
            optimizer_id: Optimizer used for the request
            optimizer_name: Display name of that optimizer

        Returns:
            Updated UsageTotals
        """
        now = time.time()
        conn = self._get_conn()

        with self._write_lock:
            try:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO usage_totals (uid, total_tokens, total_requests, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(uid) DO UPDATE SET
                        total_tokens = total_tokens + excluded.total_tokens,
                        total_requests = total_requests + excluded.total_requests,
                        updated_at = excluded.updated_at
                """, (uid, tokens, requests, now))

                cursor.execute("""
                    INSERT INTO usage_logs (uid, optimizer_id, optimizer_name, tokens, requests, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (uid, optimizer_id, optimizer_name, tokens, requests, now))

                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

            cursor.execute("SELECT * FROM usage_totals WHERE uid = ?", (uid,))
            totals = self._row_to_totals(cursor.fetchone())

        app_logger.debug(
            f"Usage SET: {uid} | +{tokens} tokens | total {totals.total_tokens} tokens / "
            f"{totals.total_requests} requests"
        )
        return totals

    def get_usage(self, uid: str) -> Optional[UsageTotals]:
        """Get running totals for a caller."""
        cursor = self._get_conn().cursor()
        cursor.execute("SELECT * FROM usage_totals WHERE uid = ?", (uid,))
        row = cursor.fetchone()
        return self._row_to_totals(row) if row else None

    def get_ranking(self) -> list[UsageTotals]:
        """All callers ordered by total tokens, highest first."""
        cursor = self._get_conn().cursor()
        cursor.execute("""
            SELECT * FROM usage_totals
            ORDER BY total_tokens DESC, uid ASC
        """)
        return [self._row_to_totals(row) for row in cursor.fetchall()]

    def get_report(self, start: float, end: float) -> tuple[list[dict], list[dict]]:
        """
        Aggregate usage log rows with start <= created_at <= end.

        Args:
            start: Window start (epoch seconds)
            end: Window end (epoch seconds)

        Returns:
            Tuple of (per-caller rows, per-optimizer rows), each sorted by tokens descending
        """
        cursor = self._get_conn().cursor()

        cursor.execute("""
            SELECT uid, SUM(tokens) AS total_tokens, SUM(requests) AS total_requests
            FROM usage_logs
            WHERE created_at >= ? AND created_at <= ?
            GROUP BY uid
            ORDER BY total_tokens DESC, uid ASC
        """, (start, end))
        by_user = [
            {"id": row['uid'], "totalTokens": row['total_tokens'], "totalRequests": row['total_requests']}
            for row in cursor.fetchall()
        ]

        cursor.execute("""
            SELECT COALESCE(optimizer_id, 'unknown') AS optimizer_id,
                   MAX(optimizer_name) AS optimizer_name,
                   SUM(tokens) AS total_tokens,
                   SUM(requests) AS total_requests
            FROM usage_logs
            WHERE created_at >= ? AND created_at <= ?
            GROUP BY COALESCE(optimizer_id, 'unknown')
            ORDER BY total_tokens DESC, optimizer_id ASC
        """, (start, end))
        by_optimizer = [
            {
                "id": row['optimizer_id'],
                "name": row['optimizer_name'] or row['optimizer_id'],
                "totalTokens": row['total_tokens'],
                "totalRequests": row['total_requests'],
            }
            for row in cursor.fetchall()
        ]

        return by_user, by_optimizer

    def clear(self) -> None:
        """Remove all totals and log rows."""
        conn = self._get_conn()
        with self._write_lock:
            conn.execute("DELETE FROM usage_totals")
            conn.execute("DELETE FROM usage_logs")
            conn.commit()

        app_logger.info("Usage store cleared")


_usage_store: Optional[UsageStore] = None


def get_usage_store() -> UsageStore:
    """Get the global usage store, creating it on first use."""
    global _usage_store
    if _usage_store is None:
        _usage_store = UsageStore()
    return _usage_store
