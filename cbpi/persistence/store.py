"""AnalysisStore — SQLite-backed storage for analysis records.

Uses stdlib sqlite3 only.  The full result is kept as JSON; verification
items are also flattened into their own table for aggregate queries.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from cbpi.compliance.models import ComplianceAnalysisResult, VerificationResult
from cbpi.config import TOP_ISSUES_LIMIT
from cbpi.persistence.models import AnalysisRecord, AnalysisStatus

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS analyses (
    id TEXT PRIMARY KEY,
    file_name TEXT NOT NULL DEFAULT '',
    file_size INTEGER NOT NULL DEFAULT 0,
    file_hash TEXT NOT NULL DEFAULT '',
    analyzed_at TEXT NOT NULL,
    conformity INTEGER NOT NULL DEFAULT 0,
    status TEXT NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    processing_ms INTEGER NOT NULL DEFAULT 0,
    algorithm_version TEXT NOT NULL DEFAULT '',
    user_id TEXT,
    result_json TEXT
);

CREATE TABLE IF NOT EXISTS analysis_items (
    analysis_id TEXT NOT NULL REFERENCES analyses(id) ON DELETE CASCADE,
    item_id TEXT NOT NULL,
    item TEXT NOT NULL,
    result TEXT NOT NULL,
    severity TEXT NOT NULL,
    PRIMARY KEY (analysis_id, item_id)
);

CREATE INDEX IF NOT EXISTS idx_analyses_user ON analyses(user_id);
CREATE INDEX IF NOT EXISTS idx_analyses_hash ON analyses(file_hash);
CREATE INDEX IF NOT EXISTS idx_items_result ON analysis_items(result);
"""


class AnalysisStore:
    """Persist and query analysis records.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Defaults to ``':memory:'``.
    """

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self._db_path = str(db_path)
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Lazy-initialise and return the database connection."""
        if self._conn is None:
            if self._db_path != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self._db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.executescript(_SCHEMA_SQL)
            self._conn.commit()
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # -- CRUD ----------------------------------------------------------------

    def save(self, record: AnalysisRecord) -> AnalysisRecord:
        """Insert *record*, replacing any stored record with the same id."""
        result_json = (
            record.result.model_dump_json(by_alias=True) if record.result else None
        )
        with self.conn:
            self.conn.execute("DELETE FROM analysis_items WHERE analysis_id = ?", (record.id,))
            self.conn.execute("DELETE FROM analyses WHERE id = ?", (record.id,))
            self.conn.execute(
                """\
                INSERT INTO analyses (id, file_name, file_size, file_hash, analyzed_at,
                                      conformity, status, notes, processing_ms,
                                      algorithm_version, user_id, result_json)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.file_name,
                    record.file_size,
                    record.file_hash,
                    record.analyzed_at.isoformat(),
                    record.conformity,
                    record.status.value,
                    record.notes,
                    record.processing_ms,
                    record.algorithm_version,
                    record.user_id,
                    result_json,
                ),
            )
            if record.result is not None:
                self.conn.executemany(
                    """\
                    INSERT INTO analysis_items (analysis_id, item_id, item, result, severity)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    [
                        (record.id, i.id, i.item, i.result.value, i.severity.value)
                        for i in record.result.items
                    ],
                )
        logger.info("Saved analysis %s (%s)", record.id, record.status.value)
        return record

    def get(self, analysis_id: str) -> AnalysisRecord | None:
        cur = self.conn.execute("SELECT * FROM analyses WHERE id = ?", (analysis_id,))
        row = cur.fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def find_by_hash(self, file_hash: str) -> AnalysisRecord | None:
        """Most recent completed analysis of a file with this hash."""
        cur = self.conn.execute(
            "SELECT * FROM analyses WHERE file_hash = ? AND status = ? "
            "ORDER BY analyzed_at DESC LIMIT 1",
            (file_hash, AnalysisStatus.COMPLETED.value),
        )
        row = cur.fetchone()
        return self._row_to_record(row) if row else None

    def delete(self, analysis_id: str) -> bool:
        """Delete a record by id. Returns True if a row was deleted."""
        with self.conn:
            cur = self.conn.execute("DELETE FROM analyses WHERE id = ?", (analysis_id,))
        return cur.rowcount > 0

    # -- Queries -------------------------------------------------------------

    def find_by_user(
        self,
        *,
        user_id: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[AnalysisRecord], int]:
        """Return one page of records, newest first, and the total count."""
        where, params = self._user_filter(user_id)
        total = self.conn.execute(
            f"SELECT COUNT(*) FROM analyses{where}", params
        ).fetchone()[0]
        cur = self.conn.execute(
            f"SELECT * FROM analyses{where} ORDER BY analyzed_at DESC, rowid DESC "
            "LIMIT ? OFFSET ?",
            [*params, limit, offset],
        )
        return [self._row_to_record(row) for row in cur.fetchall()], total

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM analyses").fetchone()[0]

    def analytics(self, *, user_id: str | None = None) -> dict[str, Any]:
        """Aggregate figures over completed analyses.

        Returns ``total_analyses``, ``avg_conformity`` (one decimal) and
        ``top_issues``: the most frequent non-compliant items with their
        frequency and severity.
        """
        where, params = self._user_filter(user_id, status=AnalysisStatus.COMPLETED)
        total, avg = self.conn.execute(
            f"SELECT COUNT(*), AVG(conformity) FROM analyses{where}", params
        ).fetchone()

        issue_where = where.replace("WHERE", "AND") if where else ""
        cur = self.conn.execute(
            f"""\
            SELECT analysis_items.item AS item, analysis_items.severity AS severity,
                   COUNT(*) AS frequency
            FROM analysis_items JOIN analyses ON analyses.id = analysis_items.analysis_id
            WHERE analysis_items.result = ? {issue_where}
            GROUP BY analysis_items.item, analysis_items.severity
            ORDER BY frequency DESC, analysis_items.item
            LIMIT ?
            """,
            [VerificationResult.NAO_CONFORME.value, *params, TOP_ISSUES_LIMIT],
        )
        return {
            "total_analyses": total,
            "avg_conformity": round(avg, 1) if avg is not None else 0.0,
            "top_issues": [
                {"item": r["item"], "frequency": r["frequency"], "severity": r["severity"]}
                for r in cur.fetchall()
            ],
        }

    # -- Internal ------------------------------------------------------------

    @staticmethod
    def _user_filter(
        user_id: str | None,
        status: AnalysisStatus | None = None,
    ) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []
        if user_id:
            clauses.append("analyses.user_id = ?")
            params.append(user_id)
        if status:
            clauses.append("analyses.status = ?")
            params.append(status.value)
        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        return where, params

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> AnalysisRecord:
        result = (
            ComplianceAnalysisResult.model_validate_json(row["result_json"])
            if row["result_json"]
            else None
        )
        return AnalysisRecord(
            id=row["id"],
            file_name=row["file_name"],
            file_size=row["file_size"],
            file_hash=row["file_hash"],
            analyzed_at=datetime.fromisoformat(row["analyzed_at"]),
            conformity=row["conformity"],
            status=AnalysisStatus(row["status"]),
            notes=row["notes"],
            processing_ms=row["processing_ms"],
            algorithm_version=row["algorithm_version"],
            user_id=row["user_id"],
            result=result,
        )
