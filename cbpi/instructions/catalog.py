"""InstructionCatalog — SQLite-backed technical instruction storage and search.

Uses stdlib sqlite3 only.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS instructions (
    code TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    category TEXT NOT NULL DEFAULT '',
    tags TEXT NOT NULL DEFAULT '[]',
    keywords TEXT NOT NULL DEFAULT '[]',
    popular INTEGER NOT NULL DEFAULT 0,
    views INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_instructions_category ON instructions(category);
"""


class Instruction(BaseModel):
    """A CB-PI technical instruction ("Instrução Técnica")."""

    code: str
    """Number and year, e.g. 'IT-008/2019'."""

    title: str
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    popular: bool = False
    views: int = 0

    def matches_term(self, term: str) -> bool:
        needle = term.lower()
        return (
            needle in self.title.lower()
            or needle in self.description.lower()
            or any(needle in kw.lower() for kw in self.keywords)
        )


class InstructionCatalog:
    """SQLite-backed catalog of technical instructions.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Use ``':memory:'`` for
        in-memory databases (useful for testing).
    auto_seed:
        If *True* (default), load the bundled instructions on first
        access when the catalog is empty.
    """

    def __init__(self, db_path: str | Path = ":memory:", *, auto_seed: bool = True) -> None:
        self._db_path = str(db_path)
        self._conn: sqlite3.Connection | None = None
        self._auto_seed = auto_seed

    @property
    def conn(self) -> sqlite3.Connection:
        """Lazy-initialise and return the database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(self._db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA_SQL)
            self._conn.commit()
            if self._auto_seed and self.count() == 0:
                self._seed()
        return self._conn

    def _seed(self) -> None:
        from cbpi.instructions.seed_data import SEED_INSTRUCTIONS
        for instruction in SEED_INSTRUCTIONS:
            self.add(instruction)
        logger.info("Seeded %d technical instructions.", len(SEED_INSTRUCTIONS))

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # -- CRUD ----------------------------------------------------------------

    def add(self, instruction: Instruction) -> None:
        """Insert or replace an instruction keyed by its code."""
        self.conn.execute(
            """\
            INSERT OR REPLACE INTO instructions
                (code, title, description, category, tags, keywords, popular, views)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                instruction.code,
                instruction.title,
                instruction.description,
                instruction.category,
                json.dumps(instruction.tags),
                json.dumps(instruction.keywords),
                int(instruction.popular),
                instruction.views,
            ),
        )
        self.conn.commit()

    def get(self, code: str) -> Instruction | None:
        cur = self.conn.execute("SELECT * FROM instructions WHERE code = ?", (code,))
        row = cur.fetchone()
        if row is None:
            return None
        return self._row_to_instruction(row)

    def increment_views(self, code: str) -> bool:
        """Bump the view counter. Returns False for unknown codes."""
        cur = self.conn.execute(
            "UPDATE instructions SET views = views + 1 WHERE code = ?", (code,)
        )
        self.conn.commit()
        return cur.rowcount > 0

    # -- Queries -------------------------------------------------------------

    def search(
        self,
        term: str | None = None,
        *,
        category: str | None = None,
        tags: list[str] | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Instruction]:
        """Search instructions with optional filters, ordered by code.

        Parameters
        ----------
        term:
            Case-insensitive substring matched against title,
            description and keywords.
        category:
            Exact category name.
        tags:
            Keep instructions sharing at least one of these tags.
        """
        params: list[Any] = []
        where = ""
        if category:
            where = " WHERE category = ?"
            params.append(category)
        cur = self.conn.execute(f"SELECT * FROM instructions{where} ORDER BY code", params)
        found = [self._row_to_instruction(row) for row in cur.fetchall()]

        # Term matching happens here: sqlite LIKE folds ASCII case only
        if term:
            found = [i for i in found if i.matches_term(term)]
        if tags:
            wanted = set(tags)
            found = [i for i in found if wanted.intersection(i.tags)]

        return found[offset:offset + limit]

    def popular(self, limit: int = 10) -> list[Instruction]:
        """Popular instructions, most viewed first."""
        cur = self.conn.execute(
            "SELECT * FROM instructions WHERE popular = 1 ORDER BY views DESC LIMIT ?",
            (limit,),
        )
        return [self._row_to_instruction(row) for row in cur.fetchall()]

    def categories(self) -> list[str]:
        cur = self.conn.execute("SELECT DISTINCT category FROM instructions ORDER BY category")
        return [row[0] for row in cur.fetchall()]

    def tags(self) -> list[str]:
        cur = self.conn.execute("SELECT tags FROM instructions")
        unique: set[str] = set()
        for row in cur.fetchall():
            unique.update(json.loads(row[0]))
        return sorted(unique)

    def count(self) -> int:
        cur = self.conn.execute("SELECT COUNT(*) FROM instructions")
        return cur.fetchone()[0]

    # -- Internal ------------------------------------------------------------

    @staticmethod
    def _row_to_instruction(row: sqlite3.Row) -> Instruction:
        return Instruction(
            code=row["code"],
            title=row["title"],
            description=row["description"],
            category=row["category"],
            tags=json.loads(row["tags"]),
            keywords=json.loads(row["keywords"]),
            popular=bool(row["popular"]),
            views=row["views"],
        )
