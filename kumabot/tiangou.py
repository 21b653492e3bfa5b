"""Random lines from a stored collection of diary entries."""

from __future__ import annotations

import random
import sqlite3
from os import PathLike
from typing import Union

HELP = "舔狗日记\n- 舔狗日记"

PathType = Union[str, "PathLike[str]"]


class TiangouDB:
    """SQLite table of diary entries."""

    def __init__(self, path: PathType) -> None:
        self._conn = sqlite3.connect(path)
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS tiangou ("
                "id INTEGER PRIMARY KEY, text TEXT NOT NULL)"
            )

    def __enter__(self) -> "TiangouDB":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def count(self) -> int:
        """Return the number of stored entries."""
        return int(self._conn.execute("SELECT COUNT(*) FROM tiangou").fetchone()[0])

    def add(self, text: str) -> int:
        """Store an entry and return its id."""
        with self._conn:
            cursor = self._conn.execute(
                "INSERT INTO tiangou (text) VALUES (?)", (text,)
            )
        return int(cursor.lastrowid)

    def pick(self, rng: random.Random | None = None) -> str:
        """Return a random entry; raise LookupError when there is none."""
        total = self.count()
        if total == 0:
            raise LookupError("tiangou table is empty")
        offset = (rng or random).randrange(total)
        row = self._conn.execute(
            "SELECT text FROM tiangou ORDER BY id LIMIT 1 OFFSET ?", (offset,)
        ).fetchone()
        return str(row[0])