"""Storage of vtuber voice clips in three category levels."""

from __future__ import annotations

import json
import random
import re
import sqlite3
from dataclasses import dataclass
from os import PathLike
from typing import Any, Iterable, Union

import requests

VTB_LIST_URL = "https://vtbkeyboard.moe/api/get_vtb_list"
VTB_PAGE_URL = "https://vtbkeyboard.moe/api/get_vtb_page?uid="
REQUEST_TIMEOUT = 15.0

FIRST_HEADER = "请选择一个vtb并发送序号:\n"
SECOND_HEADER = "请选择一个语录类别并发送序号:\n"
THIRD_HEADER = "请选择一个语录并发送序号:\n"

USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36",
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64; rv:87.0) Gecko/20100101 Firefox/87.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.1 Safari/605.1.15",
)

PathType = Union[str, "PathLike[str]"]

_UNICODE_ESCAPE = re.compile(r"\\u(.{0,4})", re.S)
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")


@dataclass(frozen=True)
class FirstCategory:
    """A vtuber."""

    index: int
    name: str
    uid: str
    description: str = ""
    icon_path: str = ""


@dataclass(frozen=True)
class SecondCategory:
    """A group of clips of one vtuber."""

    index: int
    first_category_uid: str
    name: str
    author: str = ""
    description: str = ""


@dataclass(frozen=True)
class ThirdCategory:
    """One voice clip."""

    index: int
    second_category_index: int
    first_category_uid: str
    name: str
    path: str = ""
    author: str = ""
    description: str = ""


def unescape_unicode(text: str) -> str:
    """Replace every ``\\uXXXX`` escape in ``text`` with its character."""

    def replace(match: re.Match[str]) -> str:
        digits = match.group(1)
        if not _HEX4.fullmatch(digits):
            raise ValueError(f"invalid unicode escape: \\u{digits}")
        code = int(digits, 16)
        if 0xD800 <= code <= 0xDFFF:
            raise ValueError(f"invalid unicode escape: \\u{digits}")
        return chr(code)

    return _UNICODE_ESCAPE.sub(replace, text)


def _lookup(obj: Any, path: str) -> Any:
    for key in path.split("."):
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _text(obj: Any, path: str) -> str:
    value = _lookup(obj, path)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def _items(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _decode(body: bytes) -> Any:
    text = unescape_unicode(body.decode("utf-8", errors="replace"))
    try:
        return json.loads(text, strict=False)
    except ValueError:
        return None


_FIRST_COLUMNS = (
    "first_category_index, first_category_name, first_category_uid, "
    "first_category_description, first_category_icon_path"
)
_THIRD_COLUMNS = (
    "third_category_index, second_category_index, first_category_uid, "
    "third_category_name, third_category_path, third_category_author, "
    "third_category_description"
)


def _first(row: tuple[Any, ...]) -> FirstCategory:
    return FirstCategory(int(row[0]), row[1] or "", row[2] or "", row[3] or "", row[4] or "")


def _third(row: tuple[Any, ...]) -> ThirdCategory:
    return ThirdCategory(
        int(row[0]), int(row[1]), row[2] or "", row[3] or "",
        row[4] or "", row[5] or "", row[6] or "",
    )


class VtbDB:
    """SQLite store of vtubers, clip groups and clips."""

    def __init__(self, path: PathType) -> None:
        self._conn = sqlite3.connect(path)
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS first_category ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "first_category_index INTEGER, first_category_name TEXT, "
                "first_category_uid TEXT, first_category_description VARCHAR(1024), "
                "first_category_icon_path TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS second_category ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "second_category_index INTEGER, first_category_uid TEXT, "
                "second_category_name TEXT, second_category_author TEXT, "
                "second_category_description TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS third_category ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "third_category_index INTEGER, second_category_index INTEGER, "
                "first_category_uid TEXT, third_category_name TEXT, "
                "third_category_path TEXT, third_category_author TEXT, "
                "third_category_description TEXT)"
            )

    def __enter__(self) -> "VtbDB":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def _uid_by_index(self, first_index: int) -> str:
        row = self._conn.execute(
            "SELECT first_category_uid FROM first_category "
            "WHERE first_category_index = ? ORDER BY id LIMIT 1",
            (first_index,),
        ).fetchone()
        return (row[0] or "") if row else ""

    def first_category_message(self) -> str:
        """List every vtuber as a numbered menu."""
        rows = self._conn.execute(
            "SELECT first_category_index, first_category_name "
            "FROM first_category ORDER BY id"
        ).fetchall()
        return FIRST_HEADER + "".join(f"{index}. {name or ''}\n" for index, name in rows)

    def second_category_message(self, first_index: int) -> str:
        """List the clip groups of a vtuber; empty when there is none."""
        rows = self._conn.execute(
            "SELECT second_category_index, second_category_name "
            "FROM second_category WHERE first_category_uid = ? ORDER BY id",
            (self._uid_by_index(first_index),),
        ).fetchall()
        if not rows:
            return ""
        return SECOND_HEADER + "".join(f"{index}. {name or ''}\n" for index, name in rows)

    def third_category_message(self, first_index: int, second_index: int) -> str:
        """List the clips of one group; empty when there is none."""
        rows = self._conn.execute(
            "SELECT third_category_index, third_category_name FROM third_category "
            "WHERE first_category_uid = ? AND second_category_index = ? ORDER BY id",
            (self._uid_by_index(first_index), second_index),
        ).fetchall()
        if not rows:
            return ""
        return THIRD_HEADER + "".join(f"{index}. {name or ''}\n" for index, name in rows)

    def third_category(
        self, first_index: int, second_index: int, third_index: int
    ) -> ThirdCategory | None:
        """Return the selected clip, or None."""
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category "
            "WHERE first_category_uid = ? AND second_category_index = ? "
            "AND third_category_index = ? LIMIT 1",
            (self._uid_by_index(first_index), second_index, third_index),
        ).fetchone()
        return _third(row) if row else None

    def random_vtb(self, rng: random.Random | None = None) -> ThirdCategory:
        """Return a random clip; raise LookupError when there is none."""
        total = int(self._conn.execute("SELECT COUNT(*) FROM third_category").fetchone()[0])
        if total == 0:
            raise LookupError("no clip stored")
        offset = (rng or random).randrange(total)
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category ORDER BY id LIMIT 1 OFFSET ?",
            (offset,),
        ).fetchone()
        return _third(row)

    def first_category_by_uid(self, uid: str) -> FirstCategory | None:
        """Return the vtuber with ``uid``, or None."""
        row = self._conn.execute(
            f"SELECT {_FIRST_COLUMNS} FROM first_category "
            "WHERE first_category_uid = ? LIMIT 1",
            (uid,),
        ).fetchone()
        return _first(row) if row else None

    def store_vtb_list(self, items: Iterable[Any]) -> list[str]:
        """Insert or update the vtubers of a parsed list; return their uids."""
        uids: list[str] = []
        with self._conn:
            for index, item in enumerate(items):
                uid = _text(item, "uid")
                values = (
                    index,
                    _text(item, "name"),
                    _text(item, "description"),
                    _text(item, "icon_path"),
                )
                exists = self._conn.execute(
                    "SELECT 1 FROM first_category WHERE first_category_uid = ?", (uid,)
                ).fetchone()
                if exists:
                    self._conn.execute(
                        "UPDATE first_category SET first_category_index = ?, "
                        "first_category_name = ?, first_category_description = ?, "
                        "first_category_icon_path = ? WHERE first_category_uid = ?",
                        (*values, uid),
                    )
                else:
                    self._conn.execute(
                        "INSERT INTO first_category (first_category_index, "
                        "first_category_name, first_category_description, "
                        "first_category_icon_path, first_category_uid) "
                        "VALUES (?, ?, ?, ?, ?)",
                        (*values, uid),
                    )
                uids.append(uid)
        return uids

    def store_vtb_page(self, uid: str, page: Any) -> None:
        """Insert or update the clip groups and clips of a parsed vtuber page."""
        with self._conn:
            for second_index, second in enumerate(_items(_lookup(page, "data.voices"))):
                self._upsert_second(uid, second_index, second)
                for third_index, third in enumerate(_items(_lookup(second, "voiceList"))):
                    self._upsert_third(uid, second_index, third_index, third)

    def _upsert_second(self, uid: str, index: int, item: Any) -> None:
        values = (
            _text(item, "categoryName"),
            _text(item, "author"),
            _text(item, "categoryDescription.zh-CN"),
        )
        key = (uid, index)
        exists = self._conn.execute(
            "SELECT 1 FROM second_category "
            "WHERE first_category_uid = ? AND second_category_index = ?",
            key,
        ).fetchone()
        if exists:
            self._conn.execute(
                "UPDATE second_category SET second_category_name = ?, "
                "second_category_author = ?, second_category_description = ? "
                "WHERE first_category_uid = ? AND second_category_index = ?",
                (*values, *key),
            )
        else:
            self._conn.execute(
                "INSERT INTO second_category (second_category_name, "
                "second_category_author, second_category_description, "
                "first_category_uid, second_category_index) VALUES (?, ?, ?, ?, ?)",
                (*values, *key),
            )

    def _upsert_third(self, uid: str, second_index: int, index: int, item: Any) -> None:
        values = (
            _text(item, "name"),
            _text(item, "description.zh-CN"),
            _text(item, "path"),
            _text(item, "author"),
        )
        key = (uid, second_index, index)
        exists = self._conn.execute(
            "SELECT 1 FROM third_category WHERE first_category_uid = ? "
            "AND second_category_index = ? AND third_category_index = ?",
            key,
        ).fetchone()
        if exists:
            self._conn.execute(
                "UPDATE third_category SET third_category_name = ?, "
                "third_category_description = ?, third_category_path = ?, "
                "third_category_author = ? WHERE first_category_uid = ? "
                "AND second_category_index = ? AND third_category_index = ?",
                (*values, *key),
            )
        else:
            self._conn.execute(
                "INSERT INTO third_category (third_category_name, "
                "third_category_description, third_category_path, "
                "third_category_author, first_category_uid, second_category_index, "
                "third_category_index) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (*values, *key),
            )

    def fetch_vtb_list(self, session: Any = None) -> list[str]:
        """Download the vtuber list, store it and return the uids."""
        client = session if session is not None else requests.Session()
        response = client.get(
            VTB_LIST_URL,
            headers={"User-Agent": random.choice(USER_AGENTS)},
            timeout=REQUEST_TIMEOUT,
        )
        return self.store_vtb_list(_items(_decode(response.content)))

    def fetch_vtb_page(self, uid: str, session: Any = None) -> None:
        """Download the page of vtuber ``uid`` and store its clips."""
        client = session if session is not None else requests.Session()
        response = client.get(
            VTB_PAGE_URL + uid,
            headers={"User-Agent": random.choice(USER_AGENTS)},
            timeout=REQUEST_TIMEOUT,
        )
        self.store_vtb_page(uid, _decode(response.content))