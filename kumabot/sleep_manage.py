"""Good-morning and good-night bookkeeping for group members."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta
from os import PathLike
from typing import Union

HELP = "sleepmanage\n- 早安\n- 晚安"

PathType = Union[str, "PathLike[str]"]

_HOUR_US = 3_600_000_000
_MINUTE_US = 60_000_000
_SECOND_US = 1_000_000


def _stamp(t: datetime) -> str:
    return t.isoformat(sep=" ", timespec="microseconds")


class SleepDB:
    """SQLite store of the last sleep or wake-up time of each group member."""

    def __init__(self, path: PathType) -> None:
        self._conn = sqlite3.connect(path)
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS sleep_manage ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "group_id INTEGER NOT NULL, user_id INTEGER NOT NULL, "
                "sleep_time TEXT NOT NULL)"
            )

    def __enter__(self) -> "SleepDB":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def _record(
        self, gid: int, uid: int, now: datetime, since: datetime
    ) -> tuple[int, timedelta]:
        row = self._conn.execute(
            "SELECT sleep_time FROM sleep_manage "
            "WHERE group_id = ? AND user_id = ? ORDER BY id LIMIT 1",
            (gid, uid),
        ).fetchone()
        elapsed = timedelta(0)
        with self._conn:
            if row is None:
                self._conn.execute(
                    "INSERT INTO sleep_manage (group_id, user_id, sleep_time) "
                    "VALUES (?, ?, ?)",
                    (gid, uid, _stamp(now)),
                )
            else:
                elapsed = now - datetime.fromisoformat(row[0])
                self._conn.execute(
                    "UPDATE sleep_manage SET sleep_time = ? "
                    "WHERE group_id = ? AND user_id = ?",
                    (_stamp(now), gid, uid),
                )
        position = self._conn.execute(
            "SELECT COUNT(*) FROM sleep_manage "
            "WHERE group_id = ? AND sleep_time <= ? AND sleep_time >= ?",
            (gid, _stamp(now), _stamp(since)),
        ).fetchone()[0]
        return int(position), elapsed

    def sleep(
        self, gid: int, uid: int, now: datetime | None = None
    ) -> tuple[int, timedelta]:
        """Record a good night; return the rank tonight and the time spent awake."""
        now = now or datetime.now()
        offset = timedelta(minutes=now.minute, seconds=now.second)
        if now.hour >= 21:
            since = now - timedelta(hours=now.hour - 21) - offset
        elif now.hour <= 3:
            since = now - timedelta(hours=3 + now.hour) - offset
        else:
            since = datetime.min
        return self._record(gid, uid, now, since)

    def get_up(
        self, gid: int, uid: int, now: datetime | None = None
    ) -> tuple[int, timedelta]:
        """Record a good morning; return the rank today and the time slept."""
        now = now or datetime.now()
        since = now - timedelta(
            hours=now.hour - 6, minutes=now.minute, seconds=now.second
        )
        return self._record(gid, uid, now, since)


def time_duration(delta: timedelta) -> tuple[int, int, int]:
    """Split a duration into whole hours, minutes and seconds."""
    total = delta // timedelta(microseconds=1)
    sign = -1 if total < 0 else 1
    hours, rest = divmod(abs(total), _HOUR_US)
    minutes, rest = divmod(rest, _MINUTE_US)
    seconds = rest // _SECOND_US
    return sign * hours, sign * minutes, sign * seconds


def is_morning(now: datetime | None = None) -> bool:
    """Tell whether good mornings are counted at ``now`` (6 to 12 o'clock)."""
    hour = (now or datetime.now()).hour
    return 6 <= hour <= 12


def is_evening(now: datetime | None = None) -> bool:
    """Tell whether good nights are counted at ``now`` (21 to 3 o'clock)."""
    hour = (now or datetime.now()).hour
    return hour >= 21 or hour <= 3


def _is_unknown(hours: int, minutes: int, seconds: int) -> bool:
    return (hours == 0 and minutes == 0 and seconds == 0) or hours >= 24


def good_morning_text(position: int, duration: timedelta) -> str:
    """Reply to a good morning."""
    h, m, s = time_duration(duration)
    if _is_unknown(h, m, s):
        return f"早安成功！你是今天第{position}个起床的"
    return f"早安成功！你的睡眠时长为{h}时{m}分{s}秒,你是今天第{position}个起床的"


def good_night_text(position: int, duration: timedelta) -> str:
    """Reply to a good night."""
    h, m, s = time_duration(duration)
    if _is_unknown(h, m, s):
        return f"晚安成功！你是今天第{position}个睡觉的"
    return f"晚安成功！你的清醒时长为{h}时{m}分{s}秒,你是今天第{position}个睡觉的"