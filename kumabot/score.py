"""Daily sign-in scores: storage, levels and the sign-in card image."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from os import PathLike
from typing import Union

from PIL import Image, ImageDraw, ImageFont

SIGNIN_MAX = 1
SCOREMAX = 120
SCORE_PER_SIGN_IN = 1
LEVELS: tuple[int, ...] = (0, 1, 2, 5, 10, 20, 35, 55, 75, 100, 120)
MAX_WIDTH = 1280
MAX_HEIGHT = 720
HELP = "签到得分\n- 签到\n- 获得签到背景[@xxx] | 获得签到背景\n- 查看分数排名"

ALREADY_SIGNED_TEXT = "今天你已经签到过了！"
CAPPED_TEXT = "你获得的小熊饼干已经达到上限"

_DAY_FORMAT = "%Y%m%d"
_WHITE = (255, 255, 255)
_BLACK = (0, 0, 0)
_BAR_BACK = (150, 150, 150)
_BAR_FRONT = (102, 102, 102)

PathType = Union[str, "PathLike[str]"]


@dataclass
class SignIn:
    """Sign-in record of one user."""

    uid: int
    count: int = 0
    updated_at: datetime | None = None


@dataclass(frozen=True)
class SignInResult:
    """Outcome of one sign-in attempt."""

    uid: int
    already_signed: bool
    count: int
    score: int
    level: int
    next_level_score: int
    capped: bool = False


class ScoreDB:
    """SQLite store of scores and sign-in counts."""

    def __init__(self, path: PathType) -> None:
        self._conn = sqlite3.connect(path)
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS score ("
                "uid INTEGER PRIMARY KEY, score INTEGER NOT NULL DEFAULT 0)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS sign_in ("
                "uid INTEGER PRIMARY KEY, count INTEGER NOT NULL DEFAULT 0, "
                "updated_at TEXT)"
            )

    def __enter__(self) -> "ScoreDB":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def get_score(self, uid: int) -> int:
        """Return the user's score, creating a zero entry when missing."""
        with self._conn:
            self._conn.execute("INSERT OR IGNORE INTO score (uid) VALUES (?)", (uid,))
        row = self._conn.execute(
            "SELECT score FROM score WHERE uid = ?", (uid,)
        ).fetchone()
        return int(row[0])

    def set_score(self, uid: int, score: int) -> None:
        """Insert or update the user's score."""
        with self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO score (uid, score) VALUES (?, ?)",
                (uid, score),
            )

    def get_sign_in(self, uid: int) -> SignIn:
        """Return the user's sign-in record, creating it when missing."""
        return self._sign_in_row(uid, datetime.now())

    def set_sign_in_count(self, uid: int, count: int) -> None:
        """Insert or update the user's sign-in count."""
        self._write_sign_in(uid, count, datetime.now())

    def top_scores(self, n: int) -> list[tuple[int, int]]:
        """Return up to ``n`` (uid, score) pairs, highest score first."""
        rows = self._conn.execute(
            "SELECT uid, score FROM score ORDER BY score DESC LIMIT ?", (n,)
        ).fetchall()
        return [(int(uid), int(score)) for uid, score in rows]

    def _sign_in_row(self, uid: int, now: datetime) -> SignIn:
        with self._conn:
            self._conn.execute(
                "INSERT OR IGNORE INTO sign_in (uid, count, updated_at) "
                "VALUES (?, 0, ?)",
                (uid, now.isoformat()),
            )
        count, updated = self._conn.execute(
            "SELECT count, updated_at FROM sign_in WHERE uid = ?", (uid,)
        ).fetchone()
        return SignIn(
            uid=uid,
            count=int(count),
            updated_at=datetime.fromisoformat(updated) if updated else None,
        )

    def _write_sign_in(self, uid: int, count: int, when: datetime) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO sign_in (uid, count, updated_at) "
                "VALUES (?, ?, ?)",
                (uid, count, when.isoformat()),
            )


def get_level(count: int) -> int:
    """Return the level reached with ``count`` points, or -1 past the table."""
    for level, threshold in enumerate(LEVELS):
        if count == threshold:
            return level
        if count < threshold:
            return level - 1
    return -1


def next_level_score(level: int) -> int:
    """Return the score needed for the level after ``level``."""
    if level < len(LEVELS) - 1:
        return LEVELS[level + 1]
    return SCOREMAX


def get_hour_word(t: datetime) -> str:
    """Return the greeting for the hour of ``t``."""
    h = t.hour
    if 6 <= h < 12:
        return "早上好"
    if 12 <= h < 14:
        return "中午好"
    if 14 <= h < 19:
        return "下午好"
    if 19 <= h < 24:
        return "晚上好"
    if 0 <= h < 6:
        return "凌晨好"
    return ""


def sign_in(db: ScoreDB, uid: int, now: datetime) -> SignInResult:
    """Sign ``uid`` in at ``now`` and update the stored score."""
    record = db._sign_in_row(uid, now)
    today = now.strftime(_DAY_FORMAT)
    last_day = record.updated_at.strftime(_DAY_FORMAT) if record.updated_at else ""
    if record.count >= SIGNIN_MAX and last_day == today:
        score = db.get_score(uid)
        level = get_level(score)
        return SignInResult(
            uid=uid,
            already_signed=True,
            count=record.count,
            score=score,
            level=level,
            next_level_score=next_level_score(level),
        )
    if last_day != today:
        db._write_sign_in(uid, 0, now)
    count = record.count + 1
    db._write_sign_in(uid, count, now)

    score = db.get_score(uid) + SCORE_PER_SIGN_IN
    capped = score > SCOREMAX
    if capped:
        score = SCOREMAX
    db.set_score(uid, score)
    level = get_level(score)
    return SignInResult(
        uid=uid,
        already_signed=False,
        count=count,
        score=score,
        level=level,
        next_level_score=next_level_score(level),
        capped=capped,
    )


def _limit(image: Image.Image, width: int, height: int) -> Image.Image:
    if image.width <= width and image.height <= height:
        return image
    scale = min(width / image.width, height / image.height)
    size = (max(1, int(image.width * scale)), max(1, int(image.height * scale)))
    return image.resize(size)


def _font(size: float) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    pixels = max(1, int(size))
    try:
        return ImageFont.load_default(size=pixels)
    except TypeError:
        return ImageFont.load_default()


def _draw_text(
    draw: ImageDraw.ImageDraw,
    x: float,
    baseline: float,
    text: str,
    font: ImageFont.ImageFont | ImageFont.FreeTypeFont,
    size: float,
) -> None:
    position = (x, baseline - size)
    try:
        draw.text(position, text, font=font, fill=_BLACK)
    except UnicodeEncodeError:
        safe = text.encode("latin-1", "replace").decode("latin-1")
        draw.text(position, safe, font=font, fill=_BLACK)


def draw_sign_in(
    background: Image.Image, nickname: str, score: int, now: datetime
) -> Image.Image:
    """Draw the sign-in card on top of ``background``."""
    back = _limit(background.convert("RGB"), MAX_WIDTH, MAX_HEIGHT)
    w, h = back.size
    canvas = Image.new("RGB", (w, int(h * 1.7)), _WHITE)
    canvas.paste(back, (0, 0))
    draw = ImageDraw.Draw(canvas)

    big = w * 0.1
    big_font = _font(big)
    _draw_text(draw, w * 0.1, h * 1.2, get_hour_word(now), big_font, big)
    _draw_text(draw, w * 0.6, h * 1.2, now.strftime("%m/%d"), big_font, big)

    small = w * 0.04
    small_font = _font(small)
    _draw_text(
        draw, w * 0.1, h * 1.3,
        f"{nickname} 小熊饼干+{SCORE_PER_SIGN_IN}", small_font, small,
    )
    level = get_level(score)
    _draw_text(draw, w * 0.1, h * 1.4, f"当前小熊饼干:{score}", small_font, small)
    _draw_text(draw, w * 0.1, h * 1.5, f"LEVEL:{level}", small_font, small)

    x0, y0 = w * 0.1, h * 1.55
    bar_height = h * 0.1
    draw.rectangle([x0, y0, x0 + w * 0.6, y0 + bar_height], fill=_BAR_BACK)
    target = next_level_score(level)
    ratio = score / target if target > 0 else 0.0
    filled = w * 0.6 * max(0.0, ratio)
    if filled > 0:
        draw.rectangle([x0, y0, x0 + filled, y0 + bar_height], fill=_BAR_FRONT)
    _draw_text(draw, w * 0.75, h * 1.62, f"{score}/{target}", small_font, small)
    return canvas