"""Interactive selection and download of vtuber voice clips."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence
from urllib.parse import quote_plus

import requests

from kumabot.vtb_model import PathType, ThirdCategory, VtbDB

HELP = "vtbkeyboard.moe\n- vtb语录\n- 随机vtb\n- 更新vtb\n"

MAX_ERRORS = 3
REQUEST_TIMEOUT = 15.0
DOWNLOAD_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "User-Agent": "Mozilla/5.0 (Windows NT 6.1; WOW64; rv:6.0) Gecko/20100101 Firefox/6.0",
}

TOO_MANY_ERRORS_TEXT = "输入错误太多,请重新发指令"
INVALID_NUMBER_TEXT = "请输入正确的序号，三次输入错误，指令可退出重输"
EMPTY_CHOICE_TEXT = "你选择的序号没有内容，请重新选择，三次输入错误，指令可退出重输"
NO_CLIP_TEXT = "没有内容请重新选择，三次输入错误，指令可退出重输"
EXPIRED_TEXT = "vtb语录指令过期"

_LAST_SEGMENT = re.compile(r".*/(.*)")
_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Reply:
    """What to answer to one step of the conversation.

    ``menu`` is a menu to show after ``text``; ``clip``, ``record_url`` and
    ``record_file`` are set once a clip has been chosen.
    """

    text: str = ""
    menu: str | None = None
    finished: bool = False
    clip: ThirdCategory | None = None
    record_url: str | None = None
    record_file: str | None = None


def escape_record_url(url: str) -> str:
    """Escape the last path segment of a clip URL, spaces becoming ``%20``."""
    matched = _LAST_SEGMENT.search(url)
    if matched is None:
        return url
    name = matched.group(1)
    escaped = url.replace(name, quote_plus(name, safe=""))
    return escaped.replace("+", "%20")


def _extension(url: str) -> str:
    last = url.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


def record_filename(indexes: Sequence[int], url: str) -> str:
    """Name the cached file of a clip from its three indexes and URL extension."""
    first, second, third = indexes
    return f"{first}-{second}-{third}{_extension(url)}"


def download_record(path: PathType, url: str, session: Any = None) -> Path:
    """Download ``url`` to ``path`` unless the file is already there."""
    target = Path(path)
    if not target.exists():
        client = session if session is not None else requests.Session()
        response = client.get(
            url, headers=dict(DOWNLOAD_HEADERS), timeout=REQUEST_TIMEOUT
        )
        target.write_bytes(response.content)
    return target


def random_quotation(db: VtbDB, rng: random.Random | None = None) -> Reply | None:
    """Pick a random clip; return None when no clip with a known vtuber exists."""
    try:
        clip = db.random_vtb(rng)
    except LookupError:
        return None
    vtuber = db.first_category_by_uid(clip.first_category_uid)
    if vtuber is None:
        return None
    url = escape_record_url(clip.path)
    return Reply(
        text=f"请欣赏{vtuber.name}的《{clip.name}》",
        finished=True,
        clip=clip,
        record_url=url,
        record_file=record_filename(
            (vtuber.index, clip.second_category_index, clip.index), url
        ),
    )


class QuotationSession:
    """Three-step menu: choose a vtuber, a clip group, then a clip."""

    def __init__(self, db: VtbDB) -> None:
        self.db = db
        self.step = 0
        self.indexes = [0, 0, 0]
        self.error_count = 0
        self.finished = False

    def start(self) -> Reply:
        """Open the conversation with the vtuber menu."""
        return Reply(menu=self.db.first_category_message())

    def feed(self, text: str) -> Reply:
        """Handle one message of the user."""
        if self.finished:
            raise RuntimeError("session finished")
        if self.error_count >= MAX_ERRORS:
            self.finished = True
            return Reply(text=TOO_MANY_ERRORS_TEXT, finished=True)
        if _INTEGER.fullmatch(text) is None:
            self.error_count += 1
            return Reply(text=INVALID_NUMBER_TEXT)
        num = int(text)
        if self.step == 0:
            return self._choose_vtuber(num)
        if self.step == 1:
            return self._choose_group(num)
        return self._choose_clip(num)

    def _choose_vtuber(self, num: int) -> Reply:
        self.indexes[0] = num
        menu = self.db.second_category_message(num)
        if not menu:
            self.error_count += 1
            return Reply(text=EMPTY_CHOICE_TEXT, menu=self.db.first_category_message())
        self.step += 1
        return Reply(menu=menu)

    def _choose_group(self, num: int) -> Reply:
        self.indexes[1] = num
        menu = self.db.third_category_message(self.indexes[0], num)
        if not menu:
            self.error_count += 1
            return Reply(
                text=EMPTY_CHOICE_TEXT,
                menu=self.db.second_category_message(self.indexes[0]),
            )
        self.step += 1
        return Reply(menu=menu)

    def _choose_clip(self, num: int) -> Reply:
        self.indexes[2] = num
        clip = self.db.third_category(*self.indexes)
        if clip is None or not clip.path:
            self.error_count += 1
            self.step = 1
            return Reply(text=NO_CLIP_TEXT, menu=self.db.first_category_message())
        self.finished = True
        url = escape_record_url(clip.path)
        return Reply(
            text=f"请欣赏《{clip.name}》",
            finished=True,
            clip=clip,
            record_url=url,
            record_file=record_filename(self.indexes, url),
        )