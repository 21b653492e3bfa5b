"""A word-guessing game with coloured feedback rendered as an image."""

from __future__ import annotations

import io
from enum import Enum
from typing import Iterable

from PIL import Image, ImageDraw, ImageFont

HELP = "猜单词\n- 个人猜单词\n- 团队猜单词\n- 团队六阶猜单词\n- 团队七阶猜单词"

CLASS_NAMES: dict[str, int] = {
    "": 5,
    "五阶": 5,
    "六阶": 6,
    "七阶": 7,
}

SIDE = 20
SPACE = 10
_CELL = SIDE + 4
_WHITE = (255, 255, 255)


class Mark(Enum):
    """Feedback for one letter, valued by its display colour."""

    MATCH = (125, 166, 108)
    EXIST = (199, 183, 96)
    NOTEXIST = (123, 123, 123)
    UNDONE = (219, 219, 219)

    @property
    def color(self) -> tuple[int, int, int]:
        return self.value


class WordleError(Exception):
    """Base class of rejected or final guesses."""


class LengthNotEnoughError(WordleError):
    """The guess has the wrong length."""

    def __init__(self) -> None:
        super().__init__("length not enough")


class UnknownWordError(WordleError):
    """The guess is not in the dictionary."""

    def __init__(self) -> None:
        super().__init__("unknown word")


class TimesRunOutError(WordleError):
    """Every attempt has been used without finding the word."""

    def __init__(self) -> None:
        super().__init__("times run out")


def load_words(text: str) -> list[str]:
    """Split a newline separated word list and sort it."""
    return sorted(text.split("\n"))


def class_from_name(name: str) -> int:
    """Return the word length for a difficulty name."""
    try:
        return CLASS_NAMES[name]
    except KeyError:
        raise ValueError(f"unknown class: {name}") from None


class WordleGame:
    """One game: a target word, a dictionary of allowed guesses and the guesses made."""

    def __init__(self, target: str, dictionary: Iterable[str]) -> None:
        self.target = target
        self.size = len(target)
        self.max_attempts = self.size + 1
        self._dictionary = frozenset(dictionary)
        self._record: list[str] = []

    @property
    def records(self) -> tuple[str, ...]:
        """Guesses accepted so far."""
        return tuple(self._record)

    def guess(self, word: str) -> bool:
        """Make a guess; return True when it is the target.

        Raises LengthNotEnoughError or UnknownWordError for rejected guesses,
        which use no attempt, and TimesRunOutError when the last attempt misses.
        """
        word = word.lower()
        win = word == self.target
        if not win:
            if len(word) != self.size:
                raise LengthNotEnoughError()
            if word not in self._dictionary:
                raise UnknownWordError()
        self._record.append(word)
        if not win and len(self._record) >= self.max_attempts:
            raise TimesRunOutError()
        return win

    def _mark(self, ch: str, position: int) -> Mark:
        if ch == self.target[position]:
            return Mark.MATCH
        if ch in self.target:
            return Mark.EXIST
        return Mark.NOTEXIST

    def marks(self) -> list[list[Mark]]:
        """Feedback for each accepted guess, letter by letter."""
        return [
            [self._mark(ch, j) for j, ch in enumerate(word)] for word in self._record
        ]

    def render(self) -> bytes:
        """Draw the board as a PNG image."""
        width = _CELL * self.size + SPACE * 2 - 4
        height = _CELL * (self.size + 1) + SPACE * 2 - 4
        image = Image.new("RGB", (width, height), _WHITE)
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        rows = self.marks()
        for i in range(self.size + 1):
            for j in range(self.size):
                x = SPACE + j * _CELL
                y = SPACE + i * _CELL
                if i < len(rows):
                    draw.rectangle(
                        [x, y, x + SIDE - 1, y + SIDE - 1], fill=rows[i][j].color
                    )
                    draw.text(
                        (x + 7, y + 4),
                        self._record[i][j].upper(),
                        font=font,
                        fill=_WHITE,
                    )
                else:
                    draw.rectangle(
                        [x + 1, y + 1, x + SIDE - 2, y + SIDE - 2],
                        outline=Mark.UNDONE.color,
                        width=1,
                    )
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()