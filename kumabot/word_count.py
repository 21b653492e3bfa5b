"""Hot-word counting over chat message word slices."""

from __future__ import annotations

import re
import threading
from collections import Counter
from typing import Iterable, Mapping

HELP = "聊天热词\n- 热词 [群号] [消息数目]|热词 123456 1000"

MAX_MESSAGES = 10000
DEFAULT_MESSAGES = 1000
TOP_N = 20

_CHINESE = re.compile(r"[一-龥]+")


def load_stopwords(text: str) -> list[str]:
    """Split a stop-word file into a sorted list."""
    return sorted(text.replace("\r", "").split("\n"))


def is_chinese_word(text: str) -> bool:
    """Tell whether ``text`` consists only of common Chinese characters."""
    return _CHINESE.fullmatch(text) is not None


def clamp_message_count(p: int) -> int:
    """Limit the requested number of messages; zero means the default."""
    if p > MAX_MESSAGES:
        return MAX_MESSAGES
    if p == 0:
        return DEFAULT_MESSAGES
    return p


def rank_by_word_count(frequencies: Mapping[str, int]) -> list[tuple[str, int]]:
    """Return (word, count) pairs, most frequent first."""
    return sorted(frequencies.items(), key=lambda item: item[1], reverse=True)


class WordCounter:
    """Thread-safe counter of Chinese words that are not stop words."""

    def __init__(self, stopwords: Iterable[str] = ()) -> None:
        self._stopwords = frozenset(stopwords)
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def add(self, words: Iterable[str]) -> None:
        """Count each eligible word."""
        kept = [
            w
            for w in (word.strip() for word in words)
            if is_chinese_word(w) and w not in self._stopwords
        ]
        with self._lock:
            self._counts.update(kept)

    def top(self, n: int = TOP_N) -> list[tuple[str, int]]:
        """Return the ``n`` most frequent words."""
        with self._lock:
            ranked = rank_by_word_count(self._counts)
        return ranked[:n]