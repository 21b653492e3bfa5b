"""Canned replies chosen at random for known phrases."""

from __future__ import annotations

import json
import random
from typing import Mapping, Sequence

HELP = "thesaurus\n- 词典匹配回复"


class Thesaurus:
    """Maps a phrase to the replies that may answer it."""

    def __init__(self, mapping: Mapping[str, Sequence[str]]) -> None:
        self._mapping = {key: list(values) for key, values in mapping.items()}

    @classmethod
    def from_json(cls, data: str | bytes) -> "Thesaurus":
        """Load a thesaurus from a JSON object of phrase to reply list."""
        parsed = json.loads(data)
        if not isinstance(parsed, dict):
            raise ValueError("expected a JSON object")
        return cls(parsed)

    def keys(self) -> list[str]:
        """Return every known phrase."""
        return list(self._mapping)

    def reply(self, key: str, rng: random.Random | None = None) -> str:
        """Return a random reply to ``key``; KeyError when it is unknown."""
        return (rng or random).choice(self._mapping[key])