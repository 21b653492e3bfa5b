"""Tarot card draws, card meanings and card spreads."""

from __future__ import annotations

import json
import random
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

BED = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
HELP = (
    "塔罗牌\n"
    "- 抽[塔罗牌|大阿卡纳|小阿卡纳]\n"
    "- 抽n张[塔罗牌|大阿卡纳|小阿卡纳]\n"
    "- 解塔罗牌[牌名]\n"
    "- [塔罗|大阿卡纳|小阿卡纳|混合]牌阵[圣三角|时间之流|四要素|五牌阵|吉普赛十字|马蹄|六芒星]"
)

REASONS: tuple[str, ...] = (
    "您抽到的是~\n『",
    "锵锵锵，塔罗牌的预言是~\n『",
    "诶，让我看看您抽到了~\n『",
)
POSITIONS: tuple[str, str] = ("正位", "逆位")
REVERSE_DIRS: tuple[str, str] = ("", "Reverse")

MAJOR_COUNT = 22
MINOR_COUNT = 55
MAX_DRAW = 20

_DRAW_COMMAND = re.compile(r"抽([0-9]{1,2}张)?((塔罗牌|大阿(尔)?卡纳)|小阿(尔)?卡纳)")


class TarotError(Exception):
    """Raised for invalid requests or unknown cards and spreads."""


@dataclass(frozen=True)
class Card:
    """One tarot card and its meanings."""

    name: str
    description: str = ""
    reverse_description: str = ""
    img_url: str = ""


@dataclass(frozen=True)
class Formation:
    """A card spread: how many cards and what each position represents."""

    cards_num: int
    is_cut: bool = False
    represent: list[list[str]] = field(default_factory=list)


def parse_draw_command(text: str) -> tuple[int, bool]:
    """Parse a draw command into (number of cards, whether minor arcana)."""
    matched = _DRAW_COMMAND.fullmatch(text)
    if matched is None:
        raise TarotError(f"not a draw command: {text}")
    count_part, card_type = matched.group(1), matched.group(2)
    n = 1
    if count_part:
        n = int(count_part[:-1])
        if n <= 0:
            raise TarotError("张数必须为正")
        if n > MAX_DRAW:
            raise TarotError("抽取张数过多")
    return n, "小" in card_type


def card_image_url(card: Card, reverse: bool) -> str:
    """Return the image URL of a card, upright or reversed."""
    return f"{BED}/{REVERSE_DIRS[int(reverse)]}/{card.img_url}"


def _load(data: Any) -> Mapping[str, Any]:
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    if not isinstance(data, Mapping):
        raise TarotError("expected a JSON object")
    return data


def _range_for(card_type: str) -> tuple[int, int]:
    if "小" in card_type:
        return MAJOR_COUNT, MINOR_COUNT
    if card_type == "混合":
        return 0, MAJOR_COUNT + MINOR_COUNT
    return 0, MAJOR_COUNT


class TarotDeck:
    """A full deck of cards with the known spreads."""

    def __init__(
        self, cards: Mapping[int, Card], formations: Mapping[str, Formation]
    ) -> None:
        self.cards = dict(cards)
        self.formations = dict(formations)
        self._by_name = {card.name: card for card in self.cards.values()}
        empty = Card(name="")
        self.major_arcana_names = [
            self.cards.get(i, empty).name for i in range(MAJOR_COUNT)
        ]

    @classmethod
    def from_json(cls, cards: Any, formations: Any) -> "TarotDeck":
        """Build a deck from the card and spread JSON documents."""
        parsed_cards: dict[int, Card] = {}
        for key, raw in _load(cards).items():
            info = raw.get("info", {}) or {}
            parsed_cards[int(key)] = Card(
                name=raw.get("name", ""),
                description=info.get("description", ""),
                reverse_description=info.get("reverseDescription", ""),
                img_url=info.get("imgUrl", ""),
            )
        parsed_formations = {
            name: Formation(
                cards_num=int(raw.get("cards_num", 0)),
                is_cut=bool(raw.get("is_cut", False)),
                represent=[list(row) for row in raw.get("represent", [])],
            )
            for name, raw in _load(formations).items()
        }
        return cls(parsed_cards, parsed_formations)

    def _pick(
        self, n: int, start: int, length: int, rng: random.Random
    ) -> list[tuple[Card, bool]]:
        if n > length:
            raise TarotError("抽取张数过多")
        empty = Card(name="")
        if n == 1:
            indexes = [rng.randrange(length)]
        else:
            indexes = rng.sample(range(length), n)
        return [
            (self.cards.get(i + start, empty), rng.randrange(2) == 1) for i in indexes
        ]

    def draw(
        self, n: int, minor: bool, rng: random.Random | None = None
    ) -> list[tuple[Card, bool]]:
        """Draw ``n`` distinct cards; each comes with whether it is reversed."""
        if n <= 0:
            raise TarotError("张数必须为正")
        start, length = (MAJOR_COUNT, MINOR_COUNT) if minor else (0, MAJOR_COUNT)
        return self._pick(n, start, length, rng or random.Random())

    def info(self, name: str) -> Card:
        """Return the card called ``name``."""
        try:
            return self._by_name[name]
        except KeyError:
            raise TarotError(f"没有找到{name}噢~") from None

    def card_list_text(self) -> str:
        """List the major arcana and describe the minor arcana naming."""
        names = self.major_arcana_names
        return (
            "塔罗牌列表\n大阿尔卡纳:\n"
            + " ".join(names[:7])
            + "\n"
            + " ".join(names[7:14])
            + "\n"
            + " ".join(names[14:22])
            + "\n小阿尔卡纳:\n[圣杯|星币|宝剑|权杖] [0-10|侍从|骑士|王后|国王]"
        )

    def spread(
        self,
        card_type: str,
        name: str,
        player: str,
        rng: random.Random | None = None,
    ) -> tuple[str, list[tuple[Card, bool]]]:
        """Lay out the spread ``name``; return its reading and the cards drawn."""
        formation = self.formations.get(name)
        if formation is None:
            raise TarotError(
                f"没有找到{name}噢~\n现有牌阵列表: \n" + "\n".join(self.formations)
            )
        start, length = _range_for(card_type)
        draws = self._pick(formation.cards_num, start, length, rng or random.Random())
        parts = [f"{player}---{name}\n"]
        for i, (card, reverse) in enumerate(draws):
            description = card.reverse_description if reverse else card.description
            parts.append(
                f"{formation.represent[0][i]}:『{POSITIONS[int(reverse)]}』的『"
                f"{card.name}』\n其释义为: \n{description}\n"
            )
        return "".join(parts), draws