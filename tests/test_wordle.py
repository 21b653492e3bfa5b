import io

import pytest
from PIL import Image

from kumabot.wordle import (
    LengthNotEnoughError,
    Mark,
    TimesRunOutError,
    UnknownWordError,
    WordleGame,
    class_from_name,
    load_words,
)

DICTIONARY = ["angle", "paper", "apple", "bread", "crane", "dough", "eagle"]


def test_load_words_sorts_lines():
    assert load_words("pear\napple\nfig") == ["apple", "fig", "pear"]


@pytest.mark.parametrize("name, size", [("", 5), ("五阶", 5), ("六阶", 6), ("七阶", 7)])
def test_class_from_name(name, size):
    assert class_from_name(name) == size


def test_class_from_name_unknown():
    with pytest.raises(ValueError):
        class_from_name("八阶")


def test_guess_target_wins_case_insensitive():
    game = WordleGame("apple", DICTIONARY)
    assert game.guess("APPLE") is True
    assert game.records == ("apple",)


def test_wrong_length_is_rejected_without_using_attempt():
    game = WordleGame("apple", DICTIONARY)
    with pytest.raises(LengthNotEnoughError):
        game.guess("app")
    assert game.records == ()


def test_unknown_word_is_rejected():
    game = WordleGame("apple", DICTIONARY)
    with pytest.raises(UnknownWordError):
        game.guess("zzzzz")
    assert game.marks() == []


def test_marks_worked_example():
    game = WordleGame("apple", DICTIONARY)
    assert game.guess("angle") is False
    assert game.marks() == [
        [Mark.MATCH, Mark.NOTEXIST, Mark.NOTEXIST, Mark.MATCH, Mark.MATCH]
    ]


def test_times_run_out_on_last_attempt():
    game = WordleGame("apple", DICTIONARY)
    for _ in range(game.max_attempts - 1):
        assert game.guess("crane") is False
    with pytest.raises(TimesRunOutError):
        game.guess("crane")
    assert len(game.records) == game.max_attempts


def test_win_on_last_attempt_does_not_raise():
    game = WordleGame("apple", DICTIONARY)
    for _ in range(game.max_attempts - 1):
        game.guess("bread")
    assert game.guess("apple") is True


def test_mark_colors_of_guess_follow_palette():
    game = WordleGame("apple", DICTIONARY)
    game.guess("paper")
    colors = [mark.color for mark in game.marks()[0]]
    assert colors == [
        (199, 183, 96),
        (199, 183, 96),
        (125, 166, 108),
        (199, 183, 96),
        (123, 123, 123),
    ]


def _open(data):
    return Image.open(io.BytesIO(data)).convert("RGB")


def test_render_is_png():
    data = WordleGame("apple", DICTIONARY).render()
    assert data[:4] == b"\x89PNG"


def test_render_size_grows_with_word_length():
    small = _open(WordleGame("apple", DICTIONARY).render())
    large = _open(WordleGame("orange", []).render())
    assert large.width > small.width
    assert large.height > small.height
    assert small.height > small.width


def test_render_colours_cells():
    game = WordleGame("apple", DICTIONARY)
    game.guess("angle")
    image = _open(game.render())
    assert image.getpixel((11, 11)) == Mark.MATCH.color
    assert image.getpixel((11, 35)) == Mark.UNDONE.color