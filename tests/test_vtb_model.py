import json
import random

import pytest

from kumabot.vtb_model import (
    FIRST_HEADER,
    SECOND_HEADER,
    THIRD_HEADER,
    VTB_LIST_URL,
    VTB_PAGE_URL,
    FirstCategory,
    ThirdCategory,
    VtbDB,
    unescape_unicode,
)

VTB_LIST = [
    {"name": "Alice", "uid": "u1", "description": "first", "icon_path": "a.png"},
    {"name": "Bob", "uid": "u2", "description": "second", "icon_path": "b.png"},
]

PAGE = {
    "data": {
        "voices": [
            {
                "categoryName": "Greetings",
                "author": "fan",
                "categoryDescription": {"zh-CN": "desc"},
                "voiceList": [
                    {"name": "hello", "path": "https://example.com/v/hello.mp3",
                     "author": "fan", "description": {"zh-CN": "hi"}},
                    {"name": "bye", "path": "https://example.com/v/bye.mp3"},
                ],
            },
            {"categoryName": "Songs", "voiceList": []},
        ]
    }
}


class FakeResponse:
    def __init__(self, body):
        self.content = body
        self.status_code = 200


class FakeSession:
    def __init__(self, body):
        self.body = body
        self.urls = []

    def get(self, url, **kwargs):
        self.urls.append(url)
        return FakeResponse(self.body)


@pytest.fixture
def db(tmp_path):
    with VtbDB(tmp_path / "vtb.db") as database:
        yield database


@pytest.fixture
def filled(db):
    db.store_vtb_list(VTB_LIST)
    db.store_vtb_page("u1", PAGE)
    return db


def test_unescape_unicode_round_trip():
    original = "你好, world"
    escaped = json.dumps(original, ensure_ascii=True)
    assert unescape_unicode(escaped) == json.dumps(original, ensure_ascii=False)


def test_unescape_unicode_plain_text_unchanged():
    assert unescape_unicode("no escapes here") == "no escapes here"


def test_unescape_unicode_invalid():
    with pytest.raises(ValueError):
        unescape_unicode("\\uZZZZ")


def test_store_vtb_list_returns_uids(db):
    assert db.store_vtb_list(VTB_LIST) == ["u1", "u2"]


def test_first_category_message(filled):
    assert filled.first_category_message() == FIRST_HEADER + "0. Alice\n1. Bob\n"


def test_first_category_message_empty(db):
    assert db.first_category_message() == FIRST_HEADER


def test_store_vtb_list_updates_existing(db):
    db.store_vtb_list(VTB_LIST)
    db.store_vtb_list([{"name": "Bobby", "uid": "u2"}])
    fc = db.first_category_by_uid("u2")
    assert fc.name == "Bobby"
    assert fc.index == 0
    assert db.first_category_message().count("\n") == 3


def test_first_category_by_uid(filled):
    assert filled.first_category_by_uid("u1") == FirstCategory(
        0, "Alice", "u1", "first", "a.png"
    )
    assert filled.first_category_by_uid("missing") is None


def test_second_category_message(filled):
    assert filled.second_category_message(0) == SECOND_HEADER + "0. Greetings\n1. Songs\n"
    assert filled.second_category_message(1) == ""


def test_third_category_message(filled):
    assert filled.third_category_message(0, 0) == THIRD_HEADER + "0. hello\n1. bye\n"
    assert filled.third_category_message(0, 1) == ""


def test_third_category(filled):
    clip = filled.third_category(0, 0, 0)
    assert clip == ThirdCategory(
        0, 0, "u1", "hello", "https://example.com/v/hello.mp3", "fan", "hi"
    )
    assert filled.third_category(0, 0, 5) is None


def test_store_vtb_page_updates(filled):
    filled.store_vtb_page("u1", PAGE)
    assert filled.third_category_message(0, 0) == THIRD_HEADER + "0. hello\n1. bye\n"


def test_random_vtb(filled):
    clip = filled.random_vtb(random.Random(1))
    assert clip.name in {"hello", "bye"}
    assert clip.first_category_uid == "u1"


def test_random_vtb_empty(db):
    with pytest.raises(LookupError):
        db.random_vtb()


def test_fetch_vtb_list(db):
    body = b'[{"name": "\\u4e00", "uid": "u9"}]'
    session = FakeSession(body)
    assert db.fetch_vtb_list(session) == ["u9"]
    assert session.urls == [VTB_LIST_URL]
    assert db.first_category_by_uid("u9").name == unescape_unicode("\\u4e00")


def test_fetch_vtb_list_invalid_body(db):
    assert db.fetch_vtb_list(FakeSession(b"not json")) == []


def test_fetch_vtb_page(db):
    db.store_vtb_list(VTB_LIST)
    session = FakeSession(json.dumps(PAGE).encode())
    db.fetch_vtb_page("u1", session)
    assert session.urls == [VTB_PAGE_URL + "u1"]
    assert db.third_category(0, 0, 1).name == "bye"