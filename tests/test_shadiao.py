import pytest
import requests

from kumabot.shadiao import (
    CHAYI_URL,
    CHP_URL,
    ERGOFABULOUS_URL,
    GANHAI_URL,
    LOVELIVE_REFERER,
    SD_REFERER,
    YDUANZI_URL,
    extract_luther,
    fetch_duanzi,
    fetch_luther_insult,
    fetch_shadiao,
    fetch_sweet_nothing,
)

LUTHER_PAGE = (
    "<html><body><main role=\"main\">"
    "<p class=\"other\">skip</p>"
    "<p class=\"larger\">Thou art a fool</p>"
    "</main></body></html>"
)


class FakeResponse:
    def __init__(self, body, status_code):
        self.content = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(str(self.status_code))


class FakeSession:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return FakeResponse(self.body, self.status_code)


def test_fetch_shadiao():
    session = FakeSession('{"data": {"text": "好耶"}}'.encode())
    assert fetch_shadiao("哄我", session) == "好耶"
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", CHP_URL)
    assert kwargs["headers"]["Referer"] == SD_REFERER


def test_fetch_shadiao_unknown_keyword():
    with pytest.raises(KeyError):
        fetch_shadiao("unknown", FakeSession(b"{}"))


def test_fetch_shadiao_missing_field():
    assert fetch_shadiao("来碗毒鸡汤", FakeSession(b'{"data": {}}')) == ""


def test_fetch_shadiao_http_error():
    with pytest.raises(requests.HTTPError):
        fetch_shadiao("发个朋友圈", FakeSession(b"", status_code=500))


@pytest.mark.parametrize("kind,url", [("来碗绿茶", CHAYI_URL), ("渣我", GANHAI_URL)])
def test_fetch_sweet_nothing(kind, url):
    session = FakeSession(b'{"returnObj": {"content": "sweet"}}')
    assert fetch_sweet_nothing(kind, session) == "sweet"
    method, called, kwargs = session.calls[0]
    assert (method, called) == ("GET", url)
    assert kwargs["headers"]["Referer"] == LOVELIVE_REFERER


def test_fetch_duanzi_replaces_breaks():
    session = FakeSession(b'{"duanzi": "line one<br>line two"}')
    assert fetch_duanzi(session) == "line one\nline two"
    assert session.calls[0][:2] == ("POST", YDUANZI_URL)


def test_extract_luther():
    assert extract_luther(LUTHER_PAGE) == "Thou art a fool"


def test_extract_luther_missing():
    with pytest.raises(ValueError):
        extract_luther("<html><body><main role=\"main\"></main></body></html>")


def test_fetch_luther_insult():
    session = FakeSession(LUTHER_PAGE.encode())
    assert fetch_luther_insult(session) == "Thou art a fool"
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", ERGOFABULOUS_URL)
    assert "Referer" not in kwargs["headers"]