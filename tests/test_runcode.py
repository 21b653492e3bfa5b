import json

import pytest

from kumabot.runcode import (
    API_URL,
    TEMPLATES,
    TRUNCATION_MARK,
    UNSUPPORTED_TEXT,
    RunCodeError,
    build_form,
    clear_newline_suffix,
    cut_too_long,
    handle_runcode,
    lookup_language,
    parse_result,
    run_code,
)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.content = json.dumps(payload).encode()
        self.status_code = status_code


class FakeSession:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append((url, data, headers, timeout))
        return FakeResponse(self.payload, self.status_code)


def test_clear_newline_suffix():
    assert clear_newline_suffix("abc\n\n\n") == "abc"
    assert clear_newline_suffix("a\nb") == "a\nb"
    assert clear_newline_suffix("") == ""


def test_cut_too_long_keeps_short_text():
    assert cut_too_long("hello\nworld") == "hello\nworld"


def test_cut_too_long_counts_crlf_once():
    text = "x\r\n" * 30 + "y"
    assert cut_too_long(text) == text


def test_cut_too_long_many_lines():
    text = "line\n" * 40
    result = cut_too_long(text)
    assert result.endswith(TRUNCATION_MARK)
    assert len(result) < len(text)
    assert text.startswith(result[: -len(TRUNCATION_MARK)])


def test_cut_too_long_many_chars():
    result = cut_too_long("a" * 2000)
    assert result.endswith(TRUNCATION_MARK)
    assert len(result) == 1000 + len(TRUNCATION_MARK)


def test_lookup_language_case_insensitive():
    assert lookup_language("Python") == ("15", "py3")
    assert lookup_language("ts") == ("1010", "ts")


def test_lookup_language_unknown():
    with pytest.raises(RunCodeError):
        lookup_language("brainfuck")


def test_build_form_fields():
    form = build_form("print(1)", ("15", "py3"))
    assert form["code"] == "print(1)"
    assert form["language"] == "15"
    assert form["fileext"] == "py3"
    assert form["stdin"] == ""
    assert set(form) == {"code", "token", "stdin", "language", "fileext"}


def test_parse_result_output():
    payload = json.dumps({"errors": "\n\n", "output": "hi\n\n"})
    assert parse_result(payload) == "hi"


def test_parse_result_errors():
    payload = json.dumps({"errors": "boom\n", "output": ""})
    with pytest.raises(RunCodeError, match="boom"):
        parse_result(payload)


def test_run_code_posts_form():
    session = FakeSession({"errors": "\n\n", "output": "ok\n"})
    assert run_code("print(1)", ("15", "py3"), session) == "ok"
    url, data, headers, timeout = session.calls[0]
    assert url == API_URL
    assert data["code"] == "print(1)"
    assert headers["Referer"] == "https://c.runoob.com/"
    assert timeout == 15


def test_run_code_bad_status():
    session = FakeSession({}, status_code=500)
    with pytest.raises(RunCodeError, match="code not 200"):
        run_code("x", ("15", "py3"), session)


def test_handle_runcode_not_a_command():
    assert handle_runcode("hello", "nick") is None


def test_handle_runcode_unsupported():
    assert handle_runcode(">runcode cobol x", "nick") == "> nick\n" + UNSUPPORTED_TEXT


def test_handle_runcode_help():
    reply = handle_runcode(">runcode Go help", "nick")
    assert reply == "> nick  go-template:\n>runcode go\n" + TEMPLATES["go"]


def test_handle_runcode_output_and_raw():
    session = FakeSession({"errors": "\n\n", "output": "done\n"})
    assert handle_runcode(">runcode py print(1)", "nick", session) == "> nick\ndone"
    assert handle_runcode(">runcoderaw py print(1)", "nick", session) == "done"


def test_handle_runcode_unescapes_cq():
    session = FakeSession({"errors": "\n\n", "output": ""})
    handle_runcode(">runcode py a&#91;0&#93;&#44;&amp;", "nick", session)
    assert session.calls[0][1]["code"] == "a[0],&"


def test_handle_runcode_error():
    session = FakeSession({"errors": "bad", "output": ""})
    assert handle_runcode(">runcode py x", "nick", session) == "> nick\nERROR: bad"