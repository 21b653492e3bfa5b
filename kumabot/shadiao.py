"""Silly one-liners fetched from a handful of web services."""

from __future__ import annotations

import json
from typing import Any

import requests
from lxml import html as lxml_html

CHP_URL = "https://api.shadiao.app/chp"
DU_URL = "https://api.shadiao.app/du"
PYQ_URL = "https://api.shadiao.app/pyq"
YDUANZI_URL = "http://www.yduanzi.com/duanzi/getduanzi"
CHAYI_URL = "https://api.lovelive.tools/api/SweetNothings/Web/0"
GANHAI_URL = "https://api.lovelive.tools/api/SweetNothings/Web/1"
ERGOFABULOUS_URL = "https://ergofabulous.org/luther/?"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)
SD_REFERER = "https://api.shadiao.app/"
YDUANZI_REFERER = "http://www.yduanzi.com/?utm_source=shadiao.app"
LOVELIVE_REFERER = "https://lovelive.tools/"
REQUEST_TIMEOUT = 15.0

HELP = (
    "沙雕app\n"
    "- 哄我\n- 渣我\n- 来碗绿茶\n- 发个朋友圈\n- 来碗毒鸡汤\n- 讲个段子\n- 马丁路德骂我\n"
)

SD_MAP: dict[str, str] = {"哄我": CHP_URL, "来碗毒鸡汤": DU_URL, "发个朋友圈": PYQ_URL}
SWEET_MAP: dict[str, str] = {"来碗绿茶": CHAYI_URL, "渣我": GANHAI_URL}

_LUTHER_XPATH = '//main[@role="main"]/p[@class="larger"]/text()'


def _request(method: str, url: str, referer: str, session: Any) -> bytes:
    client = session if session is not None else requests.Session()
    headers = {"User-Agent": USER_AGENT}
    if referer:
        headers["Referer"] = referer
    response = client.request(method, url, headers=headers, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.content


def _json_text(body: bytes, path: str) -> str:
    try:
        value: Any = json.loads(body)
    except ValueError:
        return ""
    for key in path.split("."):
        if not isinstance(value, dict):
            return ""
        value = value.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def fetch_shadiao(keyword: str, session: Any = None) -> str:
    """Fetch a line for one of the keywords in ``SD_MAP``."""
    url = SD_MAP[keyword]
    return _json_text(_request("GET", url, SD_REFERER, session), "data.text")


def fetch_sweet_nothing(kind: str, session: Any = None) -> str:
    """Fetch a sweet line for one of the keywords in ``SWEET_MAP``."""
    url = SWEET_MAP[kind]
    body = _request("GET", url, LOVELIVE_REFERER, session)
    return _json_text(body, "returnObj.content")


def fetch_duanzi(session: Any = None) -> str:
    """Fetch a joke, turning HTML line breaks into newlines."""
    body = _request("POST", YDUANZI_URL, YDUANZI_REFERER, session)
    return _json_text(body, "duanzi").replace("<br>", "\n")


def extract_luther(html: str | bytes) -> str:
    """Pull the insult text out of the insult page."""
    document = lxml_html.fromstring(html)
    found = document.xpath(_LUTHER_XPATH)
    if not found:
        raise ValueError("insult text not found")
    return str(found[0])


def fetch_luther_insult(session: Any = None) -> str:
    """Fetch a random insult."""
    return extract_luther(_request("GET", ERGOFABULOUS_URL, "", session))