"""Random hot comments from a music service."""

from __future__ import annotations

from typing import Any

import requests

HOT_COMMENT_URL = "https://api.gmit.vip/Api/HotComments?format=text"
REFERER = "https://api.gmit.vip/"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)
REQUEST_TIMEOUT = 15.0
HELP = "wangyiyun \n- 来份网易云热评"


def fetch_hot_comment(session: Any = None) -> str:
    """Fetch one hot comment as plain text."""
    client = session if session is not None else requests.Session()
    response = client.get(
        HOT_COMMENT_URL,
        headers={"Referer": REFERER, "User-Agent": USER_AGENT},
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.content.decode("utf-8", errors="replace")