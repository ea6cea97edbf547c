from __future__ import annotations
import json
import urllib.request
from typing import Any
from . import __version__

USER_AGENT = f"servercreator/{__version__}"


def open_url(url: str, timeout: float):
    """Open a GET request; the caller owns (and closes) the response."""
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    return urllib.request.urlopen(req, timeout=timeout)


def fetch_json(url: str, timeout: float) -> Any:
    with open_url(url, timeout) as response:
        return json.loads(response.read().decode("utf-8"))
