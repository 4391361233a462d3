from __future__ import annotations
import json
import logging
import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from ..config import FETCH_TIMEOUT, PROXY_URL

logger = logging.getLogger("disinfo.moderation.source")

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_REDDIT_POST_RE = re.compile(r"^https?://(www\.)?(reddit\.com/r/|old\.reddit\.com/r/)", re.IGNORECASE)

USER_AGENT = "DisinfoHunter/1.0"


def looks_like_url(text: str) -> bool:
    return bool(_SCHEME_RE.match((text or "").strip()))


def is_supported_link(text: str) -> bool:
    return bool(_REDDIT_POST_RE.match((text or "").strip()))


def listing_json_url(url: str) -> str:
    """https://reddit.com/r/x/comments/id/slug/?utm=1 -> https://reddit.com/r/x/comments/id/slug.json"""
    parts = urlsplit(url.strip())
    path = parts.path[:-1] if parts.path.endswith("/") else parts.path
    return urlunsplit((parts.scheme, parts.netloc, path + ".json", "", ""))


def _post_text(listing) -> str:
    post = listing[0]["data"]["children"][0]["data"]
    title = post["title"] or ""
    body = post.get("selftext") or ""
    if not title:
        return body
    return f"{title}\n\n{body}"


def extract_post_text(url: str, *, proxy_url: Optional[str] = None, timeout: Optional[float] = None) -> str:
    """
    Fetch a Reddit post's title and body. On any failure the URL itself is
    returned so the caller can still analyze something.
    """
    proxy = PROXY_URL if proxy_url is None else proxy_url
    json_url = listing_json_url(url)
    try:
        if proxy:
            r = requests.get(proxy, params={"url": json_url}, timeout=timeout or FETCH_TIMEOUT,
                             headers={"User-Agent": USER_AGENT})
            r.raise_for_status()
            listing = json.loads(r.json()["contents"])
        else:
            r = requests.get(json_url, timeout=timeout or FETCH_TIMEOUT, headers={"User-Agent": USER_AGENT})
            r.raise_for_status()
            listing = r.json()
        text = _post_text(listing)
    except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
        # ValueError covers JSON decode errors from both parse passes
        logger.warning("source.extract.failed", extra={"stage": "ingest", "url": url, "err": repr(e)[:300]})
        return url

    if not text.strip():
        logger.warning("source.extract.empty", extra={"stage": "ingest", "url": url})
        return url
    logger.info("source.extract.done", extra={"stage": "ingest", "chars": len(text)})
    return text
