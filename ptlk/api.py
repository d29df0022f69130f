from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from ptlk import __version__

LOGGER = logging.getLogger(__name__)

DEFAULT_TAG = "Tech"
DEFAULT_SOURCE = "Unknown"
REQUEST_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class Article:
    title: str
    url: str
    published_at: str
    summary: str = ""
    tag: str = DEFAULT_TAG
    source: str = DEFAULT_SOURCE


@dataclass
class FetchResult:
    articles: list[Article] = field(default_factory=list)
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


def _text_or_default(raw: Any, default: str) -> str:
    if raw is None:
        return default
    value = str(raw)
    return value if value.strip() else default


def parse_article(raw: dict[str, Any]) -> Article:
    if not isinstance(raw, dict):
        raise ValueError(f"Article entry must be an object, got {type(raw).__name__}")
    missing = [key for key in ("title", "url", "publishedAt") if raw.get(key) is None]
    if missing:
        raise ValueError(f"Article is missing required field(s): {', '.join(missing)}")
    return Article(
        title=str(raw["title"]),
        url=str(raw["url"]),
        published_at=str(raw["publishedAt"]),
        summary=str(raw.get("summary") or ""),
        tag=_text_or_default(raw.get("tag"), DEFAULT_TAG),
        source=_text_or_default(raw.get("source"), DEFAULT_SOURCE),
    )


def sanitize_base_url(url: str) -> str:
    return url.strip().rstrip("/")


class ApiClient:
    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self.base_url = sanitize_base_url(base_url)
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["User-Agent"] = f"ptlk/{__version__}"

    def fetch_latest(self, page: int, limit: int) -> FetchResult:
        url = f"{self.base_url}/api/latest"
        LOGGER.debug("GET %s page=%s limit=%s", url, page, limit)
        try:
            response = self.session.get(
                url,
                params={"page": page, "limit": limit},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.JSONDecodeError as exc:
            # subclasses RequestException, so it must come first
            LOGGER.error("Response from %s is not valid JSON: %s", url, exc)
            return FetchResult(error=f"Invalid JSON response: {exc}")
        except requests.RequestException as exc:
            LOGGER.error("Fetching %s failed: %s", url, exc)
            return FetchResult(error=str(exc))

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            LOGGER.error("Response from %s has no 'data' list", url)
            return FetchResult(error="Unexpected response: missing 'data' list")

        try:
            articles = [parse_article(entry) for entry in data]
        except ValueError as exc:
            LOGGER.error("Malformed article in response from %s: %s", url, exc)
            return FetchResult(error=f"Malformed article: {exc}")

        LOGGER.info("Fetched %d articles from %s", len(articles), url)
        return FetchResult(articles=articles)
