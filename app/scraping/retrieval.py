"""
Multi-path page retrieval with ordered fallback.

Each retrieval path routes the request through a different network
intermediary. Paths are tried strictly in order, at most once each, and the
first response that passes its path-specific validation wins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote, urlparse

import requests

from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

DEFAULT_MIN_BODY_LENGTH = 200


class ResponseShape(str, Enum):
    """
    How a retrieval path wraps the upstream page.
    """

    JSON_ENVELOPE = "json_envelope"
    RAW_BODY = "raw_body"


class RetrievalExhausted(RuntimeError):
    """
    Raised when every retrieval path failed for a target URL.
    """

    def __init__(self, target_url: str, attempts: list[str]) -> None:
        self.target_url = target_url
        self.attempts = attempts
        super().__init__(
            f"All {len(attempts)} retrieval path(s) failed for {target_url}: "
            + "; ".join(attempts)
        )


class _PathRejected(Exception):
    pass


@dataclass(frozen=True)
class RetrievalPath:
    """
    One network path: a URL template plus the response shape it returns.

    `url_template` must contain `{url}` (target appended verbatim) or
    `{encoded_url}` (target percent-encoded).
    """

    name: str
    url_template: str
    response_shape: ResponseShape

    def build_url(self, target_url: str) -> str:
        return self.url_template.format(
            url=target_url,
            encoded_url=quote(target_url, safe=""),
        )


@dataclass(frozen=True)
class RetrievalResult:
    content: str
    path_name: str


DEFAULT_RETRIEVAL_PATHS: tuple[RetrievalPath, ...] = (
    RetrievalPath(
        name="AllOrigins",
        url_template="https://api.allorigins.win/get?url={encoded_url}",
        response_shape=ResponseShape.JSON_ENVELOPE,
    ),
    RetrievalPath(
        name="CorsProxyIO",
        url_template="https://corsproxy.io/?{url}",
        response_shape=ResponseShape.RAW_BODY,
    ),
    RetrievalPath(
        name="CodeTabs",
        url_template="https://api.codetabs.com/v1/proxy?quest={url}",
        response_shape=ResponseShape.RAW_BODY,
    ),
)


class RetrievalRouter:
    """
    Fetch page content through the first retrieval path that validates.
    """

    def __init__(
        self,
        *,
        paths: Sequence[RetrievalPath] = DEFAULT_RETRIEVAL_PATHS,
        session: requests.Session | None = None,
        timeout_seconds: float = 15.0,
        min_body_length: int = DEFAULT_MIN_BODY_LENGTH,
        user_agent: str | None = None,
    ) -> None:
        if not paths:
            raise ValueError("RetrievalRouter requires at least one retrieval path.")
        self._paths = tuple(paths)
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds
        self._min_body_length = min_body_length
        self._headers = {"User-Agent": user_agent} if user_agent else {}

    @property
    def paths(self) -> tuple[RetrievalPath, ...]:
        return self._paths

    def fetch(self, target_url: str) -> RetrievalResult:
        """
        Return the decoded page content and the name of the path that served it.

        Raises RetrievalExhausted when no path produces valid content.
        """

        self._validate_target(target_url)

        attempts: list[str] = []
        for path in self._paths:
            request_url = path.build_url(target_url)
            try:
                content = self._attempt(path=path, request_url=request_url)
            except (requests.RequestException, _PathRejected) as exc:
                attempts.append(f"{path.name}: {exc}")
                log_event(
                    logger,
                    logging.WARNING,
                    "retrieval_path_failed",
                    path=path.name,
                    target_url=target_url,
                    error=str(exc),
                )
                continue

            log_event(
                logger,
                logging.INFO,
                "retrieval_path_succeeded",
                path=path.name,
                target_url=target_url,
                content_length=len(content),
            )
            return RetrievalResult(content=content, path_name=path.name)

        raise RetrievalExhausted(target_url, attempts)

    def _attempt(self, *, path: RetrievalPath, request_url: str) -> str:
        response = self._session.get(
            request_url,
            headers=self._headers,
            timeout=self._timeout_seconds,
            allow_redirects=True,
        )
        if not response.ok:
            raise _PathRejected(f"status={response.status_code}")

        if path.response_shape is ResponseShape.JSON_ENVELOPE:
            return self._unwrap_envelope(response)
        return self._validate_raw_body(response)

    @staticmethod
    def _unwrap_envelope(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError as exc:
            raise _PathRejected("response was not valid JSON") from exc

        contents = payload.get("contents") if isinstance(payload, dict) else None
        if not isinstance(contents, str) or not contents:
            raise _PathRejected("JSON envelope has no 'contents'")
        return contents

    def _validate_raw_body(self, response: requests.Response) -> str:
        text = response.text or ""
        if len(text) <= self._min_body_length:
            raise _PathRejected(
                f"body too short ({len(text)} <= {self._min_body_length} chars)"
            )
        return text

    @staticmethod
    def _validate_target(target_url: str) -> None:
        parsed = urlparse((target_url or "").strip())
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"Invalid target URL: {target_url!r}")
