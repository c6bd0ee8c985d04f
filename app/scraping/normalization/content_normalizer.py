"""
Markup-to-text normalization for model consumption.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

MAX_STREAM_CHARS = 48000

PROMO_SELECTOR = ", ".join(
    [
        "[data-title]",
        "[data-description]",
        "[aria-label]",
        "[aria-roledescription]",
        ".hero",
        ".banner",
        ".carousel",
        '[data-testid*="promo"]',
    ]
)
NON_CONTENT_TAGS = [
    "script",
    "style",
    "iframe",
    "svg",
    "path",
    "link",
    "meta",
    "noscript",
    "header",
    "footer",
    "nav",
]

_WHITESPACE = re.compile(r"\s+")


class ContentNormalizer:
    """
    Convert raw page markup into a bounded plain-text stream.

    Promotional metadata that plain text extraction would drop (slider titles,
    ARIA labels, image alt text inside hero/banner blocks) is collected first
    and prefixed to the body text with provenance markers.
    """

    def __init__(self, *, max_chars: int = MAX_STREAM_CHARS) -> None:
        self._max_chars = max_chars

    def normalize(self, markup: str) -> str:
        soup = BeautifulSoup(markup or "", "html.parser")

        meta_buffer = self._collect_promotional_metadata(soup)

        for node in soup.find_all(NON_CONTENT_TAGS):
            # already removed along with an enclosing non-content ancestor
            if node.decomposed:
                continue
            node.decompose()

        root = soup.body or soup
        body_text = root.get_text(" ")

        stream = f"{' '.join(meta_buffer)} {body_text}"
        stream = _WHITESPACE.sub(" ", stream)
        return stream[: self._max_chars].strip()

    @staticmethod
    def _collect_promotional_metadata(soup: BeautifulSoup) -> list[str]:
        buffer: list[str] = []
        for element in soup.select(PROMO_SELECTOR):
            title = _attr(element, "data-title") or _attr(element, "title")
            description = _attr(element, "data-description")
            label = _attr(element, "aria-label") or _attr(element, "aria-roledescription")

            if title:
                buffer.append(f" [BANNER_TITLE: {title}] ")
            if description:
                buffer.append(f" [BANNER_DESC: {description}] ")
            if label:
                buffer.append(f" [UI_LABEL: {label}] ")

            for image in element.find_all("img"):
                alt = _attr(image, "alt")
                if alt:
                    buffer.append(f" [IMG_ALT: {alt}] ")
        return buffer


def _attr(element: Tag, name: str) -> str:
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or ""
