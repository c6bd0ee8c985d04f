"""
tests/test_content_normalizer.py

Pytest unit tests for ContentNormalizer.

Coverage
--------
- Promotional metadata markers and their order
- Non-content subtree removal
- Whitespace collapsing
- Stream length bound
- Determinism
"""

from __future__ import annotations

import pytest

from app.scraping.normalization import MAX_STREAM_CHARS, ContentNormalizer


@pytest.fixture()
def normalizer() -> ContentNormalizer:
    return ContentNormalizer()


HERO_PAGE = """
<html>
  <head>
    <title>Offers</title>
    <meta name="description" content="ignored">
    <script>var tracking = "do-not-keep";</script>
  </head>
  <body>
    <header>Global header text</header>
    <nav>Menu Link</nav>
    <div class="hero" data-title="Spring Sale" data-description="Save 20% on stays">
      <img src="/cherry.jpg" alt="Cherry blossoms">
      <p>Book by April 30</p>
    </div>
    <main><p>Member rates available</p></main>
    <footer>Copyright footer</footer>
  </body>
</html>
"""


class TestMetadataMarkers:
    def test_markers_prefix_body_text(self, normalizer: ContentNormalizer) -> None:
        stream = normalizer.normalize(HERO_PAGE)

        assert stream.startswith(
            "[BANNER_TITLE: Spring Sale] [BANNER_DESC: Save 20% on stays] "
            "[IMG_ALT: Cherry blossoms]"
        )
        assert stream.endswith("Book by April 30 Member rates available")

    def test_aria_label_and_title_fallback(self, normalizer: ContentNormalizer) -> None:
        markup = (
            '<body><a aria-label="Open offer" title="Winter Escape" href="#">Go</a>'
            '<section aria-roledescription="carousel"><p>Slide</p></section></body>'
        )
        stream = normalizer.normalize(markup)

        assert "[BANNER_TITLE: Winter Escape]" in stream
        assert "[UI_LABEL: Open offer]" in stream
        assert "[UI_LABEL: carousel]" in stream

    def test_promo_testid_collects_image_alts(self, normalizer: ContentNormalizer) -> None:
        markup = (
            '<body><div data-testid="home-promo-tile">'
            '<img alt="Free night"><img alt=""><img></div></body>'
        )
        stream = normalizer.normalize(markup)

        assert stream.count("[IMG_ALT:") == 1
        assert "[IMG_ALT: Free night]" in stream

    def test_plain_page_has_no_markers(self, normalizer: ContentNormalizer) -> None:
        stream = normalizer.normalize("<body><p>Just text</p></body>")

        assert stream == "Just text"


class TestContentRemoval:
    def test_non_content_subtrees_are_dropped(self, normalizer: ContentNormalizer) -> None:
        stream = normalizer.normalize(HERO_PAGE)

        for dropped in ("do-not-keep", "Global header text", "Menu Link", "Copyright footer"):
            assert dropped not in stream

    def test_nested_non_content_tags(self, normalizer: ContentNormalizer) -> None:
        markup = (
            "<body><svg><path d='M0 0'/><style>.x{}</style></svg>"
            "<noscript><iframe src='x'></iframe>enable js</noscript><p>Visible</p></body>"
        )
        assert normalizer.normalize(markup) == "Visible"

    def test_fragment_without_body(self, normalizer: ContentNormalizer) -> None:
        assert normalizer.normalize("<p>Fragment</p><script>x()</script>") == "Fragment"

    def test_empty_markup(self, normalizer: ContentNormalizer) -> None:
        assert normalizer.normalize("") == ""


class TestStreamShape:
    def test_whitespace_is_collapsed(self, normalizer: ContentNormalizer) -> None:
        stream = normalizer.normalize("<body><p>a\n\n   b</p>\t<p>c</p></body>")

        assert stream == "a b c"

    def test_stream_is_bounded(self, normalizer: ContentNormalizer) -> None:
        markup = "<body>" + "<p>campaign words here</p>" * 10000 + "</body>"
        stream = normalizer.normalize(markup)

        assert MAX_STREAM_CHARS - 2 <= len(stream) <= MAX_STREAM_CHARS

    def test_custom_bound(self) -> None:
        stream = ContentNormalizer(max_chars=20).normalize("<body>" + "abc " * 50 + "</body>")

        assert len(stream) <= 20
        assert stream.startswith("abc abc")

    def test_normalize_is_deterministic(self, normalizer: ContentNormalizer) -> None:
        assert normalizer.normalize(HERO_PAGE) == normalizer.normalize(HERO_PAGE)
