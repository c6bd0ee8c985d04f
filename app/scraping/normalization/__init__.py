"""
Normalization layer exports.
"""

from app.scraping.normalization.content_normalizer import MAX_STREAM_CHARS, ContentNormalizer

__all__ = ["MAX_STREAM_CHARS", "ContentNormalizer"]
