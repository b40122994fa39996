"""Dependency injection providers for FastAPI."""

from functools import lru_cache

from momentgif.pipeline.manager import ConversionManager


@lru_cache
def get_conversion_manager() -> ConversionManager:
    return ConversionManager()
