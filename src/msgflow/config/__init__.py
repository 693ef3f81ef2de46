"""Parser configuration."""

from .settings import ParserSettings

__all__ = ["ParserSettings"]
