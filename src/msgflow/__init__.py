"""msgflow - Message flow document to typed graph model."""

from typing import TYPE_CHECKING

__all__ = ["ParserSettings", "MessageFlowParser", "parse_flow", "parse_flow_string"]

if TYPE_CHECKING:
    from .config.settings import ParserSettings
    from .parsing.parser import MessageFlowParser, parse_flow, parse_flow_string


def __getattr__(name: str):
    if name == "ParserSettings":
        from .config.settings import ParserSettings

        return ParserSettings
    if name in {"MessageFlowParser", "parse_flow", "parse_flow_string"}:
        from .parsing import parser

        return getattr(parser, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
