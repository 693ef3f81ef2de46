"""Flow document parsing."""

from .accessor import AttributeAccessor
from .classifier import Classification, classify_type, monitoring_enabled
from .properties import EXTRACTORS, PropertyContext, extract_properties, extract_qualifier
from .builders import (
    TerminalIndex,
    build_comment,
    build_connection,
    build_node,
    parse_association,
    parse_location,
    read_description,
)
from .parser import MessageFlowParser, ParseState, parse_flow, parse_flow_string

__all__ = [
    "AttributeAccessor",
    "Classification",
    "classify_type",
    "monitoring_enabled",
    "EXTRACTORS",
    "PropertyContext",
    "extract_properties",
    "extract_qualifier",
    "TerminalIndex",
    "build_comment",
    "build_connection",
    "build_node",
    "parse_association",
    "parse_location",
    "read_description",
    "MessageFlowParser",
    "ParseState",
    "parse_flow",
    "parse_flow_string",
]
