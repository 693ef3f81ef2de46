"""Builders for nodes, connections, comment notes and the flow description."""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from lxml import etree

from ..core.exceptions import MalformedFieldError
from ..core.model import CommentNote, Connection, FlowDescription, Node
from .accessor import AttributeAccessor
from .classifier import classify_type, monitoring_enabled
from .properties import PropertyContext, extract_properties

MalformedHandler = Callable[[MalformedFieldError], None]

_LOCATION_RE = re.compile(r"^(-?\d+),(-?\d+)$")


def _is_true(value: str) -> bool:
    return value.lower() == "true"


# -----------------------------------------------------------------------------
# Terminals
# -----------------------------------------------------------------------------


@dataclass
class TerminalIndex:
    """Input/output terminal names per node id, gathered from all connections."""

    inputs: Dict[str, List[str]] = field(default_factory=lambda: defaultdict(list))
    outputs: Dict[str, List[str]] = field(default_factory=lambda: defaultdict(list))

    @classmethod
    def from_document(cls, accessor: AttributeAccessor) -> "TerminalIndex":
        index = cls()
        for element in accessor.elements("//connections"):
            index.inputs[element.get("targetNode", "")].append(element.get("targetTerminalName", ""))
            index.outputs[element.get("sourceNode", "")].append(element.get("sourceTerminalName", ""))
        return index

    def for_node(self, node_id: str) -> Tuple[List[str], List[str]]:
        return list(self.inputs.get(node_id, [])), list(self.outputs.get(node_id, []))


# -----------------------------------------------------------------------------
# Nodes
# -----------------------------------------------------------------------------


def build_node(
    accessor: AttributeAccessor,
    element: etree._Element,
    terminals: TerminalIndex,
    *,
    monitoring_without_events: bool = False,
    on_malformed: Optional[MalformedHandler] = None,
) -> Node:
    """Assemble one Node from a `nodes` element.

    Common configuration is read from the element itself; category-specific
    properties are looked up by node id.
    """

    def attr(name: str) -> str:
        return accessor.scalar(f"@{name}", context=element)

    node_id = attr("id")
    classification = classify_type(attr("type"))
    inputs, outputs = terminals.for_node(node_id)

    monitor_count = accessor.count("monitorEvents", context=element)
    first_enabled = accessor.scalar("monitorEvents/@eventEnabled", context=element) if monitor_count else None

    ctx = PropertyContext(accessor, node_id, on_malformed=on_malformed)

    return Node(
        id=node_id,
        name=accessor.scalar("translation/@string", context=element),
        category=classification.category,
        is_subflow=classification.is_subflow,
        build_tree_using_schema=_is_true(attr("parserXmlnscBuildTreeUsingXMLSchema")),
        mixed_content_retain_mode=attr("parserXmlnscMixedContentRetainMode") == "all",
        comments_retain_mode=attr("parserXmlnscCommentsRetainMode") == "all",
        validate_master=attr("validateMaster") == "contentAndValue",
        message_domain_property=attr("messageDomainProperty"),
        message_set_property=attr("messageSetProperty"),
        request_msg_location_in_tree=attr("requestMsgLocationInTree"),
        message_domain=attr("messageDomain"),
        message_set=attr("messageSet"),
        record_definition=attr("recordDefinition"),
        reset_message_domain=_is_true(attr("resetMessageDomain")),
        reset_message_set=_is_true(attr("resetMessageSet")),
        reset_message_type=_is_true(attr("resetMessageType")),
        reset_message_format=_is_true(attr("resetMessageFormat")),
        monitoring_enabled=monitoring_enabled(
            monitor_count, first_enabled, without_events=monitoring_without_events
        ),
        input_terminals=inputs,
        output_terminals=outputs,
        properties=extract_properties(classification.category, ctx),
    )


# -----------------------------------------------------------------------------
# Connections
# -----------------------------------------------------------------------------


def build_connection(element: etree._Element, names: Mapping[str, str]) -> Connection:
    source = element.get("sourceNode", "")
    target = element.get("targetNode", "")
    return Connection(
        source_node_id=source,
        source_node_name=names.get(source, ""),
        target_node_id=target,
        target_node_name=names.get(target, ""),
        source_terminal=element.get("sourceTerminalName", ""),
        target_terminal=element.get("targetTerminalName", ""),
    )


# -----------------------------------------------------------------------------
# Comment notes
# -----------------------------------------------------------------------------


def parse_location(location: str) -> Tuple[int, int]:
    match = _LOCATION_RE.match(location)
    if not match:
        raise MalformedFieldError("Location is not '<int>,<int>'", {"location": location})
    return int(match.group(1)), int(match.group(2))


def parse_association(association: str, *, normalize_empty: bool = False) -> List[str]:
    """Node ids of a space-separated association.

    An empty attribute gives `[""]` (or `[]` when `normalize_empty`); trailing
    separators add no entries, so an all-blank attribute gives `[]`.
    """
    if not association:
        return [] if normalize_empty else [""]
    ids = association.split(" ")
    while ids and ids[-1] == "":
        ids.pop()
    return ids


def build_comment(
    accessor: AttributeAccessor,
    element: etree._Element,
    *,
    normalize_empty_association: bool = False,
    on_malformed: Optional[MalformedHandler] = None,
) -> CommentNote:
    location = element.get("location", "")
    try:
        x, y = parse_location(location)
    except MalformedFieldError as exc:
        if on_malformed is None:
            raise
        on_malformed(exc)
        x, y = 0, 0

    return CommentNote(
        associated_node_ids=parse_association(
            element.get("association", ""), normalize_empty=normalize_empty_association
        ),
        text=accessor.scalar("body/@string", context=element),
        x=x,
        y=y,
    )


# -----------------------------------------------------------------------------
# Flow description
# -----------------------------------------------------------------------------


def read_description(accessor: AttributeAccessor) -> FlowDescription:
    return FlowDescription(
        short_description=accessor.scalar("//eClassifiers/shortDescription/@string"),
        long_description=accessor.scalar("//eClassifiers/longDescription/@string"),
    )
