"""Message flow domain models.

These models represent one parsed flow document:
- Node: a processing element, classified into a NodeCategory bucket
- Connection: a directed wire between two node terminals
- CommentNote: a free-floating annotation with canvas coordinates
- FlowDescription: flow-level short/long description
- MessageFlow: the aggregate handed to downstream consumers

All models are frozen; they are built once during a parse and never mutated.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


PropertyValue = Union[str, List[str]]


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class NodeCategory(str, Enum):
    """Output buckets for classified nodes."""
    COLLECTOR = "Collector"
    COMPUTE = "Compute"
    FILE_INPUT = "FileInput"
    FILE_OUTPUT = "FileOutput"
    HTTP_INPUT = "WSInput"
    HTTP_REQUEST = "WSRequest"
    HTTP_REPLY = "WSReply"
    MQ_INPUT = "MQInput"
    MQ_OUTPUT = "MQOutput"
    MQ_GET = "MQGet"
    MQ_HEADER = "MQHeader"
    MQ_REPLY = "MQReply"
    RESET_CONTENT_DESCRIPTOR = "ResetContentDescriptor"
    SOAP_INPUT = "SOAPInput"
    SOAP_REQUEST = "SOAPRequest"
    TIMEOUT_CONTROL = "TimeoutControl"
    TIMEOUT_NOTIFICATION = "TimeoutNotification"
    TRY_CATCH = "TryCatch"
    IMS_REQUEST = "IMSRequest"
    FILTER = "Filter"
    TRACE = "Trace"
    LABEL = "Label"
    ROUTE_TO_LABEL = "RouteToLabel"
    AGGREGATE_CONTROL = "AggregateControl"
    DATABASE = "Database"
    ROUTE = "Route"
    MISCELLANEOUS = "Miscellaneous"

    @classmethod
    def from_tag(cls, tag: str) -> "NodeCategory":
        """Map a canonical category tag to its bucket; unknown tags are miscellaneous."""
        try:
            return cls(tag)
        except ValueError:
            return cls.MISCELLANEOUS


IssueKind = Literal["document_load", "query", "malformed_field"]


# -----------------------------------------------------------------------------
# Graph elements
# -----------------------------------------------------------------------------


class Node(BaseModel):
    """One processing element of the flow."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    category: str
    is_subflow: bool = False

    build_tree_using_schema: bool = False
    mixed_content_retain_mode: bool = False
    comments_retain_mode: bool = False
    validate_master: bool = False
    message_domain_property: str = ""
    message_set_property: str = ""
    request_msg_location_in_tree: str = ""
    message_domain: str = ""
    message_set: str = ""
    record_definition: str = ""
    reset_message_domain: bool = False
    reset_message_set: bool = False
    reset_message_type: bool = False
    reset_message_format: bool = False
    monitoring_enabled: bool = True

    input_terminals: List[str] = Field(default_factory=list)
    output_terminals: List[str] = Field(default_factory=list)
    properties: Dict[str, PropertyValue] = Field(default_factory=dict)

    @property
    def bucket(self) -> NodeCategory:
        return NodeCategory.from_tag(self.category)

    def get_property(self, key: str, default: Optional[PropertyValue] = None) -> Optional[PropertyValue]:
        return self.properties.get(key, default)


class Connection(BaseModel):
    """Directed wire from a source terminal to a target terminal."""

    model_config = ConfigDict(frozen=True)

    source_node_id: str
    source_node_name: str = ""
    target_node_id: str
    target_node_name: str = ""
    source_terminal: str = ""
    target_terminal: str = ""


class CommentNote(BaseModel):
    """Sticky note on the flow canvas."""

    model_config = ConfigDict(frozen=True)

    associated_node_ids: List[str] = Field(default_factory=list)
    text: str = ""
    x: int = 0
    y: int = 0


class FlowDescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    short_description: str = ""
    long_description: str = ""


class ParseIssue(BaseModel):
    """A failure reported during a parse (fatal or recoverable)."""

    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    message: str
    fatal: bool = False
    element_id: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)


# -----------------------------------------------------------------------------
# Aggregate
# -----------------------------------------------------------------------------


def _empty_buckets() -> Dict[NodeCategory, List[Node]]:
    return {category: [] for category in NodeCategory}


class MessageFlow(BaseModel):
    """Parsed flow document, keyed by node category."""

    model_config = ConfigDict(frozen=True)

    source: str = ""
    buckets: Dict[NodeCategory, List[Node]] = Field(default_factory=_empty_buckets)
    connections: List[Connection] = Field(default_factory=list)
    comments: List[CommentNote] = Field(default_factory=list)
    description: FlowDescription = Field(default_factory=FlowDescription)
    issues: List[ParseIssue] = Field(default_factory=list)
    failed: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def nodes(self) -> List[Node]:
        """All nodes, in bucket order."""
        return [node for category in NodeCategory for node in self.buckets.get(category, [])]

    @property
    def node_count(self) -> int:
        return sum(len(nodes) for nodes in self.buckets.values())

    @property
    def warnings(self) -> List[ParseIssue]:
        return [issue for issue in self.issues if not issue.fatal]

    def bucket(self, category: Union[NodeCategory, str]) -> List[Node]:
        if not isinstance(category, NodeCategory):
            category = NodeCategory.from_tag(category)
        return self.buckets.get(category, [])

    def find_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def connections_from(self, node_id: str) -> List[Connection]:
        return [c for c in self.connections if c.source_node_id == node_id]

    def connections_to(self, node_id: str) -> List[Connection]:
        return [c for c in self.connections if c.target_node_id == node_id]

    def comments_for(self, node_id: str) -> List[CommentNote]:
        return [note for note in self.comments if node_id in note.associated_node_ids]
