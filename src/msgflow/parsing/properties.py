"""Category-specific node properties.

Each node category has its own property contract. `EXTRACTORS` maps a
category to the functions that contribute to its property bag; categories
without an entry get an empty bag. All lookups select the node by id.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from ..core.exceptions import MalformedFieldError
from ..core.model import NodeCategory, PropertyValue
from .accessor import AttributeAccessor

QUALIFIER_START = "#"
QUALIFIER_END = ".Main"


def extract_qualifier(expression: str) -> str:
    """Module name embedded in an expression path.

    >>> extract_qualifier("esql://routine/orders#Orders_Compute.Main")
    'Orders_Compute'
    """
    start = expression.find(QUALIFIER_START)
    end = expression.find(QUALIFIER_END)
    if start < 0 or end < 0 or end <= start:
        raise MalformedFieldError(
            f"Expression lacks '{QUALIFIER_START}...{QUALIFIER_END}' markers",
            {"expression": expression},
        )
    return expression[start + len(QUALIFIER_START):end]


class PropertyContext:
    """Identity-based attribute reads for one node."""

    def __init__(
        self,
        accessor: AttributeAccessor,
        node_id: str,
        on_malformed: Optional[Callable[[MalformedFieldError], None]] = None,
    ):
        self.accessor = accessor
        self.node_id = node_id
        self.on_malformed = on_malformed

    def attr(self, name: str) -> str:
        return self.accessor.scalar(f"//nodes[@id=$id]/@{name}", id=self.node_id)

    def child_string(self, child: str) -> str:
        return self.accessor.scalar(f"//nodes[@id=$id]/{child}/@string", id=self.node_id)

    def qualifier(self, name: str) -> str:
        """`extract_qualifier` applied to attribute `name`; "" if it is malformed and tolerated."""
        raw = self.attr(name)
        try:
            return extract_qualifier(raw)
        except MalformedFieldError as exc:
            exc.context = {**(exc.context or {}), "attribute": name, "node_id": self.node_id}
            if self.on_malformed is None:
                raise
            self.on_malformed(exc)
            return ""


PropertyBag = Dict[str, PropertyValue]
Extractor = Callable[[PropertyContext], PropertyBag]


def _queue(ctx: PropertyContext) -> PropertyBag:
    return {"queueName": ctx.attr("queueName")}


def _transaction(ctx: PropertyContext) -> PropertyBag:
    return {"transactionMode": ctx.attr("transactionMode")}


def _instances(ctx: PropertyContext) -> PropertyBag:
    return {
        "componentLevel": ctx.attr("componentLevel"),
        "additionalInstances": ctx.attr("additionalInstances"),
    }


def _ims_request(ctx: PropertyContext) -> PropertyBag:
    return {
        "shortDescription": ctx.child_string("shortDescription"),
        "longDescription": ctx.child_string("longDescription"),
        "useNodeProperties": ctx.attr("useNodeProperties"),
        "configurableService": ctx.attr("configurableService"),
        "commitMode": ctx.attr("commitMode"),
    }


def _http_reply(ctx: PropertyContext) -> PropertyBag:
    return {
        "ignoreTransportFailures": ctx.attr("ignoreTransportFailures"),
        "generateDefaultHttpHeaders": ctx.attr("generateDefaultHttpHeaders"),
    }


def _soap_request(ctx: PropertyContext) -> PropertyBag:
    return {"requestTimeout": ctx.attr("requestTimeout")}


def _aggregate_control(ctx: PropertyContext) -> PropertyBag:
    return {"timeoutInterval": ctx.attr("timeoutInterval")}


def _compute(ctx: PropertyContext) -> PropertyBag:
    return {
        "computeExpression": ctx.qualifier("computeExpression"),
        "computeExpressionFull": ctx.attr("computeExpression"),
        "dataSource": ctx.attr("dataSource"),
    }


def _filter(ctx: PropertyContext) -> PropertyBag:
    return {"filterExpression": ctx.qualifier("filterExpression")}


def _database(ctx: PropertyContext) -> PropertyBag:
    return {"statement": ctx.qualifier("statement")}


def _route(ctx: PropertyContext) -> PropertyBag:
    entries = ctx.accessor.elements("//nodes[@id=$id]/filterTable", id=ctx.node_id)
    terminals: List[str] = [
        ctx.accessor.scalar("@routingOutputTerminal", context=entry) for entry in entries
    ]
    return {"routeTerminals": terminals}


EXTRACTORS: Dict[NodeCategory, List[Extractor]] = {
    NodeCategory.MQ_INPUT: [_queue, _transaction, _instances],
    NodeCategory.MQ_OUTPUT: [_queue, _transaction],
    NodeCategory.MQ_GET: [_queue, _transaction],
    NodeCategory.MQ_REPLY: [_transaction],
    NodeCategory.IMS_REQUEST: [_ims_request],
    NodeCategory.HTTP_REPLY: [_http_reply],
    NodeCategory.SOAP_REQUEST: [_soap_request],
    NodeCategory.AGGREGATE_CONTROL: [_aggregate_control],
    NodeCategory.COMPUTE: [_compute],
    NodeCategory.FILTER: [_filter],
    NodeCategory.DATABASE: [_database],
    NodeCategory.ROUTE: [_route],
    NodeCategory.FILE_INPUT: [_instances],
    NodeCategory.HTTP_INPUT: [_instances],
    NodeCategory.SOAP_INPUT: [_instances],
}


def extract_properties(category: str, ctx: PropertyContext) -> PropertyBag:
    properties: PropertyBag = {}
    for extractor in EXTRACTORS.get(NodeCategory.from_tag(category), []):
        properties.update(extractor(ctx))
    return properties
