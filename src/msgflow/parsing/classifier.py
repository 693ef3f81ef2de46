"""Node type classification.

Builtin node types look like ``ComIbmCompute.msgnode:FCMComposite_1``; the
category is the part before the first ``.`` with the vendor marker removed
(``Compute``). Anything else is an embedded subflow such as
``CommonErrorHandler.subflow:FCMComposite_1``, whose category is the verbatim
part before the first ``:``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.model import NodeCategory

BUILTIN_MARKER = "ComIbm"


@dataclass(frozen=True)
class Classification:
    category: str
    is_subflow: bool

    @property
    def bucket(self) -> NodeCategory:
        return NodeCategory.from_tag(self.category)


def classify_type(type_token: str) -> Classification:
    if BUILTIN_MARKER in type_token:
        category = type_token.split(".", 1)[0].replace(BUILTIN_MARKER, "")
        return Classification(category=category, is_subflow=False)
    return Classification(category=type_token.split(":", 1)[0], is_subflow=True)


def monitoring_enabled(
    event_count: int,
    first_event_enabled: Optional[str],
    *,
    without_events: bool = False,
) -> bool:
    """Whether monitoring events are enabled for a node.

    Enabled unless the node has no `monitorEvents` child (then `without_events`)
    or the first one carries ``eventEnabled="false"``.
    """
    if event_count == 0:
        return without_events
    return first_event_enabled != "false"
