"""Flow document parser.

`MessageFlowParser.parse()` turns one flow document into a `MessageFlow`:

1. Load the document (namespace prefixes stripped)
2. Build one Node per `nodes` element and file it into its category bucket
3. Build one Connection per `connections` element, resolving endpoint names
4. Build one CommentNote per `stickyNote` element
5. Read the flow-level short/long description

Each phase commits its results only when it completes. A fatal error
(`DocumentLoadError`, `QueryError`, or a `MalformedFieldError` in strict mode)
stops the parse; the returned flow keeps the phases that finished, is marked
`failed`, and carries the error as a `ParseIssue`. Nothing is raised to the
caller.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..config.settings import ParserSettings
from ..core.exceptions import (
    DocumentLoadError,
    MalformedFieldError,
    MsgFlowException,
    QueryError,
)
from ..core.model import (
    CommentNote,
    Connection,
    FlowDescription,
    IssueKind,
    MessageFlow,
    Node,
    NodeCategory,
    ParseIssue,
)
from ..utils.logging import get_logger
from .accessor import AttributeAccessor
from .builders import (
    TerminalIndex,
    build_comment,
    build_connection,
    build_node,
    read_description,
)

logger = get_logger(__name__)

IssueSink = Callable[[ParseIssue], None]


class ParseState(str, Enum):
    IDLE = "idle"
    DOCUMENT_LOADED = "document_loaded"
    NODES_EXTRACTED = "nodes_extracted"
    CONNECTIONS_EXTRACTED = "connections_extracted"
    COMMENTS_EXTRACTED = "comments_extracted"
    DONE = "done"
    FAILED = "failed"


def _issue_kind(exc: MsgFlowException) -> IssueKind:
    if isinstance(exc, DocumentLoadError):
        return "document_load"
    if isinstance(exc, QueryError):
        return "query"
    return "malformed_field"


class MessageFlowParser:
    """Parses flow documents into `MessageFlow` aggregates.

    The parser holds only configuration; every `parse()` call owns its own
    document and output collections, so one instance can be reused.
    """

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        on_issue: Optional[IssueSink] = None,
    ):
        self.settings = settings or ParserSettings()
        self.on_issue = on_issue

    def parse(self, path: Union[str, Path]) -> MessageFlow:
        return self._run(lambda: AttributeAccessor.from_path(path), str(path))

    def parse_string(self, text: Union[str, bytes], source: str = "<string>") -> MessageFlow:
        return self._run(lambda: AttributeAccessor.from_string(text, source=source), source)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _run(self, load: Callable[[], AttributeAccessor], source: str) -> MessageFlow:
        logger.debug("Parse started", extra={"source": source})
        state = ParseState.IDLE
        issues: List[ParseIssue] = []
        buckets: Dict[NodeCategory, List[Node]] = {category: [] for category in NodeCategory}
        connections: List[Connection] = []
        comments: List[CommentNote] = []
        description = FlowDescription()

        def tolerate(exc: MalformedFieldError) -> None:
            element_id = (exc.context or {}).get("node_id")
            logger.warning(str(exc), extra={"source": source, "element_id": element_id})
            self._report(
                issues,
                ParseIssue(
                    kind="malformed_field",
                    message=exc.message,
                    element_id=element_id,
                    context=dict(exc.context or {}),
                ),
            )

        on_malformed = None if self.settings.strict else tolerate

        try:
            accessor = load()
            state = ParseState.DOCUMENT_LOADED

            buckets, names = self._extract_nodes(accessor, on_malformed)
            state = ParseState.NODES_EXTRACTED

            connections = [build_connection(e, names) for e in accessor.elements("//connections")]
            state = ParseState.CONNECTIONS_EXTRACTED

            comments = [
                build_comment(
                    accessor,
                    element,
                    normalize_empty_association=self.settings.normalize_empty_association,
                    on_malformed=on_malformed,
                )
                for element in accessor.elements("//stickyNote")
            ]
            state = ParseState.COMMENTS_EXTRACTED

            description = read_description(accessor)
            state = ParseState.DONE
        except MsgFlowException as exc:
            logger.error(
                "Parse failed",
                extra={"source": source, "state": state.value, "error": str(exc)},
            )
            self._report(
                issues,
                ParseIssue(
                    kind=_issue_kind(exc),
                    message=exc.message,
                    fatal=True,
                    element_id=(exc.context or {}).get("node_id"),
                    context={**(exc.context or {}), "state": state.value},
                ),
            )
            state = ParseState.FAILED

        logger.debug("Parse finished", extra={"source": source, "state": state.value})
        return MessageFlow(
            source=source,
            buckets=buckets,
            connections=connections,
            comments=comments,
            description=description,
            issues=issues,
            failed=state is ParseState.FAILED,
        )

    def _extract_nodes(
        self,
        accessor: AttributeAccessor,
        on_malformed: Optional[Callable[[MalformedFieldError], None]],
    ) -> Tuple[Dict[NodeCategory, List[Node]], Dict[str, str]]:
        """Buckets of built nodes, and the display name of the first node (in
        document order) carrying each id."""
        terminals = TerminalIndex.from_document(accessor)
        buckets: Dict[NodeCategory, List[Node]] = {category: [] for category in NodeCategory}
        names: Dict[str, str] = {}
        for element in accessor.elements("//nodes"):
            node = build_node(
                accessor,
                element,
                terminals,
                monitoring_without_events=self.settings.monitoring_enabled_without_events,
                on_malformed=on_malformed,
            )
            logger.debug(
                "Classified node",
                extra={"node_id": node.id, "category": node.category, "bucket": node.bucket.value},
            )
            buckets[node.bucket].append(node)
            names.setdefault(node.id, node.name)
        return buckets, names

    def _report(self, issues: List[ParseIssue], issue: ParseIssue) -> None:
        issues.append(issue)
        if self.on_issue is not None:
            self.on_issue(issue)


def parse_flow(
    path: Union[str, Path],
    settings: Optional[ParserSettings] = None,
    on_issue: Optional[IssueSink] = None,
) -> MessageFlow:
    """Parse the flow document at `path`."""
    return MessageFlowParser(settings, on_issue).parse(path)


def parse_flow_string(
    text: Union[str, bytes],
    settings: Optional[ParserSettings] = None,
    on_issue: Optional[IssueSink] = None,
    source: str = "<string>",
) -> MessageFlow:
    return MessageFlowParser(settings, on_issue).parse_string(text, source=source)
