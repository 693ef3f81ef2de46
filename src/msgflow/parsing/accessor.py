"""Read-only XPath queries against a loaded flow document.

Flow documents carry namespace-prefixed attributes (`xmi:type`, `xmi:id`) next
to plain ones. After loading, every element and attribute is renamed to its
local name so that queries can address `@type` and `@id` directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Union

from lxml import etree

from ..core.exceptions import DocumentLoadError, QueryError
from ..utils.logging import get_logger

logger = get_logger(__name__)


def _make_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False, no_network=True, remove_comments=True, encoding=encoding
    )


def _strip_namespaces(root: etree._Element) -> None:
    for element in root.iter(tag=etree.Element):
        element.tag = etree.QName(element).localname
        for key in list(element.attrib):
            if key.startswith("{"):
                value = element.attrib.pop(key)
                local = etree.QName(key).localname
                if local not in element.attrib:
                    element.attrib[local] = value
    etree.cleanup_namespaces(root)


class AttributeAccessor:
    """Scalar, count and element queries over one parsed document.

    Identity selectors are passed as XPath variables, e.g.::

        accessor.scalar("//nodes[@id=$id]/@queueName", id="FCMComposite_1_1")

    Absent attributes resolve to the empty string; only a query that cannot be
    evaluated raises (`QueryError`).
    """

    def __init__(self, root: etree._Element, source: str = "<string>"):
        _strip_namespaces(root)
        self.root = root
        self.source = source

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "AttributeAccessor":
        path = Path(path)
        try:
            tree = etree.parse(str(path), _make_parser())
        except OSError as exc:
            raise DocumentLoadError("Cannot read flow document", {"path": str(path), "error": str(exc)}) from exc
        except etree.XMLSyntaxError as exc:
            raise DocumentLoadError("Flow document is not well-formed XML", {"path": str(path), "error": str(exc)}) from exc
        logger.debug("Loaded flow document", extra={"path": str(path)})
        return cls(tree.getroot(), source=str(path))

    @classmethod
    def from_string(cls, text: Union[str, bytes], source: str = "<string>") -> "AttributeAccessor":
        encoding = None
        if isinstance(text, str):
            # Text is already decoded; its encoding declaration no longer applies.
            text = text.encode("utf-8")
            encoding = "utf-8"
        try:
            root = etree.fromstring(text, _make_parser(encoding))
        except etree.XMLSyntaxError as exc:
            raise DocumentLoadError("Flow document is not well-formed XML", {"source": source, "error": str(exc)}) from exc
        if root is None:
            raise DocumentLoadError("Flow document is empty", {"source": source})
        return cls(root, source=source)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _evaluate(self, expression: str, context: Optional[etree._Element], variables: dict) -> Any:
        target = self.root if context is None else context
        try:
            return target.xpath(expression, **variables)
        except etree.XPathError as exc:
            raise QueryError("Query evaluation failed", {"query": expression, "error": str(exc)}) from exc

    def scalar(self, path: str, context: Optional[etree._Element] = None, **variables: str) -> str:
        """String value of the first match of `path`, or "" when nothing matches."""
        return str(self._evaluate(f"string({path})", context, variables))

    def count(self, path: str, context: Optional[etree._Element] = None, **variables: str) -> int:
        return int(self._evaluate(f"count({path})", context, variables))

    def elements(self, path: str, context: Optional[etree._Element] = None, **variables: str) -> List[etree._Element]:
        result = self._evaluate(path, context, variables)
        if not isinstance(result, list):
            raise QueryError("Query does not select elements", {"query": path})
        return [item for item in result if isinstance(item, etree._Element)]
