"""Custom exception hierarchy for msgflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class MsgFlowException(Exception):
    """Base exception type for all msgflow errors."""

    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"


class DocumentLoadError(MsgFlowException):
    """Raised when the flow document is unreadable or not well-formed XML."""


class QueryError(MsgFlowException):
    """Raised when a structural query cannot be evaluated against the document."""


class MalformedFieldError(MsgFlowException):
    """Raised when a single attribute value does not have the expected shape."""
