"""Parser settings.

Values are sourced from environment variables prefixed with `MSGFLOW_`
(and optionally `.env`), or passed explicitly.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..utils.logging import configure_logging as _configure_logging


class ParserSettings(BaseSettings):
    """Typed environment-backed settings for the flow parser."""

    model_config = SettingsConfigDict(
        env_prefix="MSGFLOW_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Abort the whole parse on the first malformed field instead of isolating it.
    strict: bool = False
    normalize_empty_association: bool = Field(
        default=False,
        description="Empty/absent association yields [] rather than ['']",
    )
    monitoring_enabled_without_events: bool = Field(
        default=False,
        description="monitoring_enabled value for nodes without a monitorEvents child",
    )

    log_level: str = "INFO"
    json_logs: bool = False

    def configure_logging(self, extra: Optional[Mapping[str, Any]] = None) -> None:
        """Set up root logging from `log_level` and `json_logs`."""
        _configure_logging(level=self.log_level, json_logs=self.json_logs, extra=extra)
