"""Unified configuration for the park reporting engine.

This module provides a single, simple configuration class used across
the reporting pipeline (pagination, labels, status priorities).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict

from park_core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Rows per table page in the dashboard reports
DEFAULT_PAGE_SIZE = 10

# Status urgency used by the status sort key (lower = more urgent)
DEFAULT_STATUS_PRIORITY = {
    "Open": 1,
    "InProgress": 2,
    "Assigned": 3,
    "Completed": 4,
    "Cancelled": 5,
}

# Priority for statuses outside the known set
UNKNOWN_STATUS_PRIORITY = 99


@dataclass
class ReportConfig:
    """Settings shared by the report pipeline.

    Attributes:
        page_size: Number of rows per table page.
        unknown_label: Label used when a grouping value is missing
            (e.g. a maintenance request without a ride).
        status_priority: Mapping of MaintenanceStatus value to sort priority.
            Statuses missing from the mapping use UNKNOWN_STATUS_PRIORITY.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    unknown_label: str = "Unknown"
    status_priority: Dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_STATUS_PRIORITY)
    )

    @classmethod
    def from_json(cls, config_path: str | Path) -> ReportConfig:
        """Load a ReportConfig from a JSON file.

        Keys missing from the file keep their defaults; unknown keys are
        rejected so that typos do not silently fall back to defaults.

        Args:
            config_path: Path to the JSON configuration file.

        Returns:
            Validated ReportConfig instance.

        Raises:
            ConfigError: If the file cannot be read, is not a JSON object,
                contains unknown keys, or holds invalid values.

        Examples:
            >>> config = ReportConfig.from_json("config/report.json")
            >>> config.page_size
            25
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load report config from {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Report config in {config_path} must be a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown report config keys: {unknown}. Allowed: {sorted(known)}")

        config = cls(**data)
        if "status_priority" in data:
            # Overrides extend the defaults rather than replacing them
            config.status_priority = {**DEFAULT_STATUS_PRIORITY, **data["status_priority"]}
        config.validate()
        logger.debug("Loaded report config from %s: %s", config_path, config)
        return config

    def validate(self) -> None:
        """Check configuration values.

        Raises:
            ConfigError: If page_size is not a positive integer or a status
                priority is not an integer.
        """
        if not isinstance(self.page_size, int) or isinstance(self.page_size, bool):
            raise ConfigError(f"page_size must be an integer, got {self.page_size!r}")
        if self.page_size < 1:
            raise ConfigError(f"page_size must be at least 1, got {self.page_size}")
        for status, priority in self.status_priority.items():
            if not isinstance(priority, int) or isinstance(priority, bool):
                raise ConfigError(f"Priority for status '{status}' must be an integer, got {priority!r}")

    def priority_for(self, status_value: str) -> int:
        """Return the sort priority for a status value."""
        return self.status_priority.get(status_value, UNKNOWN_STATUS_PRIORITY)
