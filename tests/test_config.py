"""Tests for ReportConfig loading and validation."""

import json

import pytest

from park_core.config import DEFAULT_PAGE_SIZE, ReportConfig
from park_core.exceptions import ConfigError


def test_defaults() -> None:
    config = ReportConfig()
    assert config.page_size == DEFAULT_PAGE_SIZE == 10
    assert config.priority_for("Open") == 1
    assert config.priority_for("Whatever") == 99


def test_from_json_merges_status_priorities(tmp_path) -> None:
    path = tmp_path / "report.json"
    path.write_text(json.dumps({"page_size": 25, "status_priority": {"Assigned": 0}}), encoding="utf-8")

    config = ReportConfig.from_json(path)

    assert config.page_size == 25
    assert config.priority_for("Assigned") == 0
    assert config.priority_for("Cancelled") == 5


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2]",
        json.dumps({"page_sise": 5}),
        json.dumps({"page_size": 0}),
        json.dumps({"page_size": "10"}),
        json.dumps({"status_priority": {"Open": "high"}}),
    ],
)
def test_from_json_rejects_invalid_files(tmp_path, content) -> None:
    path = tmp_path / "report.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        ReportConfig.from_json(str(path))


def test_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigError):
        ReportConfig.from_json(tmp_path / "absent.json")
