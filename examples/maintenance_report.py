"""Example: Maintenance workload report

This example loads a maintenance-request export, shows the open work
ordered by urgency, the per-worker performance table and the monthly
cancellation rate.

Prerequisites:
- Export maintenance requests from the backend to data/maintenance.json
- Optionally create config/report.json to override page size or status
  priorities
"""

import json
import logging
from pathlib import Path

from park_core import ReportConfig
from park_core.formatters import format_report_for_console, format_worker_stats
from park_core.records import MaintenanceStatus, RecordKind
from park_core.reporting import (
    Dimension,
    FilterSpec,
    SortDirection,
    SortSpec,
    aggregate,
    run_report,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

data_path = Path("data/maintenance.json")  # MODIFY AS NEEDED
config_path = Path("config/report.json")

config = ReportConfig.from_json(config_path) if config_path.exists() else ReportConfig()
sources = {RecordKind.MAINTENANCE: json.loads(data_path.read_text(encoding="utf-8"))}

# Open work, most urgent first
open_work = FilterSpec(
    status_set=frozenset({MaintenanceStatus.OPEN, MaintenanceStatus.ASSIGNED, MaintenanceStatus.IN_PROGRESS})
)
result = run_report(sources, open_work, SortSpec("status", SortDirection.DESCENDING), config=config)
print(format_report_for_console(result))

# Worker performance over all requests
everything = run_report(sources, config=config)
print("\nWorkers:")
print(format_worker_stats(aggregate(everything.records, Dimension.WORKER)))

rate = everything.cancellations
print(f"\nCancelled: {rate.cancelled_count} over {rate.month_span} month(s), {rate.rate:.2f} per month")
