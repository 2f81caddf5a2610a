"""
Pipeline event logging utilities for COURIER (Tier 2 logging).

Appends one JSON object per line to the package events log so that builds can be
audited after the fact (which packages were built, when, and how they ended).

For detailed within-context logging (Tier 1), use courier.utils.logger instead.

Usage:
    from courier.utils.event_logging import log_pipeline_event

    log_pipeline_event(
        event_type="package_build_completed",
        package_name="jane-doe_0790feebb1",
        source="cli",
        merged_pdf="letters/jane-doe.pdf",
    )
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from courier.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
PIPELINE_EVENTS_FILE = Path(
    os.getenv("PIPELINE_EVENTS_FILE", str(LOGS_PATH / "package_events.log"))
)


def log_pipeline_event(
    event_type: str,
    package_name: str,
    source: str,
    events_file: Optional[Path] = None,
    **extra_fields,
) -> None:
    """
    Log an event to the pipeline event log.

    Events are appended in JSON Lines format (one JSON object per line), which
    allows filtering by event_type or package_name without loading a database.

    Args:
        event_type: Type of event (e.g., "package_build_started", "package_build_failed")
        package_name: Package identity (recipient + fingerprint)
        source: Event source (e.g., "cli")
        events_file: Override log location (default: PIPELINE_EVENTS_FILE)
        **extra_fields: Additional event-specific fields (must be JSON serializable)
    """
    events_file = Path(events_file) if events_file else PIPELINE_EVENTS_FILE
    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "package_name": package_name,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def get_recent_events(
    n: int = 10,
    package_name: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> list[dict]:
    """
    Get the last n events from the pipeline log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        package_name: Filter to only events for this package (optional)
        event_type: Filter to only events of this type (optional)
        events_file: Override log location (default: PIPELINE_EVENTS_FILE)

    Returns:
        List of event dicts (most recent last)
    """
    events_file = Path(events_file) if events_file else PIPELINE_EVENTS_FILE
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if package_name:
        events = [e for e in events if e.get("package_name") == package_name]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    if n <= 0:
        return []

    return events[-n:]
