"""Checkpoint log recording what a scan or repair pass found."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence

from .scanner import InvalidRun


def describe_runs(runs: Sequence[InvalidRun]) -> str:
    if not runs:
        return "valid"
    first = runs[0]
    return f"invalid runs={len(runs)} offset={first.offset} length={first.length}"


@dataclass
class ScanLog:
    """Append one timestamped line per scanned source.

    Lines read ``<timestamp>Z | <action> | <source> | <outcome>``.
    """

    path: Path
    events: List[str] = field(default_factory=list)

    def log(self, source: str, action: str, runs: Sequence[InvalidRun] = ()) -> str:
        timestamp = datetime.now(timezone.utc).replace(tzinfo=None).isoformat()
        entry = f"{timestamp}Z | {action} | {source} | {describe_runs(runs)}"
        self.events.append(entry)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(entry + "\n")
        return entry
