"""Batch audit of files for UTF-8 well-formedness."""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from .measure import count_scalars
from .scanlog import ScanLog
from .scanner import Utf8Scanner


Reader = Callable[[Path], bytes]

SCORECARD_FIELDS = [
    "name",
    "path",
    "size_bytes",
    "scalars",
    "valid",
    "invalid_runs",
    "repaired_size_bytes",
    "notes",
]


@dataclass
class AuditTarget:
    """A single file to audit."""

    name: str
    path: Path


class AuditRunner:
    """Scan a batch of files and write result artifacts."""

    def __init__(
        self,
        artifacts_path: Path,
        scanner: Optional[Utf8Scanner] = None,
        replacement: bytes = b"?",
        reader: Optional[Reader] = None,
        log: Optional[ScanLog] = None,
        max_report: int = 12,
    ) -> None:
        self.artifacts_path = artifacts_path
        self.scanner = scanner or Utf8Scanner()
        self.replacement = replacement
        self.reader = reader or self._default_reader
        self.log = log
        self.max_report = max_report
        self.artifacts_path.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _default_reader(path: Path) -> bytes:
        if not path.exists():
            raise FileNotFoundError(f"Audit target not found: {path}")
        return path.read_bytes()

    def run(self, targets: Iterable[AuditTarget], notes: Optional[str] = None) -> Dict[str, object]:
        """Audit each target and write artifacts.

        Returns the aggregated result payload.
        """
        aggregated: Dict[str, object] = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "stop_at_nul": self.scanner.stop_at_nul,
            "notes": notes or "",
            "files": [],
        }

        for target in targets:
            payload = self._audit_one(target)
            aggregated["files"].append(payload)

        files: List[Dict[str, object]] = aggregated["files"]
        aggregated["totals"] = {
            "files": len(files),
            "valid": sum(1 for entry in files if entry["valid"]),
            "invalid": sum(1 for entry in files if not entry["valid"]),
        }

        self._write_artifacts(aggregated)
        return aggregated

    def _audit_one(self, target: AuditTarget) -> Dict[str, object]:
        data = self.reader(target.path)
        runs = list(self.scanner.iter_invalid(data))
        if self.log is not None:
            self.log.log(target.name, "audit", runs)
        end = self.scanner.logical_end(data)
        consumed = sum(min(run.end, end) - run.offset for run in runs)
        return {
            "name": target.name,
            "path": str(target.path),
            "size_bytes": len(data),
            "valid": not runs,
            "scalars": count_scalars(data, self.scanner),
            "invalid_runs": len(runs),
            "sample": [[run.offset, run.length] for run in runs[: self.max_report]],
            "repaired_size_bytes": len(data) - consumed + len(runs) * len(self.replacement),
        }

    def _write_artifacts(self, aggregated: Dict[str, object]) -> None:
        summary_path = self.artifacts_path / "audit_results.json"
        with summary_path.open("w", encoding="utf-8") as handle:
            json.dump(aggregated, handle, indent=2)

        markdown_path = self.artifacts_path / "audit_results.md"
        with markdown_path.open("w", encoding="utf-8") as handle:
            handle.write("# UTF-8 Audit Results\n\n")
            handle.write(f"Generated: {aggregated['generated_at']}\n\n")
            for entry in aggregated.get("files", []):
                handle.write(f"## {entry['name']}\n\n")
                handle.write(f"Valid: {entry['valid']}\n\n")
                for key in ("size_bytes", "scalars", "invalid_runs", "repaired_size_bytes"):
                    handle.write(f"- {key}: {entry[key]}\n")
                if entry["sample"]:
                    spans = ", ".join(f"{offset}+{length}" for offset, length in entry["sample"])
                    handle.write(f"- first runs: {spans}\n")
                handle.write("\n")

        scorecard_path = self.artifacts_path / "audit_scorecard.csv"
        with scorecard_path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=SCORECARD_FIELDS)
            writer.writeheader()
            for entry in aggregated["files"]:
                writer.writerow(self._scorecard_row(entry, aggregated.get("notes", "")))

    @staticmethod
    def _scorecard_row(entry: Dict[str, object], notes: str) -> Dict[str, object]:
        return {
            "name": entry.get("name", ""),
            "path": entry.get("path", ""),
            "size_bytes": entry.get("size_bytes", 0),
            "scalars": entry.get("scalars", 0),
            "valid": 1 if entry.get("valid") else 0,
            "invalid_runs": entry.get("invalid_runs", 0),
            "repaired_size_bytes": entry.get("repaired_size_bytes", 0),
            "notes": notes or "",
        }
