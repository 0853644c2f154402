"""
Run report for the MailCorpus pipeline.

The pipeline itself only logs failures as it goes; the report tallies how
many files became documents and which ones failed, and is stored as JSON
next to the generated corpus.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

REPORT_FILE = "ingest_report.json"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RunReport:
    """Outcome of one ingestion run."""

    processed: int = 0
    failed: int = 0
    failed_files: List[str] = field(default_factory=list)
    labels: Dict[str, int] = field(default_factory=dict)
    started_at: str = field(default_factory=_now)
    finished_at: Optional[str] = None

    @property
    def visited(self) -> int:
        return self.processed + self.failed

    def record_success(self, label: Optional[str]):
        self.processed += 1
        key = "<unlabeled>" if label is None else label
        self.labels[key] = self.labels.get(key, 0) + 1

    def record_failure(self, path: str):
        self.failed += 1
        self.failed_files.append(path)

    def finish(self):
        self.finished_at = _now()


def save_report(report: RunReport, output_dir: Path) -> Path:
    """Writes the report to `ingest_report.json` in output_dir."""
    path = Path(output_dir) / REPORT_FILE
    logger.debug(f"Saving run report to '{path}'")
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(report), f, indent=4)
        logger.info(f"Run report saved to '{path}'.")
    except IOError as e:
        logger.error(f"Error saving run report: {e}", exc_info=True)
    return path


def load_report(output_dir: Path) -> Optional[RunReport]:
    """Reads the report of the last run, or None if there is none."""
    path = Path(output_dir) / REPORT_FILE
    if not path.exists():
        logger.debug(f"No run report at '{path}'.")
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return RunReport(**json.load(f))
    except (json.JSONDecodeError, IOError, TypeError):
        logger.error(f"Error loading run report '{path}'.", exc_info=True)
        return None
