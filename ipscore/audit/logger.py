"""
Audit Logger — one JSON line per IP analysis.

Each line holds the UTC timestamp plus the run's AuditEntry: run id, analysed
IP, final score, how many risk factors and flagged threat sources produced it,
the proxy type, whether the gather phase timed out, how many gatherers fell
back to defaults, and the run duration. /score requests are not recorded.
"""

from __future__ import annotations

import json
import logging
import time
from collections import deque
from pathlib import Path

from ipscore.config import settings
from ipscore.models.analysis_models import AuditEntry

logger = logging.getLogger("ipscore.audit")


class AuditLogger:
    """Append-only analysis trail. Disabled loggers drop every entry."""

    def __init__(self, log_path: str | None = None, enabled: bool | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)
        self.enabled = settings.audit_enabled if enabled is None else enabled

    def log(self, entry: AuditEntry) -> None:
        if not self.enabled:
            return

        line = json.dumps({
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            **entry.model_dump(),
        })
        try:
            with self.log_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            # A lost audit line must not fail the analysis response
            logger.error(f"[{entry.run_id}] Failed to write audit log: {e}")

    def read_recent(self, count: int = 50) -> list[dict]:
        """Last `count` readable entries, oldest first. Corrupt lines are skipped."""
        if count <= 0 or not self.log_path.exists():
            return []

        recent: deque[dict] = deque(maxlen=count)
        try:
            with self.log_path.open(encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        recent.append(json.loads(line))
                    except json.JSONDecodeError:
                        logger.debug(f"Skipping corrupt audit line in {self.log_path}")
        except OSError as e:
            logger.error(f"Failed to read audit log: {e}")
            return []

        return list(recent)
