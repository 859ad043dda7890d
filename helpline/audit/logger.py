"""Audit logger: append-only JSON Lines record of relay outcomes."""

from __future__ import annotations

import fcntl
from pathlib import Path

from helpline.models import AuditEvent


class AuditLogger:
    """Appends one JSON object per line; concurrent writers are serialized by a lock file.

    Only outcomes are recorded. Alert text and audio never reach the file.
    """

    def __init__(self, log_path: str) -> None:
        self.log_path = Path(log_path)

    def log(self, event: AuditEvent) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        line = event.model_dump_json(exclude_none=True)

        lock_file = self.log_path.parent / f".{self.log_path.name}.lock"
        with open(lock_file, "w") as lf:
            fcntl.flock(lf, fcntl.LOCK_EX)
            try:
                with open(self.log_path, "a") as f:
                    f.write(line + "\n")
            finally:
                fcntl.flock(lf, fcntl.LOCK_UN)

    def read_events(self) -> list[AuditEvent]:
        if not self.log_path.exists():
            return []
        return [
            AuditEvent.model_validate_json(line)
            for line in self.log_path.read_text().splitlines()
            if line.strip()
        ]
