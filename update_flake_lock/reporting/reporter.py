from __future__ import annotations

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TextIO

from update_flake_lock.core.ids import workflow_run_correlation_id


ACTION_NAME = "update-flake-lock"
EVENT_EXECUTION_FAILURE = "execution_failure"


def escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def event_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def append_event(path: Path, event: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    line = json.dumps(event, ensure_ascii=False, sort_keys=True) + "\n"
    with open(path, "a", encoding="utf-8") as f:
        f.write(line)
        f.flush()
        os.fsync(f.fileno())


class RunReporter:
    """
    Reports run progress to the GitHub Actions host.

    Messages are written as workflow commands (`::debug::`, `::error::`) on
    stdout. Telemetry events are kept in memory and, when `events_path` is
    set, appended to a JSONL file for later upload. A telemetry sink that
    cannot be written never prevents the run outcome from being reported.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        events_path: Path | None = None,
        correlation_id: str | None = None,
    ) -> None:
        self._out = out
        self.events_path = events_path
        self.correlation_id = correlation_id or workflow_run_correlation_id()
        self.events: list[dict[str, Any]] = []
        self.failed = False

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def _write(self, line: str) -> None:
        out = self._out if self._out is not None else sys.stdout
        out.write(line + "\n")
        out.flush()

    def log_debug(self, message: str) -> None:
        self._write(f"::debug::{escape_data(message)}")

    def log_info(self, message: str) -> None:
        self._write(message)

    def report_fatal(self, message: str) -> None:
        self.failed = True
        self._write(f"::error::{escape_data(message)}")

    def record_event(self, name: str, payload: dict[str, Any]) -> dict[str, Any]:
        event = {
            "event": name,
            "action": ACTION_NAME,
            "correlation_id": self.correlation_id,
            "timestamp": event_timestamp(),
            "payload": dict(payload),
        }
        self.events.append(event)
        self.log_debug(f"event {name}: {json.dumps(event['payload'], sort_keys=True)}")
        if self.events_path is not None:
            try:
                append_event(self.events_path, event)
            except OSError as e:
                self.log_debug(f"could not write event {name} to {self.events_path}: {e}")
        return event
