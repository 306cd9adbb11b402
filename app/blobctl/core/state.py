"""Journal of finished bulk runs.

This module provides the RunJournal class for persisting and querying
run records in a JSONL file format.
"""

import json
import logging
from pathlib import Path

from blobctl.core.paths import ensure_state_dir, get_state_dir
from blobctl.models.run import RunKind, RunRecord

logger = logging.getLogger(__name__)


class RunJournal:
    """Append-only journal of bulk runs in a JSONL file.

    Storage location: ~/.local/state/blobctl/runs.jsonl

    Each line is a complete JSON object representing a RunRecord, so a
    crash mid-write loses at most the line being written.

    Attributes:
        state_dir: Directory containing the journal file.
    """

    RUNS_FILENAME = "runs.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize RunJournal.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/blobctl
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def path(self) -> Path:
        """Path to the runs.jsonl file."""
        return self._state_dir / self.RUNS_FILENAME

    def record(self, entry: RunRecord) -> None:
        """Append a run record to the journal.

        Creates the file and parent directories if they don't exist.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        with self.path.open(mode="a", encoding="utf-8") as f:
            f.write(entry.to_json_line() + "\n")
            f.flush()

    def entries(self, limit: int | None = None, kind: RunKind | None = None) -> list[RunRecord]:
        """Read run records, newest first.

        Args:
            limit: Maximum number of entries to return. If None, returns all.
            kind: Only return runs of this kind.

        Returns:
            List of RunRecord, newest first. Empty if the journal doesn't exist.
        """
        if not self.path.exists():
            return []

        records: list[RunRecord] = []
        with self.path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(RunRecord.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt journal line %d: %s", line_num, str(e))

        records.reverse()
        if kind is not None:
            records = [r for r in records if r.kind == kind]
        if limit is not None:
            return records[:limit]
        return records

    def get(self, run_id: str) -> RunRecord | None:
        """Find a run by ID or unique ID prefix."""
        matches = [r for r in self.entries() if r.id.startswith(run_id)]
        if len(matches) == 1:
            return matches[0]
        return None
