"""Append-only ledger of past analysis runs."""

import json
import logging
import os
import tempfile
from pathlib import Path

from reposentry.health.models import CategoryDelta, HistoryComparison, RunHistoryEntry

logger = logging.getLogger(__name__)

HISTORY_FILE = "history.json"


class HistoryLedger:
    """Persisted list of run summaries, newest entry last.

    The whole list is read and rewritten on every append. A corrupt or
    missing file is treated as an empty history so a run can always proceed.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> list[RunHistoryEntry]:
        """Read every entry from disk.

        Returns:
            Entries in run-completion order, or an empty list if the ledger
            is missing or unparsable
        """
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable history ledger {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring history ledger {self.path}: expected a JSON array")
            return []

        entries: list[RunHistoryEntry] = []
        for item in data:
            try:
                entries.append(RunHistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug(f"Skipping malformed history entry: {e}")
        return entries

    def append(self, entry: RunHistoryEntry) -> list[RunHistoryEntry]:
        """Append an entry and persist the full list.

        Args:
            entry: Summary of the run that just completed

        Returns:
            The ledger contents after the append
        """
        history = self.load()
        history.append(entry)
        self._write(history)
        logger.debug(f"History ledger now holds {len(history)} entries")
        return history

    def compare(self, index: int | None = None) -> HistoryComparison:
        """Compare an earlier run against the latest one.

        Args:
            index: 1-based run number to compare from (default: the run
                immediately before the latest)

        Returns:
            HistoryComparison between the chosen run and the latest

        Raises:
            ValueError: If there are fewer than two runs or the index is invalid
        """
        history = self.load()
        if len(history) < 2:
            raise ValueError("At least two analysis runs are needed to compare scores")

        latest = len(history)
        if index is None:
            index = latest - 1
        if not 1 <= index < latest:
            raise ValueError(f"Run #{index} is not an earlier run (choose 1-{latest - 1})")

        return compare_entries(history[index - 1], history[-1])

    def _write(self, history: list[RunHistoryEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([e.to_dict() for e in history], indent=2)

        # Replace atomically so an interrupted write never truncates earlier runs
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".history-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def compare_entries(older: RunHistoryEntry, newer: RunHistoryEntry) -> HistoryComparison:
    """Build a category-by-category comparison of two runs."""
    names: list[str] = []
    for result in (*older.categories, *newer.categories):
        if result.name not in names:
            names.append(result.name)

    deltas = [
        CategoryDelta(name=name, before=older.category(name), after=newer.category(name))
        for name in names
    ]
    return HistoryComparison(older=older, newer=newer, categories=deltas)
