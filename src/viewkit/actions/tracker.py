"""
Change Tracker.

Ordered log of user-intended mutations awaiting confirmation. Append-only
with no dedup: repeating an action records it again.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence

from ..core.id import ChangeID, new_change_id
from ..core.logging_config import get_logger

logger = get_logger(__name__)

EMPTY_SUMMARY = "No pending changes"


class ChangeTrackerFullError(Exception):
    """Tracker reached its capacity."""

    pass


class SaveStatus(str, Enum):
    """Save lifecycle: idle -> saving -> saved | error."""

    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


@dataclass(frozen=True)
class PendingChange:
    """A recorded user action."""

    id: ChangeID
    type: str
    args: dict[str, Any]
    timestamp: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "args": self.args,
            "timestamp": self.timestamp,
            "description": self.description,
        }


def summarize_changes(changes: Sequence[PendingChange]) -> str:
    if not changes:
        return EMPTY_SUMMARY
    n = len(changes)
    lines = [f"{n} change{'' if n == 1 else 's'}:"]
    lines.extend(f"- {c.description}" for c in changes)
    return "\n".join(lines)


@dataclass
class ChangeTracker:
    """Pending changes for one render session."""

    max_changes: int = 500
    _changes: list[PendingChange] = field(default_factory=list)
    _save_status: SaveStatus = SaveStatus.IDLE
    _last_save_error: str | None = None

    def track_change(self, type: str, args: dict[str, Any], description: str) -> PendingChange:
        """
        Append a change.

        Resets the save status to idle, since there is now unsaved work.

        Raises:
            ChangeTrackerFullError: If the tracker is at capacity
        """
        if len(self._changes) >= self.max_changes:
            logger.error("change_tracker_full", max_changes=self.max_changes, type=type)
            raise ChangeTrackerFullError(f"Change tracker full ({self.max_changes} pending changes)")

        change = PendingChange(
            id=new_change_id(),
            type=type,
            args=dict(args),
            timestamp=time.time(),
            description=description,
        )
        self._changes.append(change)
        self._save_status = SaveStatus.IDLE
        self._last_save_error = None

        logger.info("change_tracked", change_id=change.id, type=type, pending=len(self._changes))
        return change

    def get_changes_summary(self) -> str:
        """Human-readable summary of pending changes in insertion order."""
        return summarize_changes(self._changes)

    def clear_changes(self) -> None:
        """Drop all pending changes (explicit confirmation or teardown)."""
        cleared = len(self._changes)
        self._changes.clear()
        logger.info("changes_cleared", cleared=cleared)

    def discard_changes(self, changes: Iterable[PendingChange]) -> int:
        """
        Drop the given changes, keeping any recorded after them.

        Returns:
            Number of changes removed
        """
        ids = {c.id for c in changes}
        before = len(self._changes)
        self._changes = [c for c in self._changes if c.id not in ids]
        removed = before - len(self._changes)
        logger.info("changes_discarded", discarded=removed, pending=len(self._changes))
        return removed

    def set_save_status(self, status: SaveStatus, error: str | None = None) -> None:
        """Transition the save status; saved clears any recorded error."""
        self._save_status = SaveStatus(status)
        if self._save_status == SaveStatus.SAVED:
            self._last_save_error = None
        elif error is not None:
            self._last_save_error = error

    @property
    def changes(self) -> tuple[PendingChange, ...]:
        return tuple(self._changes)

    @property
    def has_changes(self) -> bool:
        return bool(self._changes)

    @property
    def save_status(self) -> SaveStatus:
        return self._save_status

    @property
    def last_save_error(self) -> str | None:
        return self._last_save_error

    def __len__(self) -> int:
        return len(self._changes)
