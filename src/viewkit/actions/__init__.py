"""Action execution, change tracking and auto-save."""

from .autosave import AutoSaver
from .executor import ActionExecutor, ActionResult, ActionRunner
from .tracker import (
    EMPTY_SUMMARY,
    ChangeTracker,
    ChangeTrackerFullError,
    PendingChange,
    SaveStatus,
)

__all__ = [
    "ActionExecutor",
    "ActionResult",
    "ActionRunner",
    "AutoSaver",
    "ChangeTracker",
    "ChangeTrackerFullError",
    "EMPTY_SUMMARY",
    "PendingChange",
    "SaveStatus",
]
