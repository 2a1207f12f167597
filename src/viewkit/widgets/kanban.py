"""
KanbanBoard - drag-and-drop board with optimistic moves.

A drop moves the card locally before the move action runs. Only a hard
failure (not success, not queued) restores the snapshot taken when the drag
started; a queued move stays applied.
"""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..actions.executor import ActionResult
from ..catalog.components import ComponentType
from ..core.logging_config import get_logger
from ..core.validate import MAX_DESCRIPTION_LENGTH, ActionRequest
from .base import Widget

logger = get_logger(__name__)


class DragPhase(str, Enum):
    """Per-gesture state."""

    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class DragState:
    """The one active drag."""

    card_id: str
    from_column_id: str
    snapshot: tuple[dict[str, Any], ...]


def _copy_columns(columns: Any) -> list[dict[str, Any]]:
    if not isinstance(columns, list):
        return []
    result = []
    for col in columns:
        if not isinstance(col, dict):
            continue
        col = copy.deepcopy(col)
        cards = col.get("cards")
        col["cards"] = [c for c in cards if isinstance(c, dict)] if isinstance(cards, list) else []
        result.append(col)
    return result


class KanbanBoard(Widget):
    """Board of columns holding cards."""

    kind = ComponentType.KANBAN_BOARD

    def reset(self, props: dict[str, Any]) -> None:
        self.columns: list[dict[str, Any]] = _copy_columns(props.get("columns"))
        tool = props.get("moveTool")
        self.move_tool: str | None = tool if isinstance(tool, str) and tool else None
        args = props.get("moveArgs")
        self.move_args: dict[str, Any] = dict(args) if isinstance(args, dict) else {}
        self.drag: DragState | None = None
        self.phase = DragPhase.IDLE

    def column(self, column_id: str) -> dict[str, Any] | None:
        return next((c for c in self.columns if c.get("id") == column_id), None)

    def card_ids(self, column_id: str) -> list[str]:
        col = self.column(column_id)
        return [c.get("id") for c in col["cards"]] if col else []

    def start_drag(self, card_id: str, from_column_id: str) -> None:
        """Begin a drag; a drag already in progress is replaced."""
        self.drag = DragState(card_id, from_column_id, tuple(copy.deepcopy(self.columns)))
        self.phase = DragPhase.DRAGGING

    def end_drag(self) -> None:
        """Abandon the drag without dropping."""
        self.drag = None
        self.phase = DragPhase.IDLE

    async def drop(self, to_column_id: str) -> ActionResult | None:
        """
        Drop the dragged card onto a column.

        Returns:
            The move action's result, or None when nothing was executed
            (no drag, same column, unknown card or column, or no move tool)
        """
        drag = self.drag
        self.drag = None
        if drag is None:
            return None

        if drag.from_column_id == to_column_id:
            self.phase = DragPhase.IDLE
            return None

        source, target = self.column(drag.from_column_id), self.column(to_column_id)
        card = next((c for c in source["cards"] if c.get("id") == drag.card_id), None) if source else None
        if card is None or target is None:
            logger.warning(
                "kanban_drop_ignored",
                board=self.key,
                card_id=drag.card_id,
                from_column=drag.from_column_id,
                to_column=to_column_id,
            )
            self.phase = DragPhase.IDLE
            return None

        # Optimistic move
        source["cards"] = [c for c in source["cards"] if c.get("id") != drag.card_id]
        source["count"] = len(source["cards"])
        target["cards"] = target["cards"] + [card]
        target["count"] = len(target["cards"])
        self.phase = DragPhase.DROPPED

        if not self.move_tool:
            self.phase = DragPhase.COMMITTED
            return None

        revision = self.revision
        title = card.get("title") or drag.card_id
        from_name = source.get("title") or drag.from_column_id
        to_name = target.get("title") or to_column_id
        result = await self.executor.execute_action(
            ActionRequest(
                type=self.move_tool,
                args={
                    **self.move_args,
                    "cardId": drag.card_id,
                    "fromColumnId": drag.from_column_id,
                    "toColumnId": to_column_id,
                },
                description=f'Move "{title}" from {from_name} → {to_name}'[:MAX_DESCRIPTION_LENGTH],
            )
        )

        if self.revision != revision:
            # Columns were rebuilt from new props while the move ran
            logger.info(
                "kanban_move_outcome_superseded",
                board=self.key,
                card_id=drag.card_id,
                failed=result.hard_failure,
            )
        elif result.hard_failure:
            logger.error("kanban_move_failed", board=self.key, card_id=drag.card_id, error=result.error)
            self.columns = copy.deepcopy(list(drag.snapshot))
            self.phase = DragPhase.ROLLED_BACK
        else:
            self.phase = DragPhase.COMMITTED
        return result
