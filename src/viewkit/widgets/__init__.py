"""Live interactive widgets."""

from typing import Any

from ..actions.executor import ActionRunner
from ..catalog.components import ComponentType
from .base import Widget
from .fields import ActionButton, EditableField
from .kanban import DragPhase, DragState, KanbanBoard

WIDGET_TYPES: dict[ComponentType, type[Widget]] = {
    KanbanBoard.kind: KanbanBoard,
    EditableField.kind: EditableField,
    ActionButton.kind: ActionButton,
}


def create_widget(
    kind: ComponentType, key: str, props: dict[str, Any], executor: ActionRunner
) -> Widget | None:
    """Instantiate the live widget for a component type, if it has one."""
    widget_cls = WIDGET_TYPES.get(kind)
    if widget_cls is None:
        return None
    return widget_cls(key, props, executor)


__all__ = [
    "ActionButton",
    "DragPhase",
    "DragState",
    "EditableField",
    "KanbanBoard",
    "WIDGET_TYPES",
    "Widget",
    "create_widget",
]
