"""Inline editor and action button widgets."""

from typing import Any

from ..actions.executor import ActionResult
from ..catalog.components import ComponentType
from ..core.logging_config import get_logger
from ..core.validate import MAX_DESCRIPTION_LENGTH, ActionRequest
from .base import Widget

logger = get_logger(__name__)


def _tool(props: dict[str, Any], name: str) -> str | None:
    value = props.get(name)
    return value if isinstance(value, str) and value else None


def _args(props: dict[str, Any], name: str) -> dict[str, Any]:
    value = props.get(name)
    return dict(value) if isinstance(value, dict) else {}


class EditableField(Widget):
    """Click-to-edit value, saved optimistically."""

    kind = ComponentType.EDITABLE_FIELD

    def reset(self, props: dict[str, Any]) -> None:
        value = props.get("value")
        self.value: str = "" if value is None else str(value)
        label = props.get("label")
        self.label: str = label if isinstance(label, str) and label else "field"
        self.save_tool = _tool(props, "saveTool")
        self.save_args = _args(props, "saveArgs")

    async def save(self, new_value: str) -> ActionResult | None:
        """
        Show the new value at once, then persist it.

        Returns:
            The save action's result, or None when nothing was executed
        """
        old_value = self.value
        if new_value == old_value:
            return None

        self.value = new_value
        if not self.save_tool:
            return None

        revision = self.revision
        result = await self.executor.execute_action(
            ActionRequest(
                type=self.save_tool,
                args={**self.save_args, "value": new_value},
                description=f'Update {self.label}: "{old_value}" → "{new_value}"'[:MAX_DESCRIPTION_LENGTH],
            )
        )
        if result.hard_failure and self.revision == revision:
            logger.error("field_save_failed", field=self.key, error=result.error)
            self.value = old_value
        return result


class ActionButton(Widget):
    """Button bound to a tool."""

    kind = ComponentType.ACTION_BUTTON

    def reset(self, props: dict[str, Any]) -> None:
        label = props.get("label")
        self.label: str = label if isinstance(label, str) else ""
        self.tool_name = _tool(props, "toolName")
        self.tool_args = _args(props, "toolArgs")
        self.disabled = props.get("disabled") is True

    async def click(self) -> ActionResult | None:
        if self.disabled or not self.tool_name:
            return None
        return await self.executor.execute_action(
            ActionRequest(
                type=self.tool_name,
                args=dict(self.tool_args),
                description=f"{self.label or self.tool_name}"[:MAX_DESCRIPTION_LENGTH],
            )
        )
