"""
Action Execution Protocol.

One entry point for every interactive widget. With direct tool calls the
action is sent to the host at once; without them, or when the direct call
fails, the action is recorded in the change tracker and narrated to the
supervising agent. Narration is best effort and never affects the result.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Protocol

from ..core.config import Settings
from ..core.logging_config import get_logger
from ..core.validate import ActionRequest
from ..host.capabilities import HostCapabilities
from ..host.protocol import Host
from ..monitoring.metrics import MetricsCollector, metrics_collector
from .tracker import ChangeTracker, ChangeTrackerFullError

logger = get_logger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of one execute_action call.

    ``success`` with ``queued`` means the intent was recorded but not yet
    applied remotely. ``success=False, queued=False`` is a hard failure and
    the only case in which callers roll back optimistic state.
    """

    success: bool
    queued: bool = False
    error: str | None = None
    result: Any = None

    @property
    def hard_failure(self) -> bool:
        return not self.success and not self.queued

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success, "queued": self.queued}
        if self.error is not None:
            data["error"] = self.error
        if self.result is not None:
            data["result"] = self.result
        return data


class ActionRunner(Protocol):
    """Anything widgets can hand actions to."""

    async def execute_action(self, action: ActionRequest) -> ActionResult: ...


class ActionExecutor:
    """Runs actions for one render session."""

    def __init__(
        self,
        host: Host | None,
        capabilities: HostCapabilities,
        tracker: ChangeTracker,
        settings: Settings,
        metrics: MetricsCollector = metrics_collector,
    ) -> None:
        self.host = host
        self.capabilities = capabilities
        self.tracker = tracker
        self.tool_call_timeout = settings.tool_call_timeout
        self.context_update_timeout = settings.context_update_timeout
        self.metrics = metrics

    async def execute_action(self, action: ActionRequest) -> ActionResult:
        """
        Execute a user action.

        Args:
            action: Tool name, flat arguments and a human-readable description

        Returns:
            ActionResult driving the caller's keep/revert decision
        """
        start = time.time()

        if self.capabilities.can_call_tools and self.host is not None:
            try:
                result = await asyncio.wait_for(
                    self.host.call_tool(action.type, dict(action.args)),
                    timeout=self.tool_call_timeout,
                )
            except Exception as e:
                error = str(e) or type(e).__name__
                logger.warning("direct_call_failed", action=action.type, error=error)
                outcome = self._record(action, f"User action queued (tool call failed): {action.description}")
                if outcome is not None:
                    self._observe("direct", "hard_failure", start)
                    return ActionResult(success=False, queued=False, error=f"{error}; {outcome}")
                await self._narrate(f"User action queued (tool call failed): {action.description}")
                self._observe("direct", "queued", start)
                return ActionResult(success=False, queued=True, error=error)

            logger.info("direct_call_succeeded", action=action.type)
            self._observe("direct", "success", start)
            return ActionResult(success=True, result=result)

        outcome = self._record(action, f"User action: {action.description}")
        if outcome is not None:
            self._observe("tracked", "hard_failure", start)
            return ActionResult(success=False, queued=False, error=outcome)
        await self._narrate(f"User action: {action.description}")
        self._observe("tracked", "queued", start)
        return ActionResult(success=True, queued=True)

    def _record(self, action: ActionRequest, narration: str) -> str | None:
        """Track the action; returns an error message if it could not be recorded."""
        try:
            self.tracker.track_change(action.type, dict(action.args), action.description)
        except ChangeTrackerFullError as e:
            self.metrics.record_error("ChangeTrackerFullError", "executor")
            return str(e)
        finally:
            self.metrics.set_pending_changes(len(self.tracker))
        logger.info("action_queued", action=action.type, narration=narration)
        return None

    async def _narrate(self, text: str) -> None:
        if self.host is None or not self.capabilities.can_update_context:
            return
        try:
            await asyncio.wait_for(self.host.update_model_context(text), timeout=self.context_update_timeout)
        except Exception as e:
            logger.warning("narration_failed", error=str(e) or type(e).__name__)

    def _observe(self, path: str, outcome: str, start: float) -> None:
        self.metrics.record_action(path, outcome, time.time() - start)
