"""Debounced auto-save of pending changes through the operator channel."""

import asyncio

from ..core.logging_config import get_logger
from ..host.capabilities import HostCapabilities
from ..host.protocol import Host
from .tracker import ChangeTracker, SaveStatus, summarize_changes

logger = get_logger(__name__)


class AutoSaver:
    """
    Asks the operator to save pending changes after a quiet period.

    Only active when direct tool calls are unavailable and the host can
    relay a message. Each ``schedule()`` restarts the debounce timer. A save
    request already on its way to the host is never cancelled: changes that
    arrive meanwhile are saved by a follow-up request once it completes.
    """

    def __init__(
        self,
        host: Host,
        capabilities: HostCapabilities,
        tracker: ChangeTracker,
        debounce: float = 3.0,
    ) -> None:
        self.host = host
        self.capabilities = capabilities
        self.tracker = tracker
        self.debounce = debounce
        self._task: asyncio.Task | None = None
        self._flushing = False
        self._rerun = False

    @property
    def enabled(self) -> bool:
        return not self.capabilities.can_call_tools and self.capabilities.can_send_message

    @property
    def pending(self) -> bool:
        return self._rerun or (self._task is not None and not self._task.done())

    @property
    def flushing(self) -> bool:
        return self._flushing

    def schedule(self) -> None:
        """(Re)start the debounce timer if there is anything to save."""
        if not self.enabled or not self.tracker.has_changes:
            return
        if self._flushing:
            self._rerun = True
            return
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> None:
        """Stop the debounce timer; an in-flight save request runs to completion."""
        self._rerun = False
        if self._flushing:
            return
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        await asyncio.sleep(self.debounce)
        await self.flush()

    async def flush(self) -> bool:
        """
        Send the save request now.

        Only the changes named in the request are dropped afterwards; any
        tracked while it was in flight stay pending.

        Returns:
            True if changes were handed to the operator
        """
        if not self.enabled or not self.tracker.has_changes or self._flushing:
            return False

        self._flushing = True
        try:
            sent = self.tracker.changes
            self.tracker.set_save_status(SaveStatus.SAVING)
            try:
                await self.host.send_message(f"Please save these changes:\n{summarize_changes(sent)}")
            except Exception as e:
                error = str(e) or type(e).__name__
                logger.warning("auto_save_failed", error=error)
                self.tracker.set_save_status(SaveStatus.ERROR, error)
                return False

            self.tracker.discard_changes(sent)
            if self.tracker.has_changes:
                self.tracker.set_save_status(SaveStatus.IDLE)
            else:
                self.tracker.set_save_status(SaveStatus.SAVED)
            logger.info("auto_save_sent", sent=len(sent), pending=len(self.tracker))
            return True
        finally:
            self._flushing = False
            if self._rerun:
                self._rerun = False
                self._task = None
                self.schedule()
