"""
Render Session.

One per host connection. Capabilities are detected once when the session
connects and then passed explicitly to the executor; the session owns the
change tracker and the live widgets of the mounted tree.
"""

from typing import Any

from .actions.autosave import AutoSaver
from .actions.executor import ActionExecutor, ActionResult
from .actions.tracker import ChangeTracker
from .core.config import Settings
from .core.id import SessionID, new_session_id
from .core.logging_config import LogContext, get_logger
from .core.validate import ActionRequest
from .host.capabilities import DISCONNECTED, HostCapabilities, detect_capabilities
from .host.protocol import Host
from .monitoring.metrics import MetricsCollector, metrics_collector
from .tree.merge import merge_trees
from .tree.models import UITree
from .tree.renderer import RenderedComponent, Renderer, RenderOutput
from .widgets import Widget, create_widget

logger = get_logger(__name__)


class RenderSession:
    """Capabilities, pending changes and mounted widgets for one host connection."""

    def __init__(
        self,
        host: Host | None,
        capabilities: HostCapabilities,
        settings: Settings,
        metrics: MetricsCollector = metrics_collector,
    ) -> None:
        self.id: SessionID = new_session_id()
        self.host = host
        self.capabilities = capabilities
        self.metrics = metrics
        self.tracker = ChangeTracker(max_changes=settings.max_tracked_changes)
        self.executor = ActionExecutor(host, capabilities, self.tracker, settings, metrics)
        self.autosaver = (
            AutoSaver(host, capabilities, self.tracker, settings.auto_save_debounce) if host is not None else None
        )
        self.renderer = Renderer(settings.render_max_depth, settings.render_max_nodes)
        self.tree: UITree | None = None
        self.widgets: dict[str, Widget] = {}

        logger.info("session_created", session_id=self.id, **capabilities.to_dict())

    @classmethod
    async def connect(
        cls,
        host: Host | None,
        settings: Settings,
        metrics: MetricsCollector = metrics_collector,
    ) -> "RenderSession":
        """Query the host once and open a session with the detected capabilities."""
        if host is None:
            return cls(None, DISCONNECTED, settings, metrics)

        try:
            features = await host.get_host_capabilities()
        except Exception as e:
            # Reachable enough to connect, not enough to prove direct calls
            logger.warning("capability_query_failed", error=str(e))
            features = {}
        return cls(host, detect_capabilities(features or {}), settings, metrics)

    def mount(self, tree: UITree) -> RenderOutput:
        """
        Render a tree and create or re-sync its live widgets.

        Widgets are matched by node key. A widget whose node is gone is
        dropped; a node whose type changed gets a fresh widget.
        """
        with LogContext(session_id=self.id):
            self.tree = merge_trees(self.tree, tree)
            output = self.renderer.render(self.tree)

            widgets: dict[str, Widget] = {}
            for node in output.walk():
                if not isinstance(node, RenderedComponent) or node.key in widgets:
                    continue
                props = self.tree.elements[node.key].props
                existing = self.widgets.get(node.key)
                if existing is not None and existing.kind == node.kind:
                    existing.sync(props)
                    widgets[node.key] = existing
                    continue
                widget = create_widget(node.kind, node.key, props, self)
                if widget is not None:
                    widgets[node.key] = widget

            self.widgets = widgets
            self.metrics.record_render("session", output.placeholders)
            logger.info("tree_mounted", nodes=self.tree.node_count, widgets=len(widgets))
            return output

    def widget(self, key: str) -> Widget | None:
        return self.widgets.get(key)

    async def execute_action(self, action: ActionRequest) -> ActionResult:
        """Run an action and arm auto-save if it was queued."""
        with LogContext(session_id=self.id):
            result = await self.executor.execute_action(action)
            if result.queued and self.autosaver is not None:
                self.autosaver.schedule()
            return result

    def changes(self) -> dict[str, Any]:
        return {
            "summary": self.tracker.get_changes_summary(),
            "changes": [c.to_dict() for c in self.tracker.changes],
            "saveStatus": self.tracker.save_status.value,
            "lastSaveError": self.tracker.last_save_error,
        }

    def confirm_changes(self) -> None:
        """The host or operator applied the pending changes."""
        if self.autosaver is not None:
            self.autosaver.cancel()
        self.tracker.clear_changes()
        self.metrics.set_pending_changes(0)

    def close(self) -> None:
        """Tear down: pending changes and widgets are discarded."""
        self.confirm_changes()
        self.widgets.clear()
        logger.info("session_closed", session_id=self.id)


class SessionNotFoundError(Exception):
    """No open session with that id."""

    pass


class SessionRegistry:
    """Open render sessions of this process."""

    def __init__(
        self,
        host: Host | None,
        settings: Settings,
        metrics: MetricsCollector = metrics_collector,
    ) -> None:
        self.host = host
        self.settings = settings
        self.metrics = metrics
        self._sessions: dict[str, RenderSession] = {}

    async def open(self, features: dict[str, Any] | None = None) -> RenderSession:
        """
        Open a session.

        Args:
            features: Features the host declared on connection; when omitted
                the host is queried
        """
        if features is not None:
            session = RenderSession(self.host, detect_capabilities(features), self.settings, self.metrics)
        else:
            session = await RenderSession.connect(self.host, self.settings, self.metrics)
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> RenderSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Unknown session: {session_id}")
        return session

    def close(self, session_id: str) -> None:
        self.get(session_id).close()
        del self._sessions[session_id]

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
