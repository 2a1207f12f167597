"""Render session tests."""

import asyncio

import pytest

from viewkit.core.config import Settings
from viewkit.core.validate import ActionRequest
from viewkit.host import DISCONNECTED
from viewkit.session import RenderSession, SessionNotFoundError, SessionRegistry
from viewkit.widgets import KanbanBoard


@pytest.mark.unit
class TestConnect:
    """Capabilities are detected once on connection."""

    @pytest.mark.asyncio
    async def test_direct_host(self, host, settings, metrics):
        session = await RenderSession.connect(host, settings, metrics)

        assert session.capabilities.can_call_tools
        host.get_host_capabilities.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_host(self, settings, metrics):
        session = await RenderSession.connect(None, settings, metrics)

        assert session.capabilities.to_dict() == {
            "canCallTools": False,
            "canUpdateContext": False,
            "canSendMessage": False,
        }
        assert session.autosaver is None

    @pytest.mark.asyncio
    async def test_query_failure_falls_back_to_tracking(self, host, settings, metrics):
        host.get_host_capabilities.side_effect = RuntimeError("timeout")

        session = await RenderSession.connect(host, settings, metrics)

        assert not session.capabilities.can_call_tools
        assert session.capabilities.can_send_message


@pytest.mark.unit
class TestMount:
    """Widgets follow the mounted tree."""

    def test_creates_widgets_for_interactive_nodes(self, host, settings, metrics, dashboard_tree):
        session = RenderSession(host, DISCONNECTED, settings, metrics)

        output = session.mount(dashboard_tree)

        assert output.ok
        assert set(session.widgets) == {"board"}
        assert isinstance(session.widget("board"), KanbanBoard)

    @pytest.mark.asyncio
    async def test_remount_of_same_tree_keeps_local_state(self, fallback_host, settings, metrics, dashboard_tree, tree_factory):
        session = await RenderSession.connect(fallback_host, settings, metrics)
        session.mount(dashboard_tree)
        board = session.widget("board")
        board.start_drag("alice", "open")
        await board.drop("won")

        again = tree_factory("page", {k: n.model_dump() for k, n in dashboard_tree.elements.items()})
        session.mount(again)

        assert session.widget("board") is board
        assert board.card_ids("won") == ["alice"]

    @pytest.mark.asyncio
    async def test_changed_props_rebuild_widget(self, fallback_host, settings, metrics, dashboard_tree, tree_factory):
        session = await RenderSession.connect(fallback_host, settings, metrics)
        session.mount(dashboard_tree)
        board = session.widget("board")
        board.start_drag("alice", "open")
        await board.drop("won")

        elements = {k: n.model_dump() for k, n in dashboard_tree.elements.items()}
        elements["board"]["props"]["columns"][0]["title"] = "Qualified"
        session.mount(tree_factory("page", elements))

        assert session.widget("board") is board
        assert board.card_ids("open") == ["alice"]
        assert board.column("open")["title"] == "Qualified"

    def test_removed_node_drops_widget(self, fallback_host, settings, metrics, dashboard_tree, tree_factory):
        session = RenderSession(fallback_host, DISCONNECTED, settings, metrics)
        session.mount(dashboard_tree)

        session.mount(tree_factory("page", {"page": {"type": "PageHeader", "props": {"title": "Empty"}}}))

        assert session.widgets == {}


@pytest.mark.unit
class TestActions:
    """Session-level action handling."""

    @pytest.mark.asyncio
    async def test_queued_action_arms_auto_save(self, fallback_host, metrics):
        settings = Settings(auto_save_debounce=0.01)
        session = await RenderSession.connect(fallback_host, settings, metrics)

        result = await session.execute_action(
            ActionRequest(type="update_opportunity", args={"id": "alice"}, description="Move Alice to Won")
        )
        assert result.queued
        await asyncio.sleep(0.1)

        fallback_host.send_message.assert_awaited_once_with(
            "Please save these changes:\n1 change:\n- Move Alice to Won"
        )
        assert session.changes()["saveStatus"] == "saved"

    @pytest.mark.asyncio
    async def test_changes_and_confirm(self, fallback_host, metrics):
        session = await RenderSession.connect(fallback_host, Settings(auto_save_debounce=60), metrics)
        await session.execute_action(ActionRequest(type="t", args={}, description="Rename deal"))

        changes = session.changes()
        assert changes["summary"] == "1 change:\n- Rename deal"
        assert changes["changes"][0]["description"] == "Rename deal"
        assert changes["saveStatus"] == "idle"

        session.confirm_changes()

        assert session.changes()["summary"] == "No pending changes"
        assert not session.autosaver.pending


@pytest.mark.unit
class TestRegistry:
    """Open, look up and close sessions."""

    @pytest.mark.asyncio
    async def test_lifecycle(self, host, settings, metrics):
        registry = SessionRegistry(host, settings, metrics)

        session = await registry.open()
        assert registry.get(session.id) is session
        assert len(registry) == 1

        registry.close(session.id)
        with pytest.raises(SessionNotFoundError):
            registry.get(session.id)

    @pytest.mark.asyncio
    async def test_declared_features_skip_the_query(self, host, settings, metrics):
        registry = SessionRegistry(host, settings, metrics)

        session = await registry.open({})

        assert not session.capabilities.can_call_tools
        host.get_host_capabilities.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_all(self, host, settings, metrics):
        registry = SessionRegistry(host, settings, metrics)
        await registry.open()
        await registry.open()

        registry.close_all()

        assert len(registry) == 0
