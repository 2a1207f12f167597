"""Debounced auto-save tests."""

import asyncio

import pytest

from viewkit.actions import AutoSaver, ChangeTracker, SaveStatus
from viewkit.host import HostCapabilities

FALLBACK = HostCapabilities(can_update_context=True, can_send_message=True)


def tracker_with(*descriptions):
    tracker = ChangeTracker()
    for d in descriptions:
        tracker.track_change("update_opportunity", {}, d)
    return tracker


@pytest.mark.unit
class TestFlush:
    """Sending the save request."""

    @pytest.mark.asyncio
    async def test_flush_sends_summary_and_clears(self, fallback_host):
        tracker = tracker_with("Move Alice to Won", "Move Bob to Lost")
        saver = AutoSaver(fallback_host, FALLBACK, tracker, debounce=0)

        assert await saver.flush() is True

        fallback_host.send_message.assert_awaited_once_with(
            "Please save these changes:\n2 changes:\n- Move Alice to Won\n- Move Bob to Lost"
        )
        assert not tracker.has_changes
        assert tracker.save_status == SaveStatus.SAVED

    @pytest.mark.asyncio
    async def test_failed_send_keeps_changes(self, fallback_host):
        fallback_host.send_message.side_effect = RuntimeError("operator offline")
        tracker = tracker_with("Move Alice to Won")
        saver = AutoSaver(fallback_host, FALLBACK, tracker, debounce=0)

        assert await saver.flush() is False

        assert len(tracker) == 1
        assert tracker.save_status == SaveStatus.ERROR
        assert tracker.last_save_error == "operator offline"

    @pytest.mark.asyncio
    async def test_nothing_to_save(self, fallback_host):
        saver = AutoSaver(fallback_host, FALLBACK, ChangeTracker(), debounce=0)

        assert await saver.flush() is False
        fallback_host.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_with_direct_calls(self, host):
        caps = HostCapabilities(can_call_tools=True, can_update_context=True, can_send_message=True)
        saver = AutoSaver(host, caps, tracker_with("x"), debounce=0)

        assert not saver.enabled
        assert await saver.flush() is False


@pytest.mark.unit
class TestDebounce:
    """Timer restarts on every schedule."""

    @pytest.mark.asyncio
    async def test_schedule_flushes_once_after_quiet_period(self, fallback_host):
        tracker = tracker_with("a")
        saver = AutoSaver(fallback_host, FALLBACK, tracker, debounce=0.05)

        saver.schedule()
        tracker.track_change("t", {}, "b")
        saver.schedule()
        assert saver.pending

        await asyncio.sleep(0.2)

        fallback_host.send_message.assert_awaited_once_with("Please save these changes:\n2 changes:\n- a\n- b")
        assert not saver.pending

    @pytest.mark.asyncio
    async def test_change_during_send_is_saved_once(self, fallback_host):
        sent = []

        async def slow_send(text):
            sent.append(text)
            await asyncio.sleep(0.05)

        fallback_host.send_message.side_effect = slow_send
        tracker = tracker_with("Move Alice to Won")
        saver = AutoSaver(fallback_host, FALLBACK, tracker, debounce=0)

        saver.schedule()
        await asyncio.sleep(0.01)
        assert saver.flushing
        tracker.track_change("update_opportunity", {}, "Move Bob to Lost")
        saver.schedule()

        await asyncio.sleep(0.3)

        assert sent == [
            "Please save these changes:\n1 change:\n- Move Alice to Won",
            "Please save these changes:\n1 change:\n- Move Bob to Lost",
        ]
        assert not tracker.has_changes
        assert tracker.save_status == SaveStatus.SAVED
        assert not saver.pending

    @pytest.mark.asyncio
    async def test_cancel_does_not_abort_send_in_flight(self, fallback_host):
        async def slow_send(text):
            await asyncio.sleep(0.05)

        fallback_host.send_message.side_effect = slow_send
        tracker = tracker_with("Move Alice to Won")
        saver = AutoSaver(fallback_host, FALLBACK, tracker, debounce=0)

        saver.schedule()
        await asyncio.sleep(0.01)
        saver.cancel()
        await asyncio.sleep(0.1)

        fallback_host.send_message.assert_awaited_once()
        assert not tracker.has_changes
        assert tracker.save_status == SaveStatus.SAVED

    @pytest.mark.asyncio
    async def test_cancel(self, fallback_host):
        saver = AutoSaver(fallback_host, FALLBACK, tracker_with("a"), debounce=0.05)

        saver.schedule()
        saver.cancel()
        await asyncio.sleep(0.1)

        fallback_host.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_schedule_without_changes_is_a_no_op(self, fallback_host):
        saver = AutoSaver(fallback_host, FALLBACK, ChangeTracker(), debounce=0)

        saver.schedule()

        assert not saver.pending
