"""Change tracker tests."""

import pytest

from viewkit.actions import EMPTY_SUMMARY, ChangeTracker, ChangeTrackerFullError, SaveStatus


@pytest.mark.unit
class TestSummary:
    """Summary text and ordering."""

    def test_empty_summary(self):
        assert ChangeTracker().get_changes_summary() == "No pending changes"
        assert EMPTY_SUMMARY == "No pending changes"

    def test_summary_keeps_insertion_order(self):
        tracker = ChangeTracker()
        tracker.track_change("move", {"card": "alice"}, "Move Alice to Won")
        tracker.track_change("move", {"card": "bob"}, "Move Bob to Lost")

        summary = tracker.get_changes_summary()

        assert summary == "2 changes:\n- Move Alice to Won\n- Move Bob to Lost"
        assert summary.count("Move Alice to Won") == 1
        assert summary.count("Move Bob to Lost") == 1

    def test_singular_summary(self):
        tracker = ChangeTracker()
        tracker.track_change("rename", {}, "Rename deal")

        assert tracker.get_changes_summary() == "1 change:\n- Rename deal"

    def test_repeats_are_not_deduplicated(self):
        tracker = ChangeTracker()
        for _ in range(3):
            tracker.track_change("move", {"card": "alice"}, "Move Alice to Won")

        assert len(tracker) == 3
        assert len({c.id for c in tracker.changes}) == 3


@pytest.mark.unit
class TestLifecycle:
    """Clear, status and capacity."""

    def test_change_fields(self):
        tracker = ChangeTracker()
        args = {"card": "alice"}
        change = tracker.track_change("move", args, "Move Alice")
        args["card"] = "mutated"

        assert change.id.startswith("chg_")
        assert change.type == "move"
        assert change.args == {"card": "alice"}
        assert change.timestamp > 0
        assert tracker.changes == (change,)

    def test_clear(self):
        tracker = ChangeTracker()
        tracker.track_change("move", {}, "Move")
        tracker.clear_changes()

        assert not tracker.has_changes
        assert tracker.get_changes_summary() == EMPTY_SUMMARY

    def test_discard_keeps_later_changes(self):
        tracker = ChangeTracker()
        first = tracker.track_change("move", {}, "Move Alice to Won")
        tracker.track_change("move", {}, "Move Bob to Lost")

        assert tracker.discard_changes([first]) == 1
        assert tracker.discard_changes([first]) == 0
        assert tracker.get_changes_summary() == "1 change:\n- Move Bob to Lost"

    def test_save_status_transitions(self):
        tracker = ChangeTracker()
        assert tracker.save_status == SaveStatus.IDLE

        tracker.set_save_status(SaveStatus.SAVING)
        tracker.set_save_status(SaveStatus.ERROR, "host offline")
        assert tracker.save_status == SaveStatus.ERROR
        assert tracker.last_save_error == "host offline"

        tracker.set_save_status(SaveStatus.SAVED)
        assert tracker.last_save_error is None

    def test_new_change_resets_status(self):
        tracker = ChangeTracker()
        tracker.set_save_status(SaveStatus.ERROR, "boom")
        tracker.track_change("move", {}, "Move")

        assert tracker.save_status == SaveStatus.IDLE
        assert tracker.last_save_error is None

    def test_capacity(self):
        tracker = ChangeTracker(max_changes=2)
        tracker.track_change("a", {}, "A")
        tracker.track_change("b", {}, "B")

        with pytest.raises(ChangeTrackerFullError):
            tracker.track_change("c", {}, "C")
        assert len(tracker) == 2
