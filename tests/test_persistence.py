import pytest

from wiretree import UnknownStateError, WidgetTreeError
from wiretree.runtime.persistence import restore_tree, snapshot_tree

from cage_widgets import MouseWidget, build_cage, cage_context


def test_durable_and_volatile_fields_are_declared():
    assert set(MouseWidget.DURABLE_FIELDS) == {
        "id",
        "start_state",
        "current_state",
        "visible",
        "version",
    }
    assert {"parent", "children", "options"} <= set(MouseWidget.VOLATILE_FIELDS)


def test_snapshot_contains_only_durable_fields():
    cage = build_cage()
    with cage_context():
        cage.invoke()
    snapshot = snapshot_tree(cage)
    assert list(snapshot) == ["cage", "mouse", "food"]
    assert snapshot["mouse"] == {
        "id": "mouse",
        "start_state": "idle",
        "current_state": "idle",
        "visible": True,
        "version": 0,
    }
    assert snapshot["food"]["visible"] is False
    for data in snapshot.values():
        assert set(data) == set(MouseWidget.DURABLE_FIELDS)


def test_restored_tree_continues_where_it_left_off():
    cage = build_cage()
    with cage_context():
        cage.invoke()
    mouse = cage.find_widget("mouse")
    mouse.version = 3
    snapshot = snapshot_tree(cage)

    fresh = build_cage()
    assert restore_tree(fresh, snapshot) == ["cage", "mouse", "food"]
    restored_mouse = fresh.find_widget("mouse")
    assert restored_mouse.current_state == "idle"
    assert restored_mouse.version == 3

    with cage_context():
        fresh.invoke()
    assert restored_mouse.current_state == "eating"


def test_restore_skips_widgets_not_in_both():
    cage = build_cage()
    snapshot = {"mouse": {"current_state": "bored"}, "cat": {"current_state": "x"}}
    assert restore_tree(cage, snapshot) == ["mouse"]
    assert cage.find_widget("mouse").current_state == "bored"


def test_restore_rejects_unknown_state_and_wrong_id():
    mouse = MouseWidget("mouse", "idle")
    with pytest.raises(UnknownStateError):
        mouse.restore_state({"current_state": "sleeping"})
    with pytest.raises(WidgetTreeError):
        mouse.restore_state({"id": "rat"})


def test_sequence_start_state_round_trips():
    mouse = MouseWidget("mouse", ("idle", "eating"))
    data = mouse.durable_state()
    assert data["start_state"] == ["idle", "eating"]
    other = MouseWidget("mouse", "idle")
    other.restore_state(data)
    assert other.start_state == ("idle", "eating")
