import gc
import logging

import pytest

from wiretree import WidgetTreeError, find

from cage_widgets import CageWidget, FoodWidget, MouseWidget, build_cage


def test_find_includes_root_and_descendants():
    cage = build_cage()
    assert find(cage, "cage") is cage
    mouse = find(cage, "mouse")
    assert isinstance(mouse, MouseWidget)
    assert find(cage, "food").visible is False
    assert find(cage, "nonexistent") is None


def test_find_is_depth_first_pre_order():
    cage = build_cage()
    mouse = cage.find_widget("mouse")
    mouse << MouseWidget("baby", "idle")
    cage << CageWidget("annex", "show")
    assert [w.id for w in cage.walk()] == ["cage", "mouse", "baby", "food", "annex"]
    assert find(mouse, "food") is None


def test_parent_root_and_path():
    cage = build_cage()
    mouse = cage.find_widget("mouse")
    baby = mouse.add_child(MouseWidget("baby", "idle"))
    assert baby.parent is mouse
    assert baby.root is cage
    assert baby.path == ["cage", "mouse", "baby"]
    assert cage.is_root and not baby.is_root
    assert [w.id for w in baby.ancestors()] == ["mouse", "cage"]


def test_children_keep_insertion_order_and_are_a_snapshot():
    cage = build_cage()
    children = cage.children
    assert [kid.id for kid in children] == ["mouse", "food"]
    cage << FoodWidget("water", "show")
    assert len(children) == 2
    assert [kid.id for kid in cage.children] == ["mouse", "food", "water"]


def test_child_cannot_have_two_parents():
    cage = build_cage()
    other = CageWidget("other", "show")
    with pytest.raises(WidgetTreeError):
        other.add_child(cage.find_widget("mouse"))


def test_cycles_are_rejected():
    cage = build_cage()
    mouse = cage.find_widget("mouse")
    with pytest.raises(WidgetTreeError):
        mouse.add_child(cage)
    with pytest.raises(WidgetTreeError):
        cage.add_child(cage)


def test_sibling_ids_must_be_unique():
    cage = build_cage()
    with pytest.raises(WidgetTreeError):
        cage << MouseWidget("mouse", "idle")


def test_duplicate_id_deeper_in_tree_is_logged(caplog):
    cage = build_cage()
    mouse = cage.find_widget("mouse")
    with caplog.at_level(logging.WARNING, logger="wiretree.core.tree"):
        mouse << FoodWidget("food", "show")
    assert "Duplicate widget id 'food'" in caplog.text


def test_remove_child_detaches_it():
    cage = build_cage()
    food = cage.remove_child("food")
    assert food.parent is None
    assert cage.find_widget("food") is None
    mouse = cage.remove_child(cage.find_widget("mouse"))
    assert mouse.is_root
    assert cage.children == ()
    with pytest.raises(WidgetTreeError):
        cage.remove_child("mouse")


def test_parent_reference_does_not_own_the_parent():
    cage = build_cage()
    mouse = cage.find_widget("mouse")
    del cage
    gc.collect()
    assert mouse.parent is None
