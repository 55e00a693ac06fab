"""Functional surface over ``Widget`` for callers that drive a tree from outside."""

from collections import OrderedDict
from typing import Any, Mapping, Optional

from wiretree.core.content import PageUpdate
from wiretree.core.events import EventAddress
from wiretree.core.widget import Widget


def next_state(widget: Widget, current: Optional[str] = None) -> Optional[str]:
    """What ``widget`` would run after ``current`` (its own current state by default)."""
    if current is None:
        current = widget.current_state
    return widget.state_machine.next_state(current)


def invoke(widget: Widget, state: Optional[str] = None, block: Any = None) -> Any:
    return widget.invoke(state, block=block)


def jump(widget: Widget, state: str) -> Any:
    return widget.jump(state)


def render(
    widget: Widget, options: Optional[Mapping[str, Any]] = None, **kwargs: Any
) -> PageUpdate:
    return widget.render(**{**(options or {}), **kwargs})


def compose(
    widget: Widget, invoke: Optional[Mapping[str, str]] = None
) -> "OrderedDict[str, Any]":
    return widget.render_children(invoke)


def address_for_event(
    widget: Widget, options: Optional[Mapping[str, Any]] = None, **kwargs: Any
) -> EventAddress:
    return widget.address_for_event(options, **kwargs)


def find(root: Widget, widget_id: Any) -> Optional[Widget]:
    return root.find_widget(widget_id)
