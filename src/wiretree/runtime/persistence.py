"""Durable widget state.

Only the fields named in ``Widget.DURABLE_FIELDS`` are captured. Tree linkage,
options, event handlers and render buffers are volatile: the caller rebuilds the
tree and then restores the durable fields into it. Storing snapshots is up to
the caller.
"""

from typing import Any, Dict, List, Mapping

from wiretree.core.widget import Widget


def snapshot_tree(root: Widget) -> Dict[str, Dict[str, Any]]:
    """Durable state of every widget under ``root``, keyed by widget id."""
    return {widget.id: widget.durable_state() for widget in root.walk()}


def restore_tree(root: Widget, snapshot: Mapping[str, Mapping[str, Any]]) -> List[str]:
    """Apply a snapshot to a freshly built tree.

    Widgets missing from the snapshot keep their constructed state; snapshot
    entries for widgets that no longer exist are skipped.

    Returns:
        Ids of the widgets that were restored, in tree order.
    """
    restored = []
    for widget in root.walk():
        data = snapshot.get(widget.id)
        if data is None:
            continue
        widget.restore_state(data)
        restored.append(widget.id)
    return restored
