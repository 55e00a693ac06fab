"""Routing incoming events and direct invocations to widgets in a tree."""

import logging
from typing import Any, List, Mapping, Optional, Tuple

from wiretree.core.content import PageUpdate
from wiretree.core.events import EventAddress, EventHandler
from wiretree.core.exceptions import UnknownWidgetError
from wiretree.core.widget import Widget
from wiretree.runtime.context import current_context, use_context

log = logging.getLogger(__name__)


class EventDispatcher:
    """Routes events fired in the client back into a widget tree.

    An event starts at its source widget and bubbles up to the root. Every
    handler registered with ``respond_to_event`` on the way that matches the
    event invokes its target widget; the resulting page updates are returned in
    the order the handlers ran.
    """

    def __init__(self, root: Widget) -> None:
        self.root = root

    def _lookup(self, widget_id: Any) -> Widget:
        widget = self.root.find_widget(widget_id)
        if widget is None:
            raise UnknownWidgetError(widget_id)
        return widget

    def handlers_for(self, address: EventAddress) -> List[Tuple[Widget, EventHandler]]:
        """Matching handlers along the bubbling path, source first."""
        source = self._lookup(address.source)
        found = []
        for widget in (source, *source.ancestors()):
            for handler in widget.event_handlers:
                if handler.matches(address):
                    found.append((widget, handler))
        return found

    def dispatch(
        self,
        source: str,
        type: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[PageUpdate]:
        address = EventAddress(source=str(source), type=str(type), params=params or {})
        return self.process(address)

    def process(self, address: EventAddress) -> List[PageUpdate]:
        handlers = self.handlers_for(address)
        log.debug(
            "event %s from %s: %d handler(s)", address.type, address.source, len(handlers)
        )

        updates = []
        with use_context(current_context().with_params(address.params)):
            for owner, handler in handlers:
                target = self._lookup(handler.on) if handler.on else owner
                log.debug("  %s -> %s#%s", owner.id, target.id, handler.state)
                updates.append(target.invoke(handler.state))
        return updates

    def invoke_widget(
        self,
        widget_id: str,
        state: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Invoke one widget directly, e.g. for a ``(widget_id, state, params)`` request."""
        widget = self._lookup(widget_id)
        with use_context(current_context().with_params(params)):
            return widget.invoke(state)
