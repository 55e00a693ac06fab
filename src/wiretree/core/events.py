"""Event addresses for routing client events back to widgets."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from wiretree.core.exceptions import MissingEventTypeError


@dataclass(frozen=True)
class EventAddress:
    """Opaque routing descriptor: which widget fired which event, with what params."""

    source: str
    type: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze params so the address can't change after it was handed out.
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def __hash__(self) -> int:
        return hash((self.source, self.type, tuple(sorted(self.params.items()))))

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into the keyword form consumed by URL builders."""
        return {"source": self.source, "type": self.type, **self.params}


@dataclass(frozen=True)
class EventHandler:
    """Run ``state`` on widget ``on`` when an event of ``type`` arrives.

    ``source`` restricts the handler to events fired by that widget; ``on``
    defaults to the widget the handler is registered with.
    """

    type: str
    state: str
    source: Optional[str] = None
    on: Optional[str] = None

    def matches(self, address: EventAddress) -> bool:
        if self.type != address.type:
            return False
        return self.source is None or self.source == address.source


def address_for_event(
    widget_id: str, options: Optional[Mapping[str, Any]] = None, **kwargs: Any
) -> EventAddress:
    """Build the address for an event fired from ``widget_id``.

    Reserved keys:
        type: the event type (required)
        source: explicit event source, defaults to ``widget_id``

    Every other key is passed through into the address params.
    """
    opts: Dict[str, Any] = dict(options or {})
    opts.update(kwargs)

    event_type = opts.pop("type", None)
    if not event_type:
        raise MissingEventTypeError()

    source = opts.pop("source", None) or widget_id
    return EventAddress(source=str(source), type=str(event_type), params=opts)
