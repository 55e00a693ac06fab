from typing import Any, Optional


class WiretreeError(Exception):
    """Base class for all wiretree errors."""

    pass


class UnknownStateError(WiretreeError):
    """Raised when a widget is asked to run a state it has no handler for."""

    def __init__(self, widget_id: Optional[str], state: Any):
        self.widget_id = widget_id
        self.state = state
        if widget_id is None:
            message = f"Unknown state {state!r}"
        else:
            message = f"Widget '{widget_id}' has no state {state!r}"
        super().__init__(message)


class MissingEventTypeError(WiretreeError):
    """Raised when an event address is requested without an event type."""

    def __init__(self, message: str = "please specify the event type"):
        super().__init__(message)


class UnknownWidgetError(WiretreeError):
    """Raised when routing targets a widget id that is not in the tree."""

    def __init__(self, widget_id: Any):
        self.widget_id = widget_id
        super().__init__(f"Widget '{widget_id}' not found")


class WidgetTreeError(WiretreeError):
    """Raised on invalid tree edits (shared ownership, cycles, bad ids)."""

    pass


class InvocationDepthError(WiretreeError):
    """Raised when nested invocations exceed the configured depth."""

    def __init__(self, widget_id: str, depth: int):
        self.widget_id = widget_id
        self.depth = depth
        super().__init__(
            f"Invocation depth {depth} exceeded while invoking '{widget_id}'"
        )


class WidgetConfigurationError(WiretreeError):
    """Raised when a required collaborator has not been configured."""

    pass
