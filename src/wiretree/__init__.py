from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("wiretree")
except PackageNotFoundError:
    __version__ = "unknown"

from wiretree.core.content import (
    Empty,
    Fragment,
    PageUpdate,
    RawPayload,
    ScriptPayload,
    UpdateMode,
)
from wiretree.core.events import EventAddress, EventHandler
from wiretree.core.exceptions import (
    InvocationDepthError,
    MissingEventTypeError,
    UnknownStateError,
    UnknownWidgetError,
    WidgetConfigurationError,
    WidgetTreeError,
    WiretreeError,
)
from wiretree.core.engine import (
    address_for_event,
    compose,
    find,
    invoke,
    jump,
    next_state,
    render,
)
from wiretree.core.states import StateMachine, TransitionTable, state
from wiretree.core.widget import Widget
from wiretree.runtime.config import Config
from wiretree.runtime.context import RenderContext, current_context, use_context
from wiretree.runtime.dispatch import EventDispatcher
from wiretree.runtime.templates import JinjaTemplates, TemplateRenderer

__all__ = [
    "Widget",
    "state",
    "StateMachine",
    "TransitionTable",
    "invoke",
    "jump",
    "render",
    "compose",
    "address_for_event",
    "find",
    "next_state",
    "PageUpdate",
    "UpdateMode",
    "Fragment",
    "ScriptPayload",
    "RawPayload",
    "Empty",
    "EventAddress",
    "EventHandler",
    "EventDispatcher",
    "Config",
    "RenderContext",
    "current_context",
    "use_context",
    "JinjaTemplates",
    "TemplateRenderer",
    "WiretreeError",
    "UnknownStateError",
    "MissingEventTypeError",
    "UnknownWidgetError",
    "WidgetTreeError",
    "InvocationDepthError",
    "WidgetConfigurationError",
]
