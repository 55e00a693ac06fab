"""Stateful widgets."""

import inspect
import logging
import re
from collections import OrderedDict
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    List,
    Mapping,
    Optional,
    Tuple,
)

from markupsafe import Markup

from wiretree.core.content import (
    Empty,
    Fragment,
    PageUpdate,
    RawPayload,
    RenderedResult,
    ScriptPayload,
)
from wiretree.core.events import EventAddress, EventHandler, address_for_event
from wiretree.core.exceptions import (
    UnknownStateError,
    WidgetConfigurationError,
    WidgetTreeError,
)
from wiretree.core.render import RenderOptions, frame_content
from wiretree.core.states import (
    StartState,
    StateMachine,
    TransitionTable,
    collect_states,
    first_state,
    validate_transitions,
)
from wiretree.core.tree import TreeNode
from wiretree.runtime.context import RenderContext, current_context

log = logging.getLogger(__name__)


def _view_dirname(class_name: str) -> str:
    if class_name.endswith("Widget") and class_name != "Widget":
        class_name = class_name[: -len("Widget")]
    return re.sub(r"(?<!^)(?=[A-Z])", "_", class_name).lower()


def _accepts_block(handler: Callable[..., Any]) -> bool:
    return "block" in inspect.signature(handler).parameters


class Widget(TreeNode):
    """A tree node with its own state machine and renderable content.

    States are methods decorated with ``@state``. ``transitions`` maps a state
    to the state that runs next when the widget is invoked without an explicit
    state; it is frozen when the class is created.

    Example:
        class MouseWidget(Widget):
            transitions = {"idle": "eating"}

            @state
            def idle(self):
                return self.render()

            @state
            def eating(self):
                return self.render(view="bored", html_attrs={"class": "busy"})
    """

    transitions: ClassVar[Mapping[str, str]] = TransitionTable()
    template_dir: ClassVar[Optional[str]] = None
    __states__: ClassVar[Mapping[str, Callable[..., Any]]]

    # Hook method names called with (id, start_state, options) on construction.
    INIT_HOOKS: ClassVar[List[str]] = []

    # What survives between requests, and what has to be rebuilt.
    DURABLE_FIELDS: ClassVar[Tuple[str, ...]] = (
        "id",
        "start_state",
        "current_state",
        "visible",
        "version",
    )
    VOLATILE_FIELDS: ClassVar[Tuple[str, ...]] = (
        "parent",
        "children",
        "options",
        "event_handlers",
        "invoke_block",
    )

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._register_states()

    @classmethod
    def _register_states(cls) -> None:
        states = collect_states(cls)
        table = cls.transitions
        if not isinstance(table, TransitionTable):
            table = TransitionTable(table)
        validate_transitions(table, states, cls.__name__)
        cls.__states__ = states
        cls.transitions = table

    @classmethod
    def view_paths(cls) -> List[str]:
        """Template directories for this class, most specific first."""
        paths: List[str] = []
        for klass in cls.__mro__:
            if not (isinstance(klass, type) and issubclass(klass, Widget)):
                continue
            path = vars(klass).get("template_dir") or _view_dirname(klass.__name__)
            if path not in paths:
                paths.append(path)
        return paths

    def __init__(
        self,
        id: str,
        start_state: StartState,
        options: Optional[Mapping[str, Any]] = None,
        visible: bool = True,
    ) -> None:
        if not isinstance(id, str) or not id:
            raise WidgetTreeError(f"Widget id must be a non-empty string, got {id!r}")
        self._init_tree()
        self._id = id
        self.start_state = self._check_start_state(start_state)
        self.current_state: Optional[str] = None
        self.visible = visible
        self.version = 0
        self.options: Dict[str, Any] = dict(options or {})
        self.invoke_block: Any = None
        self._event_handlers: List[EventHandler] = []

        for hook_name in self.INIT_HOOKS:
            getattr(self, hook_name)(id, start_state, self.options)

    @property
    def id(self) -> str:  # type: ignore[override]
        return self._id

    def _check_start_state(self, start_state: StartState) -> StartState:
        names = [start_state] if isinstance(start_state, str) else list(start_state)
        if not names:
            raise UnknownStateError(self._id, start_state)
        for name in names:
            if str(name) not in self.__states__:
                raise UnknownStateError(self._id, name)
        if isinstance(start_state, str):
            return start_state
        return tuple(str(name) for name in names)

    @property
    def state_machine(self) -> StateMachine:
        return StateMachine(self.transitions, self.start_state)

    @property
    def visible_children(self) -> List["Widget"]:
        return [kid for kid in self.children if kid.visible]

    @property
    def event_handlers(self) -> Tuple[EventHandler, ...]:
        return tuple(self._event_handlers)

    # -- invocation -------------------------------------------------------

    def invoke(self, state: Optional[str] = None, block: Any = None) -> Any:
        """Run ``state``, or whatever the state machine decides comes next.

        The state method may jump to other states before it renders, so the
        state that finally rendered is ``current_state`` afterwards.
        """
        self.invoke_block = block
        log.debug("invoke on %s with %r", self.id, state)

        if not state:
            state = self.state_machine.resolve(self.current_state)

        log.debug("%s: transition: %s to %s", self.id, self.current_state, state)
        return self._run_state(state)

    def jump(self, state: str) -> Any:
        """Force the widget into ``state``, whether or not it is a conventional transition."""
        log.debug("%s: STATE JUMP! to %s", self.id, state)
        return self._run_state(state)

    def _run_state(self, state: str) -> Any:
        name = str(state)
        handler = self.__states__.get(name)
        if handler is None:
            raise UnknownStateError(self.id, name)

        with current_context().nested(self.id):
            self.current_state = name
            if self.invoke_block is not None and _accepts_block(handler):
                return handler(self, block=self.invoke_block)
            return handler(self)

    # -- rendering --------------------------------------------------------

    def render(self, **options: Any) -> PageUpdate:
        """Render the view for the current state. Usually called at the end of a state method.

        A widget that has not run yet renders the view of its start state.

        See ``RenderOptions`` for the accepted options. ``replace_inner`` and
        ``text`` turn the default frame off.

        Examples:
            self.render(view="bored", layout="metal")
            self.render(script="alert('SQUEAK!');")
            self.render(html_attrs={"class": "highlighted"})  # <div id="mouse" class="highlighted">
            self.render(frame="p")                             # <p id="mouse">...</p>
        """
        ctx = current_context()
        opts = RenderOptions.resolve(default_frame=ctx.config.default_frame, **options)
        content = self._render_content(opts, ctx)
        return PageUpdate.for_content(self.id, content, replace_inner=opts.replace_inner)

    def _render_content(self, opts: RenderOptions, ctx: RenderContext) -> RenderedResult:
        if opts.script is not None:
            return ScriptPayload(opts.script)
        if opts.raw is not None:
            return RawPayload(opts.raw)
        if opts.empty:
            return Empty()

        if opts.render_children:
            rendered_children = self.render_children(opts.invoke_map())
        else:
            rendered_children = OrderedDict()

        view_vars = self.view_locals(rendered_children)
        view_vars.update(opts.locals)

        if opts.text is not None:
            markup = opts.text
        else:
            view = opts.view or self.current_state or first_state(self.start_state)
            markup = ctx.templates.render_template(self, view, view_vars, layout=opts.layout)

        markup = frame_content(markup, opts.frame, opts.frame_attrs(self.id))
        return Fragment(markup, children=rendered_children)

    def view_locals(self, rendered_children: "OrderedDict[str, Any]") -> Dict[str, Any]:
        """Variables every view gets."""

        def content() -> Markup:
            return Markup("\n").join(
                kid if hasattr(kid, "__html__") else Markup(str(kid))
                for kid in rendered_children.values()
            )

        return {
            "widget": self,
            "options": self.options,
            "rendered_children": rendered_children,
            "content": content,
            "param": self.param,
            "address_for_event": self.address_for_event,
            "url_for_event": self.url_for_event,
        }

    def render_children(
        self, invoke: Optional[Mapping[str, str]] = None
    ) -> "OrderedDict[str, Any]":
        """Invoke every visible child, in order.

        ``invoke`` maps child ids to the state to run; children without an entry
        decide for themselves. Entries for unknown ids are ignored.
        """
        overrides = {str(k): v for k, v in (invoke or {}).items()}
        rendered_children: "OrderedDict[str, Any]" = OrderedDict()
        for kid in self.visible_children:
            child_state = overrides.get(kid.id)
            log.debug("    %s -> %s", kid.id, child_state)
            rendered_children[kid.id] = self.render_child(kid, child_state)
        return rendered_children

    def render_child(self, child: "Widget", state: Optional[str]) -> Any:
        return child.invoke(state)

    # -- events -----------------------------------------------------------

    def address_for_event(
        self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any
    ) -> EventAddress:
        """Return the address of an event fired from this widget.

        Reserved options:
            type: the event type (required)
            source: explicit event source, this widget by default

        Any other option ends up in the address params and is available to the
        handling widget through ``param``.

        Example:
            self.address_for_event(type="squeak", volume=9)
        """
        return address_for_event(self.id, options, **kwargs)

    def url_for_event(self, type: str, **params: Any) -> str:
        url_builder = current_context().url_builder
        if url_builder is None:
            raise WidgetConfigurationError("No URL builder configured for event addresses")
        return url_builder(self.address_for_event(type=type, **params))

    def respond_to_event(
        self,
        type: str,
        with_state: str,
        source: Optional[str] = None,
        on: Optional[str] = None,
    ) -> EventHandler:
        """Invoke ``with_state`` on widget ``on`` (default: self) when ``type`` reaches this widget."""
        handler = EventHandler(type=str(type), state=str(with_state), source=source, on=on)
        self._event_handlers.append(handler)
        return handler

    def param(self, name: str, default: Any = None) -> Any:
        """Read a parameter of the event currently being processed."""
        return current_context().params.get(name, default)

    # -- durable state ----------------------------------------------------

    def durable_state(self) -> Dict[str, Any]:
        start = self.start_state
        return {
            "id": self.id,
            "start_state": start if isinstance(start, str) else list(start),
            "current_state": self.current_state,
            "visible": self.visible,
            "version": self.version,
        }

    def restore_state(self, data: Mapping[str, Any]) -> None:
        if data.get("id", self.id) != self.id:
            raise WidgetTreeError(
                f"State for '{data['id']}' cannot be restored into '{self.id}'"
            )
        if "start_state" in data:
            self.start_state = self._check_start_state(data["start_state"])
        current = data.get("current_state", self.current_state)
        if current is not None and current not in self.__states__:
            raise UnknownStateError(self.id, current)
        self.current_state = current
        self.visible = bool(data.get("visible", self.visible))
        self.version = int(data.get("version", self.version))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id={self.id!r}, "
            f"current_state={self.current_state!r}, visible={self.visible})"
        )


Widget._register_states()
