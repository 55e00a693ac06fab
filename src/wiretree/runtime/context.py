"""Render context: the collaborators a render pass runs against."""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterator,
    Mapping,
    Optional,
)

from wiretree.core.exceptions import InvocationDepthError
from wiretree.runtime.config import Config

if TYPE_CHECKING:
    from wiretree.core.events import EventAddress
    from wiretree.runtime.templates import TemplateRenderer

URLBuilder = Callable[["EventAddress"], str]


class RenderContext:
    """Configuration, templating and event params for one render pass."""

    def __init__(
        self,
        config: Optional[Config] = None,
        templates: Optional["TemplateRenderer"] = None,
        url_builder: Optional[URLBuilder] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.config = config or Config()
        self._templates = templates
        self.url_builder = url_builder
        self.params: Dict[str, Any] = dict(params or {})
        self.depth = 0

    @property
    def templates(self) -> "TemplateRenderer":
        if self._templates is None:
            from wiretree.runtime.templates import JinjaTemplates

            self._templates = JinjaTemplates.from_config(self.config)
        return self._templates

    def with_params(self, params: Optional[Mapping[str, Any]]) -> "RenderContext":
        """Copy of this context carrying another set of event params."""
        ctx = RenderContext(
            config=self.config,
            templates=self._templates,
            url_builder=self.url_builder,
            params=params,
        )
        # Nested dispatch keeps counting against the same depth limit.
        ctx.depth = self.depth
        return ctx

    @contextmanager
    def nested(self, widget_id: str) -> Iterator[None]:
        """Track one level of invoke/jump nesting."""
        if self.depth >= self.config.max_invoke_depth:
            raise InvocationDepthError(widget_id, self.depth + 1)
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1


_render_context: ContextVar[Optional[RenderContext]] = ContextVar(
    "wiretree_render_context", default=None
)
_default_context: Optional[RenderContext] = None


def set_render_context(ctx: RenderContext) -> Any:
    return _render_context.set(ctx)


def reset_render_context(token: Any) -> None:
    _render_context.reset(token)


def current_context() -> RenderContext:
    """The active render context, or a shared default built from ``Config()``."""
    global _default_context

    ctx = _render_context.get()
    if ctx is not None:
        return ctx
    if _default_context is None:
        _default_context = RenderContext()
    return _default_context


@contextmanager
def use_context(
    ctx: Optional[RenderContext] = None, **kwargs: Any
) -> Iterator[RenderContext]:
    """Install a render context for the duration of the block.

    Usage:
        with use_context(templates=JinjaTemplates.from_mapping({...})):
            update = root.invoke()
    """
    if ctx is None:
        ctx = RenderContext(**kwargs)
    token = set_render_context(ctx)
    try:
        yield ctx
    finally:
        reset_render_context(token)
