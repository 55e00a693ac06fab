"""Jinja2-backed templating for widget views."""

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    List,
    Mapping,
    Optional,
    Protocol,
    runtime_checkable,
)

from jinja2 import (
    BaseLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    select_autoescape,
)
from markupsafe import Markup

from wiretree.runtime.config import Config

if TYPE_CHECKING:
    from wiretree.core.widget import Widget

log = logging.getLogger(__name__)


@runtime_checkable
class TemplateRenderer(Protocol):
    def render_template(
        self,
        widget: "Widget",
        view: str,
        locals: Mapping[str, Any],
        layout: Optional[str] = None,
    ) -> str: ...


class JinjaTemplates:
    """Render widget views from a Jinja2 environment.

    Views live at ``<view dir>/<view>.html`` where the view dir comes from the
    widget class (see ``Widget.view_paths``); subclasses fall back to the views of
    their base classes. Layouts live at ``layouts/<layout>.html`` and receive the
    rendered view as ``content``.
    """

    LAYOUT_DIR = "layouts"

    def __init__(self, env: Environment) -> None:
        self.env = env

    @classmethod
    def from_loader(cls, loader: BaseLoader, autoescape: bool = True) -> "JinjaTemplates":
        env = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"]) if autoescape else False,
        )
        return cls(env)

    @classmethod
    def from_config(cls, config: Config) -> "JinjaTemplates":
        loader = FileSystemLoader([str(d) for d in config.template_dirs])
        return cls.from_loader(loader, autoescape=config.autoescape)

    @classmethod
    def from_mapping(
        cls, templates: Mapping[str, str], autoescape: bool = True
    ) -> "JinjaTemplates":
        return cls.from_loader(DictLoader(dict(templates)), autoescape=autoescape)

    def candidates(self, widget: "Widget", view: str) -> List[str]:
        filename = view if "." in view else f"{view}.html"
        return [f"{path}/{filename}" for path in widget.view_paths()]

    def render_template(
        self,
        widget: "Widget",
        view: str,
        locals: Mapping[str, Any],
        layout: Optional[str] = None,
    ) -> str:
        names = self.candidates(widget, view)
        log.debug("%s: rendering view %s from %s", widget.id, view, names)

        # TemplatesNotFound and render errors propagate to the caller unchanged.
        template = self.env.select_template(names)
        html = template.render(**locals)

        if layout:
            filename = layout if "." in layout else f"{layout}.html"
            wrapper = self.env.get_template(f"{self.LAYOUT_DIR}/{filename}")
            html = wrapper.render(**{**locals, "content": Markup(html)})

        return html
