"""Render options and framing."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from wiretree.runtime.escape import escape_html, render_attrs

_TAG_RE = re.compile(r"^[A-Za-z][A-Za-z0-9\-]*$")

# Sentinel for "frame not given": the default depends on other options.
DEFAULT_FRAME: Any = object()

Frame = Union[str, bool]


@dataclass(frozen=True)
class RenderOptions:
    """Options for ``Widget.render``, resolved once per call.

    Attributes:
        view: Template to render. Defaults to the current state name.
        layout: Layout the view is rendered into.
        html_attrs: Attributes for the frame tag; ``id`` defaults to the widget id.
        locals: Variables passed to the template.
        replace_inner: Replace the inner content of the widget's frame instead of
            the whole frame. Turns the default frame off.
        render_children: Render visible children before the view.
        frame: Tag wrapped around the output, or False for no frame.
        invoke: Child id to state overrides used while rendering children.
        script: Script to execute instead of rendering a view.
        raw: Payload to send as-is instead of rendering a view.
        empty: Render nothing.
        text: Literal markup used instead of a view. Turns the default frame off.
    """

    view: Optional[str] = None
    layout: Optional[str] = None
    html_attrs: Mapping[str, Any] = field(default_factory=dict)
    locals: Mapping[str, Any] = field(default_factory=dict)
    replace_inner: bool = False
    render_children: bool = True
    frame: Frame = "div"
    invoke: Mapping[str, str] = field(default_factory=dict)
    script: Optional[str] = None
    raw: Optional[Union[str, bytes]] = None
    empty: bool = False
    text: Optional[str] = None

    @classmethod
    def resolve(cls, default_frame: str = "div", **options: Any) -> "RenderOptions":
        frame = options.pop("frame", DEFAULT_FRAME)
        if frame is DEFAULT_FRAME:
            text_only = options.get("replace_inner") or options.get("text") is not None
            frame = False if text_only else default_frame
        elif frame is True:
            frame = default_frame
        elif frame is None:
            frame = False

        if frame and not _TAG_RE.match(str(frame)):
            raise ValueError(f"Invalid frame tag {frame!r}")

        for key in ("html_attrs", "locals", "invoke"):
            if options.get(key) is None:
                options.pop(key, None)

        # Unknown keys raise TypeError here.
        return cls(frame=frame, **options)

    def frame_attrs(self, widget_id: str) -> Dict[str, Any]:
        attrs = {"id": widget_id}
        attrs.update(self.html_attrs)
        return attrs

    def invoke_map(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in self.invoke.items()}


def frame_content(content: str, tag: Frame, attrs: Mapping[str, Any]) -> str:
    """Wrap rendered markup into a container tag."""
    if not tag:
        return content
    name = escape_html(tag)
    return f"<{name}{render_attrs(attrs)}>{content}</{name}>"
