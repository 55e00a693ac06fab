"""HTML escaping utilities for widget frames."""

from typing import Any, Mapping


def escape_html(value: Any) -> str:
    """Escape HTML special characters to prevent XSS.

    Escapes: & < > " '

    Args:
        value: Any value to escape (will be converted to string first)

    Returns:
        HTML-escaped string safe for embedding in HTML content or attributes
    """
    s = str(value)
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


def render_attrs(attrs: Mapping[str, Any]) -> str:
    """Render a mapping as HTML attributes, leading space included.

    ``True`` renders a bare boolean attribute, ``None``/``False`` drop it.
    Order follows the mapping.
    """
    parts = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {escape_html(name)}")
        else:
            parts.append(f' {escape_html(name)}="{escape_html(value)}"')
    return "".join(parts)
