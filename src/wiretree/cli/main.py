"""Main CLI entry point."""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler
from rich.tree import Tree

from wiretree import __version__
from wiretree.core.content import PageUpdate
from wiretree.core.exceptions import WiretreeError
from wiretree.core.widget import Widget
from wiretree.runtime.config import Config
from wiretree.runtime.context import RenderContext, use_context
from wiretree.runtime.dispatch import EventDispatcher

console = Console()

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.STYLE_COMMANDS_TABLE_SHOW_LINES = False
click.rich_click.STYLE_COMMANDS_TABLE_BOX = None
click.rich_click.STYLE_OPTIONS_TABLE_BOX = None
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'wiretree --help' for more information."

# Cyan theme
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"
click.rich_click.STYLE_USAGE = "dim"

click.rich_click.COMMAND_GROUPS = {
    "wiretree": [
        {
            "name": "Commands",
            "commands": ["render", "tree", "event"],
        }
    ]
}


def import_tree(app_str: str) -> Widget:
    """Import a widget tree from string (e.g. 'app:build_tree').

    The attribute may be a root ``Widget`` or a zero-argument factory returning one.
    """
    if ":" not in app_str:
        raise click.BadParameter("App must be in format 'module:attr'", param_hint="APP")

    module_name, attr = app_str.split(":", 1)

    # Add current directory to path so we can import local modules
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    try:
        import importlib

        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(
            f"Could not import module '{module_name}': {e}", param_hint="APP"
        )

    try:
        target = getattr(module, attr)
    except AttributeError:
        raise click.BadParameter(
            f"Attribute '{attr}' not found in module '{module_name}'",
            param_hint="APP",
        )

    root = target if isinstance(target, Widget) else target()
    if not isinstance(root, Widget):
        raise click.BadParameter(
            f"'{app_str}' did not produce a Widget (got {type(root).__name__})",
            param_hint="APP",
        )
    return root


def parse_params(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into a dict; values are parsed as JSON when possible."""
    params: Dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--param")
        key, raw = pair.split("=", 1)
        try:
            params[key] = json.loads(raw)
        except ValueError:
            params[key] = raw
    return params


def _setup_logging(config: Config) -> None:
    if config.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _print_updates(updates: Any, as_json: bool) -> None:
    if isinstance(updates, PageUpdate):
        updates = [updates]
    if as_json:
        payload = [u.to_dict() if isinstance(u, PageUpdate) else str(u) for u in updates]
        click.echo(json.dumps(payload, indent=2))
        return
    for update in updates:
        if isinstance(update, PageUpdate):
            console.print(f"[dim]{update.mode.value} #{update.target}[/]", highlight=False)
        click.echo(str(update))


def _context(template_dirs: Tuple[str, ...], debug: bool) -> RenderContext:
    return RenderContext(config=Config.for_dirs(*template_dirs, debug=debug))


@click.group(
    help=f"""
[bold white on cyan] wiretree [/] [bold cyan]v{__version__}[/] Stateful widget trees, rendered on the server.

Run [bold cyan]wiretree render APP[/] to render a tree.

[dim]APP should be a string in format 'module:attr', naming a root widget or a
factory returning one, e.g. 'app:build_tree'.[/dim]
"""
)
@click.version_option(__version__)
def cli() -> None:
    pass


@cli.command()
@click.argument("app")
@click.option("--widget", "widget_id", default=None, help="Widget to invoke (default: root)")
@click.option("--state", default=None, help="State to invoke")
@click.option("--template-dir", "template_dirs", multiple=True, help="Template directory")
@click.option("--json", "as_json", is_flag=True, help="Print page updates as JSON")
@click.option("--debug", is_flag=True, help="Log invocations")
def render(
    app: str,
    widget_id: Optional[str],
    state: Optional[str],
    template_dirs: Tuple[str, ...],
    as_json: bool,
    debug: bool,
) -> None:
    """Invoke a widget and print the page update."""
    ctx = _context(template_dirs, debug)
    _setup_logging(ctx.config)
    root = import_tree(app)

    try:
        with use_context(ctx):
            update = EventDispatcher(root).invoke_widget(widget_id or root.id, state)
    except WiretreeError as e:
        raise click.ClickException(str(e))

    _print_updates(update, as_json)


@cli.command()
@click.argument("app")
def tree(app: str) -> None:
    """Show the widget tree."""
    root = import_tree(app)

    def label(widget: Widget) -> str:
        text = f"[bold cyan]{widget.id}[/] [dim]{type(widget).__name__}[/] start={widget.start_state}"
        if widget.current_state:
            text += f" current={widget.current_state}"
        if not widget.visible:
            text += " [magenta](hidden)[/]"
        return text

    def build(node: Tree, widget: Widget) -> None:
        for kid in widget.children:
            build(node.add(label(kid)), kid)

    view = Tree(label(root))
    build(view, root)
    console.print(view)


@cli.command()
@click.argument("app")
@click.argument("source")
@click.argument("type")
@click.option("-p", "--param", "params", multiple=True, help="Event param as key=value")
@click.option("--template-dir", "template_dirs", multiple=True, help="Template directory")
@click.option("--json", "as_json", is_flag=True, help="Print page updates as JSON")
@click.option("--debug", is_flag=True, help="Log invocations")
def event(
    app: str,
    source: str,
    type: str,
    params: Tuple[str, ...],
    template_dirs: Tuple[str, ...],
    as_json: bool,
    debug: bool,
) -> None:
    """Fire an event from SOURCE and print the resulting page updates."""
    ctx = _context(template_dirs, debug)
    _setup_logging(ctx.config)
    root = import_tree(app)
    event_params = parse_params(params)

    try:
        with use_context(ctx):
            updates = EventDispatcher(root).dispatch(source, type, event_params)
    except WiretreeError as e:
        raise click.ClickException(str(e))

    if not updates:
        console.print(f"No widget responds to '{type}' from '{source}'.")
        return
    _print_updates(updates, as_json)


if __name__ == "__main__":
    cli()
