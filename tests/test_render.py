import pytest

from wiretree import (
    Config,
    Empty,
    Fragment,
    JinjaTemplates,
    PageUpdate,
    RawPayload,
    RenderContext,
    ScriptPayload,
    UpdateMode,
    Widget,
    compose,
    render,
    state,
    use_context,
)
from wiretree.core.render import RenderOptions, frame_content

from cage_widgets import TEMPLATES, MouseWidget, build_cage, cage_context


@pytest.fixture
def mouse():
    cage = build_cage()
    mouse = cage.find_widget("mouse")
    mouse.current_state = "idle"
    return mouse


def test_default_render_replaces_whole_framed_widget(mouse):
    with cage_context():
        update = render(mouse, {})
    assert update.mode is UpdateMode.REPLACE_WHOLE
    assert update.target == "mouse"
    assert isinstance(update.content, Fragment)
    assert update.content.markup == '<div id="mouse"><p>idle mouse</p></div>'


def test_replace_inner_drops_the_frame(mouse):
    with cage_context():
        update = render(mouse, {"replace_inner": True})
    assert update.mode is UpdateMode.REPLACE_INNER
    assert update.replace_inner
    assert update.content.markup == "<p>idle mouse</p>"


def test_explicit_frame_wins_over_replace_inner(mouse):
    with cage_context():
        update = mouse.render(replace_inner=True, frame="section")
    assert update.content.markup == '<section id="mouse"><p>idle mouse</p></section>'


def test_custom_frame_tag_and_html_attrs(mouse):
    with cage_context():
        update = mouse.render(frame="p", html_attrs={"class": "highlighted"})
    assert update.content.markup == '<p id="mouse" class="highlighted"><p>idle mouse</p></p>'


def test_html_attrs_may_override_the_id(mouse):
    with cage_context():
        update = mouse.render(html_attrs={"id": "squeaker", "data-x": '"q"'})
    assert update.content.markup.startswith('<div id="squeaker" data-x="&quot;q&quot;">')


def test_frame_false_renders_bare_view(mouse):
    with cage_context():
        update = mouse.render(frame=False)
    assert update.mode is UpdateMode.REPLACE_WHOLE
    assert str(update) == "<p>idle mouse</p>"


def test_invalid_frame_tag_is_rejected(mouse):
    with cage_context():
        with pytest.raises(ValueError):
            mouse.render(frame="div onclick=alert(1)")


def test_script_short_circuits_everything(mouse):
    with use_context(templates=JinjaTemplates.from_mapping({})):
        update = mouse.render(script="alert('SQUEAK!');", replace_inner=True)
    assert update.content == ScriptPayload("alert('SQUEAK!');")
    assert update.mode is UpdateMode.REPLACE_INNER
    assert update.to_dict() == {
        "mode": "replace_inner",
        "target": "mouse",
        "kind": "script",
        "content": "alert('SQUEAK!');",
    }


def test_raw_and_empty(mouse):
    with use_context(templates=JinjaTemplates.from_mapping({})):
        raw = mouse.render(raw=b"\x7b\x7d")
        empty = mouse.render(empty=True)
    assert raw.content == RawPayload(b"{}")
    assert str(raw) == "{}"
    assert isinstance(empty.content, Empty)
    assert str(empty) == ""
    assert empty.target == "mouse"


def test_undecodable_raw_bytes_still_serialize(mouse):
    update = mouse.render(raw=b"\xff\xfe")
    assert update.content.payload == b"\xff\xfe"
    assert update.to_dict() == {
        "mode": "replace",
        "target": "mouse",
        "kind": "raw",
        "content": "\ufffd\ufffd",
    }


def test_script_wins_over_raw_and_empty(mouse):
    update = mouse.render(script="go()", raw="raw", empty=True)
    assert isinstance(update.content, ScriptPayload)
    update = mouse.render(raw="raw", empty=True)
    assert isinstance(update.content, RawPayload)


def test_text_renders_literally_without_frame(mouse):
    update = mouse.render(text="<b>hi</b>")
    assert update.content.markup == "<b>hi</b>"
    assert update.mode is UpdateMode.REPLACE_WHOLE


def test_view_and_layout(mouse):
    with cage_context():
        update = mouse.render(view="bored", layout="metal")
    assert update.content.markup == '<div id="mouse"><main><p>bored</p></main></div>'


def test_locals_reach_the_template():
    class Sign(Widget):
        @state
        def show(self):
            return self.render(locals={"label": "<Cheese>"})

    templates = JinjaTemplates.from_mapping({"sign/show.html": "{{ label }}"})
    with use_context(templates=templates):
        update = Sign("sign", "show").invoke()
    assert update.content.markup == '<div id="sign">&lt;Cheese&gt;</div>'


def test_widget_that_never_ran_renders_its_start_view():
    class Sign(Widget):
        @state
        def show(self):
            return self.render()

    templates = JinjaTemplates.from_mapping({"sign/show.html": "open"})
    sign = Sign("sign", "show")
    with use_context(templates=templates):
        update = sign.render()
    assert update.content.markup == '<div id="sign">open</div>'
    assert sign.current_state is None


def test_default_frame_comes_from_config(mouse):
    ctx = RenderContext(
        config=Config(default_frame="span"),
        templates=JinjaTemplates.from_mapping(TEMPLATES),
    )
    with use_context(ctx):
        update = mouse.render()
    assert update.content.markup == '<span id="mouse"><p>idle mouse</p></span>'


def test_unknown_render_option_is_a_type_error(mouse):
    with pytest.raises(TypeError):
        mouse.render(replace_html=True)


def test_render_options_resolution():
    opts = RenderOptions.resolve()
    assert opts.frame == "div"
    assert opts.render_children is True
    assert RenderOptions.resolve(replace_inner=True).frame is False
    assert RenderOptions.resolve(text="x").frame is False
    assert RenderOptions.resolve(frame=True, default_frame="li").frame == "li"
    assert RenderOptions.resolve(html_attrs=None).html_attrs == {}
    assert opts.frame_attrs("w") == {"id": "w"}


def test_frame_content():
    assert frame_content("x", False, {"id": "a"}) == "x"
    assert frame_content("x", "li", {"id": "a", "hidden": True}) == '<li id="a" hidden>x</li>'


# -- composing children ---------------------------------------------------


def test_compose_skips_hidden_children_and_keeps_order():
    cage = build_cage()
    cage << MouseWidget("rat", "idle")
    with cage_context():
        rendered = compose(cage)
    assert list(rendered) == ["mouse", "rat"]
    assert all(isinstance(r, PageUpdate) for r in rendered.values())
    assert cage.find_widget("food").current_state is None


def test_compose_override_precedence():
    cage = build_cage()
    with cage_context():
        rendered = compose(cage, {"mouse": "bored"})
    assert rendered["mouse"].content.markup == '<div id="mouse"><p>bored</p></div>'
    assert cage.find_widget("mouse").current_state == "bored"


def test_compose_lets_children_decide_their_next_state():
    cage = build_cage()
    with cage_context():
        first = compose(cage)["mouse"]
        second = compose(cage)["mouse"]
    assert "idle" in str(first)
    assert "eating" in str(second)


def test_overrides_for_unknown_children_are_ignored():
    cage = build_cage()
    with cage_context():
        rendered = compose(cage, {"cat": "pounce", "food": "show"})
    assert list(rendered) == ["mouse"]


def test_render_children_can_be_turned_off():
    cage = build_cage()
    with cage_context():
        update = cage.invoke()
        cage.render(render_children=False)
    assert update.content.children["mouse"].target == "mouse"
    assert cage.find_widget("mouse").current_state == "idle"


def test_invoke_option_overrides_child_states():
    class Box(Widget):
        @state
        def show(self):
            return self.render(invoke={"mouse": "squeak"}, frame=False)

    box = Box("box", "show")
    mouse = build_cage().remove_child("mouse")
    box << mouse
    templates = JinjaTemplates.from_mapping({"box/show.html": "{{ content() }}"})
    with use_context(templates=templates):
        update = box.invoke()
    assert update.content.markup == "alert('SQUEAK!');"
    assert update.content.children["mouse"].content == ScriptPayload("alert('SQUEAK!');")
