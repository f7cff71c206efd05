from __future__ import annotations

from pathlib import Path

import pytest

import sqli.core
from sqli.core import events
from sqli.core.controls import Button, ButtonState, LineInput, RadioGroup, RadioOption
from sqli.core.events import CTRL, MouseEvent, MouseKind, key, key_from_name, mouse_down
from sqli.core.geometry import Rect, centered_rect, split_columns, split_rows
from sqli.core.results import QueryResult
from sqli.ui import palette
from sqli.ui.canvas import Canvas


def test_key_from_name() -> None:
    assert key_from_name("a") == key("a")
    assert key_from_name("A") == key("A")
    assert key_from_name("ctrl+s") == key("s", CTRL)
    assert key_from_name("shift+tab") == key(events.TAB, events.SHIFT)
    assert key_from_name("backtab").shift
    assert key_from_name("ctrl+@") == key(events.SPACE, CTRL)
    assert key_from_name("space", " ") == key(" ")
    assert key_from_name("full_stop", ".") == key(".")
    assert key_from_name("escape") == key(events.ESCAPE)
    assert key_from_name("enter").char is None


def test_line_input_editing() -> None:
    field = LineInput("select")
    field.handle_key_event(key(events.HOME))
    field.handle_key_event(key("x"))
    assert field.value == "xselect"
    field.handle_key_event(key(events.DELETE))
    field.handle_key_event(key(events.END))
    field.handle_key_event(key(events.BACKSPACE))
    assert field.value == "xelec"
    assert field.handle_key_event(key("u", CTRL))
    assert field.value == ""
    assert not field.handle_key_event(key(events.ENTER))


def test_line_input_render_masks_and_scrolls() -> None:
    canvas = Canvas(12, 3)
    field = LineInput("abcdefghijklmnop", masked=True)
    field.render(canvas, canvas.area, title="Pw", focused=True)
    assert canvas.row_text(1) == "│" + "•" * 9 + " │"
    assert "Pw" in canvas.row_text(0)


def test_radio_group() -> None:
    with pytest.raises(ValueError):
        RadioGroup([])
    group = RadioGroup([RadioOption("A", 1), RadioOption("B", 2)])
    group.handle_key_event(key(events.RIGHT))
    assert group.selected_value == 2
    group.handle_key_event(key(events.RIGHT))
    assert group.selected_value == 1
    assert not group.handle_key_event(key("x"))
    assert group.click(mouse_down(15, 0), Rect(0, 0, 20, 1))
    assert group.selected_value == 2
    group.set_selected(1)
    assert group.selected == 0
    canvas = Canvas(20, 1)
    group.render(canvas, canvas.area)
    assert canvas.row_text(0) == "(*) A     ( ) B     "


def test_button_states() -> None:
    button = Button("Run", "green")
    assert not button.handle_mouse_event(mouse_down(0, 0))
    canvas = Canvas(10, 3)
    button.render(canvas, Rect(2, 0, 6, 3))
    assert canvas.row_text(1) == "   Run    "
    assert button.handle_mouse_event(MouseEvent(MouseKind.MOVE, 3, 1))
    assert button.state is ButtonState.HOVER
    button.handle_mouse_event(mouse_down(3, 1))
    assert button.state is ButtonState.ACTIVE
    assert button.style() == "bold button_fg on button_active"
    assert palette.resolve(button.style()).endswith(palette.current().button_active)
    button.handle_mouse_event(MouseEvent(MouseKind.UP, 3, 1))
    assert button.state is ButtonState.NORMAL


def test_geometry_helpers() -> None:
    area = Rect(0, 0, 100, 40)
    assert centered_rect(50, 25, area) == Rect(25, 15, 50, 10)
    top, flex, bottom = split_rows(Rect(0, 0, 10, 10), [2, None, 3])
    assert (top.height, flex.y, flex.height, bottom.y) == (2, 2, 5, 7)
    cols = split_columns(Rect(0, 0, 10, 1), [None, None, None])
    assert [c.width for c in cols] == [3, 3, 4]
    assert Rect(1, 1, 1, 1).inner(1).is_empty


def test_canvas_clips_and_merges_styles() -> None:
    canvas = Canvas(6, 2)
    assert canvas.draw_text(4, 0, "abcd", "red") == 2
    canvas.put(9, 9, "x")
    canvas.draw_box(canvas.area, "blue", "T")
    assert canvas.row_text(0) == "┌ T ─┐"
    assert canvas.row_text(1) == "└────┘"
    text = canvas.to_text(Rect(0, 0, 3, 1))
    assert text.plain == "┌ T"
    assert canvas.style_at(2, 0) == "blue"


def test_canvas_resolves_palette_roles() -> None:
    canvas = Canvas(4, 1)
    canvas.draw_text(0, 0, "ab", "bold modal_fg on modal_bg")
    canvas.draw_text(2, 0, "cd", "red")
    spans = canvas.to_text().spans
    pal = palette.current()
    assert str(spans[0].style) == f"bold {pal.modal_fg} on {pal.modal_bg}"
    assert str(spans[1].style) == "red"
    assert canvas.style_at(0, 0) == "bold modal_fg on modal_bg"


def test_core_draws_without_the_ui_layer() -> None:
    core = Path(sqli.core.__file__).parent
    for source in core.glob("*.py"):
        assert "sqli.ui" not in source.read_text(encoding="utf-8"), source.name


def test_palette_selection() -> None:
    try:
        palette.use("high-contrast")
        assert palette.current() is palette.PALETTES["high-contrast"]
        with pytest.raises(ValueError):
            palette.use("neon")
        assert palette.resolve("bold accent on nothing") == f"bold {palette.current().accent} on nothing"
    finally:
        palette.use("default")


def test_query_result_helpers() -> None:
    result = QueryResult.from_values(["id", "name"], [(1, "x" * 50), (2, None)], 3.4)
    assert result.rows[1] == ["2", "NULL"]
    assert result.summary() == "Query time: 3ms | 2 rows"
    assert QueryResult().is_empty
