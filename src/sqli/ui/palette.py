from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class Palette:
    footer_bg: str
    footer_fg: str
    accent: str
    accent_dim: str
    focus_border: str
    editing_border: str
    panel_border: str
    panel_title: str
    shortcut_fg: str
    shortcut_bg: str
    message_fg: str
    error_fg: str
    # Workspace roles
    cursor_bg: str
    cursor_fg: str
    line_number: str
    search_hit_bg: str
    search_bar_bg: str
    search_bar_fg: str
    # Collections tree / results roles
    tree_folder: str
    tree_file: str
    tree_scope: str
    row_selected_bg: str
    table_header: str
    table_cell: str
    # Modal roles
    overlay_bg: str
    modal_bg: str
    modal_fg: str
    modal_border: str
    input_bg: str
    input_focus_border: str
    radio_selected: str
    # Button themes: background per theme, shared foreground
    button_fg: str
    button_blue: str
    button_red: str
    button_green: str
    button_hover: str
    button_active: str


DEFAULT = Palette(
    footer_bg="#1f2430",
    footer_fg="#d8dee9",
    accent="#5ea1ff",
    accent_dim="#4c75c6",
    focus_border="#ffa657",
    editing_border="#10b981",
    panel_border="#3b4252",
    panel_title="#d8dee9",
    shortcut_fg="#ffffff",
    shortcut_bg="#5ea1ff",
    message_fg="#ffb86c",
    error_fg="#ff5555",
    cursor_bg="#314f76",
    cursor_fg="#ffffff",
    line_number="#6b7280",
    search_hit_bg="#b36b00",
    search_bar_bg="#065f46",
    search_bar_fg="#ffffff",
    tree_folder="#5ea1ff",
    tree_file="#d8dee9",
    tree_scope="#6b7280",
    row_selected_bg="#314f76",
    table_header="#4c75c6",
    table_cell="#d8dee9",
    overlay_bg="#0f1117",
    modal_bg="#1f2430",
    modal_fg="#d8dee9",
    modal_border="#5ea1ff",
    input_bg="#0f1117",
    input_focus_border="#ffa657",
    radio_selected="#10b981",
    button_fg="#ffffff",
    button_blue="#4c75c6",
    button_red="#b91c1c",
    button_green="#047857",
    button_hover="#5ea1ff",
    button_active="#ffa657",
)

DIM = Palette(
    footer_bg="#2b2b2b",
    footer_fg="#cccccc",
    accent="#a0a0a0",
    accent_dim="#888888",
    focus_border="#bbbbbb",
    editing_border="#e0e0e0",
    panel_border="#444444",
    panel_title="#cccccc",
    shortcut_fg="#000000",
    shortcut_bg="#a0a0a0",
    message_fg="#e6b673",
    error_fg="#ff6666",
    cursor_bg="#555555",
    cursor_fg="#ffffff",
    line_number="#666666",
    search_hit_bg="#7a7a7a",
    search_bar_bg="#303030",
    search_bar_fg="#f0f0f0",
    tree_folder="#bbbbbb",
    tree_file="#e0e0e0",
    tree_scope="#777777",
    row_selected_bg="#303030",
    table_header="#888888",
    table_cell="#e0e0e0",
    overlay_bg="#1a1a1a",
    modal_bg="#2b2b2b",
    modal_fg="#e0e0e0",
    modal_border="#a0a0a0",
    input_bg="#1a1a1a",
    input_focus_border="#bbbbbb",
    radio_selected="#f0f0f0",
    button_fg="#ffffff",
    button_blue="#555555",
    button_red="#7a3b3b",
    button_green="#3b6a4a",
    button_hover="#777777",
    button_active="#999999",
)

HIGH_CONTRAST = Palette(
    footer_bg="#000000",
    footer_fg="#ffffff",
    accent="#00ffff",
    accent_dim="#00aaaa",
    focus_border="#ffff00",
    editing_border="#00ff00",
    panel_border="#888888",
    panel_title="#ffffff",
    shortcut_fg="#000000",
    shortcut_bg="#ffff00",
    message_fg="#ffb000",
    error_fg="#ff6666",
    cursor_bg="#ff00ff",
    cursor_fg="#000000",
    line_number="#aaaaaa",
    search_hit_bg="#888800",
    search_bar_bg="#008800",
    search_bar_fg="#ffffff",
    tree_folder="#00ffff",
    tree_file="#ffffff",
    tree_scope="#aaaaaa",
    row_selected_bg="#333333",
    table_header="#00aaaa",
    table_cell="#ffffff",
    overlay_bg="#000000",
    modal_bg="#000000",
    modal_fg="#ffffff",
    modal_border="#ffff00",
    input_bg="#000000",
    input_focus_border="#00ffff",
    radio_selected="#00ff00",
    button_fg="#000000",
    button_blue="#00aaaa",
    button_red="#ff6666",
    button_green="#00ff00",
    button_hover="#ffff00",
    button_active="#ff00ff",
)

PALETTES = {"default": DEFAULT, "dim": DIM, "high-contrast": HIGH_CONTRAST}
ROLES = frozenset(f.name for f in fields(Palette))

_current = DEFAULT


def current() -> Palette:
    return _current


def use(name: str) -> Palette:
    """Select the palette every renderer draws with."""
    global _current
    try:
        _current = PALETTES[name]
    except KeyError:
        raise ValueError(f"Unknown theme: {name}") from None
    return _current


def resolve(style: str) -> str:
    """Replace palette role names in a rich style string with colours.

    ``"bold modal_fg on modal_bg"`` becomes ``"bold #d8dee9 on #1f2430"`` under
    the default palette; words that are not roles are kept as they are.
    """
    pal = _current
    return " ".join(
        getattr(pal, word) if word in ROLES else word
        for word in style.split()
    )
