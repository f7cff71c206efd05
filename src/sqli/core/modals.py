from __future__ import annotations

from dataclasses import dataclass

from sqli.core import events
from sqli.core.controls import LineInput, RadioGroup, RadioOption
from sqli.core.dialog import (
    CLOSE,
    NO_ACTION,
    ButtonAction,
    DialogButton,
    ModalAction,
    ModalDialog,
    custom,
)
from sqli.core.drawing import Surface
from sqli.core.events import KeyEvent, MouseEvent
from sqli.core.geometry import Rect, split_rows
from sqli.core.tree import CollectionScope, EntryKind

NAME_ROWS = 3


def _scope_options() -> list[RadioOption]:
    return [RadioOption("Local", CollectionScope.LOCAL), RadioOption("User", CollectionScope.USER)]


@dataclass(frozen=True)
class NewFileValues:
    name: str
    kind: EntryKind
    scope: CollectionScope
    parent_folder: str | None = None


@dataclass(frozen=True)
class EditFileValues:
    name: str
    scope: CollectionScope


class FormModal:
    """Shared key/mouse routing for dialogs made of a column of fields.

    Subclasses provide the dialog, the field rectangles inside the content
    region, and how a key or click reaches the field at a given index.
    """

    dialog: ModalDialog

    def __init__(self) -> None:
        self.focused_element = 0
        self.error: str | None = None
        self.last_area: Rect | None = None

    @property
    def element_count(self) -> int:
        return 1

    def set_error(self, message: str | None) -> None:
        self.error = message

    def handle_key_event(self, key: KeyEvent) -> ModalAction:
        if key.code == events.ENTER:
            return custom(ButtonAction.SUBMIT)
        if key.code == events.ESCAPE:
            return CLOSE
        if key.code == events.TAB:
            step = -1 if key.shift else 1
            self.focused_element = (self.focused_element + step) % self.element_count
            return NO_ACTION
        if self._field_key(self.focused_element, key):
            self.error = None
        return NO_ACTION

    def handle_mouse_event(self, mouse: MouseEvent, area: Rect) -> ModalAction:
        hit = self.dialog.hit_test(mouse, area)
        if hit.content is not None:
            for index, rect in enumerate(self.field_areas(hit.content)):
                if rect.contains(mouse.column, mouse.row):
                    self.focused_element = index
                    self._field_click(index, mouse, rect)
                    break
        return hit.action

    def render(self, canvas: Surface, area: Rect) -> None:
        self.last_area = area
        self.dialog.render(canvas, area, self._draw_content)

    def _draw_content(self, canvas: Surface, content: Rect) -> None:
        for index, rect in enumerate(self.field_areas(content)):
            self._draw_field(canvas, index, rect, focused=index == self.focused_element)
        if self.error:
            row = content.bottom - 1
            canvas.draw_text(content.x, row, self.error, "error_fg on modal_bg", content.width)

    @staticmethod
    def _after_label(rect: Rect, label: str) -> Rect:
        width = min(rect.width, len(label) + 1)
        return Rect(rect.x + width, rect.y, rect.width - width, rect.height)

    def _draw_label(self, canvas: Surface, rect: Rect, label: str) -> Rect:
        """Draw ``label`` at the left of a one-row field, return the rest."""
        canvas.draw_text(rect.x, rect.y, label, "accent on modal_bg")
        return self._after_label(rect, label)

    def field_areas(self, content: Rect) -> list[Rect]:
        raise NotImplementedError

    def _field_key(self, index: int, key: KeyEvent) -> bool:
        raise NotImplementedError

    def _field_click(self, index: int, mouse: MouseEvent, rect: Rect) -> None:
        raise NotImplementedError

    def _draw_field(self, canvas: Surface, index: int, rect: Rect, *, focused: bool) -> None:
        raise NotImplementedError


class PasswordModal(FormModal):
    def __init__(self) -> None:
        super().__init__()
        self.password = LineInput(masked=True)
        self.dialog = ModalDialog(
            "Enter Password",
            [
                DialogButton("Cancel", ButtonAction.CANCEL, "red"),
                DialogButton("Submit", ButtonAction.SUBMIT, "green"),
            ],
            50,
            30,
            min_width=36,
            min_height=12,
        )

    def values(self) -> str:
        return self.password.value

    def field_areas(self, content: Rect) -> list[Rect]:
        return split_rows(content, [NAME_ROWS])[:1]

    def _field_key(self, index: int, key: KeyEvent) -> bool:
        return self.password.handle_key_event(key)

    def _field_click(self, index: int, mouse: MouseEvent, rect: Rect) -> None:
        self.password.click(mouse, rect)

    def _draw_field(self, canvas: Surface, index: int, rect: Rect, *, focused: bool) -> None:
        self.password.render(canvas, rect, title="Password", focused=focused)


class NewFileModal(FormModal):
    def __init__(self, parent_folder: str | None = None) -> None:
        super().__init__()
        self.parent_folder = parent_folder
        self.name = LineInput(placeholder="collection/query.sql" if parent_folder is None else "query.sql")
        self.kind = RadioGroup([RadioOption("File", EntryKind.FILE), RadioOption("Folder", EntryKind.FOLDER)])
        self.scope = RadioGroup(_scope_options())
        title = "New File/Folder" if parent_folder is None else f"New in {parent_folder}"
        self.dialog = ModalDialog(
            title,
            [
                DialogButton("Cancel", ButtonAction.CANCEL, "red"),
                DialogButton("Create", ButtonAction.SUBMIT, "green"),
            ],
            50,
            40,
            min_width=40,
            min_height=16,
        )

    @property
    def element_count(self) -> int:
        return 3

    def values(self) -> NewFileValues:
        return NewFileValues(
            self.name.value.strip(),
            self.kind.selected_value,  # type: ignore[arg-type]
            self.scope.selected_value,  # type: ignore[arg-type]
            self.parent_folder,
        )

    def field_areas(self, content: Rect) -> list[Rect]:
        name, _, kind, _, scope = split_rows(content, [NAME_ROWS, 1, 1, 1, 1])[:5]
        return [name, kind, scope]

    def _field_key(self, index: int, key: KeyEvent) -> bool:
        if index == 0:
            return self.name.handle_key_event(key)
        group = self.kind if index == 1 else self.scope
        return group.handle_key_event(key)

    def _field_click(self, index: int, mouse: MouseEvent, rect: Rect) -> None:
        if index == 0:
            self.name.click(mouse, rect)
        elif index == 1:
            self.kind.click(mouse, self._after_label(rect, "Type:"))
        else:
            self.scope.click(mouse, self._after_label(rect, "Scope:"))

    def _draw_field(self, canvas: Surface, index: int, rect: Rect, *, focused: bool) -> None:
        if index == 0:
            self.name.render(canvas, rect, title="Name", focused=focused)
        elif index == 1:
            self.kind.render(canvas, self._draw_label(canvas, rect, "Type:"), focused=focused)
        else:
            self.scope.render(canvas, self._draw_label(canvas, rect, "Scope:"), focused=focused)


class EditFileModal(FormModal):
    def __init__(self, name: str, is_folder: bool, current_scope: CollectionScope) -> None:
        super().__init__()
        self.original_name = name
        self.is_folder = is_folder
        self.current_scope = current_scope
        self.name = LineInput(name)
        self.scope = RadioGroup(_scope_options())
        self.scope.set_selected(current_scope)
        self.dialog = ModalDialog(
            f"Edit {'Folder' if is_folder else 'File'}",
            [
                DialogButton("Cancel", ButtonAction.CANCEL, "red"),
                DialogButton("Save", ButtonAction.SUBMIT, "green"),
            ],
            50,
            35 if is_folder else 25,
            min_width=40,
            min_height=14 if is_folder else 12,
        )

    @property
    def element_count(self) -> int:
        return 2 if self.is_folder else 1

    def values(self) -> EditFileValues:
        scope = self.scope.selected_value if self.is_folder else self.current_scope
        return EditFileValues(self.name.value.strip(), scope)  # type: ignore[arg-type]

    def field_areas(self, content: Rect) -> list[Rect]:
        name, _, scope = split_rows(content, [NAME_ROWS, 1, 1])[:3]
        return [name, scope] if self.is_folder else [name]

    def _field_key(self, index: int, key: KeyEvent) -> bool:
        if index == 0:
            return self.name.handle_key_event(key)
        return self.scope.handle_key_event(key)

    def _field_click(self, index: int, mouse: MouseEvent, rect: Rect) -> None:
        if index == 0:
            self.name.click(mouse, rect)
        else:
            self.scope.click(mouse, self._after_label(rect, "Scope:"))

    def _draw_field(self, canvas: Surface, index: int, rect: Rect, *, focused: bool) -> None:
        if index == 0:
            self.name.render(canvas, rect, title="Name", focused=focused)
        else:
            self.scope.render(canvas, self._draw_label(canvas, rect, "Scope:"), focused=focused)
