from __future__ import annotations

import logging
from dataclasses import dataclass

from sqli.core.dialog import (  # noqa: F401  re-exported for callers
    CLOSE,
    NO_ACTION,
    ButtonAction,
    ModalAction,
    ModalActionKind,
    custom,
)
from sqli.core.drawing import Surface
from sqli.core.events import KeyEvent, MouseEvent
from sqli.core.geometry import Rect
from sqli.core.modals import EditFileModal, NewFileModal, PasswordModal
from sqli.core.tree import CollectionScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PasswordPrompt:
    pass


@dataclass(frozen=True)
class NewFile:
    parent_folder: str | None = None


@dataclass(frozen=True)
class EditFile:
    name: str
    is_folder: bool
    current_scope: CollectionScope


ModalType = PasswordPrompt | NewFile | EditFile
Modal = PasswordModal | NewFileModal | EditFileModal


def build_modal(modal_type: ModalType) -> Modal:
    if isinstance(modal_type, PasswordPrompt):
        return PasswordModal()
    if isinstance(modal_type, NewFile):
        return NewFileModal(modal_type.parent_folder)
    if isinstance(modal_type, EditFile):
        return EditFileModal(modal_type.name, modal_type.is_folder, modal_type.current_scope)
    raise TypeError(f"Unknown modal type: {type(modal_type).__name__}")


class ModalManager:
    """Holds at most one modal plus a one-shot result outbox.

    While a modal is shown it receives every input event; ``handle_event``
    reports what the user asked for as a ``ModalAction``.
    """

    def __init__(self) -> None:
        self._modal: Modal | None = None
        self._result: str | None = None

    @property
    def active_modal(self) -> Modal | None:
        return self._modal

    def show_modal(self, modal_type: ModalType) -> Modal:
        self._modal = build_modal(modal_type)
        self._result = None
        logger.debug("showing modal %s", type(modal_type).__name__)
        return self._modal

    def close_modal(self) -> None:
        self._modal = None
        self._result = None

    def is_modal_active(self) -> bool:
        return self._modal is not None

    def handle_event(self, event: KeyEvent | MouseEvent, area: Rect | None = None) -> ModalAction:
        """Route one event to the active modal.

        Mouse events are hit-tested against ``area``, defaulting to the area
        the modal was last rendered into.
        """
        modal = self._modal
        if modal is None:
            return NO_ACTION
        if isinstance(event, KeyEvent):
            return modal.handle_key_event(event)
        area = area or modal.last_area
        if area is None:
            return NO_ACTION
        return modal.handle_mouse_event(event, area)

    def store_result(self, value: str) -> None:
        self._result = value

    def take_result(self) -> str | None:
        value, self._result = self._result, None
        return value

    def render(self, canvas: Surface, area: Rect) -> None:
        if self._modal is not None:
            self._modal.render(canvas, area)
