from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class PaneId(Enum):
    HEADER = "header"
    COLLECTIONS = "collections"
    WORKSPACE = "workspace"
    RESULTS = "results"


class FocusType(Enum):
    INACTIVE = "inactive"  # not reachable by input
    ACTIVE = "active"  # tab target, keys are pane-level commands
    EDITING = "editing"  # pane owns raw key input


class NavigationError(Exception):
    """Structural navigation failure; indicates a programming error."""


class PaneNotRegistered(NavigationError):
    def __init__(self, pane_id: PaneId) -> None:
        super().__init__(f"Pane not registered: {pane_id.name}")
        self.pane_id = pane_id


class NoPanesRegistered(NavigationError):
    def __init__(self) -> None:
        super().__init__("No panes registered")


@dataclass
class PaneInfo:
    id: PaneId
    element_count: int
    current_element: int = 0
    focus_type: FocusType = FocusType.INACTIVE

    def is_active(self) -> bool:
        return self.focus_type in (FocusType.ACTIVE, FocusType.EDITING)

    def is_editing(self) -> bool:
        return self.focus_type is FocusType.EDITING

    def activate(self) -> None:
        self.focus_type = FocusType.ACTIVE

    def deactivate(self) -> None:
        self.focus_type = FocusType.INACTIVE

    def start_editing(self) -> None:
        self.focus_type = FocusType.EDITING

    def stop_editing(self) -> None:
        if self.focus_type is FocusType.EDITING:
            self.focus_type = FocusType.ACTIVE

    def next_element(self) -> bool:
        if self.element_count <= 1:
            return False
        self.current_element = (self.current_element + 1) % self.element_count
        return True

    def prev_element(self) -> bool:
        if self.element_count <= 1:
            return False
        self.current_element = (self.current_element - 1) % self.element_count
        return True


class NavigationManager:
    """Registry of panes plus the cursor that decides which one receives input.

    - ``tab_order`` lists every registered pane exactly once.
    - At most one pane is not INACTIVE, and it is ``active_pane``.
    - Tab cycles sub-elements of an EDITING pane that has more than one
      element, otherwise it moves to the next pane.
    """

    def __init__(self) -> None:
        self._panes: dict[PaneId, PaneInfo] = {}
        self._tab_order: list[PaneId] = []
        self._active_pane: PaneId | None = None

    # ---- Registration ----
    def register_pane(self, pane_id: PaneId, element_count: int) -> None:
        info = self._panes.get(pane_id)
        if info is None:
            self._panes[pane_id] = PaneInfo(pane_id, element_count)
        else:
            # Re-registration keeps focus; only the element count changes
            info.element_count = element_count
            if info.current_element >= element_count:
                info.current_element = 0

        if pane_id not in self._tab_order:
            self._tab_order.append(pane_id)

        if self._active_pane is None:
            self._active_pane = pane_id
            self._panes[pane_id].activate()

    def move_in_tab_order(self, pane_id: PaneId, new_position: int) -> None:
        self._require(pane_id)
        self._tab_order.remove(pane_id)
        pos = max(0, min(new_position, len(self._tab_order)))
        self._tab_order.insert(pos, pane_id)

    # ---- Accessors ----
    @property
    def tab_order(self) -> list[PaneId]:
        return list(self._tab_order)

    @property
    def active_pane(self) -> PaneId | None:
        return self._active_pane

    def get_pane_info(self, pane_id: PaneId) -> PaneInfo | None:
        return self._panes.get(pane_id)

    def active_pane_info(self) -> PaneInfo | None:
        if self._active_pane is None:
            return None
        return self._panes.get(self._active_pane)

    def is_active(self, pane_id: PaneId) -> bool:
        return self._active_pane is pane_id

    def is_editing(self, pane_id: PaneId) -> bool:
        info = self._panes.get(pane_id)
        return info is not None and info.is_editing()

    def focus_type(self, pane_id: PaneId) -> FocusType:
        info = self._panes.get(pane_id)
        return info.focus_type if info is not None else FocusType.INACTIVE

    # ---- Mutation ----
    def activate_pane(self, pane_id: PaneId) -> None:
        self._require(pane_id)
        if self._active_pane is not None:
            current = self._panes.get(self._active_pane)
            if current is not None:
                current.deactivate()
        self._panes[pane_id].activate()
        self._active_pane = pane_id
        logger.debug("activated pane %s", pane_id.name)

    def cycle_pane(self, reverse: bool = False) -> PaneId:
        if not self._tab_order:
            raise NoPanesRegistered()
        if self._active_pane is not None and self._active_pane in self._tab_order:
            current_idx = self._tab_order.index(self._active_pane)
        else:
            current_idx = 0
        step = -1 if reverse else 1
        next_id = self._tab_order[(current_idx + step) % len(self._tab_order)]
        self.activate_pane(next_id)
        return next_id

    def start_editing(self, pane_id: PaneId) -> None:
        self._require(pane_id)
        if self._active_pane is not pane_id:
            self.activate_pane(pane_id)
        self._panes[pane_id].start_editing()

    def stop_editing(self, pane_id: PaneId) -> None:
        self._require(pane_id)
        self._panes[pane_id].stop_editing()

    def handle_tab(self, reverse: bool = False) -> tuple[PaneId, bool]:
        """Returns (pane, consumed_within_pane)."""
        info = self.active_pane_info()
        if info is not None and info.is_editing() and info.element_count > 1:
            handled = info.prev_element() if reverse else info.next_element()
            if handled:
                return info.id, True
        return self.cycle_pane(reverse), False

    def _require(self, pane_id: PaneId) -> None:
        if pane_id not in self._panes:
            raise PaneNotRegistered(pane_id)
