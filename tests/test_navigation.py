from __future__ import annotations

import pytest

from sqli.core.navigation import (
    FocusType,
    NavigationManager,
    NoPanesRegistered,
    PaneId,
    PaneNotRegistered,
)

ALL = [PaneId.HEADER, PaneId.COLLECTIONS, PaneId.WORKSPACE, PaneId.RESULTS]


def _nav(ids=ALL, counts=None) -> NavigationManager:
    nav = NavigationManager()
    for i, pane_id in enumerate(ids):
        nav.register_pane(pane_id, counts[i] if counts else 1)
    return nav


def _non_inactive(nav: NavigationManager) -> list[PaneId]:
    return [p for p in nav.tab_order if nav.focus_type(p) is not FocusType.INACTIVE]


def test_first_registered_pane_is_active() -> None:
    nav = _nav()
    assert nav.active_pane is PaneId.HEADER
    assert nav.focus_type(PaneId.HEADER) is FocusType.ACTIVE
    assert _non_inactive(nav) == [PaneId.HEADER]


def test_tab_order_lists_each_pane_once() -> None:
    nav = _nav()
    nav.register_pane(PaneId.WORKSPACE, 2)
    nav.register_pane(PaneId.HEADER, 1)
    assert nav.tab_order == ALL
    assert sorted(p.value for p in nav.tab_order) == sorted(p.value for p in ALL)


def test_reregistration_keeps_focus_and_clamps_element() -> None:
    nav = _nav(counts=[1, 3, 1, 1])
    nav.start_editing(PaneId.COLLECTIONS)
    nav.handle_tab()
    nav.handle_tab()
    assert nav.get_pane_info(PaneId.COLLECTIONS).current_element == 2

    nav.register_pane(PaneId.COLLECTIONS, 2)
    info = nav.get_pane_info(PaneId.COLLECTIONS)
    assert info.element_count == 2
    assert info.current_element == 0
    assert info.focus_type is FocusType.EDITING
    assert nav.active_pane is PaneId.COLLECTIONS


@pytest.mark.parametrize("count", [2, 3, 4])
def test_cycle_round_trip(count: int) -> None:
    nav = _nav(ALL[:count])
    nav.activate_pane(ALL[1])
    nav.cycle_pane(False)
    nav.cycle_pane(True)
    assert nav.active_pane is ALL[1]
    nav.cycle_pane(True)
    nav.cycle_pane(False)
    assert nav.active_pane is ALL[1]


def test_cycle_wraps_around() -> None:
    nav = _nav()
    assert nav.cycle_pane(True) is PaneId.RESULTS
    assert nav.cycle_pane(False) is PaneId.HEADER
    assert _non_inactive(nav) == [PaneId.HEADER]


def test_cycle_with_no_panes_raises() -> None:
    with pytest.raises(NoPanesRegistered):
        NavigationManager().cycle_pane()


def test_unknown_pane_raises() -> None:
    nav = _nav([PaneId.HEADER])
    with pytest.raises(PaneNotRegistered) as exc:
        nav.activate_pane(PaneId.RESULTS)
    assert str(exc.value) == "Pane not registered: RESULTS"
    with pytest.raises(PaneNotRegistered):
        nav.start_editing(PaneId.RESULTS)
    with pytest.raises(PaneNotRegistered):
        nav.stop_editing(PaneId.RESULTS)
    with pytest.raises(PaneNotRegistered):
        nav.move_in_tab_order(PaneId.RESULTS, 0)
    assert nav.active_pane is PaneId.HEADER


def test_start_editing_activates_pane() -> None:
    nav = _nav()
    nav.start_editing(PaneId.WORKSPACE)
    assert nav.get_pane_info(PaneId.WORKSPACE).focus_type is FocusType.EDITING
    assert nav.is_active(PaneId.WORKSPACE)
    assert nav.is_editing(PaneId.WORKSPACE)
    assert nav.focus_type(PaneId.HEADER) is FocusType.INACTIVE
    assert _non_inactive(nav) == [PaneId.WORKSPACE]


def test_stop_editing_demotes_only_editing_panes() -> None:
    nav = _nav()
    nav.start_editing(PaneId.RESULTS)
    nav.stop_editing(PaneId.RESULTS)
    assert nav.focus_type(PaneId.RESULTS) is FocusType.ACTIVE
    nav.stop_editing(PaneId.HEADER)
    assert nav.focus_type(PaneId.HEADER) is FocusType.INACTIVE


def test_handle_tab_cycles_all_four_panes() -> None:
    nav = _nav()
    seen = []
    for _ in range(4):
        pane, consumed = nav.handle_tab()
        assert consumed is False
        seen.append(pane)
    assert seen == [PaneId.COLLECTIONS, PaneId.WORKSPACE, PaneId.RESULTS, PaneId.HEADER]


def test_handle_tab_cycles_elements_while_editing() -> None:
    nav = _nav(counts=[3, 1, 1, 1])
    nav.start_editing(PaneId.HEADER)
    assert nav.handle_tab() == (PaneId.HEADER, True)
    assert nav.get_pane_info(PaneId.HEADER).current_element == 1
    assert nav.handle_tab(reverse=True) == (PaneId.HEADER, True)
    assert nav.handle_tab(reverse=True) == (PaneId.HEADER, True)
    assert nav.get_pane_info(PaneId.HEADER).current_element == 2
    assert nav.active_pane is PaneId.HEADER


def test_handle_tab_single_element_editing_pane_switches_panes() -> None:
    nav = _nav()
    nav.start_editing(PaneId.COLLECTIONS)
    assert nav.handle_tab() == (PaneId.WORKSPACE, False)
    assert nav.focus_type(PaneId.COLLECTIONS) is FocusType.INACTIVE


def test_active_multi_element_pane_still_switches() -> None:
    nav = _nav(counts=[3, 1, 1, 1])
    assert nav.handle_tab() == (PaneId.COLLECTIONS, False)


def test_move_in_tab_order() -> None:
    nav = _nav()
    nav.move_in_tab_order(PaneId.RESULTS, 0)
    assert nav.tab_order == [PaneId.RESULTS, PaneId.HEADER, PaneId.COLLECTIONS, PaneId.WORKSPACE]
    nav.move_in_tab_order(PaneId.RESULTS, 99)
    assert nav.tab_order == ALL
    assert nav.cycle_pane(True) is PaneId.RESULTS


def test_at_most_one_pane_not_inactive_after_mixed_operations() -> None:
    nav = _nav(counts=[1, 2, 1, 1])
    ops = [
        lambda: nav.start_editing(PaneId.COLLECTIONS),
        lambda: nav.handle_tab(),
        lambda: nav.cycle_pane(True),
        lambda: nav.activate_pane(PaneId.RESULTS),
        lambda: nav.start_editing(PaneId.HEADER),
        lambda: nav.handle_tab(reverse=True),
        lambda: nav.stop_editing(PaneId.RESULTS),
    ]
    for op in ops:
        op()
        active = _non_inactive(nav)
        assert len(active) == 1
        assert active[0] is nav.active_pane
