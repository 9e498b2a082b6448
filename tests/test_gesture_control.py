import logging

import pytest

from gesture_control import DEFAULT_SELECTION, GestureController, SessionState, apply_symbol
from pose_types import GarmentColor, GarmentSelection, GarmentType, GestureSymbol


def test_cooldown_allows_one_change_per_window():
    controller = GestureController(cooldown_seconds=1.0)
    state = SessionState()

    assert controller.apply(state, [GestureSymbol.RIGHT_HAND_UP], now=10.0)
    assert not controller.apply(state, [GestureSymbol.RIGHT_HAND_UP], now=10.5)
    assert state.selection.type == GarmentType.JACKET

    assert controller.apply(state, [GestureSymbol.RIGHT_HAND_UP], now=11.0)
    assert state.selection.type == GarmentType.DRESS


def test_cooldown_state_tracks_expiry():
    controller = GestureController(cooldown_seconds=2.0)
    state = SessionState()
    controller.apply(state, [GestureSymbol.HEAD_RIGHT], now=5.0)

    assert state.cooldown.active
    assert state.cooldown.expires_at == pytest.approx(7.0)
    assert state.cooldown.refresh(6.9)
    assert not state.cooldown.refresh(7.0)


def test_empty_symbols_do_not_start_cooldown():
    controller = GestureController()
    state = SessionState()
    assert not controller.apply(state, [], now=1.0)
    assert not state.cooldown.active
    assert state.selection == DEFAULT_SELECTION


def test_clock_is_used_when_no_time_given():
    ticks = iter([100.0, 100.2, 101.5])
    controller = GestureController(cooldown_seconds=1.0, clock=lambda: next(ticks))
    state = SessionState()

    assert controller.apply(state, [GestureSymbol.HEAD_RIGHT])
    assert not controller.apply(state, [GestureSymbol.HEAD_RIGHT])
    assert controller.apply(state, [GestureSymbol.HEAD_RIGHT])
    assert state.selection.color == GarmentColor.GREEN


def test_both_hands_takes_priority_and_resets():
    controller = GestureController()
    state = SessionState(selection=GarmentSelection(GarmentType.HAT, GarmentColor.BLACK))
    symbols = [GestureSymbol.RIGHT_HAND_UP, GestureSymbol.LEFT_HAND_UP, GestureSymbol.BOTH_HANDS_UP]

    assert controller.apply(state, symbols, now=0.0)
    assert state.selection == DEFAULT_SELECTION


def test_hand_takes_priority_over_head():
    controller = GestureController()
    state = SessionState()
    controller.apply(state, [GestureSymbol.HEAD_LEFT, GestureSymbol.LEFT_HAND_UP], now=0.0)
    assert state.selection == GarmentSelection(GarmentType.SCARF, GarmentColor.RED)


@pytest.mark.parametrize(
    "start,symbol,expected",
    [
        (GarmentSelection(GarmentType.SCARF, GarmentColor.RED), GestureSymbol.RIGHT_HAND_UP, GarmentSelection(GarmentType.SHIRT, GarmentColor.RED)),
        (GarmentSelection(GarmentType.SHIRT, GarmentColor.RED), GestureSymbol.LEFT_HAND_UP, GarmentSelection(GarmentType.SCARF, GarmentColor.RED)),
        (GarmentSelection(GarmentType.DRESS, GarmentColor.BLACK), GestureSymbol.HEAD_RIGHT, GarmentSelection(GarmentType.DRESS, GarmentColor.RED)),
        (GarmentSelection(GarmentType.DRESS, GarmentColor.RED), GestureSymbol.HEAD_LEFT, GarmentSelection(GarmentType.DRESS, GarmentColor.BLACK)),
    ],
)
def test_selection_changes_wrap(start, symbol, expected):
    assert apply_symbol(start, symbol) == expected


def test_applied_gesture_is_logged(caplog):
    controller = GestureController()
    with caplog.at_level(logging.INFO, logger="gesture_control"):
        controller.apply(SessionState(), [GestureSymbol.RIGHT_HAND_UP], now=0.0)
    assert "jacket_red" in caplog.text
