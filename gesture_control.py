import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from pose_types import GarmentSelection, GestureSymbol

logger = logging.getLogger(__name__)

DEFAULT_SELECTION = GarmentSelection()

# Highest priority first; one action is applied per cooldown window.
GESTURE_PRIORITY = [
    GestureSymbol.BOTH_HANDS_UP,
    GestureSymbol.RIGHT_HAND_UP,
    GestureSymbol.LEFT_HAND_UP,
    GestureSymbol.HEAD_RIGHT,
    GestureSymbol.HEAD_LEFT,
]


@dataclass
class GestureCooldownState:
    active: bool = False
    expires_at: float = 0.0

    def refresh(self, now: float) -> bool:
        if self.active and now >= self.expires_at:
            self.active = False
        return self.active

    def start(self, now: float, duration: float) -> None:
        self.active = True
        self.expires_at = now + duration


@dataclass
class SessionState:
    selection: GarmentSelection = DEFAULT_SELECTION
    mirrored: bool = True
    cooldown: GestureCooldownState = field(default_factory=GestureCooldownState)


def apply_symbol(selection: GarmentSelection, symbol: GestureSymbol) -> GarmentSelection:
    if symbol == GestureSymbol.BOTH_HANDS_UP:
        return DEFAULT_SELECTION
    if symbol == GestureSymbol.RIGHT_HAND_UP:
        return selection.shifted(type_step=1)
    if symbol == GestureSymbol.LEFT_HAND_UP:
        return selection.shifted(type_step=-1)
    if symbol == GestureSymbol.HEAD_RIGHT:
        return selection.shifted(color_step=1)
    if symbol == GestureSymbol.HEAD_LEFT:
        return selection.shifted(color_step=-1)
    return selection


class GestureController:
    """Applies detected gestures to a session, at most once per cooldown window."""

    def __init__(self, cooldown_seconds: float = 1.0, clock: Callable[[], float] = time.monotonic):
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._lock = threading.Lock()

    def apply(self, state: SessionState, symbols: Iterable[GestureSymbol], now: Optional[float] = None) -> bool:
        symbols = set(symbols)
        if not symbols:
            return False
        if now is None:
            now = self._clock()

        with self._lock:
            if state.cooldown.refresh(now):
                logger.debug("Gestures %s ignored during cooldown", sorted(s.value for s in symbols))
                return False

            symbol = next((s for s in GESTURE_PRIORITY if s in symbols), None)
            if symbol is None:
                return False

            state.selection = apply_symbol(state.selection, symbol)
            state.cooldown.start(now, self.cooldown_seconds)

        logger.info("Gesture %s -> %s", symbol.value, state.selection.key)
        return True
