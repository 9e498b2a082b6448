import logging
from typing import Callable, List, Optional

from pose_types import (
    LEFT_EYE,
    LEFT_SHOULDER,
    LEFT_WRIST,
    NOSE,
    RIGHT_EYE,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    GestureSymbol,
    LandmarkFrame,
)

logger = logging.getLogger(__name__)

GestureCallback = Callable[[List[GestureSymbol]], None]


class GestureDetector:
    """Classifies body gestures from a single landmark frame.

    Every rule is a fixed geometric threshold on the current frame only.
    Debouncing is left to whoever applies the gestures.
    """

    required_joints = [
        LEFT_SHOULDER,
        RIGHT_SHOULDER,
        LEFT_WRIST,
        RIGHT_WRIST,
        NOSE,
        LEFT_EYE,
        RIGHT_EYE,
    ]

    def __init__(self, head_turn_ratio: float = 0.3, callback: Optional[GestureCallback] = None):
        self.head_turn_ratio = head_turn_ratio
        self._callback = callback

    def register_callback(self, callback: Optional[GestureCallback]) -> None:
        self._callback = callback

    def detect(self, frame: Optional[LandmarkFrame]) -> List[GestureSymbol]:
        if frame is None:
            return []
        found = frame.require(self.required_joints)
        if found is None:
            logger.debug("Gesture landmarks missing, skipping frame")
            return []
        left_shoulder, right_shoulder, left_wrist, right_wrist, nose, left_eye, right_eye = found

        gestures: List[GestureSymbol] = []
        # Image y grows downward, so a raised wrist has the smaller y.
        if right_wrist.y < right_shoulder.y:
            gestures.append(GestureSymbol.RIGHT_HAND_UP)
        if left_wrist.y < left_shoulder.y:
            gestures.append(GestureSymbol.LEFT_HAND_UP)

        eye_distance = abs(right_eye.x - left_eye.x)
        margin = self.head_turn_ratio * eye_distance
        if nose.x < left_eye.x - margin:
            gestures.append(GestureSymbol.HEAD_LEFT)
        if nose.x > right_eye.x + margin:
            gestures.append(GestureSymbol.HEAD_RIGHT)

        if GestureSymbol.RIGHT_HAND_UP in gestures and GestureSymbol.LEFT_HAND_UP in gestures:
            gestures.append(GestureSymbol.BOTH_HANDS_UP)
        return gestures

    def process(self, frame: Optional[LandmarkFrame]) -> List[GestureSymbol]:
        gestures = self.detect(frame)
        if gestures and self._callback is not None:
            self._callback(list(gestures))
        return gestures
