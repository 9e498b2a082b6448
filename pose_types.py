from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

# MediaPipe Pose indices used by the try-on engine.
NOSE = 0
LEFT_EYE = 2
RIGHT_EYE = 5
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_ELBOW = 13
RIGHT_ELBOW = 14
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_HIP = 23
RIGHT_HIP = 24

POSE_LANDMARK_COUNT = 33

# Points reported below this visibility count as missing.
DEFAULT_MIN_VISIBILITY = 0.5


@dataclass(frozen=True)
class Landmark:
    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0


class LandmarkFrame:
    """Index-ordered landmarks for one video frame.

    Coordinates are in the mirror-view convention: the subject's left side
    sits at the smaller x, as in a selfie image. Entries may be None (not
    detected or below the visibility threshold). Lookups outside the
    sequence also return None so callers can treat every missing point the
    same way.
    """

    def __init__(self, landmarks: Sequence[Optional[Landmark]], timestamp: float = 0.0):
        self._landmarks: Tuple[Optional[Landmark], ...] = tuple(landmarks)
        self.timestamp = timestamp

    @classmethod
    def from_points(
        cls,
        points: Iterable[Any],
        timestamp: float = 0.0,
        min_visibility: float = DEFAULT_MIN_VISIBILITY,
    ) -> "LandmarkFrame":
        # Accepts dicts ({"x", "y", "visibility"}), tuples or objects with x/y attributes.
        landmarks: List[Optional[Landmark]] = []
        for point in points:
            lm = _coerce_landmark(point)
            if lm is not None and lm.visibility < min_visibility:
                lm = None
            landmarks.append(lm)
        return cls(landmarks, timestamp=timestamp)

    def mirrored(self) -> "LandmarkFrame":
        # x -> 1 - x, between camera-image and mirror-view coordinates.
        return LandmarkFrame(
            [None if lm is None else replace(lm, x=1.0 - lm.x) for lm in self._landmarks],
            timestamp=self.timestamp,
        )

    def get(self, index: int) -> Optional[Landmark]:
        if index < 0 or index >= len(self._landmarks):
            return None
        return self._landmarks[index]

    def require(self, indices: Iterable[int]) -> Optional[List[Landmark]]:
        found = [self.get(i) for i in indices]
        if any(lm is None for lm in found):
            return None
        return found

    def __len__(self) -> int:
        return len(self._landmarks)

    def __iter__(self):
        return iter(self._landmarks)


def _coerce_landmark(point: Any) -> Optional[Landmark]:
    if point is None:
        return None
    if isinstance(point, Landmark):
        return point
    if isinstance(point, dict):
        return Landmark(
            float(point["x"]),
            float(point["y"]),
            float(point.get("z", 0.0)),
            float(point.get("visibility", 1.0)),
        )
    if isinstance(point, (tuple, list)):
        return Landmark(*(float(v) for v in point))
    return Landmark(
        float(point.x),
        float(point.y),
        float(getattr(point, "z", 0.0)),
        float(getattr(point, "visibility", 1.0)),
    )


class GarmentType(str, Enum):
    SHIRT = "shirt"
    JACKET = "jacket"
    DRESS = "dress"
    HAT = "hat"
    GLASSES = "glasses"
    SCARF = "scarf"


class GarmentColor(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    BLACK = "black"


@dataclass(frozen=True)
class GarmentSelection:
    type: GarmentType = GarmentType.SHIRT
    color: GarmentColor = GarmentColor.RED

    @property
    def key(self) -> str:
        return f"{self.type.value}_{self.color.value}"

    @classmethod
    def parse(cls, garment_type: str, color: str) -> "GarmentSelection":
        try:
            return cls(GarmentType(garment_type), GarmentColor(color))
        except ValueError:
            raise ValueError(f"Unknown garment selection: {garment_type!r}/{color!r}") from None

    @classmethod
    def from_indices(cls, type_idx: int, color_idx: int) -> "GarmentSelection":
        types = list(GarmentType)
        colors = list(GarmentColor)
        return cls(types[type_idx % len(types)], colors[color_idx % len(colors)])

    def type_index(self) -> int:
        return list(GarmentType).index(self.type)

    def color_index(self) -> int:
        return list(GarmentColor).index(self.color)

    def shifted(self, type_step: int = 0, color_step: int = 0) -> "GarmentSelection":
        return GarmentSelection.from_indices(
            self.type_index() + type_step,
            self.color_index() + color_step,
        )


class GestureSymbol(str, Enum):
    RIGHT_HAND_UP = "RIGHT_HAND_UP"
    LEFT_HAND_UP = "LEFT_HAND_UP"
    HEAD_LEFT = "HEAD_LEFT"
    HEAD_RIGHT = "HEAD_RIGHT"
    BOTH_HANDS_UP = "BOTH_HANDS_UP"
