from typing import Dict, Tuple

import numpy as np
import pytest

from pose_types import (
    LEFT_EYE,
    LEFT_HIP,
    LEFT_SHOULDER,
    LEFT_WRIST,
    NOSE,
    POSE_LANDMARK_COUNT,
    RIGHT_EYE,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    Landmark,
    LandmarkFrame,
)

# Standing person, arms down, looking straight at the camera.
NEUTRAL_POSE: Dict[int, Tuple[float, float]] = {
    NOSE: (0.5, 0.2),
    LEFT_EYE: (0.45, 0.18),
    RIGHT_EYE: (0.55, 0.18),
    LEFT_SHOULDER: (0.3, 0.3),
    RIGHT_SHOULDER: (0.7, 0.3),
    LEFT_WRIST: (0.3, 0.6),
    RIGHT_WRIST: (0.7, 0.6),
    LEFT_HIP: (0.3, 0.7),
    RIGHT_HIP: (0.7, 0.7),
}


def build_frame(points: Dict[int, Tuple[float, float]], drop=()) -> LandmarkFrame:
    landmarks = [None] * POSE_LANDMARK_COUNT
    for idx, (x, y) in points.items():
        if idx in drop:
            continue
        landmarks[idx] = Landmark(x, y)
    return LandmarkFrame(landmarks)


@pytest.fixture
def make_frame():
    def _make(overrides=None, drop=()):
        points = dict(NEUTRAL_POSE)
        points.update(overrides or {})
        return build_frame(points, drop=drop)

    return _make


@pytest.fixture
def surface():
    return np.zeros((1000, 1000, 4), dtype=np.uint8)


class DictAssets:
    def __init__(self, images=None):
        self.images = dict(images or {})
        self.requested = []

    def get(self, selection):
        self.requested.append(selection)
        return self.images.get(selection.key)


@pytest.fixture
def no_assets():
    return DictAssets()


@pytest.fixture
def dict_assets():
    return DictAssets
