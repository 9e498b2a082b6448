import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from pose_types import LEFT_HIP, LEFT_SHOULDER, RIGHT_HIP, RIGHT_SHOULDER, Landmark, LandmarkFrame

Point = Tuple[float, float]

TORSO_INDICES = (LEFT_SHOULDER, RIGHT_SHOULDER, LEFT_HIP, RIGHT_HIP)


def to_pixel(lm: Landmark, width: int, height: int) -> Point:
    return lm.x * width, lm.y * height


def midpoint(a: Point, b: Point) -> Point:
    return (a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0


@dataclass(frozen=True)
class GarmentPlacement:
    left_shoulder: Point
    right_shoulder: Point
    left_hip: Point
    right_hip: Point
    shoulder_width: float
    torso_height: float
    center: Point
    angle: float
    draw_width: float

    def draw_size(self, asset_width: int, asset_height: int) -> Tuple[float, float]:
        # Height follows the asset's own aspect ratio.
        if asset_width <= 0:
            return self.draw_width, 0.0
        return self.draw_width, self.draw_width * asset_height / float(asset_width)


def compute_placement(
    frame: Optional[LandmarkFrame],
    width: int,
    height: int,
    width_scale: float = 2.5,
    anchor_drop: float = 0.2,
) -> Optional[GarmentPlacement]:
    if frame is None:
        return None
    found = frame.require(TORSO_INDICES)
    if found is None:
        return None

    ls, rs, lh, rh = (to_pixel(lm, width, height) for lm in found)

    shoulder_width = abs(rs[0] - ls[0])
    shoulder_mid = midpoint(ls, rs)
    hip_mid = midpoint(lh, rh)
    torso_height = abs(hip_mid[1] - shoulder_mid[1])

    # Anchor sits below the shoulder line so the garment covers the chest.
    center = (shoulder_mid[0], shoulder_mid[1] + anchor_drop * torso_height)
    angle = math.atan2(rs[1] - ls[1], rs[0] - ls[0])

    return GarmentPlacement(
        left_shoulder=ls,
        right_shoulder=rs,
        left_hip=lh,
        right_hip=rh,
        shoulder_width=shoulder_width,
        torso_height=torso_height,
        center=center,
        angle=angle,
        draw_width=width_scale * shoulder_width,
    )


def translation(tx: float, ty: float) -> np.ndarray:
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])


def rotation(theta: float) -> np.ndarray:
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def scaling(sx: float, sy: float) -> np.ndarray:
    return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])


def horizontal_flip(width: float) -> np.ndarray:
    # x -> width - x
    return translation(width, 0.0) @ scaling(-1.0, 1.0)


def to_pixel_index_space(canvas_matrix: np.ndarray) -> np.ndarray:
    # Canvas coordinates put pixel centers at i + 0.5, OpenCV at i.
    return translation(-0.5, -0.5) @ canvas_matrix @ translation(0.5, 0.5)


def apply_to_point(matrix: np.ndarray, point: Point) -> Point:
    x, y, _ = matrix @ np.array([point[0], point[1], 1.0])
    return float(x), float(y)
