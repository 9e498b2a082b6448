from typing import Callable, Dict, List, Optional, Tuple

from geometry import GarmentPlacement, Point
from pose_types import GarmentColor, GarmentType

BGR_COLORS: Dict[GarmentColor, Tuple[int, int, int]] = {
    GarmentColor.RED: (0, 0, 255),
    GarmentColor.BLUE: (255, 0, 0),
    GarmentColor.GREEN: (0, 255, 0),
    GarmentColor.BLACK: (0, 0, 0),
}


def outline_color(color: GarmentColor, alpha: float = 0.6) -> Tuple[int, int, int, int]:
    b, g, r = BGR_COLORS[color]
    return b, g, r, int(round(255 * alpha))


def _frame(p: GarmentPlacement):
    ls, rs = p.left_shoulder, p.right_shoulder
    # Sleeves and hems extend away from the body whichever way the shoulders face.
    side = 1.0 if rs[0] >= ls[0] else -1.0
    waist_y = (ls[1] + p.left_hip[1]) / 2.0
    return ls, rs, side * p.shoulder_width, p.torso_height, waist_y


def shirt_outline(p: GarmentPlacement) -> List[Point]:
    ls, rs, sw, th, waist_y = _frame(p)
    return [
        ls,
        rs,
        (rs[0] + sw * 0.2, rs[1] + th * 0.3),
        (rs[0], waist_y),
        (rs[0], waist_y + th * 0.8),
        (ls[0], waist_y + th * 0.8),
        (ls[0], waist_y),
        (ls[0] - sw * 0.2, ls[1] + th * 0.3),
    ]


def jacket_outline(p: GarmentPlacement) -> List[Point]:
    ls, rs, sw, th, waist_y = _frame(p)
    return [
        (ls[0] - sw * 0.1, ls[1] - th * 0.1),
        (rs[0] + sw * 0.1, rs[1] - th * 0.1),
        (rs[0] + sw * 0.3, rs[1] + th * 0.4),
        (rs[0], waist_y + th * 0.8),
        (ls[0], waist_y + th * 0.8),
        (ls[0] - sw * 0.3, ls[1] + th * 0.4),
    ]


def dress_outline(p: GarmentPlacement) -> List[Point]:
    ls, rs, sw, th, waist_y = _frame(p)
    return [
        ls,
        rs,
        (rs[0] + sw * 0.1, rs[1] + th * 0.8),
        (rs[0], waist_y + th * 1.5),
        (ls[0], waist_y + th * 1.5),
        (ls[0] - sw * 0.1, ls[1] + th * 0.8),
    ]


OUTLINES: Dict[GarmentType, Callable[[GarmentPlacement], List[Point]]] = {
    GarmentType.SHIRT: shirt_outline,
    GarmentType.JACKET: jacket_outline,
    GarmentType.DRESS: dress_outline,
}


def garment_outline(garment_type: GarmentType, placement: GarmentPlacement) -> Optional[List[Point]]:
    builder = OUTLINES.get(garment_type)
    if builder is None:
        return None
    return builder(placement)
