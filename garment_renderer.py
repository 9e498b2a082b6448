import logging
from typing import Optional, Protocol, Tuple

import cv2
import numpy as np

from garment_shapes import garment_outline, outline_color
from geometry import (
    GarmentPlacement,
    Point,
    apply_to_point,
    compute_placement,
    horizontal_flip,
    rotation,
    scaling,
    to_pixel_index_space,
    translation,
)
from pose_types import GarmentSelection, LandmarkFrame

logger = logging.getLogger(__name__)

FALLBACK_MARKER = "marker"
FALLBACK_OUTLINE = "outline"

# Sub-pixel precision for OpenCV drawing primitives.
_SHIFT = 4
_SCALE = 1 << _SHIFT


class GarmentSource(Protocol):
    def get(self, selection: GarmentSelection) -> Optional[np.ndarray]:
        ...


class GarmentRenderer:
    """Draws the selected garment onto a transparent BGRA overlay.

    The overlay is cleared on every call. Nothing is drawn when the torso
    landmarks are missing; when the garment image is not available a
    fallback shape is drawn at the anchor point instead.
    """

    def __init__(
        self,
        width_scale: float = 2.5,
        anchor_drop: float = 0.2,
        fallback_radius: int = 20,
        fallback_color: Tuple[int, int, int, int] = (128, 128, 128, 255),
        fallback_style: str = FALLBACK_MARKER,
        outline_alpha: float = 0.6,
        invert_mirrored_rotation: bool = False,
    ):
        if fallback_style not in (FALLBACK_MARKER, FALLBACK_OUTLINE):
            raise ValueError(f"Unknown fallback style: {fallback_style!r}")
        self.width_scale = width_scale
        self.anchor_drop = anchor_drop
        self.fallback_radius = fallback_radius
        self.fallback_color = fallback_color
        self.fallback_style = fallback_style
        self.outline_alpha = outline_alpha
        self.invert_mirrored_rotation = invert_mirrored_rotation

    def render(
        self,
        landmarks: Optional[LandmarkFrame],
        selection: GarmentSelection,
        mirrored: bool,
        surface: np.ndarray,
        assets: GarmentSource,
    ) -> None:
        _check_surface(surface)
        surface[:] = 0
        height, width = surface.shape[:2]

        placement = compute_placement(
            landmarks, width, height, width_scale=self.width_scale, anchor_drop=self.anchor_drop
        )
        if placement is None:
            logger.debug("Torso landmarks missing, overlay cleared")
            return

        image = assets.get(selection)
        if image is None or placement.draw_width < 1.0:
            self._draw_fallback(surface, placement, selection, mirrored)
            return

        matrix = self.garment_matrix(placement, image.shape[1], image.shape[0], mirrored, width)
        layer = cv2.warpAffine(
            image,
            matrix[:2],
            (width, height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )
        composite_over(surface, layer)

    def canvas_matrix(
        self,
        placement: GarmentPlacement,
        asset_width: int,
        asset_height: int,
        mirrored: bool,
        surface_width: int,
    ) -> np.ndarray:
        # Maps asset canvas coordinates to surface canvas coordinates:
        # flip, move to anchor, rotate, then center the image on the anchor.
        draw_w, draw_h = placement.draw_size(asset_width, asset_height)
        angle = placement.angle
        if mirrored and self.invert_mirrored_rotation:
            angle = -angle

        matrix = (
            translation(*placement.center)
            @ rotation(angle)
            @ translation(-draw_w / 2.0, -draw_h / 2.0)
            @ scaling(draw_w / float(asset_width), draw_h / float(asset_height))
        )
        if mirrored:
            matrix = horizontal_flip(surface_width) @ matrix
        return matrix

    def garment_matrix(
        self,
        placement: GarmentPlacement,
        asset_width: int,
        asset_height: int,
        mirrored: bool,
        surface_width: int,
    ) -> np.ndarray:
        return to_pixel_index_space(
            self.canvas_matrix(placement, asset_width, asset_height, mirrored, surface_width)
        )

    def anchor_on_surface(self, placement: GarmentPlacement, mirrored: bool, surface_width: int) -> Point:
        if not mirrored:
            return placement.center
        return apply_to_point(horizontal_flip(surface_width), placement.center)

    def _draw_fallback(
        self,
        surface: np.ndarray,
        placement: GarmentPlacement,
        selection: GarmentSelection,
        mirrored: bool,
    ) -> None:
        width = surface.shape[1]
        if self.fallback_style == FALLBACK_OUTLINE:
            outline = garment_outline(selection.type, placement)
            if outline is not None:
                flip = horizontal_flip(width) if mirrored else None
                points = [apply_to_point(flip, p) if flip is not None else p for p in outline]
                poly = np.array([_fixed_point(p) for p in points], dtype=np.int32)
                cv2.fillPoly(
                    surface,
                    [poly],
                    outline_color(selection.color, self.outline_alpha),
                    lineType=cv2.LINE_8,
                    shift=_SHIFT,
                )
                return

        center = _fixed_point(self.anchor_on_surface(placement, mirrored, width))
        cv2.circle(
            surface,
            center,
            int(self.fallback_radius * _SCALE),
            self.fallback_color,
            thickness=-1,
            lineType=cv2.LINE_8,
            shift=_SHIFT,
        )


def _fixed_point(point: Point) -> Tuple[int, int]:
    # Canvas coordinates to OpenCV pixel-index coordinates, in fixed point.
    return int(round((point[0] - 0.5) * _SCALE)), int(round((point[1] - 0.5) * _SCALE))


def _check_surface(surface: np.ndarray) -> None:
    if not isinstance(surface, np.ndarray) or surface.ndim != 3 or surface.shape[2] != 4:
        raise ValueError("Overlay surface must be an HxWx4 array")
    if surface.dtype != np.uint8:
        raise ValueError(f"Overlay surface must be uint8, got {surface.dtype}")


def composite_over(surface: np.ndarray, layer: np.ndarray) -> None:
    src_a = layer[:, :, 3:4].astype(np.float32) / 255.0
    if not np.any(src_a):
        return
    dst_a = surface[:, :, 3:4].astype(np.float32) / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)
    src_rgb = layer[:, :, :3].astype(np.float32)
    dst_rgb = surface[:, :, :3].astype(np.float32)
    out_rgb = (src_rgb * src_a + dst_rgb * dst_a * (1.0 - src_a)) / np.maximum(out_a, 1e-6)
    surface[:, :, :3] = np.clip(out_rgb, 0, 255).astype(np.uint8)
    surface[:, :, 3:4] = np.clip(out_a * 255.0 + 0.5, 0, 255).astype(np.uint8)
