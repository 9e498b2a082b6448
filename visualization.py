from typing import Iterable, Optional, Tuple

import cv2
import numpy as np

from pose_types import Landmark, LandmarkFrame

# MediaPipe Pose skeleton, head and upper body only.
POSE_CONNECTIONS = (
    (0, 2),
    (0, 5),
    (11, 12),
    (11, 23),
    (12, 24),
    (23, 24),
    (11, 13),
    (13, 15),
    (12, 14),
    (14, 16),
)


def _to_pixel(lm: Landmark, image_size: Tuple[int, int], mirrored: bool) -> Tuple[int, int]:
    width, height = image_size
    x = 1.0 - lm.x if mirrored else lm.x
    return int(x * width), int(lm.y * height)


def draw_pose(frame, landmarks: Optional[LandmarkFrame], mirrored: bool = False, color=(0, 255, 0)) -> None:
    if landmarks is None:
        return
    height, width = frame.shape[:2]
    for a, b in POSE_CONNECTIONS:
        lm_a = landmarks.get(a)
        lm_b = landmarks.get(b)
        if lm_a is None or lm_b is None:
            continue
        cv2.line(frame, _to_pixel(lm_a, (width, height), mirrored), _to_pixel(lm_b, (width, height), mirrored), color, 2)

    for lm in landmarks:
        if lm is None:
            continue
        cv2.circle(frame, _to_pixel(lm, (width, height), mirrored), 4, (0, 255, 255), -1)


def composite_overlay(frame_bgr: np.ndarray, overlay_bgra: np.ndarray) -> None:
    # Blends the transparent garment layer onto the video frame in place.
    alpha = overlay_bgra[:, :, 3:4].astype(np.float32) / 255.0
    if not np.any(alpha):
        return
    blended = overlay_bgra[:, :, :3].astype(np.float32) * alpha + frame_bgr.astype(np.float32) * (1.0 - alpha)
    frame_bgr[:] = np.clip(blended, 0, 255).astype(np.uint8)


def draw_status_panel(frame, lines: Iterable[str], origin=(10, 30)) -> None:
    x, y = origin
    for line in lines:
        cv2.putText(frame, line, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        y += 28
