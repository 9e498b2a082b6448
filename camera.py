import logging
import time
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class CameraFrame:
    frame: Optional[np.ndarray]
    timestamp: float
    ok: bool


class CameraStream:
    def __init__(
        self,
        camera_index: int = 0,
        width: int = 1280,
        height: int = 720,
        target_fps: int = 30,
        backend: int = cv2.CAP_ANY,
    ):
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self.target_fps = target_fps
        self.backend = backend
        self._capture: Optional[cv2.VideoCapture] = None
        self._last_time = time.monotonic()

    def open(self) -> bool:
        self._capture = cv2.VideoCapture(self.camera_index, self.backend)
        if not self._capture.isOpened():
            logger.error("Could not open camera %d", self.camera_index)
            self._capture = None
            return False
        self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._capture.set(cv2.CAP_PROP_FPS, self.target_fps)
        logger.info(
            "Camera %d opened at %dx%d",
            self.camera_index,
            int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        return True

    def read(self) -> CameraFrame:
        if self._capture is None:
            return CameraFrame(None, time.monotonic(), False)

        ok, frame = self._capture.read()
        now = time.monotonic()
        if not ok:
            return CameraFrame(None, now, False)

        # Pace reads to the display rate.
        if self.target_fps > 0:
            min_frame_time = 1.0 / float(self.target_fps)
            elapsed = now - self._last_time
            if elapsed < min_frame_time:
                time.sleep(min_frame_time - elapsed)
                now = time.monotonic()
        self._last_time = now
        return CameraFrame(frame, now, True)

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
