import logging
from typing import Any, Optional, Sequence

import cv2
import mediapipe as mp

from pose_types import DEFAULT_MIN_VISIBILITY, POSE_LANDMARK_COUNT, LandmarkFrame

logger = logging.getLogger(__name__)


def landmarks_to_frame(
    raw_landmarks: Sequence[Any],
    timestamp: float,
    visibility_threshold: float = DEFAULT_MIN_VISIBILITY,
) -> LandmarkFrame:
    # MediaPipe on an unflipped camera image puts the subject's left side at
    # the larger x; the try-on engine expects mirror-view coordinates.
    frame = LandmarkFrame.from_points(
        raw_landmarks[:POSE_LANDMARK_COUNT],
        timestamp=timestamp,
        min_visibility=visibility_threshold,
    )
    return frame.mirrored()


class PoseDetector:
    """Runs MediaPipe Pose on raw camera frames and yields mirror-view landmark frames."""

    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        visibility_threshold: float = DEFAULT_MIN_VISIBILITY,
    ):
        self.visibility_threshold = visibility_threshold
        self._mp_pose = mp.solutions.pose
        self._pose = self._mp_pose.Pose(
            static_image_mode=False,
            model_complexity=1,
            smooth_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def process(self, frame_bgr, timestamp: float) -> Optional[LandmarkFrame]:
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        frame_rgb.flags.writeable = False
        results = self._pose.process(frame_rgb)
        if results.pose_landmarks is None:
            logger.debug("No pose detected at %.3f", timestamp)
            return None
        return landmarks_to_frame(results.pose_landmarks.landmark, timestamp, self.visibility_threshold)

    def close(self) -> None:
        self._pose.close()
