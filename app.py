import logging

import cv2
import numpy as np

from asset_cache import AssetCache
from camera import CameraStream
from config import (
    ASSET_CONFIG,
    CAMERA_CONFIG,
    DISPLAY_CONFIG,
    GESTURE_CONFIG,
    POSE_CONFIG,
    RENDER_CONFIG,
    SESSION_CONFIG,
)
from garment_renderer import GarmentRenderer
from gesture_control import GestureController, SessionState
from gesture_detection import GestureDetector
from pose_detection import PoseDetector
from pose_types import GarmentSelection
from tryon import TryOnPipeline
from visualization import composite_overlay, draw_pose, draw_status_panel

logger = logging.getLogger(__name__)


def build_pipeline() -> TryOnPipeline:
    assets = AssetCache(**ASSET_CONFIG)
    assets.preload()
    return TryOnPipeline(
        detector=GestureDetector(head_turn_ratio=GESTURE_CONFIG["head_turn_ratio"]),
        controller=GestureController(cooldown_seconds=GESTURE_CONFIG["cooldown_seconds"]),
        renderer=GarmentRenderer(**RENDER_CONFIG),
        assets=assets,
        state=initial_state(),
    )


def initial_state() -> SessionState:
    selection = GarmentSelection.parse(SESSION_CONFIG["garment_type"], SESSION_CONFIG["color"])
    # Landmarks arrive in mirror view, so the overlay only flips when the video is shown unflipped.
    return SessionState(selection=selection, mirrored=not CAMERA_CONFIG["mirrored"])


def main():
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    window_name = DISPLAY_CONFIG["window_name"]
    camera = CameraStream(
        camera_index=CAMERA_CONFIG["camera_index"],
        width=CAMERA_CONFIG["width"],
        height=CAMERA_CONFIG["height"],
        target_fps=CAMERA_CONFIG["target_fps"],
    )
    if not camera.open():
        logger.error("Could not open webcam.")
        return

    detector = PoseDetector(**POSE_CONFIG)
    pipeline = build_pipeline()
    state = pipeline.state
    show_skeleton = DISPLAY_CONFIG["show_skeleton"]
    overlay = None

    cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
    try:
        while True:
            if cv2.getWindowProperty(window_name, cv2.WND_PROP_VISIBLE) < 1:
                break
            cam_frame = camera.read()
            if not cam_frame.ok:
                blank = np.zeros((480, 640, 3), dtype=np.uint8)
                draw_status_panel(blank, ["Camera error"])
                cv2.imshow(window_name, blank)
                if cv2.waitKey(1) & 0xFF == ord("q"):
                    break
                continue

            frame = cam_frame.frame
            height, width = frame.shape[:2]
            if overlay is None or overlay.shape[:2] != (height, width):
                overlay = np.zeros((height, width, 4), dtype=np.uint8)

            # Pose runs on the raw frame; the detector hands back mirror-view landmarks.
            landmarks = detector.process(frame, cam_frame.timestamp)
            gestures = pipeline.tick(landmarks, overlay, now=cam_frame.timestamp)

            display = frame.copy() if state.mirrored else cv2.flip(frame, 1)
            composite_overlay(display, overlay)
            if show_skeleton:
                draw_pose(display, landmarks, mirrored=state.mirrored)

            lines = [
                f"Garment: {state.selection.type.value} / {state.selection.color.value}",
                "View: camera" if state.mirrored else "View: mirror",
                "Assets: ready" if pipeline.assets.is_ready else "Assets: loading",
                "Gestures: " + (", ".join(g.value for g in gestures) if gestures else "-"),
                "Keys: T type, C color, M mirror, S skeleton, Q quit",
            ]
            draw_status_panel(display, lines)
            cv2.imshow(window_name, display)

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            if key == ord("t"):
                state.selection = state.selection.shifted(type_step=1)
            elif key == ord("c"):
                state.selection = state.selection.shifted(color_step=1)
            elif key == ord("m"):
                state.mirrored = not state.mirrored
            elif key == ord("s"):
                show_skeleton = not show_skeleton
    finally:
        pipeline.close()
        detector.close()
        camera.release()
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
