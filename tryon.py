from typing import List, Optional

import numpy as np

from asset_cache import AssetCache
from garment_renderer import GarmentRenderer
from gesture_control import GestureController, SessionState
from gesture_detection import GestureDetector
from pose_types import GestureSymbol, LandmarkFrame


class TryOnPipeline:
    """One render-loop tick: detect gestures, apply them, then paint.

    Detection always runs before rendering, so a gesture that changes the
    selection shows up in the same tick's overlay.
    """

    def __init__(
        self,
        detector: GestureDetector,
        controller: GestureController,
        renderer: GarmentRenderer,
        assets: AssetCache,
        state: Optional[SessionState] = None,
    ):
        self.detector = detector
        self.controller = controller
        self.renderer = renderer
        self.assets = assets
        self.state = state if state is not None else SessionState()
        self._now: Optional[float] = None
        self.detector.register_callback(self._on_gestures)

    def tick(
        self,
        landmarks: Optional[LandmarkFrame],
        surface: np.ndarray,
        now: Optional[float] = None,
    ) -> List[GestureSymbol]:
        self._now = now
        try:
            gestures = self.detector.process(landmarks)
        finally:
            self._now = None
        self.renderer.render(landmarks, self.state.selection, self.state.mirrored, surface, self.assets)
        return gestures

    def close(self) -> None:
        self.detector.register_callback(None)
        self.assets.close()

    def _on_gestures(self, gestures: List[GestureSymbol]) -> None:
        self.controller.apply(self.state, gestures, now=self._now)
