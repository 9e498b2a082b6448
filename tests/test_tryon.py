import numpy as np

from asset_cache import AssetCache
from garment_renderer import GarmentRenderer
from gesture_control import GestureController, SessionState
from gesture_detection import GestureDetector
from pose_types import RIGHT_WRIST, GarmentType, GestureSymbol
from tryon import TryOnPipeline


def make_pipeline(**state_kwargs):
    assets = AssetCache()
    return TryOnPipeline(
        detector=GestureDetector(),
        controller=GestureController(cooldown_seconds=1.0),
        renderer=GarmentRenderer(),
        assets=assets,
        state=SessionState(**state_kwargs),
    )


def test_gesture_change_is_painted_in_the_same_tick(make_frame, surface):
    pipeline = make_pipeline(mirrored=False)
    jacket = np.zeros((60, 100, 4), dtype=np.uint8)
    jacket[:, :] = (255, 255, 255, 255)
    pipeline.assets.put("jacket_red", jacket)

    gestures = pipeline.tick(make_frame({RIGHT_WRIST: (0.7, 0.1)}), surface, now=0.0)

    assert gestures == [GestureSymbol.RIGHT_HAND_UP]
    assert pipeline.state.selection.type == GarmentType.JACKET
    assert surface[380, 500].tolist() == [255, 255, 255, 255]


def test_held_gesture_is_debounced(make_frame, surface):
    pipeline = make_pipeline()
    raised = make_frame({RIGHT_WRIST: (0.7, 0.1)})

    pipeline.tick(raised, surface, now=0.0)
    pipeline.tick(raised, surface, now=0.5)
    assert pipeline.state.selection.type == GarmentType.JACKET

    pipeline.tick(raised, surface, now=1.5)
    assert pipeline.state.selection.type == GarmentType.DRESS


def test_missing_pose_clears_overlay(surface):
    pipeline = make_pipeline()
    surface[:] = 9
    assert pipeline.tick(None, surface, now=0.0) == []
    assert not surface.any()


def test_close_tears_down_assets(make_frame, surface):
    pipeline = make_pipeline()
    pipeline.close()
    assert pipeline.assets.closed
    pipeline.tick(make_frame({RIGHT_WRIST: (0.7, 0.1)}), surface, now=0.0)
    assert pipeline.state.selection.type == GarmentType.SHIRT
