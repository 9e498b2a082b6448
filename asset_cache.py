import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import cv2
import numpy as np

from pose_types import GarmentColor, GarmentSelection, GarmentType

logger = logging.getLogger(__name__)

ImageLoader = Callable[[Path], Optional[np.ndarray]]


class AssetStatus(str, Enum):
    PENDING = "pending"
    LOADED = "loaded"
    FAILED = "failed"


def all_selections() -> List[GarmentSelection]:
    return [GarmentSelection(t, c) for t in GarmentType for c in GarmentColor]


def read_image(path: Path) -> Optional[np.ndarray]:
    return cv2.imread(str(path), cv2.IMREAD_UNCHANGED)


def to_uint8(img: np.ndarray) -> np.ndarray:
    # IMREAD_UNCHANGED keeps 16-bit PNG depth; the compositor works in 8 bits.
    if img.dtype == np.uint8:
        return img
    if img.dtype == np.uint16:
        return (img >> 8).astype(np.uint8)
    raise ValueError(f"Unsupported image depth: {img.dtype}")


def to_bgra(img: np.ndarray) -> np.ndarray:
    img = to_uint8(img)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGRA)
    if img.shape[2] == 3:
        alpha = np.full(img.shape[:2] + (1,), 255, dtype=img.dtype)
        return np.concatenate([img, alpha], axis=2)
    if img.shape[2] == 4:
        return img
    raise ValueError(f"Unsupported channel count: {img.shape[2]}")


class AssetCache:
    """Garment images keyed by ``<type>_<color>``.

    ``preload`` resolves every key on a background thread; ``get`` never
    blocks and returns None until the image is available. A key that fails
    to load stays FAILED for the life of the cache.
    """

    def __init__(
        self,
        asset_dir: str = "garments",
        extensions: Sequence[str] = ("png", "webp", "jpg"),
        loader: ImageLoader = read_image,
    ):
        self.asset_dir = Path(asset_dir)
        self.extensions = tuple(extensions)
        self._loader = loader
        self._images: Dict[str, np.ndarray] = {}
        self._status: Dict[str, AssetStatus] = {}
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._closed = False
        self._thread: Optional[threading.Thread] = None

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, selection: GarmentSelection) -> Optional[np.ndarray]:
        with self._lock:
            return self._images.get(selection.key)

    def status(self, key: str) -> AssetStatus:
        with self._lock:
            return self._status.get(key, AssetStatus.PENDING)

    def put(self, key: str, image: np.ndarray) -> None:
        self._store(key, to_bgra(image))

    def path_candidates(self, key: str) -> List[Path]:
        return [self.asset_dir / f"{key}.{ext}" for ext in self.extensions]

    def preload(self, selections: Optional[Iterable[GarmentSelection]] = None) -> None:
        if self._thread is not None:
            return
        keys = [s.key for s in (selections if selections is not None else all_selections())]
        self._thread = threading.Thread(target=self.load_all, args=(keys,), name="asset-preload", daemon=True)
        self._thread.start()

    def load_all(self, keys: Optional[Iterable[str]] = None) -> None:
        if keys is None:
            keys = [s.key for s in all_selections()]
        for key in keys:
            if self._closed:
                return
            self._load_one(key)

        if self._closed:
            return
        self._ready.set()
        with self._lock:
            loaded = sum(1 for s in self._status.values() if s == AssetStatus.LOADED)
            failed = sum(1 for s in self._status.values() if s == AssetStatus.FAILED)
        logger.info("Garment assets ready: %d loaded, %d failed", loaded, failed)

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._ready.wait(timeout)

    def close(self, timeout: Optional[float] = 1.0) -> None:
        with self._lock:
            self._closed = True
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _load_one(self, key: str) -> None:
        with self._lock:
            if self._status.get(key) in (AssetStatus.LOADED, AssetStatus.FAILED):
                return

        path = next((p for p in self.path_candidates(key) if p.exists()), None)
        if path is None:
            self._fail(key, f"no file for {key} in {self.asset_dir}")
            return

        try:
            img = self._loader(path)
            if img is None:
                self._fail(key, f"could not decode {path}")
                return
            self._store(key, to_bgra(img))
        except (cv2.error, OSError, ValueError) as exc:
            self._fail(key, f"{path}: {exc}")

    def _store(self, key: str, image: np.ndarray) -> None:
        with self._lock:
            # Loads that finish after teardown are dropped.
            if self._closed:
                return
            self._images[key] = image
            self._status[key] = AssetStatus.LOADED

    def _fail(self, key: str, reason: str) -> None:
        with self._lock:
            if self._closed or self._status.get(key) == AssetStatus.FAILED:
                return
            self._status[key] = AssetStatus.FAILED
        logger.warning("Garment asset unavailable, using fallback: %s", reason)
