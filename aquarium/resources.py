"""
Drawable image resources and the two-phase load barrier.

The core never fetches or decodes images. The host hands over objects
that report load completion and final pixel size; await_images() blocks
until every requested image has completed (or a timeout passes) so the
population can be built atomically with its full count from tick zero.
"""

import threading
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from .constants import IMAGE_LOAD_TIMEOUT_S
from .data_types import AssetManifest, Species


class ImageResource(Protocol):
    """Host-provided image: load notification plus final pixel size"""
    name: str

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def loaded(self) -> bool: ...

    def add_load_callback(self, callback: Callable[['ImageResource'], None]) -> None: ...


class StaticImage:
    """
    Image whose size is known up front (already decoded by the host).

    Attributes:
        name: Asset name from the manifest (e.g. "fish1.png")
        width: Pixel width
        height: Pixel height
        payload: Opaque host object handed back to the drawing surface
    """

    def __init__(self, name: str, width: int, height: int, payload: Any = None):
        self.name = name
        self._width = width
        self._height = height
        self.payload = payload

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def loaded(self) -> bool:
        return True

    @property
    def aspect_ratio(self) -> float:
        return self._width / self._height if self._height else 1.0

    def add_load_callback(self, callback):
        callback(self)

    def __repr__(self):
        return f"StaticImage({self.name!r}, {self._width}x{self._height})"


class PendingImage:
    """
    Image that completes later, possibly from a loader thread.

    Callbacks registered before completion fire once on complete();
    callbacks registered afterwards fire immediately.
    """

    def __init__(self, name: str, payload: Any = None):
        self.name = name
        self.payload = payload
        self._width = 0
        self._height = 0
        self._loaded = False
        self._callbacks: List[Callable] = []
        self._lock = threading.Lock()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def aspect_ratio(self) -> float:
        return self._width / self._height if self._height else 1.0

    def add_load_callback(self, callback):
        with self._lock:
            if not self._loaded:
                self._callbacks.append(callback)
                return
        callback(self)

    def complete(self, width: int, height: int, payload: Any = None):
        """Mark the image decoded and notify listeners"""
        with self._lock:
            if self._loaded:
                return
            self._width = width
            self._height = height
            if payload is not None:
                self.payload = payload
            self._loaded = True
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def __repr__(self):
        state = f"{self._width}x{self._height}" if self._loaded else "pending"
        return f"PendingImage({self.name!r}, {state})"


def aspect_ratio(image: ImageResource) -> float:
    """Width / height of a loaded image (1.0 for degenerate sizes)"""
    return image.width / image.height if image.height else 1.0


def await_images(
    images: Mapping[str, ImageResource],
    timeout: float = IMAGE_LOAD_TIMEOUT_S
) -> Dict[str, ImageResource]:
    """
    Block until every image has loaded or the timeout elapses.

    Args:
        images: {name: image} as requested by the host
        timeout: Seconds to wait for stragglers

    Returns:
        {name: image} for images that completed in time
    """
    remaining = set(images.keys())
    done = threading.Event()
    lock = threading.Lock()

    if not remaining:
        return {}

    def _on_load(name):
        def _callback(_image):
            with lock:
                remaining.discard(name)
                if not remaining:
                    done.set()
        return _callback

    for name, image in images.items():
        image.add_load_callback(_on_load(name))

    start = time.perf_counter()
    done.wait(timeout)
    elapsed = time.perf_counter() - start

    with lock:
        missing = sorted(remaining)

    if missing:
        print(f"[WARN] {len(missing)} image(s) not loaded after {elapsed:.2f}s: {', '.join(missing)}")

    return {name: image for name, image in images.items() if image.loaded}


def resolve_pools(
    manifest: AssetManifest,
    images: Mapping[str, ImageResource],
    species: Optional[List[Species]] = None
) -> Dict[Species, List[ImageResource]]:
    """
    Map manifest names to loaded images, per species.

    Names missing from `images` are dropped. When the manifest has no
    entry for a species, images whose name starts with the species key
    are used instead (e.g. "swimmer_a.png").
    """
    pools = {}
    for kind in (species or list(Species)):
        names = manifest.species.get(kind)
        if names is None:
            names = [n for n in images if n.lower().startswith(kind.value)]
        pools[kind] = [images[n] for n in names if n in images]
    return pools


def resolve_decor_pool(manifest: AssetManifest, images: Mapping[str, ImageResource]) -> List[ImageResource]:
    """Flattened list of loaded decor images across all categories"""
    pool = []
    for names in manifest.decor.values():
        pool.extend(images[n] for n in names if n in images)
    return pool
