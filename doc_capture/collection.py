"""
In-memory collection of captured page images
"""

from typing import Callable, Iterable, List, Tuple

from .models import PageImageRef

Observer = Callable[[Tuple[PageImageRef, ...]], None]


class ImageCollection:
    """Ordered, append-only list of page image references"""

    def __init__(self):
        self._images: List[PageImageRef] = []
        self._observers: List[Observer] = []

    def append(self, images: Iterable[PageImageRef]):
        """Add images to the end of the collection, keeping their order"""
        new_images = list(images)
        if not new_images:
            return
        self._images.extend(new_images)
        snapshot = self.snapshot()
        for observer in list(self._observers):
            observer(snapshot)

    def snapshot(self) -> Tuple[PageImageRef, ...]:
        return tuple(self._images)

    def subscribe(self, observer: Observer):
        """Register a callback run with the new snapshot after each append"""
        self._observers.append(observer)

    def unsubscribe(self, observer: Observer):
        if observer in self._observers:
            self._observers.remove(observer)

    def __len__(self):
        return len(self._images)

    def __iter__(self):
        return iter(self.snapshot())
