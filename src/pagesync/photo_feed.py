from collections import deque

from pagesync.schemas import Photo

FEED_CAPACITY = 50


class PhotoFeed:
    """Shared photos, oldest first. Appending past capacity evicts from the head."""

    def __init__(self):
        self.photos: deque[Photo] = deque(maxlen=FEED_CAPACITY)

    def append(self, photo: Photo) -> None:
        self.photos.append(photo)

    def snapshot(self) -> list[Photo]:
        return list(self.photos)

    def clear(self) -> None:
        self.photos.clear()

    def __len__(self) -> int:
        return len(self.photos)
