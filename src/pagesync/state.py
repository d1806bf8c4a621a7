"""Process-wide relay state, built once per application."""

from dataclasses import dataclass
from dataclasses import field

from pagesync.event_broker import EventBroker
from pagesync.photo_feed import PhotoFeed
from pagesync.registry import SessionRegistry


@dataclass
class RelayState:
    registry: SessionRegistry = field(default_factory=SessionRegistry)
    feed: PhotoFeed = field(default_factory=PhotoFeed)
    broker: EventBroker = field(default_factory=EventBroker)

    async def close(self) -> None:
        await self.broker.shutdown()
        self.registry.clear()
        self.feed.clear()


def build_state() -> RelayState:
    return RelayState()
