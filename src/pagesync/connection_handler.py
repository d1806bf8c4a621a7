"""Per-connection state machine for the relay.

Each handler method runs to completion without awaiting between the
registry/feed mutation and the broadcast, so on a single event loop no other
frame can interleave with it.
"""

import enum
import logging

from pagesync.event_broker import Connection
from pagesync.event_broker import EventBroker
from pagesync.photo_feed import PhotoFeed
from pagesync.registry import SessionRegistry
from pagesync.schemas import AppReset
from pagesync.schemas import ExistingUsers
from pagesync.schemas import InitPhotos
from pagesync.schemas import MalformedMessage
from pagesync.schemas import NewPhoto
from pagesync.schemas import PageChange
from pagesync.schemas import parse_inbound
from pagesync.schemas import Participant
from pagesync.schemas import Photo
from pagesync.schemas import PhotoUpload
from pagesync.schemas import ResetApp
from pagesync.schemas import UserJoin
from pagesync.schemas import UserJoined
from pagesync.schemas import UserLeft
from pagesync.schemas import UserPageUpdate

logger = logging.getLogger(__name__)


class ConnectionState(enum.Enum):
    CONNECTING = "connecting"
    JOINED = "joined"
    CLOSED = "closed"


class ConnectionHandler:
    def __init__(
        self,
        connection: Connection,
        registry: SessionRegistry,
        feed: PhotoFeed,
        broker: EventBroker,
    ):
        self.connection = connection
        self.registry = registry
        self.feed = feed
        self.broker = broker
        self.state = ConnectionState.CONNECTING

    @property
    def id(self) -> str:
        return self.connection.id

    def open(self) -> None:
        """Register for fan-out and send the current feed and roster to this client only."""
        self.broker.connect(self.connection)
        self.broker.send(self.connection, InitPhotos(photos=self.feed.snapshot()))
        self.broker.send(self.connection, ExistingUsers(users=self.registry.all()))
        logger.info("New connection: %s", self.id)

    def handle(self, raw: str | bytes) -> None:
        if self.state is ConnectionState.CLOSED:
            return

        try:
            message = parse_inbound(raw)
        except MalformedMessage as exc:
            logger.warning("Dropping malformed message from %s: %s", self.id, exc)
            return

        if isinstance(message, UserJoin):
            self.on_user_join(message)
        elif isinstance(message, PageChange):
            self.on_page_change(message)
        elif isinstance(message, PhotoUpload):
            self.on_photo_upload(message)
        elif isinstance(message, ResetApp):
            self.on_reset()

    def on_user_join(self, message: UserJoin) -> None:
        # A repeated join simply replaces the previous record
        participant = Participant(
            id=self.id,
            name=message.name,
            avatar=message.avatar,
            is_admin=message.is_admin,
            page=message.page,
        )
        self.registry.put(self.id, participant)
        self.state = ConnectionState.JOINED
        self.broker.broadcast(UserJoined(user=participant))
        logger.info("User joined: %s (%s)", participant.name, self.id)

    def on_page_change(self, message: PageChange) -> None:
        if not self.registry.update_page(self.id, message.page):
            return
        self.broker.broadcast(UserPageUpdate(user_id=self.id, page=message.page))

    def on_photo_upload(self, message: PhotoUpload) -> None:
        photo = Photo(url=message.url, caption=message.caption)
        self.feed.append(photo)
        self.broker.broadcast(NewPhoto(photo=photo))
        logger.info("New photo uploaded: %s", photo.caption)

    def on_reset(self) -> None:
        participant = self.registry.get(self.id)
        if participant is None:
            return
        if not participant.is_admin:
            logger.info("Ignoring reset from non-admin %s", self.id)
            return

        self.registry.clear()
        self.feed.clear()
        self.broker.broadcast(AppReset())
        logger.info("App reset by admin %s", participant.name)

    async def close(self) -> None:
        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSED

        self.broker.detach(self.connection)
        participant = self.registry.remove(self.id)
        if participant is not None:
            self.broker.broadcast(UserLeft(user_id=self.id))
            logger.info("User left: %s", participant.name)

        await self.broker.disconnect(self.connection)
