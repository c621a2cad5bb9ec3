import asyncio
from collections import defaultdict
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskboard.core.constants import BoardOperation, EventType
from taskboard.core.exceptions.domain import AuthenticationError, ResourceNotFoundError
from taskboard.models.base import new_id
from taskboard.repos.board import BoardRepo
from taskboard.schemas.events import BoardEvent
from taskboard.schemas.user import UserResponse
from taskboard.services.access_policy import authorize
from taskboard.services.auth_service import AuthService


class RealtimeConnection:
    """One authenticated client and the boards it has joined.

    Outgoing messages go through a bounded FIFO queue drained by a single
    writer, which keeps per-connection delivery in publish order.
    """

    def __init__(self, user: UserResponse, *, max_pending: int = 100):
        self.id = new_id()
        self.user = user
        self.boards: set[str] = set()
        self._queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(maxsize=max_pending)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def deliver(self, message: dict[str, Any]) -> bool:
        """Queue a message without waiting. Returns False if it was dropped."""
        if self._closed:
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    async def next_message(self) -> dict[str, Any] | None:
        """Wait for the next outgoing message; ``None`` once the connection is closed."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    def drain(self) -> list[dict[str, Any]]:
        """Take every queued message without waiting."""
        messages = []
        while not self._queue.empty():
            message = self._queue.get_nowait()
            if message is not None:
                messages.append(message)
        return messages

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Pending events are discarded; the sentinel wakes the writer
        self.drain()
        self._queue.put_nowait(None)


class BoardNotifier:
    """Fans board-scoped events out to the connections that joined the board.

    Delivery is at-most-once with no replay: a connection that joins after an
    event was published never sees it. Publishing never blocks or raises on
    behalf of subscribers.
    """

    def __init__(
        self,
        auth_service: AuthService,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        max_pending: int = 100,
    ):
        self._auth_service = auth_service
        self._session_factory = session_factory
        self._max_pending = max_pending
        self._connections: dict[str, RealtimeConnection] = {}
        self._rooms: dict[str, set[RealtimeConnection]] = defaultdict(set)

    async def connect(self, token: str | None) -> RealtimeConnection:
        """Authenticate a new connection.

        Raises:
            AuthenticationError: If the token is missing, invalid or expired.
        """
        if not token:
            raise AuthenticationError("Please log in")
        user = await self._auth_service.verify_session(token)
        connection = RealtimeConnection(user, max_pending=self._max_pending)
        self._connections[connection.id] = connection
        logger.info(f"Realtime connection opened: {connection.id} (user={user.id})")
        return connection

    async def join(self, connection: RealtimeConnection, board_id: str) -> None:
        """Subscribe a connection to a board channel. Requires board membership.

        Raises:
            AuthenticationError: If the connection was already closed.
            ResourceNotFoundError: If the board does not exist.
            AuthorizationError: If the user is not a member of the board.
        """
        if connection.closed or connection.id not in self._connections:
            raise AuthenticationError("Connection is closed")

        session = self._session_factory()
        try:
            board = await BoardRepo(session).get_by_id(board_id, fresh=True)
            if not board:
                raise ResourceNotFoundError("Board", board_id)
            authorize(connection.user.id, board, BoardOperation.READ)
        finally:
            await session.close()

        self._rooms[board_id].add(connection)
        connection.boards.add(board_id)
        logger.debug(f"Connection {connection.id} joined board {board_id}")

    def leave(self, connection: RealtimeConnection, board_id: str) -> bool:
        room = self._rooms.get(board_id)
        connection.boards.discard(board_id)
        if not room or connection not in room:
            return False
        room.discard(connection)
        if not room:
            del self._rooms[board_id]
        return True

    def disconnect(self, connection: RealtimeConnection) -> None:
        for board_id in list(connection.boards):
            self.leave(connection, board_id)
        self._connections.pop(connection.id, None)
        connection.close()
        logger.info(f"Realtime connection closed: {connection.id}")

    def evict(self, board_id: str, user_id: str) -> int:
        """Unsubscribe every connection of a user from a board. Returns count removed."""
        removed = 0
        for connection in list(self._rooms.get(board_id, ())):
            if connection.user.id == user_id:
                self.leave(connection, board_id)
                removed += 1
        return removed

    def close_room(self, board_id: str) -> None:
        """Drop a board channel entirely (the board no longer exists)."""
        for connection in self._rooms.pop(board_id, set()):
            connection.boards.discard(board_id)

    def subscriber_count(self, board_id: str) -> int:
        return len(self._rooms.get(board_id, ()))

    def publish(self, board_id: str, event_type: EventType, data: dict[str, Any]) -> int:
        """Queue an event for every connection joined to the board.

        Returns the number of connections it was queued for.
        """
        message = BoardEvent(type=event_type, board_id=board_id, data=data).model_dump(
            mode="json", by_alias=True
        )
        delivered = 0
        for connection in list(self._rooms.get(board_id, ())):
            if connection.deliver(message):
                delivered += 1
            else:
                logger.warning(
                    f"Dropped {event_type} for connection {connection.id} on board {board_id} "
                    f"(pending={connection.pending})"
                )
        return delivered

    async def close(self) -> None:
        """Disconnect every connection (process shutdown)."""
        for connection in list(self._connections.values()):
            self.disconnect(connection)
        self._rooms.clear()
