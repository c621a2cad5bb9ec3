import asyncio
import contextlib
import json
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from loguru import logger

from taskboard.api.deps import AppSettings, Services
from taskboard.core.constants import ClientMessage, ServerMessage
from taskboard.core.exceptions.base import AppException
from taskboard.core.exceptions.domain import AuthenticationError, ValidationError
from taskboard.schemas.events import ClientCommand
from taskboard.services.notifier import BoardNotifier, RealtimeConnection
from taskboard.utils.cookies import get_session_token
from taskboard.utils.validation import validate_payload

router = APIRouter(tags=["realtime"])


def _reply(connection: RealtimeConnection, message_type: ServerMessage, **fields: Any) -> None:
    connection.deliver({"type": message_type.value, **fields})


async def _pump(websocket: WebSocket, connection: RealtimeConnection) -> None:
    """Single writer: forwards queued messages in order until the connection closes."""
    while True:
        message = await connection.next_message()
        if message is None:
            return
        try:
            await websocket.send_json(message)
        except WebSocketDisconnect:
            return
        except Exception as e:
            logger.warning(f"Realtime send to {connection.id} failed: {e!r}")
            return


async def _handle_command(
    notifier: BoardNotifier, connection: RealtimeConnection, raw: str
) -> None:
    try:
        command = validate_payload(ClientCommand, json.loads(raw))
        if command.type == ClientMessage.PING:
            _reply(connection, ServerMessage.PONG)
            return
        if not command.board_id:
            raise ValidationError("boardId is required")

        if command.type == ClientMessage.JOIN:
            await notifier.join(connection, command.board_id)
            _reply(connection, ServerMessage.JOINED, boardId=command.board_id)
        else:
            notifier.leave(connection, command.board_id)
            _reply(connection, ServerMessage.LEFT, boardId=command.board_id)
    except json.JSONDecodeError:
        _reply(connection, ServerMessage.ERROR, error=ValidationError.__name__, detail="Malformed message")
    except AppException as e:
        logger.debug(f"Realtime command rejected for {connection.id}: {e.kind}")
        _reply(connection, ServerMessage.ERROR, error=e.kind, detail=e.message)


@router.websocket("/ws")
async def realtime(
    websocket: WebSocket,
    services: Services,
    settings: AppSettings,
):
    """Board event stream. Clients send join/leave/ping and receive board events."""
    notifier = services.notifier
    try:
        connection = await notifier.connect(get_session_token(websocket, settings))
    except AuthenticationError as e:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)
        return

    await websocket.accept()
    writer = asyncio.create_task(_pump(websocket, connection))
    try:
        while True:
            raw = await websocket.receive_text()
            await _handle_command(notifier, connection, raw)
    except WebSocketDisconnect:
        pass
    finally:
        notifier.disconnect(connection)
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer
