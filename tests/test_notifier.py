"""
Tests for the realtime notifier: subscription, delivery order and backpressure.
"""
import pytest

from taskboard.core.constants import EventType
from taskboard.core.exceptions.domain import (
    AuthenticationError,
    AuthorizationError,
    ResourceNotFoundError,
)
from taskboard.schemas.board import BoardCreate
from taskboard.services.notifier import RealtimeConnection


async def open_connection(services, user, board_id=None):
    connection = await services.notifier.connect(services.auth.issue_token(user.id))
    if board_id:
        await services.notifier.join(connection, board_id)
    return connection


def event_types(connection):
    return [message["type"] for message in connection.drain()]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Connection queue
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


async def test_connection_queue_is_fifo_and_bounded(alice):
    connection = RealtimeConnection(alice, max_pending=3)
    results = [connection.deliver({"n": n}) for n in range(5)]
    assert results == [True, True, True, False, False]
    assert connection.drain() == [{"n": 0}, {"n": 1}, {"n": 2}]


async def test_closed_connection_stops_delivering(alice):
    connection = RealtimeConnection(alice)
    connection.deliver({"n": 1})
    connection.close()
    assert connection.closed
    assert not connection.deliver({"n": 2})
    assert await connection.next_message() is None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Authentication & join
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@pytest.mark.parametrize("token", [None, "", "not-a-token"])
async def test_connect_fails_closed(services, token):
    with pytest.raises(AuthenticationError):
        await services.notifier.connect(token)


async def test_join_requires_membership(services, bob, board):
    connection = await open_connection(services, bob)
    with pytest.raises(AuthorizationError):
        await services.notifier.join(connection, board.id)
    assert services.notifier.subscriber_count(board.id) == 0


async def test_join_missing_board(services, alice):
    connection = await open_connection(services, alice)
    with pytest.raises(ResourceNotFoundError):
        await services.notifier.join(connection, "0" * 32)


async def test_join_after_disconnect_rejected(services, alice, board):
    connection = await open_connection(services, alice)
    services.notifier.disconnect(connection)
    with pytest.raises(AuthenticationError):
        await services.notifier.join(connection, board.id)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Delivery
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


async def test_only_joined_connections_receive_events(services, alice, board, todo, make_task):
    joined = await open_connection(services, alice, board.id)
    idle = await open_connection(services, alice)

    task = await make_task(todo, "Write spec")

    messages = joined.drain()
    assert [m["type"] for m in messages] == [EventType.TASK_CREATED, EventType.ACTIVITY_ADDED]
    assert all(m["boardId"] == board.id for m in messages)
    assert messages[0]["data"]["id"] == task.id
    assert messages[0]["data"]["assignedUsers"][0]["id"] == alice.id
    assert messages[1]["data"]["action"] == 'Alice created the task "Write spec".'
    assert idle.drain() == []


async def test_events_stay_on_their_board(services, alice, board, todo, make_task):
    other = await services.boards.create_board(alice, BoardCreate(title="Other"))
    watcher = await open_connection(services, alice, other.id)

    await make_task(todo, "Elsewhere")
    assert watcher.drain() == []


async def test_events_arrive_in_publish_order(services, alice, board, todo, make_task):
    connection = await open_connection(services, alice, board.id)
    task = await make_task(todo, "One")
    await services.tasks.reorder_task(alice, task.id, 3)
    await services.tasks.delete_task(alice, task.id)

    actions = [m["data"]["action"] for m in connection.drain() if m["type"] == "activityAdded"]
    assert actions == [
        'Alice created the task "One".',
        'Alice moved task "One" to position 3',
        'Alice deleted the task "One"',
    ]


async def test_full_queue_drops_new_events(services, alice, board):
    connection = await open_connection(services, alice, board.id)
    delivered = [
        services.notifier.publish(board.id, EventType.ACTIVITY_ADDED, {"n": n}) for n in range(7)
    ]
    # The test settings keep five pending events per connection
    assert delivered == [1, 1, 1, 1, 1, 0, 0]
    assert [m["data"]["n"] for m in connection.drain()] == [0, 1, 2, 3, 4]


async def test_publish_without_subscribers(services, board):
    assert services.notifier.publish(board.id, EventType.ACTIVITY_ADDED, {}) == 0


async def test_leave_stops_delivery(services, alice, board):
    connection = await open_connection(services, alice, board.id)
    assert services.notifier.leave(connection, board.id)
    assert not services.notifier.leave(connection, board.id)
    services.notifier.publish(board.id, EventType.ACTIVITY_ADDED, {})
    assert connection.drain() == []


async def test_removed_member_is_evicted(services, alice, bob, board):
    await services.boards.add_member(alice, board.id, bob.email)
    bob_connection = await open_connection(services, bob, board.id)

    await services.boards.remove_member(alice, board.id, bob.id)
    assert event_types(bob_connection) == [EventType.ACTIVITY_ADDED]
    assert board.id not in bob_connection.boards

    services.notifier.publish(board.id, EventType.ACTIVITY_ADDED, {})
    assert bob_connection.drain() == []


async def test_deleted_board_room_is_closed(services, alice, board):
    connection = await open_connection(services, alice, board.id)
    await services.boards.delete_board(alice, board.id)
    assert services.notifier.subscriber_count(board.id) == 0
    assert connection.boards == set()


async def test_close_disconnects_everyone(services, alice, board):
    connection = await open_connection(services, alice, board.id)
    await services.notifier.close()
    assert connection.closed
    assert services.notifier.subscriber_count(board.id) == 0
