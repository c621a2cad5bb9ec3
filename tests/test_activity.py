"""
Tests for the activity log: ordering, contents and write-failure handling.
"""
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from taskboard.repos.activity import ActivityRepo
from taskboard.schemas.task import TaskCreate
from taskboard.services.activity_log import ActivityLog


async def test_activity_most_recent_first(services, alice, board, todo, make_task):
    await make_task(todo, "Write spec")
    entries = await services.boards.list_activity(alice, board.id)

    assert [e.action for e in entries] == [
        'Alice created the task "Write spec".',
        'Alice created list "Todo"',
        'Alice created the board "Sprint"',
    ]
    assert all(e.board_id == board.id for e in entries)
    assert entries[0].user.name == "Alice"
    assert entries[1].list_id == todo.id


async def test_each_mutation_records_exactly_one_entry(services, alice, board, todo, make_task):
    task = await make_task(todo, "Count me")
    before = len(await services.boards.list_activity(alice, board.id))
    await services.tasks.reorder_task(alice, task.id, 4)
    after = await services.boards.list_activity(alice, board.id)
    assert len(after) == before + 1
    assert after[0].task_id == task.id


async def test_failed_write_keeps_mutation_and_withholds_events(
    services, alice, board, todo, monkeypatch
):
    """The mutation stands, a warning is logged, and nothing is broadcast"""
    connection = await services.notifier.connect(services.auth.issue_token(alice.id))
    await services.notifier.join(connection, board.id)

    async def broken_create(self, *args, **kwargs):
        raise SQLAlchemyError("disk I/O error")

    warnings = []
    sink_id = logger.add(lambda message: warnings.append(str(message)), level="WARNING")
    monkeypatch.setattr(ActivityRepo, "create_one", broken_create)
    try:
        task = await services.tasks.create_task(
            alice, TaskCreate(title="Kept anyway", list_id=todo.id)
        )
    finally:
        monkeypatch.undo()
        logger.remove(sink_id)

    assert connection.drain() == []
    assert any("Activity log write failed" in w for w in warnings)
    assert [t.id for t in await services.tasks.list_tasks(alice, todo.id)] == [task.id]
    actions = [e.action for e in await services.boards.list_activity(alice, board.id)]
    assert 'Alice created the task "Kept anyway".' not in actions


async def test_full_history_is_returned(services, session_factory, alice, board):
    log = ActivityLog(session_factory)
    for n in range(250):
        await log.record(board.id, alice.id, f"Alice touched item {n}")

    entries = await services.boards.list_activity(alice, board.id)

    assert len(entries) == 251
    assert entries[-1].action == 'Alice created the board "Sprint"'
