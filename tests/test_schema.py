"""
Schema creation on a fresh database file.
"""
from sqlalchemy import inspect

from taskboard.models.db import create_engine, init_models


async def test_fresh_database_builds_every_table(settings):
    engine = create_engine(settings)
    try:
        await init_models(engine)
        # A second run against the existing file is a no-op
        await init_models(engine)

        async with engine.connect() as conn:
            tables, task_indexes = await conn.run_sync(
                lambda sync_conn: (
                    set(inspect(sync_conn).get_table_names()),
                    {ix["name"]: ix["column_names"] for ix in inspect(sync_conn).get_indexes("task")},
                )
            )
    finally:
        await engine.dispose()

    assert tables == {
        "user", "board", "board_member", "task_list", "task", "task_assignee", "activity"
    }
    assert task_indexes["ix_task_list_id"] == ["list_id"]
