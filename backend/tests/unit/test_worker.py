"""Tests for the arq worker wiring."""

from unittest.mock import AsyncMock, patch

from hive.retention import retention_worker
from hive.worker.arq import WorkerSettings


def test_retention_trigger_is_scheduled_hourly_at_minute_17():
    cron_jobs = {job.name: job for job in WorkerSettings.cron_jobs}

    job = cron_jobs["cron:retention_run_all"]
    assert job.minute == 17
    assert job.hour is None
    assert job.run_at_startup is False


async def test_cron_job_calls_the_trigger():
    with patch(
        "hive.retention.retention_worker.trigger_retention_run", AsyncMock(return_value=True)
    ) as trigger:
        assert await retention_worker.retention_run_all({}) is True

    trigger.assert_awaited_once()


async def test_purge_org_function_runs_with_its_own_session(sessionmanager, seed, days_ago):
    org_id = await seed.org()
    thread_id = await seed.thread(org_id, days_ago(300))
    await seed.messages(org_id, thread_id, days_ago(200), count=2)
    await seed.commit()

    ctx = {"job_id": "job-1", "sessionmanager": sessionmanager}
    meta = await retention_worker.purge_org_retention(ctx, str(org_id))

    assert meta["counts"]["messages"] == 2
    assert meta["dryRun"] is False
