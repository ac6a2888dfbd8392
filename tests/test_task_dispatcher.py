import pytest
import asyncio
import logging

from produce_scraper.services.task_dispatcher import BackgroundDispatcher


@pytest.mark.asyncio
async def test_dispatched_task_is_tracked_until_done():
    dispatcher = BackgroundDispatcher()
    gate = asyncio.Event()

    async def job():
        await gate.wait()
        return "done"

    task = dispatcher.dispatch(job(), name="job-1")
    assert dispatcher.pending == 1

    gate.set()
    assert await task == "done"
    await asyncio.sleep(0)
    assert dispatcher.pending == 0


@pytest.mark.asyncio
async def test_escaped_exception_is_logged(caplog):
    dispatcher = BackgroundDispatcher()

    async def job():
        raise RuntimeError("engine disposed")

    with caplog.at_level(logging.ERROR):
        dispatcher.dispatch(job(), name="job-2")
        await dispatcher.drain(timeout=1)
        await asyncio.sleep(0)

    assert dispatcher.pending == 0
    assert "Background task job-2 failed: engine disposed" in caplog.text


@pytest.mark.asyncio
async def test_submit_calls_the_function_with_args():
    dispatcher = BackgroundDispatcher()
    seen = []

    async def run(job_id, store_id):
        seen.append((job_id, store_id))

    task = await dispatcher.submit(run, "job-3", "1234", name="scrape-job-job-3")
    await task

    assert task.get_name() == "scrape-job-job-3"
    assert seen == [("job-3", "1234")]


@pytest.mark.asyncio
async def test_drain_waits_for_running_jobs():
    dispatcher = BackgroundDispatcher()
    finished = []

    async def job(n):
        await asyncio.sleep(0.01)
        finished.append(n)

    for n in range(3):
        dispatcher.dispatch(job(n))
    await dispatcher.drain(timeout=5)

    assert sorted(finished) == [0, 1, 2]


@pytest.mark.asyncio
async def test_drain_abandons_jobs_past_the_grace_period():
    dispatcher = BackgroundDispatcher()

    async def job():
        await asyncio.sleep(60)

    task = dispatcher.dispatch(job(), name="slow")
    await dispatcher.drain(timeout=0.01)

    assert task.cancelled()
    await asyncio.sleep(0)
    assert dispatcher.pending == 0


@pytest.mark.asyncio
async def test_drain_without_tasks_returns_immediately():
    await BackgroundDispatcher().drain(timeout=0)
