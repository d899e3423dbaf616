import pytest

from aitext.errors import InvalidInputError, JobNotFoundError
from aitext.facade import GenerationFacade
from aitext.models import JobStatus
from aitext.store import JobStore


def test_submit_returns_pending_and_normalizes_previous_id(store):
    facade = GenerationFacade(store)
    result = facade.submit("hello", previous_id="   ")
    assert result.status is JobStatus.pending
    view = facade.status(result.id)
    assert view.prompt == "hello"
    assert view.previous_id is None
    assert view.result is None
    assert view.submitted_at == result.submitted_at


def test_submit_blank_prompt(store):
    facade = GenerationFacade(store)
    with pytest.raises(InvalidInputError):
        facade.submit("  ")
    with pytest.raises(InvalidInputError):
        facade.submit(None)
    assert len(store) == 0


def test_status_rejects_blank_and_unknown_ids(store):
    facade = GenerationFacade(store)
    with pytest.raises(InvalidInputError):
        facade.status(" ")
    with pytest.raises(JobNotFoundError):
        facade.status("missing")


@pytest.mark.asyncio
async def test_stream_emits_until_terminal(store):
    steps = iter([
        lambda job_id: store.set_status(job_id, JobStatus.processing),
        lambda job_id: None,
        lambda job_id: store.set_status(job_id, JobStatus.complete, "the answer"),
    ])
    waits = []

    async def fake_sleep(seconds):
        waits.append(seconds)
        next(steps)(job_id)

    facade = GenerationFacade(store, stream_interval=5.0, sleep=fake_sleep)
    job_id = facade.submit("question").id

    statuses = [view.status async for view in facade.stream_status(job_id)]
    assert statuses == [JobStatus.pending, JobStatus.processing, JobStatus.processing, JobStatus.complete]
    assert waits == [5.0, 5.0, 5.0]


@pytest.mark.asyncio
async def test_closing_stream_leaves_job_untouched(store):
    async def no_sleep(seconds):
        return None

    facade = GenerationFacade(store, sleep=no_sleep)
    job_id = facade.submit("question").id
    updates = facade.stream_status(job_id)
    first = await updates.__anext__()
    await updates.aclose()

    assert first.status is JobStatus.pending
    assert store.get(job_id).status is JobStatus.pending
    assert store.next_pending().id == job_id


@pytest.mark.asyncio
async def test_stream_unknown_id(store):
    facade = GenerationFacade(store)
    with pytest.raises(JobNotFoundError):
        async for _ in facade.stream_status("missing"):
            pass


class EagerDispatchStore(JobStore):
    """Moves every new job to PROCESSING right after insertion, like a dispatcher racing the handler."""

    def create(self, prompt, previous_id=None):
        job = super().create(prompt, previous_id)
        self.set_status(job.id, JobStatus.processing)
        return job


def test_submit_reports_pending_even_if_dispatch_starts_immediately():
    store = EagerDispatchStore()
    facade = GenerationFacade(store)
    result = facade.submit("hello")
    assert result.status is JobStatus.pending
    assert store.get(result.id).status is JobStatus.processing
