import os
import pytest
from httpx import ASGITransport, AsyncClient

os.environ["DISPATCHER_ENABLED"] = "0"
os.environ["PROVIDER"] = "stub"
os.environ["RATE_LIMIT_BACKEND"] = "memory"

from aitext.facade import GenerationFacade
from aitext.main import app as fastapi_app
from aitext.store import JobStore


class FakeTime:
    """Manually advanced time source for the rate-limit clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def store():
    return JobStore()


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
async def client(store):
    fastapi_app.state.facade = GenerationFacade(store, stream_interval=0.01)
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
