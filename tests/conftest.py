"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest
from httpx import ASGITransport, AsyncClient

from hooktrigger.registry import InMemoryJobRegistry


@dataclass
class RecordingRunner:
    """Job runner that records submissions instead of running anything."""

    submitted: list = field(default_factory=list)

    def submit(self, job, cause, environment):
        self.submitted.append((job, cause, environment))


@pytest.fixture
def registry():
    return InMemoryJobRegistry()


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def app(registry, runner):
    from hooktrigger.main import create_app

    return create_app(registry=registry, runner=runner)


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
