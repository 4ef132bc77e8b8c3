"""Shared test fixtures and sample data."""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock, MagicMock

from gisty.config import Settings
from gisty.main import app
from gisty.models.schemas import GistDocument, GistSummary
from gisty.routers import gists, health
from gisty.services.gist_service import GistService

API_BASE = "https://api.github.test"

# Sample list entry matching the GitHub API response for a user's gists
SAMPLE_SUMMARY_DATA = {
    "id": "1b212f0843127d2d061f0d53fb581680",
    "url": "https://api.github.com/gists/1b212f0843127d2d061f0d53fb581680",
    "html_url": "https://gist.github.com/1b212f0843127d2d061f0d53fb581680",
    "description": "Hello world!",
    "public": True,
    "created_at": "2014-10-01T16:19:34Z",
    "updated_at": "2025-12-23T23:51:45Z",
    "comments": 291,
    "files": {
        "hello_world.rb": {
            "filename": "hello_world.rb",
            "type": "application/x-ruby",
            "language": "Ruby",
            "size": 175,
        }
    },
    "owner": {"login": "arsham", "id": 583231},
}

# Sample single gist, as returned by /gists/{id}
SAMPLE_GIST_DATA = {
    "id": "1b212f0843127d2d061f0d53fb581680",
    "description": "Hello world!",
    "files": {
        "hello_world.rb": {
            "filename": "hello_world.rb",
            "content": "class HelloWorld\n  def initialize\n    puts 'hi'\n  end\nend\n",
        },
        "notes.md": {"filename": "notes.md", "content": "# notes"},
    },
}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def refuse(request: httpx.Request) -> httpx.Response:
    """Handler for tests where the API must not be contacted."""
    pytest.fail(f"unexpected request to {request.url}")


@pytest.fixture
def make_transport():
    """Build a RecordingTransport around a handler."""
    return RecordingTransport


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def settings(cache_dir):
    """Test settings."""
    return Settings(
        username="arsham",
        token="s3cr3t",
        api_base_url=API_BASE,
        cache_dir=cache_dir,
        request_timeout=5.0,
    )


@pytest.fixture
def sample_summary_data():
    return SAMPLE_SUMMARY_DATA


@pytest.fixture
def sample_gist_data():
    return SAMPLE_GIST_DATA


@pytest.fixture
def sample_summary(sample_summary_data) -> GistSummary:
    return GistSummary.model_validate(sample_summary_data)


@pytest.fixture
def sample_document(sample_gist_data) -> GistDocument:
    return GistDocument.model_validate(sample_gist_data)


@pytest.fixture
def warnings_log():
    """Logger stand-in that records what the service reports."""
    return MagicMock()


@pytest_asyncio.fixture
async def make_service(settings):
    """Build started GistServices around a handler; closed after the test."""
    services = []

    async def factory(handler=refuse, service_settings=None, log=None):
        transport = RecordingTransport(handler)
        service = GistService(service_settings or settings, log=log, transport=transport)
        await service.start()
        services.append(service)
        return service, transport

    yield factory

    for service in services:
        await service.close()


@pytest.fixture
def mock_gist_service(settings, sample_summary, sample_document):
    """Mocked gist service."""
    mock_service = AsyncMock(spec=GistService)
    mock_service.settings = settings
    mock_service.cache_enabled = True
    mock_service.list_gists.return_value = [sample_summary]
    mock_service.get_gist.return_value = sample_document
    mock_service.invalidate.return_value = True
    mock_service.check_health.return_value = True
    return mock_service


@pytest_asyncio.fixture
async def test_client(mock_gist_service):
    """AsyncClient for testing with mocked dependencies."""
    app.dependency_overrides[gists.get_gist_service] = lambda: mock_gist_service
    app.dependency_overrides[health.get_gist_service] = lambda: mock_gist_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
