import pytest
import httpx

from natureup.core.config import Settings


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        _env_file=None,
        STORAGE_MODE="local",
        LOCAL_CACHE_DIR=str(tmp_path / "cache"),
        OPENAI_API_KEY="test-openai-key",
        GEMINI_API_KEY="test-gemini-key",
        ALLTRAILS_API_TOKEN="test-alltrails-token",
        HTTP_TIMEOUT=5.0,
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def make_transport():
    return RecordingTransport


