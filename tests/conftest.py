import pytest
from unittest.mock import MagicMock
import sys
from pathlib import Path

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
sys.path.append(project_root)

from lib.config import Settings

class FakeContent:
    def __init__(self, chunks):
        self.chunks = chunks

    async def iter_chunked(self, size):
        for chunk in self.chunks:
            yield chunk

class FakeResponse:
    """Stands in for an aiohttp response inside `async with session.get(...)`"""

    def __init__(self, status=200, json_data=None, body=b"", chunks=None):
        self.status = status
        self.json_data = json_data
        self.body = body
        self.content = FakeContent(chunks if chunks is not None else [body])

    async def json(self):
        if self.json_data is None:
            raise ValueError("No JSON body")
        return self.json_data

    async def text(self):
        return str(self.json_data) if self.json_data is not None else self.body.decode(errors="replace")

    async def read(self):
        return self.body

class _RequestContext:
    def __init__(self, outcome):
        self.outcome = outcome

    async def __aenter__(self):
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

class FakeSession:
    """Replays queued responses per HTTP method and records every call"""

    def __init__(self, get=None, post=None):
        self.queues = {"GET": list(get or []), "POST": list(post or [])}
        self.calls = []

    def _request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return _RequestContext(self.queues[method].pop(0))

    def get(self, url, **kwargs):
        return self._request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._request("POST", url, **kwargs)

    def calls_to(self, method):
        return [call for call in self.calls if call[0] == method]

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

@pytest.fixture
def settings():
    return Settings(
        twilio_account_sid="ACtest",
        twilio_auth_token="twilio-token",
        assemblyai_api_key="assembly-key",
        roboflow_api_key="roboflow-key",
        roboflow_model_id="skin-disease",
        roboflow_model_version="3",
        openrouter_api_key="openrouter-key",
        transcription_poll_interval=0,
        transcription_max_polls=5,
        reply_delay=0,
        follow_up_delay=0
    )

def make_completion(content):
    """Shape of an OpenAI chat completion response"""
    completion = MagicMock()
    choice = MagicMock()
    choice.message.content = content
    completion.choices = [choice]
    return completion

@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion(
        "🟡 YELLOW - Eczema. Keep the area clean and moisturised."
    )
    return client
