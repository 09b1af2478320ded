import tempfile

import aiohttp
import pytest

from api.services.media import MediaFetcher
from lib.error_handler import FetchError
from conftest import FakeResponse, FakeSession

MEDIA_URL = 'https://api.twilio.com/2010-04-01/Accounts/ACtest/Messages/MM1/Media/ME1'

@pytest.mark.asyncio
async def test_fetch_uses_twilio_basic_auth(settings):
    session = FakeSession(get=[FakeResponse(body=b'\xff\xd8image')])
    fetcher = MediaFetcher(settings)

    data = await fetcher.fetch(session, MEDIA_URL)

    assert data == b'\xff\xd8image'
    method, url, kwargs = session.calls[0]
    assert (method, url) == ('GET', MEDIA_URL)
    assert kwargs['auth'] == aiohttp.BasicAuth('ACtest', 'twilio-token')

@pytest.mark.asyncio
async def test_fetch_raises_on_non_success_status(settings):
    session = FakeSession(get=[FakeResponse(status=404, body=b'not found')])

    with pytest.raises(FetchError):
        await MediaFetcher(settings).fetch(session, MEDIA_URL)

@pytest.mark.asyncio
async def test_fetch_raises_on_transport_error(settings):
    session = FakeSession(get=[aiohttp.ClientConnectionError('connection reset')])

    with pytest.raises(FetchError):
        await MediaFetcher(settings).fetch(session, MEDIA_URL)

@pytest.mark.asyncio
async def test_stream_writes_all_chunks(settings):
    session = FakeSession(get=[FakeResponse(chunks=[b'OggS', b'-voice', b'-note'])])

    with tempfile.NamedTemporaryFile() as temp_file:
        written = await MediaFetcher(settings).stream(session, MEDIA_URL, temp_file)
        temp_file.seek(0)
        assert temp_file.read() == b'OggS-voice-note'

    assert written == len(b'OggS-voice-note')

@pytest.mark.asyncio
async def test_stream_raises_on_non_success_status(settings):
    session = FakeSession(get=[FakeResponse(status=401, body=b'unauthorized')])

    with tempfile.NamedTemporaryFile() as temp_file:
        with pytest.raises(FetchError):
            await MediaFetcher(settings).stream(session, MEDIA_URL, temp_file)
