import logging
from typing import BinaryIO

import aiohttp

from lib.config import Settings
from lib.error_handler import FetchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

class MediaFetcher:
    """Downloads message attachments from Twilio's authenticated media URLs"""

    def __init__(self, settings: Settings):
        self.auth = settings.twilio_basic_auth

    async def fetch(self, session, url: str) -> bytes:
        """Download the whole attachment into memory"""
        logger.info(f"Downloading media from Twilio: {url}")
        try:
            async with session.get(url, auth=self.auth) as response:
                if response.status != 200:
                    logger.error(f"Failed to download media: {response.status}")
                    logger.error(await response.text())
                    raise FetchError(f"Media download returned {response.status}")
                data = await response.read()
        except aiohttp.ClientError as e:
            raise FetchError(f"Media download failed: {str(e)}") from e

        logger.info(f"Media downloaded: {len(data)} bytes")
        return data

    async def stream(self, session, url: str, file: BinaryIO) -> int:
        """Stream the attachment into an open binary file, returning the byte count"""
        logger.info(f"Streaming media from Twilio: {url}")
        written = 0
        try:
            async with session.get(url, auth=self.auth) as response:
                if response.status != 200:
                    logger.error(f"Failed to stream media: {response.status}")
                    logger.error(await response.text())
                    raise FetchError(f"Media download returned {response.status}")
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    file.write(chunk)
                    written += len(chunk)
        except aiohttp.ClientError as e:
            raise FetchError(f"Media download failed: {str(e)}") from e

        file.flush()
        logger.info(f"Media saved locally: {file.name} ({written} bytes)")
        return written
