import asyncio
import logging
import tempfile
from typing import Callable

import aiohttp

from api.models import TranscriptionJob, TranscriptionStatus
from api.prompts import audio_prompt
from api.services.media import MediaFetcher
from api.services.triage import TriageService
from lib.config import Settings
from lib.error_handler import (
    AppError,
    ErrorHandler,
    PollError,
    SubmitError,
    TranscriptionTimeout,
    UploadError,
)

logger = logging.getLogger(__name__)

TRANSCRIPTION_FAILED_MESSAGE = "Failed to transcribe audio."

class AudioService:
    def __init__(
        self,
        settings: Settings,
        fetcher: MediaFetcher,
        triage_service: TriageService,
        session_factory: Callable = aiohttp.ClientSession
    ):
        self.base_url = settings.assemblyai_base_url
        self.headers = {'authorization': settings.assemblyai_api_key}
        self.poll_interval = settings.transcription_poll_interval
        self.max_polls = settings.transcription_max_polls
        self.fetcher = fetcher
        self.triage = triage_service
        self.session_factory = session_factory
        logger.info(f"Audio service initialized with transcription URL: {self.base_url}")

    async def upload(self, session, audio_data: bytes) -> str:
        """Upload raw audio and return the provider-hosted URL"""
        logger.info(f"Uploading {len(audio_data)} bytes of audio")
        try:
            async with session.post(
                f"{self.base_url}/upload",
                data=audio_data,
                headers=self.headers
            ) as response:
                if response.status != 200:
                    logger.error(f"Upload error: {await response.text()}")
                    raise UploadError(f"Upload returned {response.status}")
                payload = await response.json()
        except aiohttp.ClientError as e:
            raise UploadError(f"Upload request failed: {str(e)}") from e
        except ValueError as e:
            raise UploadError(f"Upload response was not JSON: {str(e)}") from e

        if not isinstance(payload, dict):
            raise UploadError(f"Unexpected upload response: {payload!r}")
        upload_url = payload.get('upload_url')
        if not upload_url:
            raise UploadError("Upload response had no upload_url")

        logger.info(f"Audio uploaded. URL: {upload_url}")
        return upload_url

    async def submit(self, session, upload_url: str) -> str:
        """Request a transcript for an uploaded asset and return the job id"""
        try:
            async with session.post(
                f"{self.base_url}/transcript",
                json={'audio_url': upload_url},
                headers=self.headers
            ) as response:
                if response.status != 200:
                    logger.error(f"Submit error: {await response.text()}")
                    raise SubmitError(f"Transcript request returned {response.status}")
                payload = await response.json()
        except aiohttp.ClientError as e:
            raise SubmitError(f"Transcript request failed: {str(e)}") from e
        except ValueError as e:
            raise SubmitError(f"Transcript response was not JSON: {str(e)}") from e

        if not isinstance(payload, dict):
            raise SubmitError(f"Unexpected transcript response: {payload!r}")
        job_id = payload.get('id')
        if not job_id:
            raise SubmitError("Transcript response had no id")

        logger.info(f"Transcript request created. ID: {job_id}")
        return job_id

    async def poll(self, session, job_id: str) -> TranscriptionJob:
        """Wait for a transcript job to reach completed or failed.

        Polls every ``poll_interval`` seconds, at most ``max_polls`` times,
        and raises TranscriptionTimeout once the budget is spent.
        """
        for attempt in range(1, self.max_polls + 1):
            job = await self._fetch_job(session, job_id)
            logger.info(f"Polling transcription status ({attempt}/{self.max_polls}): {job.status.value}")
            if job.status.is_terminal:
                return job
            await asyncio.sleep(self.poll_interval)

        raise TranscriptionTimeout(f"Transcript {job_id} unfinished after {self.max_polls} polls")

    async def _fetch_job(self, session, job_id: str) -> TranscriptionJob:
        try:
            async with session.get(
                f"{self.base_url}/transcript/{job_id}",
                headers=self.headers
            ) as response:
                if response.status != 200:
                    logger.error(f"Poll error: {await response.text()}")
                    raise PollError(f"Transcript status returned {response.status}")
                payload = await response.json()
            if not isinstance(payload, dict):
                raise PollError(f"Unexpected transcript status: {payload!r}")
            return TranscriptionJob.from_response({**payload, 'id': job_id})
        except aiohttp.ClientError as e:
            raise PollError(f"Transcript status request failed: {str(e)}") from e
        except ValueError as e:
            raise PollError(f"Unreadable transcript status: {str(e)}") from e

    async def transcribe(self, session, media_url: str) -> TranscriptionJob:
        """Download, upload, submit and poll a voice note"""
        # The temp file is unique per call and removed on every exit path
        with tempfile.NamedTemporaryFile(suffix='.ogg') as temp_file:
            await self.fetcher.stream(session, media_url, temp_file)
            temp_file.seek(0)
            upload_url = await self.upload(session, temp_file.read())

        job_id = await self.submit(session, upload_url)
        return await self.poll(session, job_id)

    async def assess(self, media_url: str) -> str:
        """Transcribe a voice note and return a triage verdict"""
        try:
            async with self.session_factory() as session:
                job = await self.transcribe(session, media_url)
        except AppError as e:
            return ErrorHandler.handle_transcription_error(e)

        if job.status == TranscriptionStatus.FAILED:
            logger.warning(f"Transcription {job.id} failed")
            return TRANSCRIPTION_FAILED_MESSAGE

        logger.info(f"Final transcript: {job.text}")
        return await self.triage.assess(audio_prompt(job.text or ""))
