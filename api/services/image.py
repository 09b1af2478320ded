import logging
from typing import Callable

import aiohttp

from api.models import DetectionResult
from api.prompts import image_prompt
from api.services.media import MediaFetcher
from api.services.triage import TriageService
from lib.config import Settings
from lib.error_handler import AppError, DetectionError, ErrorHandler

logger = logging.getLogger(__name__)

NO_CONDITION_MESSAGE = "No skin condition detected."

class ImageService:
    def __init__(
        self,
        settings: Settings,
        fetcher: MediaFetcher,
        triage_service: TriageService,
        session_factory: Callable = aiohttp.ClientSession
    ):
        self.detection_url = settings.detection_url
        self.api_key = settings.roboflow_api_key
        self.fetcher = fetcher
        self.triage = triage_service
        self.session_factory = session_factory
        logger.info(f"Image service initialized with detection URL: {self.detection_url}")

    async def detect(self, session, image_data: bytes) -> DetectionResult:
        """Run the hosted detection model on an image and collect condition labels"""
        data = aiohttp.FormData()
        data.add_field('file',
                       image_data,
                       filename='upload.jpg',
                       content_type='image/jpeg')

        logger.info(f"Sending image to detection service: {self.detection_url}")
        try:
            async with session.post(
                self.detection_url,
                params={'api_key': self.api_key},
                data=data
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(f"Detection service error: {error_text}")
                    raise DetectionError(f"Detection service returned {response.status}")
                payload = await response.json()
        except aiohttp.ClientError as e:
            raise DetectionError(f"Detection request failed: {str(e)}") from e
        except ValueError as e:
            raise DetectionError(f"Detection response was not JSON: {str(e)}") from e

        logger.info(f"Detection raw response: {payload}")
        if not isinstance(payload, dict):
            raise DetectionError(f"Unexpected detection response: {payload!r}")
        predictions = payload.get('predictions') or []
        if not isinstance(predictions, list):
            raise DetectionError(f"Unexpected predictions: {predictions!r}")
        result = DetectionResult.from_predictions(predictions)
        logger.info(f"Detected skin conditions: {result.labels}")
        return result

    async def assess(self, media_url: str) -> str:
        """Download an image, detect conditions and return a triage verdict"""
        try:
            async with self.session_factory() as session:
                image_data = await self.fetcher.fetch(session, media_url)
                result = await self.detect(session, image_data)
        except AppError as e:
            return ErrorHandler.handle_image_error(e)

        if not result:
            return NO_CONDITION_MESSAGE

        return await self.triage.assess(image_prompt(result.joined()))
