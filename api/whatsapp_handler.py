import asyncio
import logging
from typing import Awaitable, Callable

from api.models import InboundMessage, MediaKind, WebhookReply
from api.prompts import text_prompt
from api.services.audio import AudioService
from api.services.image import ImageService
from api.services.triage import TriageService
from lib.config import Settings
from lib.error_handler import ErrorHandler, UnsupportedMediaError

logger = logging.getLogger(__name__)

PROCESSING_MESSAGE = "Processing your request... Please wait."

# send_follow_up(to, from_, body)
FollowUpSender = Callable[[str, str, str], Awaitable[object]]

class WhatsAppHandler:
    """Routes inbound WhatsApp messages to the right triage pipeline.

    Text messages are answered in the webhook response. Media messages get
    an immediate placeholder; the verdict is computed by
    ``process_media_message`` and pushed through ``send_follow_up``.
    """

    def __init__(
        self,
        settings: Settings,
        triage_service: TriageService,
        image_service: ImageService,
        audio_service: AudioService,
        send_follow_up: FollowUpSender
    ):
        self.triage = triage_service
        self.image = image_service
        self.audio = audio_service
        self.send_follow_up = send_follow_up
        self.reply_delay = settings.reply_delay
        self.follow_up_delay = settings.follow_up_delay

    async def handle_incoming_message(self, message: InboundMessage) -> WebhookReply:
        """Produce the synchronous webhook reply"""
        logger.info(
            f"Incoming WhatsApp message from {message.from_number}: "
            f"body={message.body!r} num_media={message.num_media} "
            f"media_type={message.media_content_type} media_url={message.media_url}"
        )

        if message.has_media:
            logger.info("Media message detected, acknowledging immediately")
            return WebhookReply(message=PROCESSING_MESSAGE, deferred=True)

        logger.info("Text message detected")
        verdict = await self.triage.assess(text_prompt(message.body or ""))
        await asyncio.sleep(self.reply_delay)
        logger.info(f"Replying to user: {verdict}")
        return WebhookReply(message=verdict)

    async def process_media_message(self, message: InboundMessage) -> str:
        """Compute the verdict for a media message and send it as a follow-up"""
        try:
            verdict = await self.assess_media(message)
        except Exception as e:
            verdict = ErrorHandler.handle_webhook_error(e)

        await asyncio.sleep(self.follow_up_delay)

        try:
            await self.send_follow_up(message.from_number, message.to_number, verdict)
            logger.info(f"Sent async response: {verdict}")
        except Exception as e:
            logger.error(f"Failed to send follow-up to {message.from_number}: {str(e)}")
        return verdict

    async def assess_media(self, message: InboundMessage) -> str:
        kind = message.media_kind
        if kind == MediaKind.IMAGE:
            return await self.image.assess(message.media_url)
        if kind == MediaKind.AUDIO:
            return await self.audio.assess(message.media_url)
        return ErrorHandler.handle_media_error(
            UnsupportedMediaError(message.media_content_type)
        )
