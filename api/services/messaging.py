import asyncio
import logging

from lib.twilio_client import TwilioClient

logger = logging.getLogger(__name__)

class MessagingService:
    """Async facade over the Twilio REST client for follow-up messages"""

    def __init__(self, twilio_client: TwilioClient):
        self.twilio = twilio_client

    async def send_message(self, to: str, from_: str, body: str) -> str:
        logger.info(f"Sending message to {to}: {body[:20]}...")
        # Run Twilio API call in an executor to prevent blocking
        loop = asyncio.get_running_loop()
        sid = await loop.run_in_executor(
            None,
            lambda: self.twilio.send_message(to_number=to, body=body, from_number=from_)
        )
        logger.info(f"Message sent successfully: {sid}")
        return sid
