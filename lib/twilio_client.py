from twilio.rest import Client
from twilio.base.exceptions import TwilioException, TwilioRestException
from typing import Optional
import logging
from lib.config import Settings
from lib.error_handler import SendError

logger = logging.getLogger(__name__)

class TwilioClient:
    def __init__(self, settings: Settings, client: Optional[Client] = None):
        self.account_sid = settings.twilio_account_sid
        self.auth_token = settings.twilio_auth_token
        self._client = client

    @property
    def client(self) -> Client:
        # Created on first use so the app can start without credentials
        if self._client is None:
            try:
                self._client = Client(self.account_sid, self.auth_token)
            except TwilioException as e:
                logger.error(f"Failed to initialize Twilio client: {str(e)}")
                raise SendError("Failed to initialize messaging service") from e
        return self._client

    def send_message(self, to_number: str, body: str, from_number: str) -> str:
        """Send a WhatsApp message and return the message SID."""
        try:
            message = self.client.messages.create(
                body=body,
                from_=from_number,
                to=to_number
            )
            logger.info(f"Message sent successfully to {to_number}")
            return message.sid
        except TwilioRestException as e:
            logger.error(f"Twilio error sending message: {str(e)}")
            if e.code == 63016:  # Outside the WhatsApp session window
                raise SendError("Recipient is outside the 24 hour session window.") from e
            elif e.code == 21211:  # Invalid phone number
                raise SendError("Invalid phone number format.") from e
            else:
                raise SendError(f"Failed to send message: {str(e)}") from e
        except SendError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error sending message: {str(e)}")
            raise SendError("An unexpected error occurred while sending the message.") from e
