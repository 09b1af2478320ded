from typing import Optional
import logging

logger = logging.getLogger(__name__)

PROCESSING_ERROR_MESSAGE = "Error processing your message."
ANALYSIS_ERROR_MESSAGE = "Error analyzing condition."
IMAGE_ERROR_MESSAGE = "Error detecting objects in the image."
AUDIO_ERROR_MESSAGE = "Error transcribing audio."
AUDIO_TIMEOUT_MESSAGE = "Transcription took too long. Please try again."
UNSUPPORTED_MEDIA_MESSAGE = "Unsupported media type."

class AppError(Exception):
    def __init__(self, message: str, status_code: int = 500, user_message: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.user_message = user_message or PROCESSING_ERROR_MESSAGE
        super().__init__(self.message)

class FetchError(AppError):
    """Media download from Twilio failed"""

class UploadError(AppError):
    """Audio upload to the transcription provider failed"""

class SubmitError(AppError):
    """Transcription job could not be created"""

class PollError(AppError):
    """Transcription status request failed"""

class TranscriptionTimeout(AppError, TimeoutError):
    """Transcription job did not finish within the poll budget"""

class DetectionError(AppError):
    """Image detection request failed"""

class CompletionError(AppError):
    """Language model completion failed"""

ClassificationError = CompletionError

class UnsupportedMediaError(AppError):
    def __init__(self, content_type: Optional[str]):
        self.content_type = content_type
        super().__init__(
            f"Unsupported media type: {content_type!r}",
            status_code=415,
            user_message=UNSUPPORTED_MEDIA_MESSAGE
        )

class SendError(AppError):
    """Outbound WhatsApp message could not be sent"""

class ErrorHandler:
    @staticmethod
    def handle_completion_error(error: Exception) -> str:
        logger.error(f"Completion error: {str(error)}")
        return ANALYSIS_ERROR_MESSAGE

    @staticmethod
    def handle_image_error(error: Exception) -> str:
        logger.error(f"Image detection error: {str(error)}")
        return IMAGE_ERROR_MESSAGE

    @staticmethod
    def handle_transcription_error(error: Exception) -> str:
        if isinstance(error, TranscriptionTimeout):
            logger.error(f"Transcription timed out: {str(error)}")
            return AUDIO_TIMEOUT_MESSAGE
        logger.error(f"Transcription error: {str(error)}")
        return AUDIO_ERROR_MESSAGE

    @staticmethod
    def handle_media_error(error: UnsupportedMediaError) -> str:
        logger.warning(f"Media error: {str(error)}")
        return error.user_message

    @staticmethod
    def handle_webhook_error(error: Exception) -> str:
        logger.error(f"Webhook error: {str(error)}", exc_info=error)
        return PROCESSING_ERROR_MESSAGE
