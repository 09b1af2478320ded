from flask import Flask, Response, request, jsonify
from openai import OpenAI
from twilio.twiml.messaging_response import MessagingResponse
from typing import Optional
import asyncio
import logging
import sys

from api.models import InboundMessage
from api.services.audio import AudioService
from api.services.image import ImageService
from api.services.media import MediaFetcher
from api.services.messaging import MessagingService
from api.services.triage import TriageService
from api.whatsapp_handler import WhatsAppHandler
from lib.background import BackgroundDispatcher
from lib.config import Settings, get_settings
from lib.error_handler import ErrorHandler
from lib.twilio_client import TwilioClient

logger = logging.getLogger(__name__)

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout,
        force=True  # Ensure our config takes precedence
    )

def build_handler(settings: Settings) -> WhatsAppHandler:
    """Wire the services together from one settings object"""
    logger.info("Initializing services...")
    openai_client = OpenAI(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url
    )
    triage_service = TriageService(openai_client, model=settings.openrouter_model)
    fetcher = MediaFetcher(settings)
    messaging_service = MessagingService(TwilioClient(settings))

    handler = WhatsAppHandler(
        settings=settings,
        triage_service=triage_service,
        image_service=ImageService(settings, fetcher, triage_service),
        audio_service=AudioService(settings, fetcher, triage_service),
        send_follow_up=messaging_service.send_message
    )
    logger.info("All services initialized successfully")
    return handler

def create_twiml_response(message: str) -> Response:
    """Create a TwiML response with the given message"""
    resp = MessagingResponse()
    resp.message(message)
    return Response(str(resp), mimetype='application/xml')

def create_app(
    settings: Optional[Settings] = None,
    handler: Optional[WhatsAppHandler] = None,
    dispatcher: Optional[BackgroundDispatcher] = None
) -> Flask:
    settings = settings or get_settings()
    handler = handler or build_handler(settings)
    dispatcher = dispatcher or BackgroundDispatcher()

    app = Flask(__name__)

    @app.route("/health", methods=['GET'])
    def health():
        """Liveness probe"""
        return jsonify({"status": "ok"})

    @app.route("/whatsapp", methods=['POST'])
    def whatsapp_webhook():
        """Handle incoming WhatsApp webhooks from Twilio"""
        try:
            message = InboundMessage.from_form(request.form.to_dict())
            reply = asyncio.run(handler.handle_incoming_message(message))
            response = create_twiml_response(reply.message)
            if reply.deferred:
                # Media work starts only once the placeholder has been sent
                response.call_on_close(
                    lambda: dispatcher.dispatch(handler.process_media_message, message)
                )
            return response

        except Exception as e:
            return create_twiml_response(ErrorHandler.handle_webhook_error(e))

    return app

if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings)
    logger.info(f"Starting Flask server on port {settings.port}...")
    create_app(settings).run(host="0.0.0.0", port=settings.port)
