import argparse
import logging
from lib.config import get_settings
from lib.twilio_client import TwilioClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def send_test_message(from_number: str, to_number: str, body: str) -> str:
    """Send a WhatsApp message through Twilio to check credentials and sandbox setup"""
    twilio = TwilioClient(get_settings())
    sid = twilio.send_message(to_number=to_number, body=body, from_number=from_number)
    print(f"Message sent! SID: {sid}")
    return sid

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Send a test WhatsApp message via Twilio")
    parser.add_argument("--from", dest="from_number", required=True,
                        help="Twilio sandbox number, e.g. whatsapp:+14155238886")
    parser.add_argument("--to", dest="to_number", required=True,
                        help="Your WhatsApp number, e.g. whatsapp:+15551234567")
    parser.add_argument("--body", default="Hello from the triage bot and Twilio!")
    args = parser.parse_args()

    try:
        send_test_message(args.from_number, args.to_number, args.body)
    except Exception as e:
        print(f"Error: {str(e)}")
        raise SystemExit(1)
