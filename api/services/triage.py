import asyncio
import logging

from openai import OpenAI, OpenAIError

from api.prompts import TRIAGE_SYSTEM_PROMPT
from lib.error_handler import CompletionError, ErrorHandler

logger = logging.getLogger(__name__)

class TriageService:
    """Severity classifier backed by an OpenAI-compatible completion endpoint"""

    def __init__(self, openai_client: OpenAI, model: str):
        self.client = openai_client
        self.model = model
        logger.info(f"Triage service initialized with model: {model}")

    async def classify(self, prompt: str) -> str:
        """Send one prompt through the triage persona and return the verdict text"""
        logger.info(f"Sending prompt to completion service: {prompt}")
        messages = [
            {"role": "system", "content": TRIAGE_SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]
        try:
            # Sync client: shared across per-request event loops
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None,
                lambda: self.client.chat.completions.create(
                    model=self.model,
                    messages=messages
                )
            )
            reply = response.choices[0].message.content
        except OpenAIError as e:
            raise CompletionError(f"Completion request failed: {str(e)}") from e
        except (AttributeError, IndexError, TypeError) as e:
            raise CompletionError(f"Malformed completion response: {str(e)}") from e

        if not reply:
            raise CompletionError("Completion response had no content")

        logger.info(f"Completion reply: {reply}")
        return reply

    async def assess(self, prompt: str) -> str:
        """Like classify, but never raises: failures become the fixed fallback"""
        try:
            return await self.classify(prompt)
        except CompletionError as e:
            return ErrorHandler.handle_completion_error(e)
