import asyncio
import logging
import threading
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

class BackgroundDispatcher:
    """Runs deferred async jobs on daemon threads, one event loop per job"""

    def dispatch(self, job: Callable[..., Awaitable[Any]], *args: Any) -> threading.Thread:
        thread = threading.Thread(target=self._run, args=(job, args), daemon=True)
        thread.start()
        return thread

    def _run(self, job: Callable[..., Awaitable[Any]], args: tuple) -> None:
        try:
            asyncio.run(job(*args))
        except Exception:
            logger.exception("Background job failed")
