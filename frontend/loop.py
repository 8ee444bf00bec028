# frontend/loop.py

import asyncio
import logging
import threading

logger = logging.getLogger(__name__)


class BackgroundLoop:
    """
    An asyncio event loop on a daemon thread. The web handlers are
    synchronous, so game timers and animations are scheduled here.
    """

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        self.thread = None

    def start(self):
        if self.thread is not None:
            return
        self.thread = threading.Thread(target=self._run, name="game-tasks", daemon=True)
        self.thread.start()
        logger.debug("Background task loop started")

    def _run(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def spawn(self, coro):
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def stop(self, timeout=1.0):
        if self.thread is None:
            return
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.thread.join(timeout)
        self.thread = None
