"""
Context Reaper - periodic eviction of expired cart contexts.

Bounds memory used by abandoned carts that are never read again.
Started and stopped by the application lifespan.
"""
import asyncio
from datetime import timedelta
from typing import Optional

from experience.config import DEFAULT_CLEANUP_INTERVAL_MINUTES
from experience.logging import get_logger
from .store import CartContextStore

logger = get_logger(__name__)


class ContextReaper:
    """
    Background task that sweeps the store on a fixed interval.

    The interval is independent of the cart TTL. ``run_once`` performs a
    single sweep synchronously so tests never wait on wall-clock time.
    """

    def __init__(
        self,
        store: CartContextStore,
        interval: timedelta = timedelta(minutes=DEFAULT_CLEANUP_INTERVAL_MINUTES),
    ):
        self.store = store
        self.interval = interval
        self.task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            logger.warning("Context reaper already running")
            return

        self.task = asyncio.create_task(self._run())
        logger.info(f"Context reaper started (interval={self.interval})")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self.task is None:
            return

        self.task.cancel()
        try:
            await self.task
        except asyncio.CancelledError:
            pass
        self.task = None
        logger.info("Context reaper stopped")

    def run_once(self) -> int:
        """Run a single sweep; returns the number of evicted contexts."""
        evicted = self.store.sweep_expired()
        logger.info(f"Cleaned up {evicted} expired cart contexts")
        return evicted

    async def _run(self) -> None:
        seconds = self.interval.total_seconds()
        while True:
            await asyncio.sleep(seconds)
            try:
                self.run_once()
            except Exception as e:
                # Next tick retries
                logger.error(f"Cart context sweep failed: {e}", exc_info=True)
