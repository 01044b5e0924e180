"""Per-landing-zone deployment progress, advanced on every poll."""

import asyncio
import logging
import random
from typing import Optional

from lz_engine.progress import DeploymentProgress, advance_progress, initialize_progress

logger = logging.getLogger(__name__)


class DeploymentProgressTracker:
    def __init__(self, rng: Optional[random.Random] = None):
        self._progress: dict[str, DeploymentProgress] = {}
        self._lock = asyncio.Lock()
        self._rng = rng or random.Random()

    async def start(self, landing_zone_id: str) -> DeploymentProgress:
        progress = initialize_progress(landing_zone_id)
        async with self._lock:
            self._progress[landing_zone_id] = progress
        return progress

    async def poll(self, landing_zone_id: str) -> DeploymentProgress:
        """Advance and return progress; unknown ids start fresh."""
        async with self._lock:
            progress = self._progress.get(landing_zone_id)
            if progress is None:
                logger.info("No progress for landing zone %s, initializing", landing_zone_id)
                progress = initialize_progress(landing_zone_id)
                self._progress[landing_zone_id] = progress
            return advance_progress(progress, self._rng)
