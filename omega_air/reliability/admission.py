import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

logger = logging.getLogger(__name__)


class ProviderAdmission:
    """Caps concurrent in-flight attempts per provider.

    A limit of zero or less admits everything.
    """

    def __init__(self, limit: Optional[int] = None):
        self.limit = limit or 0
        self._semaphores: Dict[str, asyncio.Semaphore] = {}

    def _semaphore(self, provider: str) -> asyncio.Semaphore:
        semaphore = self._semaphores.get(provider)
        if semaphore is None:
            semaphore = asyncio.Semaphore(self.limit)
            self._semaphores[provider] = semaphore
        return semaphore

    @asynccontextmanager
    async def slot(self, provider: str) -> AsyncIterator[None]:
        if self.limit <= 0:
            yield
            return

        semaphore = self._semaphore(provider)
        if semaphore.locked():
            logger.info(f"Admission limit reached for {provider}, waiting for a free slot")
        async with semaphore:
            yield

