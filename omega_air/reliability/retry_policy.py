import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, FrozenSet, Iterable, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import ProviderRequestFailed

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class RoutingMode(str, Enum):
    """Provider selection policies."""

    AUTO = "auto"
    FALLBACK = "fallback"
    PRIORITY = "priority"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RoutingMode":
        """Unknown or empty mode strings resolve to auto."""
        if not value:
            return cls.AUTO
        try:
            return cls(value.strip().lower())
        except ValueError:
            logger.warning(f"Unknown routing mode '{value}', using auto")
            return cls.AUTO


@dataclass(frozen=True)
class FallbackPolicy:
    max_retries: int = 3
    backoff_multiplier: float = 2.0
    exclude_providers: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {self.max_retries}")
        if self.backoff_multiplier < 1:
            raise ValueError(f"backoff_multiplier must be >= 1, got {self.backoff_multiplier}")
        # Normalize enum members and plain strings to provider names
        object.__setattr__(
            self,
            "exclude_providers",
            frozenset(getattr(p, "value", p) for p in self.exclude_providers),
        )

    def excluding(self, providers: Iterable[str]) -> "FallbackPolicy":
        return FallbackPolicy(
            max_retries=self.max_retries,
            backoff_multiplier=self.backoff_multiplier,
            exclude_providers=self.exclude_providers | frozenset(getattr(p, "value", p) for p in providers),
        )

    def retrying(self, sleep: SleepFunc) -> AsyncRetrying:
        """Fresh per-provider retry controller.

        Waits ``backoff_multiplier ** n`` seconds after the n-th failed attempt
        (n starting at 0) and re-raises the last ``ProviderRequestFailed``.
        """
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, exp_base=self.backoff_multiplier),
            retry=retry_if_exception_type(ProviderRequestFailed),
            sleep=sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
