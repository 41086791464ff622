"""Error taxonomy for provider routing and fallback."""

from typing import Optional


class OmegaAIRError(Exception):
    """Base class for routing errors."""


class ProviderUnavailable(OmegaAIRError):
    """Provider has no valid credential or configuration."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Provider {provider} is not configured")


class ProviderRequestFailed(OmegaAIRError):
    """A single attempt against a provider did not succeed."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider} API error: {reason}")


class NoProvidersAvailable(OmegaAIRError):
    """The candidate list for a call is empty."""

    def __init__(self, message: str = "No AI providers available"):
        super().__init__(message)


class AllProvidersExhausted(OmegaAIRError):
    """Every candidate provider ran out of retries."""

    def __init__(self, last_error: Optional[ProviderRequestFailed]):
        self.last_error = last_error
        self.provider = last_error.provider if last_error else None
        detail = str(last_error) if last_error else "no attempt recorded"
        super().__init__(f"All AI providers failed. Last error: {detail}")
