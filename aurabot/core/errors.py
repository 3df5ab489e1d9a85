"""Error taxonomy for the enhancement pipeline.

Provider and rate-limit errors never leave the context enhancer: they are
carried as the ``error`` text of a failed ``ProviderResult``. Only
``AssistantInvocationError`` may reach the caller of ``compose``.
"""


class AuraBotError(Exception):
    """Base class for all pipeline errors."""


class ProviderUnavailableError(AuraBotError):
    """A data provider call failed, timed out or returned a malformed payload."""

    def __init__(self, category: str, reason: str):
        self.category = category
        self.reason = reason
        super().__init__(f"{category} provider unavailable: {reason}")


class RateLimitExceededError(AuraBotError):
    """Quota exhausted for a user/category window or the bot-wide daily cap."""

    def __init__(self, category: str, current: int, limit: int, scope: str = "user"):
        self.category = category
        self.current = current
        self.limit = limit
        self.scope = scope
        super().__init__(f"{scope} {category} limit reached: {current}/{limit}")


class AssistantInvocationError(AuraBotError):
    """The base assistant could not produce a reply."""
