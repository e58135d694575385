"""Bounded retry schedule for renders attempted before the preview libraries are loaded"""

from pydantic import BaseModel, Field

from componentize.config import Settings


class RetryPolicy(BaseModel):
    """max_attempts counts the first try; delay_ms precedes the second, then grows by backoff."""
    max_attempts: int   = Field(default=2,   ge=1)
    delay_ms:     int   = Field(default=600, ge=0)
    backoff:      float = Field(default=1.0, ge=1.0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_attempts,
            delay_ms=settings.retry_delay_ms,
            backoff=settings.retry_backoff,
        )

    def should_retry(self, attempt: int) -> bool:
        """True if another attempt may follow attempt number `attempt` (1-based)."""
        return attempt < self.max_attempts

    def delay_for(self, attempt: int) -> int:
        """Milliseconds to wait after failed attempt `attempt` before the next one."""
        return round(self.delay_ms * self.backoff ** (attempt - 1))

    def schedule(self) -> list[int]:
        """All inter-attempt delays, e.g. [600] for the default policy."""
        return [self.delay_for(a) for a in range(1, self.max_attempts)]
