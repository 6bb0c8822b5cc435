"""Clock abstraction so saved-calculation timestamps are testable.

All timestamps are UTC. Tests freeze the clock with
``TimeProvider.set_default(TimeProvider(frozen_at=...))``.
"""
from datetime import datetime, timezone
from typing import Optional


class TimeProvider:
    """Provides the current UTC time, optionally frozen.

    Usage:
        provider = TimeProvider()
        provider.now()

        provider = TimeProvider(frozen_at=datetime(2026, 3, 1, tzinfo=timezone.utc))
        provider.now()  # always 2026-03-01T00:00:00+00:00
    """

    _instance: Optional['TimeProvider'] = None

    def __init__(self, frozen_at: Optional[datetime] = None):
        self._frozen_at = frozen_at

    def now(self) -> datetime:
        if self._frozen_at is not None:
            return self._frozen_at
        return datetime.now(timezone.utc)

    @classmethod
    def get_default(cls) -> 'TimeProvider':
        """Get the process-wide provider."""
        if cls._instance is None:
            cls._instance = TimeProvider()
        return cls._instance

    @classmethod
    def set_default(cls, provider: 'TimeProvider') -> None:
        cls._instance = provider

    @classmethod
    def reset_default(cls) -> None:
        cls._instance = None


def get_now() -> datetime:
    """Current UTC datetime from the default provider."""
    return TimeProvider.get_default().now()
