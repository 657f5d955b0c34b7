"""Time authority port.

Every timestamp the engine produces or compares comes from this port:
proof issued_at/expires_at, share token lifetimes, decision timestamps
and the throughput window span. Latency is measured on monotonic().

Implementations:
    SystemTimeAuthority (govproof/infrastructure/adapters/time/)
    FakeTimeAuthority (tests/helpers/fake_time_authority.py)
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Source of wall-clock and monotonic time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware (UTC)."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Current time in UTC."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Seconds on a clock that never goes backwards.

        Only differences between two readings are meaningful.
        """
        ...
