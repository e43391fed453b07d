"""Time source for the ledger.

Timestamps are integer UNIX seconds in UTC. Services receive a clock
instead of reading the system time so expiration rules can be tested.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        ...


class SystemClock:
    def now(self) -> int:
        return int(datetime.now(timezone.utc).timestamp())
