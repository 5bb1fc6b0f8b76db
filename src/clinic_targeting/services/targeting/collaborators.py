"""Contracts for the external services the targeting pipeline talks to."""

from __future__ import annotations

import asyncio
import time
from typing import Optional, Protocol, Sequence

from ...models.domain import Territory


class AddressResolver(Protocol):
    async def resolve(self, latitude: float, longitude: float) -> Optional[str]:
        """Return a street address for the coordinate, or None when unknown."""


class TerritorySource(Protocol):
    async def list_territories(self) -> Sequence[Territory]:
        """Return a read-only snapshot of every known territory."""


class NullAddressResolver:
    """Resolver used when no geocoding provider is wired in."""

    async def resolve(self, latitude: float, longitude: float) -> Optional[str]:
        return None


class StaticTerritorySource:
    def __init__(self, territories: Sequence[Territory]) -> None:
        self._territories = tuple(territories)

    async def list_territories(self) -> Sequence[Territory]:
        return self._territories


class RequestThrottle:
    """Enforce a minimum interval between consecutive outbound calls."""

    def __init__(self, interval_seconds: float) -> None:
        self.interval_seconds = interval_seconds
        self._last_call: float | None = None

    async def wait(self) -> None:
        if self._last_call is not None and self.interval_seconds > 0:
            remaining = self.interval_seconds - (time.monotonic() - self._last_call)
            if remaining > 0:
                await asyncio.sleep(remaining)
        self._last_call = time.monotonic()
