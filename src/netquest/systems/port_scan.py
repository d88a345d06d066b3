"""Paced external port scan used on the firewall screen."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from netquest.rules.catalog import PortInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortResult:
    port: int
    name: str
    danger: str
    status: str  # "open" | "filtered"


class PortScan:
    """Reveals one port per ``delay`` seconds.

    A scan is issued at generation 0. ``cancel()`` bumps the generation;
    any step that wakes up afterwards is dropped without calling
    ``on_result``. ``protected`` is asked again for every port, so a
    firewall applied mid-scan filters the ports still to come.
    """

    def __init__(
        self,
        ports: Iterable[PortInfo],
        *,
        protected: Callable[[], bool],
        delay: float,
        on_result: Callable[[PortResult], None] | None = None,
    ) -> None:
        self.ports = tuple(ports)
        self.protected = protected
        self.delay = max(0.0, delay)
        self.results: list[PortResult] = []
        self._on_result = on_result
        self._generation = 0
        self._finished = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def cancelled(self) -> bool:
        return self._generation != 0

    def cancel(self) -> None:
        self._generation += 1

    def probe(self, info: PortInfo) -> PortResult:
        return PortResult(
            port=info.port,
            name=info.name,
            danger=info.danger,
            status="filtered" if self.protected() else "open",
        )

    async def run(self) -> list[PortResult]:
        for info in self.ports:
            await asyncio.sleep(self.delay)
            if self.cancelled:
                logger.warning("Port scan cancelled; discarding step for port %s", info.port)
                return list(self.results)
            result = self.probe(info)
            self.results.append(result)
            if self._on_result is not None:
                self._on_result(result)
        self._finished = True
        return list(self.results)
