"""
envfmt/ssm/writer.py

Sequential, rate-limited write-back of a ParamBag. Each param is written to
`{prefix}/{lowercased key}`; every outcome is reported on its own and a
failure never stops the remaining writes. A flat delay separates consecutive
writes. Failed writes are not retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List

from envfmt.errors import ParameterStoreError
from envfmt.models.params import ParamBag, WriteOutcome
from envfmt.ssm.client import ParameterStoreClient

logger = logging.getLogger(__name__)

WRITE_DELAY_SECONDS = 0.2


class ThrottledWriter:
    def __init__(
        self,
        client: ParameterStoreClient,
        overwrite: bool,
        *,
        delay_seconds: float = WRITE_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the writer.

        Args:
            client: Where params are written.
            overwrite: Allow replacing an existing value at a path.
            delay_seconds: Pause between consecutive writes.
            sleep: The suspension used for the pause.
        """
        self._client = client
        self._overwrite = overwrite
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    async def write(self, bag: ParamBag) -> List[WriteOutcome]:
        """Write every param in bag order and return one outcome per param."""
        outcomes: List[WriteOutcome] = []
        for index, param in enumerate(bag.params):
            if index > 0:
                await self._sleep(self._delay_seconds)

            path = bag.remote_path(param)
            try:
                await self._client.put(path, param.value, self._overwrite)
            except ParameterStoreError as exc:
                logger.warning("Failed to write %s: %s", path, exc)
                outcomes.append(WriteOutcome(path=path, ok=False, error=str(exc)))
            else:
                logger.info("Wrote %s", path)
                outcomes.append(WriteOutcome(path=path, ok=True))
        return outcomes
