"""
Helpers shared by the provider probers.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Protocol

from reaper.core.exceptions import ProbeError
from reaper.models.outcome import Cancellation
from reaper.models.repository import Repository


class Prober(Protocol):
    """Checks one repository on one provider and cancels what it should."""

    provider: str

    async def probe(self, repo: Repository) -> list[Cancellation]: ...


async def gather_all(aws: list[Awaitable[Any]]) -> list[Any]:
    """
    Run awaitables concurrently and wait for every one of them.

    A failure never cuts the others short. A lone failure with nothing else
    done is re-raised as is. Otherwise the failures are raised together as a
    ProbeError that keeps the cancellations which did go through, including
    those carried by nested ProbeErrors.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    errors: list[Exception] = []
    completed: list[Any] = []
    for result in results:
        if isinstance(result, ProbeError):
            errors.extend(result.errors)
            completed.append(result.cancellations)
        elif isinstance(result, Exception):
            errors.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            completed.append(result)

    if not errors:
        return completed

    cancellations = flatten(completed)
    if len(errors) == 1 and not cancellations:
        raise errors[0]
    raise ProbeError(errors, cancellations)


def flatten(results: list[Any]) -> list[Cancellation]:
    """Collect cancellations from a mix of None, single results and lists."""
    cancellations: list[Cancellation] = []
    for result in results:
        if result is None:
            continue
        if isinstance(result, list):
            cancellations.extend(result)
        else:
            cancellations.append(result)
    return cancellations
