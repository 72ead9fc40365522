"""Poll driver: block until the readiness predicate holds or a deadline passes."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import click

from ..errors import PollTimeoutError, WaitError
from ..shared.logging import get_logger
from .controller import StatusController

logger = get_logger(__name__)

DEFAULT_INTERVAL = 5.0


@dataclass
class PollResult:
    """Result of a successful poll."""

    attempts: int = 0
    elapsed_seconds: float = 0.0


class StatusPoller:
    """Call a condition at a fixed interval until it holds."""

    def __init__(self, interval_seconds: float = DEFAULT_INTERVAL):
        """Initialize status poller.

        Args:
            interval_seconds: Seconds between condition checks.
        """
        self.interval_seconds = interval_seconds

    async def poll(
        self,
        condition: Callable[[], bool],
        timeout_seconds: float,
        on_attempt: Callable[[int, bool], None] | None = None,
    ) -> PollResult:
        """Poll condition until it returns True or timeout_seconds elapse.

        The first check happens one interval after the call. Sleeps never
        overrun the deadline; an interval cut short by the deadline ends with
        one last check at the deadline.

        Args:
            condition: Predicate to poll.
            timeout_seconds: Overall deadline.
            on_attempt: Optional callback called with (attempt, result).

        Returns:
            PollResult with attempt count and elapsed time.

        Raises:
            PollTimeoutError: If the deadline elapsed first.
        """
        loop = asyncio.get_running_loop()
        start = loop.time()
        deadline = start + timeout_seconds
        attempts = 0

        while True:
            remaining = deadline - loop.time()
            final = remaining < self.interval_seconds
            await asyncio.sleep(max(0.0, remaining) if final else self.interval_seconds)

            attempts += 1
            done = condition()

            if on_attempt:
                on_attempt(attempts, done)

            if done:
                return PollResult(attempts=attempts, elapsed_seconds=loop.time() - start)

            if final:
                raise PollTimeoutError(
                    f"timed out after {timeout_seconds}s waiting for the condition",
                    timeout_seconds=timeout_seconds,
                    attempts=attempts,
                )

    def poll_sync(
        self,
        condition: Callable[[], bool],
        timeout_seconds: float,
        on_attempt: Callable[[int, bool], None] | None = None,
    ) -> PollResult:
        """Synchronous wrapper for poll."""
        return asyncio.run(self.poll(condition, timeout_seconds, on_attempt))


def wait_until_pods_running(
    core_api: Any,
    pods: Iterable[str],
    timeout_seconds: float,
    interval_seconds: float = DEFAULT_INTERVAL,
    output: Callable[[str], None] = click.echo,
) -> PollResult:
    """Block until every watched pod runs and every node is Ready.

    Args:
        core_api: CoreV1Api used by the pod and node mirrors.
        pods: Pod name prefixes to wait for.
        timeout_seconds: Overall deadline.
        interval_seconds: Seconds between readiness checks.
        output: Sink for user-facing status lines.

    Returns:
        PollResult of the successful poll.

    Raises:
        WaitError: If the deadline elapsed before the control plane converged.
    """
    controller = StatusController.from_api(core_api, pods, output=output)
    controller.run()
    logger.debug(
        "Waiting for control plane",
        pods=list(controller.watch_pods),
        timeout=timeout_seconds,
        interval=interval_seconds,
    )

    poller = StatusPoller(interval_seconds=interval_seconds)
    try:
        result = poller.poll_sync(controller.all_running, timeout_seconds)
    except PollTimeoutError as e:
        raise WaitError(f"error while checking pod status: {e}") from e
    finally:
        controller.stop()

    output("All self-hosted control plane components successfully started")
    return result
