"""Resource mirror: a list+watch reflection of one Kubernetes resource kind.

The mirror lists every object once, then follows the watch stream from the
list's resource version, re-listing every resync period to repair missed
events. Failures are logged and retried; they are never surfaced.
"""

from __future__ import annotations

import functools
import threading
import time
from collections.abc import Callable
from typing import Any

from kubernetes import watch
from kubernetes.client.rest import ApiException

from ..shared.logging import get_logger
from .store import ObjectStore

logger = get_logger(__name__)

# Default intervals (seconds)
DEFAULT_RESYNC_PERIOD = 30 * 60.0
DEFAULT_WATCH_TIMEOUT = 300
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_REQUEST_TIMEOUT = 60.0

HTTP_GONE = 410


class ResourceMirror:
    """Keeps an ObjectStore in sync with the API server for one kind."""

    def __init__(
        self,
        kind: str,
        list_func: Callable[..., Any],
        resync_period: float = DEFAULT_RESYNC_PERIOD,
        watch_timeout: int = DEFAULT_WATCH_TIMEOUT,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        store: ObjectStore | None = None,
    ):
        """Initialize the mirror.

        Args:
            kind: Resource kind, used for logging and the thread name.
            list_func: CoreV1Api list method, e.g. ``list_pod_for_all_namespaces``.
            resync_period: Seconds between full re-lists.
            watch_timeout: Server-side timeout of a single watch call.
            retry_delay: Seconds to wait after a failed list or watch.
            store: Store to populate. A new one is created if omitted.
        """
        self.kind = kind
        self.resync_period = resync_period
        self.watch_timeout = watch_timeout
        self.retry_delay = retry_delay
        self.store = store or ObjectStore()

        self._list_func = list_func
        self._synced = threading.Event()
        self._watch: watch.Watch | None = None
        self._response: Any = None
        self._thread: threading.Thread | None = None

    def start(self, stop_event: threading.Event) -> threading.Thread:
        """Start synchronizing in a background daemon thread.

        Calling start() again while the thread is alive returns the same thread.
        """
        if self._thread is not None and self._thread.is_alive():
            return self._thread

        self._thread = threading.Thread(
            target=self.run,
            args=(stop_event,),
            name=f"{self.kind}-mirror",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        """Abort the in-flight watch stream, if any.

        Closing the streaming response unblocks a watch that is waiting for
        its next event. An in-flight list is bounded by its request timeout.
        """
        current = self._watch
        if current is not None:
            current.stop()
        response = self._response
        if response is not None:
            response.close()

    def run(self, stop_event: threading.Event) -> None:
        """List and watch until stop_event is set."""
        logger.info("Starting mirror", kind=self.kind)

        while not stop_event.is_set():
            try:
                resource_version = self._relist()
                self._watch_until_resync(resource_version, stop_event)
            except ApiException as e:
                if e.status == HTTP_GONE:
                    logger.info("Watch expired, relisting", kind=self.kind)
                    continue
                logger.warning(
                    "List/watch failed", kind=self.kind, status=e.status, reason=e.reason
                )
                stop_event.wait(self.retry_delay)
            except Exception as e:
                if stop_event.is_set():
                    # stop() closed the stream under the reader
                    break
                logger.warning("List/watch failed", kind=self.kind, error=str(e))
                stop_event.wait(self.retry_delay)

        logger.info("Mirror stopped", kind=self.kind)

    def has_synced(self) -> bool:
        """Whether the initial list has populated the store."""
        return self._synced.is_set()

    def wait_for_sync(self, timeout: float | None = None) -> bool:
        """Block until the initial list completed or timeout elapsed."""
        return self._synced.wait(timeout)

    def list_keys(self) -> list[str]:
        return self.store.list_keys()

    def get_by_key(self, key: str) -> tuple[Any | None, bool]:
        return self.store.get_by_key(key)

    def list(self) -> list[Any]:
        return self.store.list()

    def _relist(self) -> str:
        """Replace the store content with a fresh list.

        Returns:
            Resource version to start watching from.
        """
        response = self._list_func(_request_timeout=DEFAULT_REQUEST_TIMEOUT)
        items = response.items or []
        self.store.replace(items)
        self._synced.set()

        resource_version = response.metadata.resource_version
        logger.debug(
            "Relisted", kind=self.kind, count=len(items), resource_version=resource_version
        )
        return resource_version

    def _watch_until_resync(self, resource_version: str, stop_event: threading.Event) -> None:
        deadline = time.monotonic() + self.resync_period
        while not stop_event.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug("Resync period elapsed", kind=self.kind)
                return
            timeout_seconds = max(1, int(min(self.watch_timeout, remaining)))
            resource_version = self._watch_once(resource_version, timeout_seconds, stop_event)

    def _watch_once(
        self,
        resource_version: str,
        timeout_seconds: int,
        stop_event: threading.Event,
    ) -> str:
        """Apply one watch call's events to the store.

        Returns:
            Resource version of the last applied event.
        """
        if stop_event.is_set():
            return resource_version

        current = watch.Watch()
        self._watch = current
        try:
            for event in current.stream(
                self._tracked_list_func(stop_event),
                resource_version=resource_version,
                timeout_seconds=timeout_seconds,
                _request_timeout=(DEFAULT_REQUEST_TIMEOUT, timeout_seconds + 30),
            ):
                if stop_event.is_set():
                    break
                resource_version = self._apply(event) or resource_version
        finally:
            current.stop()
            self._watch = None
            self._response = None
        return resource_version

    def _tracked_list_func(self, stop_event: threading.Event) -> Callable[..., Any]:
        """Wrap the list function so stop() can close the streaming response.

        Watch.stream reads the return type from the docstring, so it is kept.
        """

        @functools.wraps(self._list_func)
        def list_func(*args: Any, **kwargs: Any) -> Any:
            response = self._list_func(*args, **kwargs)
            self._response = response
            if stop_event.is_set():
                response.close()
            return response

        return list_func

    def _apply(self, event: dict[str, Any]) -> str | None:
        event_type = event["type"]
        obj = event["object"]

        if event_type in ("ADDED", "MODIFIED"):
            self.store.update(obj)
        elif event_type == "DELETED":
            self.store.delete(obj)
        else:
            logger.debug("Ignoring watch event", kind=self.kind, type=event_type)
            return None

        return obj.metadata.resource_version
