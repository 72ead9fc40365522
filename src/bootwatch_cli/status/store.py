"""Thread-safe keyed object store backing a resource mirror."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from typing import Any

from ..errors import StoreError


def object_key(obj: Any) -> str:
    """Return the store key for a Kubernetes object.

    Namespaced objects are keyed ``<namespace>/<name>``, cluster-scoped
    objects (nodes) by name alone.
    """
    metadata = obj.metadata
    if metadata.namespace:
        return f"{metadata.namespace}/{metadata.name}"
    return metadata.name


class ObjectStore:
    """Keyed snapshot of one resource kind.

    A single writer applies events while readers take point-in-time copies.
    Objects are stored and replaced whole, so readers never observe a
    partially updated object.
    """

    def __init__(self, key_func: Callable[[Any], str] = object_key):
        self._key_func = key_func
        self._items: dict[str, Any] = {}
        self._lock = threading.Lock()

    def add(self, obj: Any) -> None:
        key = self._key_func(obj)
        with self._lock:
            self._items[key] = obj

    update = add

    def delete(self, obj: Any) -> None:
        key = self._key_func(obj)
        with self._lock:
            self._items.pop(key, None)

    def replace(self, objects: Iterable[Any]) -> None:
        """Swap the whole content for a freshly listed set of objects."""
        items = {self._key_func(obj): obj for obj in objects}
        with self._lock:
            self._items = items

    def list_keys(self) -> list[str]:
        with self._lock:
            return list(self._items)

    def list(self) -> list[Any]:
        with self._lock:
            return list(self._items.values())

    def get_by_key(self, key: str) -> tuple[Any | None, bool]:
        """Look up an object by key.

        Returns:
            Tuple of (object or None, exists).

        Raises:
            StoreError: If the key is not a string.
        """
        if not isinstance(key, str):
            raise StoreError(f"invalid store key {key!r}")
        with self._lock:
            obj = self._items.get(key)
        return obj, obj is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
