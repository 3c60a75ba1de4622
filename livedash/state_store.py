"""Per-widget render state.

Every stateful widget keeps the values it last rendered here, keyed by
``(widget_id, attribute)``. Relative progress updates and animation frames
are resolved against this store rather than recomputed from scratch.
"""

from typing import Any, Iterator

Scalar = int | str | bool


class KeyedStateStore:
    """In-memory map of ``(widget_id, attribute) -> last rendered value``.

    Entries are created on first render and live as long as the store.
    Only the rendering authority touches it, so there is no locking.
    """

    def __init__(self) -> None:
        self._partitions: dict[str, dict[str, Scalar]] = {}

    def get(self, widget_id: str, attr: str, default: Any = None) -> Any:
        partition = self._partitions.get(widget_id)
        if partition is None:
            return default
        return partition.get(attr, default)

    def set(self, widget_id: str, attr: str, value: Scalar) -> None:
        self._partitions.setdefault(widget_id, {})[attr] = value

    def update(self, widget_id: str, **values: Scalar) -> None:
        """Set several attributes of one widget at once."""
        self._partitions.setdefault(widget_id, {}).update(values)

    def has(self, widget_id: str, attr: str) -> bool:
        return attr in self._partitions.get(widget_id, {})

    def slice(self, widget_id: str) -> dict[str, Scalar]:
        """Return a copy of one widget's partition."""
        return dict(self._partitions.get(widget_id, {}))

    def ids(self) -> list[str]:
        """Widget ids in first-seen order."""
        return list(self._partitions)

    def __contains__(self, widget_id: object) -> bool:
        return widget_id in self._partitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._partitions)

    def __len__(self) -> int:
        return len(self._partitions)
