"""
Recycling pool of display handles.

Handles are created up front (``warm_up``) and recycled as zones scroll
in and out of view.  When the pool runs dry ``acquire`` synthesizes a
new handle and logs a warning; those extra handles join the pool when
released, so under sustained overflow the pool keeps growing unless a
``max_handles`` ceiling is set.
"""

from __future__ import annotations

import itertools
from collections import deque
from collections.abc import Callable
from typing import Any

from loguru import logger

from citybudget.core.exceptions import PoolExhaustedError
from citybudget.scene.handles import DisplayHandle


def _deactivate(handle: Any) -> None:
    deactivate = getattr(handle, "deactivate", None)
    if callable(deactivate):
        deactivate()


class HandlePool:
    """
    FIFO pool of opaque display handles.

    Args:
        factory: Creates a new handle. Defaults to :class:`DisplayHandle`.
        capacity: Number of handles created by :meth:`warm_up`.
        max_handles: Optional hard ceiling on handles ever created.
            ``None`` means overflow is always synthesized.
        on_release: Called on a handle when it goes back to the pool.
            Defaults to calling ``handle.deactivate()`` if present.
    """

    def __init__(
        self,
        factory: Callable[[], Any] | None = None,
        capacity: int = 30,
        max_handles: int | None = None,
        on_release: Callable[[Any], None] | None = None,
    ):
        if max_handles is not None and max_handles < capacity:
            raise ValueError("max_handles must be at least capacity")

        ids = itertools.count(1)
        self._factory = factory or (lambda: DisplayHandle(handle_id=next(ids)))
        self._on_release = on_release or _deactivate
        self.capacity = capacity
        self.max_handles = max_handles

        self._idle: deque[Any] = deque()
        self._idle_ids: set[int] = set()

        self.total_created = 0
        self.synthesized = 0
        self.acquire_count = 0
        self.release_count = 0

    def __len__(self) -> int:
        return len(self._idle)

    @property
    def idle_count(self) -> int:
        return len(self._idle)

    @property
    def in_use(self) -> int:
        return self.total_created - len(self._idle)

    def _create(self) -> Any:
        handle = self._factory()
        self.total_created += 1
        return handle

    def _push(self, handle: Any) -> None:
        self._idle.append(handle)
        self._idle_ids.add(id(handle))

    def warm_up(self) -> int:
        """Fill the pool up to ``capacity`` idle handles; return how many were created."""
        created = 0
        while len(self._idle) < self.capacity:
            try:
                handle = self._create()
            except Exception:
                logger.exception(f"Failed to create pool handle {created + 1}/{self.capacity}")
                break
            _deactivate(handle)
            self._push(handle)
            created += 1
        logger.info(f"Handle pool warmed up: {created} created, {len(self._idle)} idle")
        return created

    def acquire(self) -> Any:
        """Take an idle handle, or synthesize one when none is idle."""
        if self._idle:
            handle = self._idle.popleft()
            self._idle_ids.discard(id(handle))
        else:
            if self.max_handles is not None and self.total_created >= self.max_handles:
                raise PoolExhaustedError(self.max_handles)
            logger.warning("Handle pool depleted, creating new zone handle")
            handle = self._create()
            self.synthesized += 1
        self.acquire_count += 1
        return handle

    def release(self, handle: Any) -> None:
        """Deactivate *handle* and return it to the idle queue. Never raises."""
        if handle is None:
            return
        if id(handle) in self._idle_ids:
            logger.warning("Handle released twice; ignoring")
            return
        try:
            self._on_release(handle)
        except Exception:
            logger.exception("Error deactivating released handle")
        self._push(handle)
        self.release_count += 1

    def drain(self) -> list[Any]:
        """Remove and return every idle handle (scene teardown)."""
        drained = list(self._idle)
        self._idle.clear()
        self._idle_ids.clear()
        self.total_created -= len(drained)
        logger.debug(f"Drained {len(drained)} idle handles")
        return drained

    def stats(self) -> dict[str, Any]:
        return {
            "capacity": self.capacity,
            "max_handles": self.max_handles,
            "idle": len(self._idle),
            "in_use": self.in_use,
            "total_created": self.total_created,
            "synthesized": self.synthesized,
            "acquired": self.acquire_count,
            "released": self.release_count,
        }
