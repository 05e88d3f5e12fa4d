"""
Trajectory Result Store
=======================
Ordered, capacity-bounded, deduplicated collection of computed
trajectories. Each accepted trajectory receives the next palette color;
colors are assigned once at insertion and never change.

Duplicates are detected by the parameter fingerprint. A rejected insert
never mutates the store. ``insert`` and ``clear`` are serialized by a
lock so one store can be shared between threads.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .errors import CapacityError, DuplicateError, StoreRejection
from .integrator import Trajectory

logger = logging.getLogger(__name__)


MAX_TRAJECTORIES = 20
PALETTE = (
    '#00d4ff', '#ff6b35', '#7fff7f', '#ff4fa3',
    '#ffd700', '#b06fff', '#ff9999', '#00ffcc',
)


@dataclass(frozen=True)
class InsertResult:
    """Outcome of ``ResultStore.insert``."""
    accepted: bool
    color: Optional[str] = None
    reason: Optional[str] = None           # 'duplicate' | 'capacity'
    trajectory: Optional[Trajectory] = None


class ResultStore:
    """
    Session-scoped store of trajectories for comparison.

    Parameters
    ----------
    capacity : int
        Maximum number of stored trajectories.
    palette : sequence of str
        Colors assigned round-robin in insertion order.
    """

    def __init__(self, capacity: int = MAX_TRAJECTORIES,
                 palette: Sequence[str] = PALETTE):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if not palette:
            raise ValueError("palette must contain at least one color")
        self.capacity = capacity
        self.palette = tuple(palette)
        self._entries = []
        self._fingerprints = set()
        self._color_counter = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item) -> bool:
        if isinstance(item, Trajectory):
            item = item.fingerprint
        return item in self._fingerprints

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    def add(self, trajectory: Trajectory) -> Trajectory:
        """
        Store a trajectory and return the stored, colored copy.

        Raises DuplicateError or CapacityError without touching the store.
        """
        key = trajectory.fingerprint
        with self._lock:
            if key in self._fingerprints:
                raise DuplicateError(
                    f"Already computed for dt={trajectory.params.dt} "
                    f"with same parameters")
            if len(self._entries) >= self.capacity:
                raise CapacityError(
                    f"Max {self.capacity} trajectories reached. Clear to add more.")

            color = self.palette[self._color_counter % len(self.palette)]
            stored = trajectory.with_color(color)
            self._color_counter += 1
            self._entries.append(stored)
            self._fingerprints.add(key)

        logger.info("stored trajectory #%d (dt=%g, %s)",
                    len(self._entries), trajectory.params.dt, color)
        return stored

    def insert(self, trajectory: Trajectory) -> InsertResult:
        """Like ``add`` but reports rejection as a value."""
        try:
            stored = self.add(trajectory)
        except StoreRejection as exc:
            logger.warning("%s", exc)
            return InsertResult(accepted=False, reason=exc.reason)
        return InsertResult(accepted=True, color=stored.color, trajectory=stored)

    def clear(self) -> None:
        """Drop every entry and restart the color cycle."""
        with self._lock:
            self._entries = []
            self._fingerprints = set()
            self._color_counter = 0
        logger.info("result store cleared")

    def list(self) -> Tuple[Trajectory, ...]:
        """Snapshot of stored trajectories in insertion order."""
        return tuple(self._entries)
