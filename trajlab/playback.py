"""
Pull-based playback over a computed trajectory.

The trajectory is fully computed before playback starts; a host clock
decides when to pull the next frame. Each frame advances the display
index by ``max(1, n_points // frames)`` until the last point is reached.
"""

from typing import Iterator, Tuple

from .integrator import Trajectory, TrajectoryPoint

DEFAULT_FRAMES = 300


def playback_stride(n_points: int, frames: int = DEFAULT_FRAMES) -> int:
    return max(1, n_points // frames)


def playback_frames(trajectory: Trajectory,
                    frames: int = DEFAULT_FRAMES) -> Iterator[int]:
    """Yield display indices, always ending on the last point."""
    n = len(trajectory)
    stride = playback_stride(n, frames)
    idx = 0
    while True:
        idx += stride
        if idx >= n - 1:
            yield n - 1
            return
        yield idx


class Playback:
    """
    Iterator of ``(index, point)`` frames for one trajectory.

    >>> for idx, point in Playback(traj):
    ...     draw(traj.x[:idx + 1], traj.y[:idx + 1])
    """

    def __init__(self, trajectory: Trajectory, frames: int = DEFAULT_FRAMES):
        self.trajectory = trajectory
        self.frames = frames
        self.index = 0
        self.done = False
        self._indices = playback_frames(trajectory, frames)

    def __iter__(self):
        return self

    def __next__(self) -> Tuple[int, TrajectoryPoint]:
        if self.done:
            raise StopIteration
        try:
            self.index = next(self._indices)
        except StopIteration:
            self.done = True
            raise
        if self.index == len(self.trajectory) - 1:
            self.done = True
        t = self.trajectory
        return self.index, TrajectoryPoint(float(t.x[self.index]), float(t.y[self.index]))

    def reset(self) -> None:
        self.index = 0
        self.done = False
        self._indices = playback_frames(self.trajectory, self.frames)
