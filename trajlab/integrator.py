"""
Numerical Integration Engine
=============================
Semi-implicit (symplectic) Euler integration of a point mass under
gravity and quadratic drag relative to a horizontal wind:

    v_{n+1} = v_n + a(y_n, v_n) * dt
    x_{n+1} = x_n + v_{n+1} * dt

Velocity is advanced first and the updated velocity feeds the position
update of the same step. The ground crossing is located by linear
interpolation, so a terminated trajectory ends at exactly y = 0.

Long flights are downsampled: the first 50 000 steps are kept in full,
after that the retention interval grows with elapsed steps.

Output: Trajectory dataclass with the retained points and flight summary.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .atmosphere import density
from .projectile import SimulationParameters

logger = logging.getLogger(__name__)


GRAVITY               = 9.81          # m/s²
MAX_STEPS             = 20_000_000    # hard iteration cap
FULL_RESOLUTION_STEPS = 50_000        # steps retained without decimation
DECIMATION_DIVISOR    = 5_000         # interval = step // divisor afterwards


class TrajectoryPoint(NamedTuple):
    """Ground-relative position (m)."""
    x: float
    y: float


@dataclass(frozen=True, eq=False)
class Trajectory:
    """Complete trajectory output."""
    params: SimulationParameters

    # Retained points, shape (N,)
    x: np.ndarray             # downrange
    y: np.ndarray             # height

    range: float              # final x (m)
    max_height: float         # peak y over every raw step (m)
    final_speed: float        # |v| at termination (m/s)
    step_count: int           # raw integration steps executed
    landed: bool              # False if stopped by the step cap or cancelled
    color: Optional[str] = None

    def __len__(self) -> int:
        return len(self.x)

    @property
    def truncated(self) -> bool:
        """True when integration stopped before reaching the ground."""
        return not self.landed

    @property
    def points(self) -> Tuple[TrajectoryPoint, ...]:
        return tuple(TrajectoryPoint(float(px), float(py))
                     for px, py in zip(self.x, self.y))

    @property
    def launch_point(self) -> TrajectoryPoint:
        return TrajectoryPoint(float(self.x[0]), float(self.y[0]))

    @property
    def final_point(self) -> TrajectoryPoint:
        return TrajectoryPoint(float(self.x[-1]), float(self.y[-1]))

    @property
    def peak_point(self) -> TrajectoryPoint:
        """Highest retained point (used for the apex marker)."""
        idx = int(np.argmax(self.y))
        return TrajectoryPoint(float(self.x[idx]), float(self.y[idx]))

    @property
    def fingerprint(self) -> str:
        return self.params.fingerprint()

    def with_color(self, color: str) -> "Trajectory":
        return replace(self, color=color)

    def summary(self) -> str:
        """Human-readable summary string."""
        p = self.params
        status = 'LANDED' if self.landed else 'TRUNCATED'
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — {p.shape:<30s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Cd           : {p.cd:<36.4g} ║",
            f"║  Atmosphere   : {p.atmosphere.label:<36s} ║",
            f"║  Timestep     : {p.dt:<36.6g} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Launch vel   : {p.v0:>10.1f} m/s{'':<22s} ║",
            f"║  Elevation    : {p.angle_deg:>10.1f} °{'':<24s} ║",
            f"║  Wind         : {p.wind_speed:>10.1f} m/s @ {p.wind_dir_deg:>5.1f}°{'':<10s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {self.range:>14.4f} m{'':<20s} ║",
            f"║  Max height   : {self.max_height:>14.4f} m{'':<20s} ║",
            f"║  Final speed  : {self.final_speed:>14.4f} m/s{'':<18s} ║",
            f"║  Steps        : {self.step_count:>14,d}{'':<22s} ║",
            f"║  Status       : {status:<36s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


def _retained(step: int) -> bool:
    if step < FULL_RESOLUTION_STEPS:
        return True
    return step % max(1, step // DECIMATION_DIVISOR) == 0


def integrate(params: SimulationParameters, max_steps: int = MAX_STEPS,
              cancel=None) -> Trajectory:
    """
    Integrate one trajectory from launch to ground impact.

    Parameters
    ----------
    params : SimulationParameters
        Validated launch, body and environment parameters.
    max_steps : int
        Hard cap on raw integration steps. A run that hits it is returned
        with ``landed=False``.
    cancel : object with ``is_set()``, optional
        Checked once per step (e.g. ``threading.Event``). A cancelled run
        is returned with ``landed=False``.

    Returns
    -------
    Trajectory
    """
    params.validate()
    if max_steps < 1:
        raise ValueError(f"max_steps must be >= 1, got {max_steps}")

    dt = float(params.dt)
    model = params.atmosphere
    k_coeff = 0.5 * params.cd * params.area / params.mass
    wind_x = params.wind_x
    vx, vy = params.initial_velocity()

    x, y = 0.0, float(params.y0)
    xs, ys = [x], [y]
    max_h = y
    steps = 0
    landed = False
    last_kept = True

    logger.debug("integrating %s (dt=%g, cap=%d)", params.shape, dt, max_steps)

    while y >= 0.0 and steps < max_steps:
        if cancel is not None and cancel.is_set():
            logger.info("integration cancelled after %d steps", steps)
            break

        k = k_coeff * density(y, model)

        # Velocity relative to the air mass
        vrx = vx - wind_x
        vry = vy
        vr = math.sqrt(vrx * vrx + vry * vry)

        ax, ay = 0.0, -GRAVITY
        if vr > 0.0:
            ax -= k * vr * vrx
            ay -= k * vr * vry

        vx += ax * dt
        vy += ay * dt
        prev_x, prev_y = x, y
        x += vx * dt
        y += vy * dt

        if y > max_h:
            max_h = y

        if y < 0.0:
            frac = prev_y / (prev_y - y)
            x = prev_x + frac * (x - prev_x)
            y = 0.0
            landed = True

        last_kept = _retained(steps)
        if last_kept:
            xs.append(x)
            ys.append(y)
        steps += 1

        if landed:
            break

    if not last_kept:
        xs.append(x)
        ys.append(y)

    if not landed:
        logger.warning("trajectory truncated at %d steps (y=%.3f m)", steps, y)

    result = Trajectory(
        params=params,
        x=np.array(xs),
        y=np.array(ys),
        range=x,
        max_height=max_h,
        final_speed=math.sqrt(vx * vx + vy * vy),
        step_count=steps,
        landed=landed,
    )
    logger.debug("range=%.4f m, max height=%.4f m, %d steps, %d points",
                 result.range, result.max_height, steps, len(result))
    return result
