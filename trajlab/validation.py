"""
Validation & Step-Size Convergence
===================================
Compares the fixed-step semi-implicit Euler integrator against:

  - the closed-form drag-free solution (any launch height)
  - a high-accuracy adaptive reference (scipy ``solve_ivp``, RK45 with
    tight tolerances and a terminal ground-impact event) that uses the
    same gravity, drag and atmosphere model

``convergence_study`` sweeps the time step and reports how range and
peak height approach the reference as dt shrinks.
"""

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

import numpy as np
from scipy.integrate import solve_ivp

from .atmosphere import density
from .integrator import GRAVITY, integrate
from .projectile import SimulationParameters


DEFAULT_DTS = (0.1, 0.05, 0.01, 0.005, 0.001)


@dataclass
class ReferenceSolution:
    """Flight summary from an independent solution."""
    range: float
    max_height: float
    flight_time: float
    final_speed: float


@dataclass
class ConvergenceRow:
    """Result of one step size in a convergence sweep."""
    dt: float
    range: float
    max_height: float
    final_speed: float
    step_count: int
    range_error: float       # m, signed vs reference
    height_error: float      # m, signed vs reference
    ref_range: float

    @property
    def range_error_pct(self) -> float:
        if self.ref_range == 0.0:
            return 0.0
        return 100.0 * self.range_error / self.ref_range


def vacuum_solution(params: SimulationParameters) -> ReferenceSolution:
    """
    Closed-form drag-free, windless flight from height y0 to the ground.

    Ignores Cd and wind.
    """
    vx, vy = params.initial_velocity()
    g = GRAVITY
    t_flight = (vy + math.sqrt(vy * vy + 2.0 * g * params.y0)) / g
    apex = params.y0 + max(vy, 0.0) ** 2 / (2.0 * g)
    vy_final = vy - g * t_flight
    return ReferenceSolution(
        range=vx * t_flight,
        max_height=apex,
        flight_time=t_flight,
        final_speed=math.hypot(vx, vy_final),
    )


def reference_solution(params: SimulationParameters, rtol: float = 1e-10,
                       atol: float = 1e-10, t_max: float = 1e5) -> ReferenceSolution:
    """
    Adaptive high-order solution of the same equations of motion.

    Raises RuntimeError if the solver fails or the body never lands
    within ``t_max`` seconds.
    """
    k_coeff = 0.5 * params.cd * params.area / params.mass
    wind_x = params.wind_x
    model = params.atmosphere

    def rhs(t, state):
        x, y, vx, vy = state
        k = k_coeff * density(y, model)
        vrx = vx - wind_x
        vr = math.hypot(vrx, vy)
        return [vx, vy, -k * vr * vrx, -GRAVITY - k * vr * vy]

    def ground(t, state):
        return state[1]
    ground.terminal = True
    ground.direction = -1

    def apex(t, state):
        return state[3]
    apex.direction = -1

    vx0, vy0 = params.initial_velocity()
    sol = solve_ivp(rhs, (0.0, t_max), [0.0, float(params.y0), vx0, vy0],
                    method='RK45', rtol=rtol, atol=atol,
                    events=(ground, apex))
    if sol.status == -1:
        raise RuntimeError(f"reference integration failed: {sol.message}")
    if len(sol.t_events[0]) == 0:
        raise RuntimeError(f"no ground impact within {t_max} s")

    x_f, _, vx_f, vy_f = sol.y_events[0][0]
    heights = [float(params.y0), float(np.max(sol.y[1]))]
    if len(sol.y_events[1]):
        heights.append(float(sol.y_events[1][0][1]))
    return ReferenceSolution(
        range=float(x_f),
        max_height=max(heights),
        flight_time=float(sol.t_events[0][0]),
        final_speed=float(math.hypot(vx_f, vy_f)),
    )


def convergence_study(params: SimulationParameters,
                      dts: Sequence[float] = DEFAULT_DTS,
                      reference: Optional[ReferenceSolution] = None,
                      verbose: bool = True) -> List[ConvergenceRow]:
    """
    Integrate ``params`` at each step size and compare with a reference.

    Returns one ConvergenceRow per dt, in the order given.
    """
    if reference is None:
        reference = reference_solution(params)

    if verbose:
        print(f"\n{'='*75}")
        print(f"  CONVERGENCE: {params.shape} (Cd={params.cd}, {params.atmosphere.label})")
        print(f"  Reference range {reference.range:.4f} m | "
              f"max height {reference.max_height:.4f} m")
        print(f"{'='*75}")
        print(f"{'dt (s)':>10} {'Range (m)':>12} {'Err (m)':>10} "
              f"{'Max H (m)':>11} {'Err (m)':>10} {'Steps':>12}")
        print("-" * 75)

    rows = []
    for dt in dts:
        traj = integrate(replace(params, dt=dt))
        row = ConvergenceRow(
            dt=dt,
            range=traj.range,
            max_height=traj.max_height,
            final_speed=traj.final_speed,
            step_count=traj.step_count,
            range_error=traj.range - reference.range,
            height_error=traj.max_height - reference.max_height,
            ref_range=reference.range,
        )
        rows.append(row)
        if verbose:
            print(f"{dt:>10.4g} {row.range:>12.4f} {row.range_error:>+10.4f} "
                  f"{row.max_height:>11.4f} {row.height_error:>+10.4f} "
                  f"{row.step_count:>12,d}")

    if verbose:
        print(f"{'='*75}\n")
    return rows
