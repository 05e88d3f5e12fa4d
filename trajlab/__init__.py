"""
Trajectory Step-Size Lab
========================
Computes point-mass ballistic trajectories under:
  - Gravity
  - Quadratic aerodynamic drag (constant Cd)
  - Selectable atmosphere (constant 1.225, constant 1.29, ISA)
  - Horizontal wind

using fixed-step semi-implicit Euler integration, and keeps a bounded,
deduplicated, color-coded set of results so runs at different time steps
can be compared side by side.
"""

from .atmosphere import AtmosphereModel, density, isa_density, isa_temperature, isa_profile
from .errors import ValidationError, StoreRejection, DuplicateError, CapacityError
from .shapes import ALL_SHAPES, shape_cd, parse_drag_coefficient
from .projectile import SimulationParameters
from .integrator import integrate, Trajectory, TrajectoryPoint, MAX_STEPS
from .store import ResultStore, InsertResult, PALETTE, MAX_TRAJECTORIES
from .playback import Playback, playback_frames, playback_stride
from .validation import (
    vacuum_solution, reference_solution, convergence_study,
    ConvergenceRow, ReferenceSolution,
)

__version__ = "1.0.0"
__all__ = [
    'AtmosphereModel', 'density', 'isa_density', 'isa_temperature', 'isa_profile',
    'ValidationError', 'StoreRejection', 'DuplicateError', 'CapacityError',
    'ALL_SHAPES', 'shape_cd', 'parse_drag_coefficient',
    'SimulationParameters',
    'integrate', 'Trajectory', 'TrajectoryPoint', 'MAX_STEPS',
    'ResultStore', 'InsertResult', 'PALETTE', 'MAX_TRAJECTORIES',
    'Playback', 'playback_frames', 'playback_stride',
    'vacuum_solution', 'reference_solution', 'convergence_study',
    'ConvergenceRow', 'ReferenceSolution',
]
