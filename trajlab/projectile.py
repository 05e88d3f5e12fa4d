"""
Simulation Parameters
=====================
Defines the immutable parameter set for one trajectory computation and
its canonical fingerprint, used to detect repeated requests.

Coordinate system:
  x = downrange (horizontal, ground-relative)
  y = height above ground (vertical, up positive)

Wind is horizontal only. Its direction is measured from the direction of
motion, and the air-mass velocity along x is ``wind_speed * cos(dir)``.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Tuple

from .atmosphere import AtmosphereModel
from .errors import ValidationError


# Order matters: it defines the fingerprint layout.
FINGERPRINT_FIELDS = (
    'dt', 'cd', 'atmosphere', 'wind_speed', 'wind_dir_deg',
    'v0', 'angle_deg', 'mass', 'area', 'y0',
)

_POSITIVE_FIELDS = ('v0', 'mass', 'area', 'dt')
_NON_NEGATIVE_FIELDS = ('cd', 'y0')
_NUMERIC_FIELDS = (
    'v0', 'angle_deg', 'mass', 'cd', 'area', 'dt',
    'y0', 'wind_speed', 'wind_dir_deg',
)


@dataclass(frozen=True)
class SimulationParameters:
    """
    Complete specification of one simulation request (SI units, degrees).
    """
    v0: float                         # m/s  launch speed
    angle_deg: float                  # degrees above horizontal
    mass: float                       # kg
    cd: float                         # drag coefficient
    area: float                       # m²  reference area
    dt: float                         # s   integration step
    y0: float = 0.0                   # m   launch height
    wind_speed: float = 0.0           # m/s
    wind_dir_deg: float = 0.0         # degrees
    atmosphere: AtmosphereModel = AtmosphereModel.CONSTANT_1225
    shape: str = 'Custom'             # display label only

    def __post_init__(self):
        object.__setattr__(self, 'atmosphere', AtmosphereModel.parse(self.atmosphere))
        self.validate()

    def validate(self) -> None:
        """Raise ValidationError for the first malformed field."""
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ValidationError(name, value, 'must be a number')
            if not math.isfinite(value):
                raise ValidationError(name, value, 'must be finite')
        for name in _POSITIVE_FIELDS:
            if getattr(self, name) <= 0:
                raise ValidationError(name, getattr(self, name), 'must be > 0')
        for name in _NON_NEGATIVE_FIELDS:
            if getattr(self, name) < 0:
                raise ValidationError(name, getattr(self, name), 'must be >= 0')

    def initial_velocity(self) -> Tuple[float, float]:
        """Convert launch speed + angle to (vx, vy)."""
        theta = math.radians(self.angle_deg)
        return self.v0 * math.cos(theta), self.v0 * math.sin(theta)

    @property
    def wind_x(self) -> float:
        """Horizontal air-mass velocity (m/s)."""
        return self.wind_speed * math.cos(math.radians(self.wind_dir_deg))

    @property
    def ballistic_factor(self) -> float:
        """Cd·A/m (m²/kg); drag deceleration is ½ρ·v²·ballistic_factor."""
        return self.cd * self.area / self.mass

    def fingerprint(self) -> str:
        """
        Canonical encoding of every physically relevant field.

        Identical parameter sets always give the same string and a change
        to any single field gives a different one. ``shape`` is excluded.
        """
        parts = []
        for name in FINGERPRINT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, AtmosphereModel):
                parts.append(value.value)
            else:
                parts.append(repr(float(value) + 0.0))  # folds -0.0
        return '_'.join(parts)
