"""
Air Density Models
==================
Maps altitude to air density for the three selectable atmospheres:

  - constant 1.225 kg/m³ (ISA sea level)
  - constant 1.29 kg/m³  (cold, dense air at 0 °C)
  - ISA: troposphere power law below 11 km, exponential stratosphere
    approximation above it

The two ISA branches meet at the tropopause to within ~0.05 %; this is an
approximation model, not a layered boundary-value solve.

Reference: U.S. Standard Atmosphere, 1976 (NASA-TM-X-74335)
"""

import math
from enum import Enum

import numpy as np


# ── ISA Constants ──────────────────────────────────────────────────────────
SEA_LEVEL_TEMP       = 288.15      # K  (15 °C)
SEA_LEVEL_DENSITY    = 1.225       # kg/m³
COLD_AIR_DENSITY     = 1.29        # kg/m³
LAPSE_RATE_TROPO     = -0.0065     # K/m  (troposphere)
TROPOPAUSE_ALT       = 11000.0     # m
TROPOPAUSE_TEMP      = 216.65      # K  (-56.5 °C)
DENSITY_EXPONENT     = 4.2561      # g·M/(R·L) − 1
TROPOPAUSE_DENSITY   = 0.3639      # kg/m³
STRATO_DECAY_RATE    = 0.0001576   # 1/m  (1 / scale height)


class AtmosphereModel(Enum):
    """Atmosphere density model selector."""
    CONSTANT_1225 = "const1225"
    CONSTANT_1290 = "const1290"
    ISA = "isa"

    @classmethod
    def parse(cls, value) -> "AtmosphereModel":
        """Accept a member, its value, or one of the legacy short keys."""
        if isinstance(value, cls):
            return value
        key = _LEGACY_KEYS.get(value, value)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown atmosphere model {value!r}. "
                f"Available: {[m.value for m in cls]}"
            ) from None

    @property
    def label(self) -> str:
        return _LABELS[self]


_LEGACY_KEYS = {
    'const': AtmosphereModel.CONSTANT_1225.value,
    'const129': AtmosphereModel.CONSTANT_1290.value,
}

_LABELS = {
    AtmosphereModel.CONSTANT_1225: 'Constant ρ=1.225',
    AtmosphereModel.CONSTANT_1290: 'Constant ρ=1.29',
    AtmosphereModel.ISA: 'ISA',
}


def isa_temperature(altitude: float) -> float:
    """
    Temperature (K) at a given geometric altitude (m).

    - Troposphere (0–11 km): linear lapse at −6.5 °C/km
    - Above the tropopause: isothermal at 216.65 K
    """
    altitude = max(altitude, 0.0)
    if altitude <= TROPOPAUSE_ALT:
        return SEA_LEVEL_TEMP + LAPSE_RATE_TROPO * altitude
    return TROPOPAUSE_TEMP


def isa_density(altitude: float) -> float:
    """
    ISA air density (kg/m³). Negative altitudes are treated as sea level.
    """
    if altitude < 0.0:
        altitude = 0.0
    if altitude <= TROPOPAUSE_ALT:
        T = SEA_LEVEL_TEMP + LAPSE_RATE_TROPO * altitude
        return SEA_LEVEL_DENSITY * (T / SEA_LEVEL_TEMP) ** DENSITY_EXPONENT
    return TROPOPAUSE_DENSITY * math.exp(-STRATO_DECAY_RATE * (altitude - TROPOPAUSE_ALT))


def density(altitude: float, model=AtmosphereModel.ISA) -> float:
    """
    Air density (kg/m³) at ``altitude`` (m) for the selected model.

    Pure and defined for every real altitude.
    """
    # Called once per integration step, so compare members before parsing.
    if model is AtmosphereModel.CONSTANT_1225:
        return SEA_LEVEL_DENSITY
    if model is AtmosphereModel.CONSTANT_1290:
        return COLD_AIR_DENSITY
    if model is AtmosphereModel.ISA:
        return isa_density(altitude)
    return density(altitude, AtmosphereModel.parse(model))


# ── Vectorized version for plotting ───────────────────────────────────────
def isa_profile(alt_array: np.ndarray, model=AtmosphereModel.ISA) -> dict:
    """
    Compute density and temperature profiles for an array of altitudes.
    Returns dict with keys: 'altitude', 'temperature', 'density'.
    """
    model = AtmosphereModel.parse(model)
    alt_array = np.asarray(alt_array, dtype=float)
    T = np.array([isa_temperature(h) for h in alt_array])
    rho = np.array([density(h, model) for h in alt_array])
    return {
        'altitude': alt_array,
        'temperature': T,
        'density': rho,
    }


if __name__ == "__main__":
    print("Atmosphere Model Verification")
    print("=" * 56)
    print(f"{'Alt (m)':>10} {'T (K)':>10} {'ρ ISA':>10} {'ρ 1.225':>10} {'ρ 1.29':>10}")
    print("-" * 56)
    for h in [0, 1000, 5000, 10000, 11000, 15000, 20000]:
        print(f"{h:>10.0f} {isa_temperature(h):>10.2f} "
              f"{density(h, AtmosphereModel.ISA):>10.5f} "
              f"{density(h, AtmosphereModel.CONSTANT_1225):>10.5f} "
              f"{density(h, AtmosphereModel.CONSTANT_1290):>10.5f}")
