"""
Validation against closed-form and adaptive reference solutions.
Run: python -m pytest tests/ -v
"""

import sys
import os
import math

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajlab.projectile import SimulationParameters
from trajlab.integrator import integrate, GRAVITY
from trajlab.validation import vacuum_solution, reference_solution, convergence_study


class TestReferenceSolutions:

    def test_vacuum_flat_ground(self):
        params = SimulationParameters(v0=20.0, angle_deg=45.0, mass=1.0,
                                      cd=0.0, area=0.01, dt=0.01)
        sol = vacuum_solution(params)
        assert sol.range == pytest.approx(400.0 / GRAVITY, rel=1e-12)
        assert sol.max_height == pytest.approx(200.0 / (2 * GRAVITY), rel=1e-12)
        assert sol.final_speed == pytest.approx(20.0, rel=1e-9)

    def test_scipy_matches_vacuum(self):
        params = SimulationParameters(v0=30.0, angle_deg=35.0, mass=1.0,
                                      cd=0.0, area=0.01, dt=0.01, y0=12.0)
        exact = vacuum_solution(params)
        ref = reference_solution(params)
        assert ref.range == pytest.approx(exact.range, rel=1e-6)
        assert ref.max_height == pytest.approx(exact.max_height, rel=1e-6)
        assert ref.flight_time == pytest.approx(exact.flight_time, rel=1e-6)

    def test_integrator_close_to_reference_with_drag(self):
        params = SimulationParameters(v0=50.0, angle_deg=45.0, mass=0.145, cd=0.47,
                                      area=0.0042, dt=0.001, y0=1.0, wind_speed=5.0,
                                      atmosphere='isa')
        ref = reference_solution(params)
        traj = integrate(params)
        assert traj.range == pytest.approx(ref.range, rel=5e-3)
        assert traj.max_height == pytest.approx(ref.max_height, rel=5e-3)
        assert traj.final_speed == pytest.approx(ref.final_speed, rel=1e-2)


class TestConvergence:

    def test_errors_shrink_with_dt(self):
        params = SimulationParameters(v0=40.0, angle_deg=40.0, mass=0.5, cd=0.47,
                                      area=0.005, dt=0.1)
        rows = convergence_study(params, dts=(0.1, 0.01, 0.001), verbose=False)
        assert [r.dt for r in rows] == [0.1, 0.01, 0.001]
        errors = [abs(r.range_error) for r in rows]
        assert errors[0] > errors[1] > errors[2]
        assert abs(rows[-1].range_error_pct) < 0.5

    def test_verbose_prints_table(self, capsys):
        params = SimulationParameters(v0=20.0, angle_deg=45.0, mass=1.0,
                                      cd=0.0, area=0.01, dt=0.1)
        convergence_study(params, dts=(0.05,), reference=vacuum_solution(params))
        out = capsys.readouterr().out
        assert 'CONVERGENCE' in out
        assert '0.05' in out
