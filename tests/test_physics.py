"""
Unit Tests for the Trajectory Step-Size Lab
===========================================
Tests atmosphere, parameter validation and integration for correctness.
Run: python -m pytest tests/ -v
"""

import sys
import os
import math
import threading
from dataclasses import replace

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajlab.atmosphere import AtmosphereModel, density, isa_temperature, isa_profile
from trajlab.errors import ValidationError
from trajlab.shapes import ALL_SHAPES, shape_cd, parse_drag_coefficient
from trajlab.projectile import SimulationParameters
from trajlab.integrator import integrate, FULL_RESOLUTION_STEPS, GRAVITY


def make_params(**overrides):
    values = dict(v0=20.0, angle_deg=45.0, mass=1.0, cd=0.0, area=0.01, dt=0.01)
    values.update(overrides)
    return SimulationParameters(**values)


class TestAtmosphere:
    """Verify density models."""

    def test_constant_models_exact(self):
        assert density(0, AtmosphereModel.CONSTANT_1225) == 1.225
        assert density(0, AtmosphereModel.CONSTANT_1290) == 1.29

    def test_constant_models_ignore_altitude(self):
        for h in [-500.0, 0.0, 3000.0, 25000.0]:
            assert density(h, AtmosphereModel.CONSTANT_1225) == 1.225
            assert density(h, AtmosphereModel.CONSTANT_1290) == 1.29

    def test_isa_sea_level(self):
        assert abs(density(0, AtmosphereModel.ISA) - 1.225) < 1e-12

    def test_isa_negative_altitude_clamped(self):
        assert density(-100.0, AtmosphereModel.ISA) == density(0.0, AtmosphereModel.ISA)

    def test_isa_monotonic_troposphere(self):
        rho = [density(h, AtmosphereModel.ISA) for h in np.linspace(0, 11000, 200)]
        assert all(a > b for a, b in zip(rho, rho[1:]))

    def test_isa_monotonic_stratosphere(self):
        rho = [density(h, AtmosphereModel.ISA) for h in np.linspace(11001, 30000, 200)]
        assert all(a > b for a, b in zip(rho, rho[1:]))

    def test_tropopause_branches_agree(self):
        tropo = density(11000.0, AtmosphereModel.ISA)
        assert abs(tropo - 0.3639) / 0.3639 < 1e-3
        strato = density(11000.0 + 1e-6, AtmosphereModel.ISA)
        assert abs(tropo - strato) / tropo < 1e-3

    def test_tropopause_temperature(self):
        assert abs(isa_temperature(11000) - 216.65) < 0.01

    def test_model_parsing(self):
        assert density(0, 'const129') == 1.29
        assert density(0, 'isa') == density(0, AtmosphereModel.ISA)
        with pytest.raises(ValueError):
            density(0, 'mars')

    def test_profile_shapes(self):
        prof = isa_profile(np.linspace(0, 20000, 50))
        assert prof['density'].shape == (50,)
        assert prof['density'][0] > prof['density'][-1]


class TestShapes:
    """Verify shape presets and custom Cd parsing."""

    def test_all_shapes_positive(self):
        for key in ALL_SHAPES:
            assert shape_cd(key) > 0

    def test_unknown_shape(self):
        with pytest.raises(ValueError):
            shape_cd('teapot')

    def test_custom_cd_accepted(self):
        assert parse_drag_coefficient(' 0.75 ') == 0.75

    @pytest.mark.parametrize('text', [None, '', '   ', 'abc', '-1', '0', 'nan', 'inf'])
    def test_custom_cd_rejected(self, text):
        with pytest.raises(ValidationError):
            parse_drag_coefficient(text)


class TestParameters:
    """Verify parameter validation and fingerprints."""

    @pytest.mark.parametrize('field, value', [
        ('dt', 0.0), ('dt', -0.01), ('dt', float('nan')),
        ('v0', 0.0), ('mass', -1.0), ('area', 0.0),
        ('cd', -0.1), ('y0', -1.0), ('angle_deg', float('inf')),
    ])
    def test_invalid_fields_rejected(self, field, value):
        with pytest.raises(ValidationError) as info:
            make_params(**{field: value})
        assert info.value.field == field

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            make_params(dt=0.0)

    def test_atmosphere_string_coerced(self):
        p = make_params(atmosphere='isa')
        assert p.atmosphere is AtmosphereModel.ISA

    def test_wind_component(self):
        p = make_params(wind_speed=10.0, wind_dir_deg=60.0)
        assert abs(p.wind_x - 5.0) < 1e-9

    def test_fingerprint_deterministic(self):
        assert make_params().fingerprint() == make_params().fingerprint()

    def test_fingerprint_ignores_int_float_and_shape(self):
        a = make_params(v0=20, shape='Sphere')
        b = make_params(v0=20.0, shape='Cube')
        assert a.fingerprint() == b.fingerprint()

    @pytest.mark.parametrize('field, value', [
        ('dt', 0.02), ('cd', 0.47), ('atmosphere', AtmosphereModel.ISA),
        ('wind_speed', 3.0), ('wind_dir_deg', 90.0), ('v0', 21.0),
        ('angle_deg', 30.0), ('mass', 2.0), ('area', 0.02), ('y0', 1.5),
    ])
    def test_fingerprint_changes_per_field(self, field, value):
        base = make_params()
        assert replace(base, **{field: value}).fingerprint() != base.fingerprint()


class TestIntegrator:
    """Verify semi-implicit Euler integration."""

    def test_drag_free_matches_closed_form(self):
        traj = integrate(make_params())
        theta = math.radians(45.0)
        expected_range = 20.0 ** 2 * math.sin(2 * theta) / GRAVITY
        expected_height = 20.0 ** 2 * math.sin(theta) ** 2 / (2 * GRAVITY)
        assert abs(expected_range - 40.77) < 0.01
        assert abs(traj.range - expected_range) < 0.3
        assert abs(traj.max_height - expected_height) < 0.15

    def test_error_shrinks_with_dt(self):
        theta = math.radians(45.0)
        expected = 20.0 ** 2 * math.sin(2 * theta) / GRAVITY
        coarse = integrate(make_params(dt=0.05))
        fine = integrate(make_params(dt=0.001))
        assert abs(fine.range - expected) < abs(coarse.range - expected)

    def test_landing_point_exactly_zero(self):
        for params in [make_params(), make_params(cd=0.47, y0=10.0, dt=0.003),
                       make_params(angle_deg=-20.0, y0=5.0)]:
            traj = integrate(params)
            assert traj.landed
            assert traj.final_point.y == 0.0
            assert traj.y[-1] == 0.0

    def test_first_point_is_launch(self):
        traj = integrate(make_params(y0=3.0))
        assert traj.launch_point == (0.0, 3.0)

    def test_summary_fields(self):
        traj = integrate(make_params(cd=0.47))
        assert traj.range == traj.final_point.x
        assert traj.max_height >= float(np.max(traj.y))
        assert traj.final_speed > 0
        assert traj.step_count > 0
        assert traj.color is None
        assert 'LANDED' in traj.summary()

    def test_deterministic(self):
        params = make_params(cd=0.47, wind_speed=5.0, atmosphere='isa')
        a, b = integrate(params), integrate(params)
        assert a.range == b.range
        assert a.max_height == b.max_height
        assert np.array_equal(a.x, b.x)

    def test_drag_reduces_range(self):
        vacuum = integrate(make_params())
        dragged = integrate(make_params(cd=1.0, area=0.05))
        assert dragged.range < vacuum.range
        assert dragged.max_height < vacuum.max_height

    def test_headwind_reduces_range(self):
        # Air moving against the direction of motion: wind_x < 0
        calm = integrate(make_params(cd=0.5, area=0.05))
        head = integrate(make_params(cd=0.5, area=0.05, wind_speed=10.0, wind_dir_deg=180.0))
        tail = integrate(make_params(cd=0.5, area=0.05, wind_speed=10.0, wind_dir_deg=0.0))
        assert head.range < calm.range < tail.range

    def test_wind_ignored_without_drag(self):
        calm = integrate(make_params())
        windy = integrate(make_params(wind_speed=15.0))
        assert calm.range == windy.range

    def test_denser_air_reduces_range(self):
        light = integrate(make_params(cd=0.5, area=0.05, atmosphere='const1225'))
        dense = integrate(make_params(cd=0.5, area=0.05, atmosphere='const1290'))
        assert dense.range < light.range

    def test_step_cap_truncates(self):
        traj = integrate(make_params(), max_steps=100)
        assert traj.truncated
        assert traj.step_count == 100
        assert traj.final_point.y > 0
        assert 'TRUNCATED' in traj.summary()

    def test_cancellation(self):
        event = threading.Event()
        event.set()
        traj = integrate(make_params(), cancel=event)
        assert traj.truncated
        assert traj.step_count == 0
        assert len(traj) == 1

    def test_downsampling_bounds_points(self):
        # ~290k raw steps
        traj = integrate(make_params(dt=1e-5))
        assert traj.landed
        assert traj.step_count > FULL_RESOLUTION_STEPS
        assert len(traj) < traj.step_count / 2
        assert len(traj) > FULL_RESOLUTION_STEPS
        assert traj.launch_point == (0.0, 0.0)
        assert traj.final_point.y == 0.0
        assert traj.final_point.x == traj.range
        assert np.all(np.diff(traj.x) >= 0)
