"""
Unit Tests for the Force Model and Integrator
=============================================
Run: python -m pytest tests/ -v
"""

import sys
import os
import dataclasses
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from projectile_engine.config import ProjectileConfig, EngineSettings, LAUNCH_POSITION
from projectile_engine.forces import (
    wind_velocity, gravity_acceleration, drag_acceleration,
    compute_acceleration, force_breakdown,
)
from projectile_engine.integrator import clamp_dt, step, simulate


def vacuum(**kwargs):
    params = dict(mass=1.0, gravity=9.81, damping=0.0,
                  initial_position=(0.0, 0.02, 0.0),
                  initial_velocity=(10.0, 10.0, 0.0))
    params.update(kwargs)
    return ProjectileConfig(**params)


class TestConfig:
    """Launch configuration is checked where it enters the system."""

    def test_rejects_non_positive_mass(self):
        with pytest.raises(ValueError):
            ProjectileConfig(mass=0.0)
        with pytest.raises(ValueError):
            ProjectileConfig(mass=-1.0)

    def test_rejects_negative_wind_speed(self):
        with pytest.raises(ValueError):
            ProjectileConfig(wind_speed=-0.5)

    def test_rejects_negative_damping(self):
        with pytest.raises(ValueError):
            ProjectileConfig(damping=-0.1)

    def test_rejects_bad_vectors(self):
        with pytest.raises(ValueError):
            ProjectileConfig(initial_velocity=(1.0, 2.0))
        with pytest.raises(ValueError):
            ProjectileConfig(initial_position=(0.0, float('nan'), 0.0))

    def test_wind_direction_folded_into_circle(self):
        assert ProjectileConfig(wind_direction=370.0).wind_direction == pytest.approx(10.0)
        assert ProjectileConfig(wind_direction=-90.0).wind_direction == pytest.approx(270.0)

    def test_config_is_immutable(self):
        cfg = ProjectileConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.mass = 2.0

    def test_from_launch_velocity(self):
        cfg = ProjectileConfig.from_launch(20.0, 45.0)
        v = np.array(cfg.initial_velocity)
        assert abs(np.linalg.norm(v) - 20.0) < 1e-9
        assert abs(v[1] - 20.0 * np.sin(np.radians(45))) < 1e-9
        assert v[2] == pytest.approx(0.0)
        assert cfg.initial_position == LAUNCH_POSITION

    def test_from_launch_azimuth(self):
        cfg = ProjectileConfig.from_launch(10.0, 0.0, azimuth_deg=90.0)
        assert cfg.initial_velocity[0] == pytest.approx(0.0, abs=1e-12)
        assert cfg.initial_velocity[2] == pytest.approx(10.0)

    @pytest.mark.parametrize('field', ['mass', 'gravity', 'damping', 'wind_speed'])
    @pytest.mark.parametrize('value', [float('inf'), float('nan')])
    def test_rejects_non_finite_scalars(self, field, value):
        with pytest.raises(ValueError):
            ProjectileConfig(**{field: value})
        with pytest.raises(ValueError):
            ProjectileConfig.from_launch(20.0, 45.0, wind_enabled=True, **{field: value})

    def test_settings_require_positive_max_dt(self):
        with pytest.raises(ValueError):
            EngineSettings(max_dt=0.0)
        with pytest.raises(ValueError):
            EngineSettings(max_dt=float('inf'))

    @pytest.mark.parametrize('field', [
        'sample_interval', 'launch_radius', 'launch_ceiling', 'ground_altitude',
        'rest_speed', 'rest_altitude', 'heading_min_speed',
    ])
    def test_settings_reject_negative_thresholds(self, field):
        with pytest.raises(ValueError):
            EngineSettings(**{field: -0.1})
        with pytest.raises(ValueError):
            EngineSettings(**{field: float('nan')})
        assert getattr(EngineSettings(**{field: 0.0}), field) == 0.0


class TestForces:
    """Gravity, linear drag and wind."""

    def test_gravity_points_down(self):
        assert np.array_equal(gravity_acceleration(9.81), [0.0, -9.81, 0.0])

    def test_wind_disabled_is_zero(self):
        cfg = ProjectileConfig(wind_enabled=False, wind_speed=5.0)
        assert np.array_equal(wind_velocity(cfg), np.zeros(3))

    def test_wind_direction_zero_is_plus_x(self):
        cfg = ProjectileConfig(wind_enabled=True, wind_speed=4.0, wind_direction=0.0)
        assert np.allclose(wind_velocity(cfg), [4.0, 0.0, 0.0])

    def test_wind_direction_ninety_is_plus_z(self):
        cfg = ProjectileConfig(wind_enabled=True, wind_speed=4.0, wind_direction=90.0)
        w = wind_velocity(cfg)
        assert np.allclose(w, [0.0, 0.0, 4.0])
        assert w[1] == 0.0

    def test_zero_damping_gives_exactly_zero_drag(self):
        a = drag_acceleration(np.array([123.4, -56.7, 8.9]),
                              np.array([3.0, 0.0, 1.0]), mass=2.0, damping=0.0)
        assert np.array_equal(a, np.zeros(3))

    def test_zero_damping_total_is_pure_gravity(self):
        cfg = vacuum(wind_enabled=True, wind_speed=10.0, wind_direction=45.0)
        acc = compute_acceleration(np.array([7.0, -3.0, 2.0]), cfg)
        assert np.array_equal(acc, [0.0, -9.81, 0.0])

    def test_drag_opposes_relative_velocity(self):
        v = np.array([10.0, 5.0, -2.0])
        w = np.array([2.0, 0.0, 1.0])
        a = drag_acceleration(v, w, mass=2.0, damping=0.5)
        assert np.allclose(a, -(0.5 / 2.0) * (v - w))
        assert np.dot(a, v - w) < 0

    def test_drag_vanishes_when_moving_with_the_wind(self):
        cfg = ProjectileConfig(damping=0.5, wind_enabled=True,
                               wind_speed=3.0, wind_direction=0.0)
        acc = compute_acceleration(np.array([3.0, 0.0, 0.0]), cfg)
        assert np.allclose(acc, [0.0, -cfg.gravity, 0.0])

    def test_force_breakdown(self):
        cfg = ProjectileConfig(mass=2.0, gravity=9.81, damping=0.5)
        forces = force_breakdown(np.array([4.0, 0.0, 0.0]), cfg)
        assert forces['weight_magnitude'] == pytest.approx(19.62)
        assert np.allclose(forces['drag'], [-2.0, 0.0, 0.0])
        assert np.allclose(forces['net'], forces['weight'] + forces['drag'])


class TestIntegrator:
    """Semi-implicit Euler stepping."""

    def test_clamp_dt(self):
        assert clamp_dt(0.016) == 0.016
        assert clamp_dt(0.5) == 0.1
        assert clamp_dt(5.0, max_dt=0.05) == 0.05
        assert clamp_dt(-0.2) == 0.0

    def test_velocity_updated_before_position(self):
        p = np.array([0.0, 10.0, 0.0])
        v = np.array([1.0, 0.0, 0.0])
        a = np.array([0.0, -10.0, 0.0])
        p2, v2 = step(p, v, a, 0.1)
        assert np.allclose(v2, [1.0, -1.0, 0.0])
        # position uses the updated velocity
        assert np.allclose(p2, [0.1, 9.9, 0.0])

    def test_step_does_not_touch_inputs(self):
        p = np.array([0.0, 1.0, 0.0])
        v = np.array([1.0, 1.0, 1.0])
        a = np.array([0.0, -9.81, 0.0])
        step(p, v, a, 0.05)
        assert np.array_equal(p, [0.0, 1.0, 0.0])
        assert np.array_equal(v, [1.0, 1.0, 1.0])

    def test_simulate_rejects_zero_dt(self):
        with pytest.raises(ValueError):
            simulate(vacuum(), dt=0.0)


class TestPhysicalProperties:
    """Long-run behaviour of the integrated equations of motion."""

    def test_free_fall_vertical_velocity(self):
        cfg = vacuum()
        result = simulate(cfg, dt=0.01)
        expected = cfg.initial_velocity[1] - cfg.gravity * result.time
        assert np.allclose(result.vy, expected, atol=1e-9)

    def test_terminal_velocity(self):
        cfg = ProjectileConfig(mass=1.0, gravity=9.81, damping=0.5)
        pos = np.array([0.0, 1e4, 0.0])
        vel = np.zeros(3)
        for _ in range(2000):
            pos, vel = step(pos, vel, compute_acceleration(vel, cfg), 0.05)
        assert vel[1] == pytest.approx(-cfg.mass * cfg.gravity / cfg.damping, abs=1e-6)

    def test_drag_never_adds_horizontal_speed(self):
        cfg = vacuum(damping=0.5)
        result = simulate(cfg, dt=1.0 / 60.0)
        horizontal = np.hypot(result.vx, result.vz)
        assert np.all(np.diff(horizontal) <= 0)
        assert horizontal[-1] < horizontal[0]

    def test_horizontal_velocity_relaxes_to_wind(self):
        cfg = ProjectileConfig(mass=1.0, damping=0.5, wind_enabled=True,
                               wind_speed=3.0, wind_direction=90.0)
        pos = np.array([0.0, 1e4, 0.0])
        vel = np.array([10.0, 0.0, 0.0])
        for _ in range(2000):
            pos, vel = step(pos, vel, compute_acceleration(vel, cfg), 0.05)
        w = wind_velocity(cfg)
        assert vel[0] == pytest.approx(w[0], abs=1e-6)
        assert vel[2] == pytest.approx(w[2], abs=1e-6)


class TestScenarios:
    """Reference flights launched from the pad at (0, 0.02, 0)."""

    def test_vacuum_parabola(self):
        result = simulate(vacuum(), dt=1.0 / 60.0)
        assert result.landed
        assert abs(result.range_total - 20.4) < 0.5
        assert abs(result.flight_time - 2.04) < 0.1
        assert abs(result.max_altitude - 5.12) < 0.15

    def test_vacuum_apex_time(self):
        dt = 1.0 / 60.0
        result = simulate(vacuum(), dt=dt)
        apex = result.time[np.argmax(result.vy <= 0)]
        assert abs(apex - 1.02) < 2 * dt

    def test_drag_shortens_range(self):
        r_vacuum = simulate(vacuum(), dt=1.0 / 60.0)
        r_drag = simulate(vacuum(damping=0.5), dt=1.0 / 60.0)
        assert r_drag.landed
        assert r_drag.range_total < r_vacuum.range_total

    def test_tailwind_extends_range(self):
        base = vacuum(damping=0.5)
        tail = vacuum(damping=0.5, wind_enabled=True, wind_speed=5.0, wind_direction=0.0)
        head = vacuum(damping=0.5, wind_enabled=True, wind_speed=5.0, wind_direction=180.0)
        r_base = simulate(base).range_total
        assert simulate(tail).range_total > r_base > simulate(head).range_total

    def test_crosswind_drifts_sideways(self):
        cfg = vacuum(damping=0.5, wind_enabled=True, wind_speed=5.0, wind_direction=90.0)
        assert simulate(cfg).lateral_drift > 0

    def test_summary_mentions_range(self):
        text = simulate(vacuum()).summary()
        assert 'Range' in text and 'Flight time' in text


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
