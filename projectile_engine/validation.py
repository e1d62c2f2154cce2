"""
Validation Against the Closed-Form Solution
===========================================
Linear drag keeps the equations of motion linear, so the flight has an
exact solution. With k = b/m and wind velocity w:

    v_h(t) = w + (v0_h - w) e^{-kt}
    p_h(t) = p0_h + w t + (v0_h - w) (1 - e^{-kt}) / k
    v_y(t) = -g/k + (v0_y + g/k) e^{-kt}
    y(t)   = y0 - (g/k) t + (v0_y + g/k) (1 - e^{-kt}) / k

and the usual vacuum parabola for k = 0. The impact time is the
descending root of y(t) = ground, found with Brent's method.

The engine is run at display frame rate through ``simulate`` and its
range, peak height and flight time are compared with these values.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np
from scipy.optimize import brentq

from .config import ProjectileConfig, EngineSettings, DEFAULT_SETTINGS, GROUND_ALTITUDE
from .forces import wind_velocity
from .integrator import simulate

logger = logging.getLogger(__name__)


def analytic_state(config: ProjectileConfig, t: float):
    """Exact (position, velocity) at time t under linear drag."""
    g = config.gravity
    k = config.damping / config.mass
    p0 = np.array(config.initial_position)
    v0 = np.array(config.initial_velocity)

    if k == 0:
        gvec = np.array([0.0, -g, 0.0])
        return p0 + v0 * t + 0.5 * gvec * t**2, v0 + gvec * t

    w = wind_velocity(config)
    # the steady state the velocity relaxes to: wind horizontally, terminal vertically
    v_inf = np.array([w[0], -g / k, w[2]])
    decay = np.exp(-k * t)
    velocity = v_inf + (v0 - v_inf) * decay
    position = p0 + v_inf * t + (v0 - v_inf) * (1.0 - decay) / k
    return position, velocity


def apex_time(config: ProjectileConfig) -> float:
    """Time at which the vertical velocity crosses zero (0 if never climbing)."""
    v0y = config.initial_velocity[1]
    if v0y <= 0:
        return 0.0
    g = config.gravity
    k = config.damping / config.mass
    if k == 0:
        return v0y / g
    return float(np.log(1.0 + k * v0y / g) / k)


def impact_time(config: ProjectileConfig, ground: float = GROUND_ALTITUDE) -> float:
    """
    Time at which the descending flight crosses ``ground``.

    Raises ValueError if the flight never gets above ``ground``.
    """
    def height(t):
        return analytic_state(config, t)[0][1] - ground

    t_lo = apex_time(config)
    if height(t_lo) < 0:
        if t_lo == 0.0:
            return 0.0
        raise ValueError("trajectory never rises above the ground level")

    t_hi = t_lo + 1.0
    while height(t_hi) > 0:
        t_hi *= 2.0
        if t_hi > 1e6:
            raise ValueError("trajectory does not come back down")
    return float(brentq(height, t_lo, t_hi, xtol=1e-10))


@dataclass
class ValidationResult:
    """Result of one engine-vs-exact comparison."""
    elevation_deg: float
    ref_range: float
    sim_range: float
    range_error_pct: float
    ref_max_alt: float
    sim_max_alt: float
    alt_error_pct: float
    ref_tof: float
    sim_tof: float
    tof_error_pct: float


def _pct(sim, ref):
    return 100.0 * (sim - ref) / ref if ref else 0.0


def validate_against_analytic(speed: float = 20.0,
                              elevations: Sequence[float] = (15, 30, 45, 60, 75),
                              dt: float = 1.0 / 60.0,
                              settings: EngineSettings = DEFAULT_SETTINGS,
                              verbose: bool = True,
                              **config_kwargs) -> List[ValidationResult]:
    """
    Fly the engine at each elevation and compare with the exact solution.

    Extra keyword arguments go to ProjectileConfig.from_launch.
    """
    results = []

    if verbose:
        label = ", ".join(f"{k}={v}" for k, v in config_kwargs.items()) or "defaults"
        print(f"\n{'='*75}")
        print(f"  VALIDATION: engine vs closed form  ({speed} m/s, {label})")
        print(f"  Timestep: {dt:.4f} s")
        print(f"{'='*75}")
        print(f"{'Elev°':>6} {'Ref R (m)':>10} {'Sim R (m)':>10} {'Err %':>7} "
              f"{'Ref Alt':>9} {'Sim Alt':>9} {'Err %':>7} "
              f"{'Ref ToF':>8} {'Sim ToF':>8} {'Err %':>7}")
        print("-" * 75)

    for elev in elevations:
        config = ProjectileConfig.from_launch(speed, elev, **config_kwargs)
        traj = simulate(config, dt=dt, settings=settings)

        t_ref = impact_time(config, settings.ground_altitude)
        p_ref, _ = analytic_state(config, t_ref)
        p_apex, _ = analytic_state(config, apex_time(config))
        ref_range = float(np.hypot(p_ref[0] - config.initial_position[0],
                                   p_ref[2] - config.initial_position[2]))
        ref_alt = float(p_apex[1])

        vr = ValidationResult(
            elevation_deg=float(elev),
            ref_range=ref_range,
            sim_range=traj.range_total,
            range_error_pct=_pct(traj.range_total, ref_range),
            ref_max_alt=ref_alt,
            sim_max_alt=traj.max_altitude,
            alt_error_pct=_pct(traj.max_altitude, ref_alt),
            ref_tof=t_ref,
            sim_tof=traj.flight_time,
            tof_error_pct=_pct(traj.flight_time, t_ref),
        )
        results.append(vr)
        logger.debug("elevation %.0f°: range error %+.2f%%", elev, vr.range_error_pct)

        if verbose:
            print(f"{elev:>6.0f} {ref_range:>10.2f} {traj.range_total:>10.2f} "
                  f"{vr.range_error_pct:>+7.2f} "
                  f"{ref_alt:>9.2f} {traj.max_altitude:>9.2f} {vr.alt_error_pct:>+7.2f} "
                  f"{t_ref:>8.2f} {traj.flight_time:>8.2f} {vr.tof_error_pct:>+7.2f}")

    if verbose:
        avg_range_err = np.mean([abs(r.range_error_pct) for r in results])
        avg_alt_err = np.mean([abs(r.alt_error_pct) for r in results])
        avg_tof_err = np.mean([abs(r.tof_error_pct) for r in results])
        print("-" * 75)
        print(f"  Mean absolute errors | Range: {avg_range_err:.2f}% | "
              f"Altitude: {avg_alt_err:.2f}% | Time: {avg_tof_err:.2f}%")
        status = "✓ PASS" if avg_range_err < 5 else "✗ CHECK TIMESTEP"
        print(f"  Status: {status}")
        print(f"{'='*75}\n")

    return results


VALIDATION_CASES = {
    'vacuum': {'damping': 0.0},
    'linear drag': {'damping': 0.5},
    'drag + tailwind': {'damping': 0.5, 'wind_enabled': True,
                        'wind_speed': 3.0, 'wind_direction': 0.0},
}


def run_all_validations(verbose: bool = True) -> Dict[str, List[ValidationResult]]:
    """Run the comparison for every case in VALIDATION_CASES."""
    return {
        name: validate_against_analytic(verbose=verbose, **kwargs)
        for name, kwargs in VALIDATION_CASES.items()
    }
