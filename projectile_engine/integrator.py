"""
Numerical Integration Engine
=============================
Semi-implicit ("symplectic") Euler time stepping:

    v_{n+1} = v_n + a(v_n) * dt
    x_{n+1} = x_n + v_{n+1} * dt

Velocity is advanced first and the *new* velocity moves the position.
This is as cheap as forward Euler but far better behaved at the
modest, variable frame rates the engine runs at.

``step`` is what the live driver calls every frame. ``simulate`` runs a
whole flight at a fixed dt through the same force model and landing
rule, for analysis and validation.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import ProjectileConfig, EngineSettings, DEFAULT_SETTINGS, MAX_DT
from .forces import compute_acceleration
from .lifecycle import has_landed, horizontal_distance


def clamp_dt(dt: float, max_dt: float = MAX_DT) -> float:
    """Clamp a frame delta into [0, max_dt]."""
    if dt <= 0:
        return 0.0
    return min(dt, max_dt)


def step(position: np.ndarray, velocity: np.ndarray,
         acceleration: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Advance one semi-implicit Euler step.

    Returns new (position, velocity) arrays; the inputs are not modified.
    """
    new_velocity = np.asarray(velocity, dtype=float) + np.asarray(acceleration) * dt
    new_position = np.asarray(position, dtype=float) + new_velocity * dt
    return new_position, new_velocity


@dataclass
class TrajectoryResult:
    """Complete fixed-step trajectory output."""
    config: ProjectileConfig
    dt: float
    landed: bool

    # arrays of shape (N,)
    time: np.ndarray
    x: np.ndarray             # downrange
    y: np.ndarray             # altitude
    z: np.ndarray             # crossrange
    vx: np.ndarray
    vy: np.ndarray
    vz: np.ndarray

    @property
    def speed(self) -> np.ndarray:
        return np.sqrt(self.vx**2 + self.vy**2 + self.vz**2)

    @property
    def range_total(self) -> float:
        """Horizontal range from the launch point at the last step (m)."""
        end = (self.x[-1], self.y[-1], self.z[-1])
        return horizontal_distance(end, self.config.initial_position)

    @property
    def max_altitude(self) -> float:
        return float(np.max(self.y))

    @property
    def flight_time(self) -> float:
        return float(self.time[-1])

    @property
    def impact_velocity(self) -> float:
        """Speed at the last step (m/s)."""
        return float(self.speed[-1])

    @property
    def impact_angle_deg(self) -> float:
        """Angle of descent at impact (degrees below horizontal)."""
        v_horiz = np.hypot(self.vx[-1], self.vz[-1])
        return float(np.degrees(np.arctan2(-self.vy[-1], v_horiz)))

    @property
    def lateral_drift(self) -> float:
        """Crossrange displacement at the last step (m)."""
        return float(self.z[-1] - self.config.initial_position[2])

    def summary(self) -> str:
        """Human-readable summary string."""
        c = self.config
        wind = f"{c.wind_speed:.1f} m/s @ {c.wind_direction:.0f}°" if c.wind_enabled else "off"
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY{'':<34s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Mass         : {c.mass:>10.2f} kg{'':<23s} ║",
            f"║  Damping b    : {c.damping:>10.2f} kg/s{'':<21s} ║",
            f"║  Wind         : {wind:<36s} ║",
            f"║  Timestep     : {self.dt:<36.4f} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {self.range_total:>10.2f} m{'':<24s} ║",
            f"║  Max altitude : {self.max_altitude:>10.2f} m{'':<24s} ║",
            f"║  Flight time  : {self.flight_time:>10.2f} s{'':<24s} ║",
            f"║  Impact vel   : {self.impact_velocity:>10.2f} m/s{'':<22s} ║",
            f"║  Impact angle : {self.impact_angle_deg:>10.1f} °{'':<24s} ║",
            f"║  Lateral drift: {self.lateral_drift:>10.2f} m{'':<24s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


def simulate(config: ProjectileConfig, dt: float = 1.0 / 60.0,
             max_time: float = 120.0,
             settings: EngineSettings = DEFAULT_SETTINGS) -> TrajectoryResult:
    """
    Fly one projectile at a fixed timestep until it lands or max_time.

    The step size is clamped exactly as the live driver clamps it.
    """
    dt = clamp_dt(dt, settings.max_dt)
    if dt == 0:
        raise ValueError("dt must be positive")

    origin = np.array(config.initial_position)
    pos = origin.copy()
    vel = np.array(config.initial_velocity)
    t = 0.0
    landed = False

    history = [(t, pos, vel)]

    while t < max_time:
        acc = compute_acceleration(vel, config)
        pos, vel = step(pos, vel, acc, dt)
        t += dt
        history.append((t, pos, vel))

        if has_landed(pos, vel, origin, settings):
            landed = True
            break

    return _build_result(history, config, dt, landed)


def _build_result(history, config, dt, landed):
    """Convert history list to TrajectoryResult."""
    times, positions, velocities = zip(*history)

    positions = np.array(positions)
    velocities = np.array(velocities)

    return TrajectoryResult(
        config=config,
        dt=dt,
        landed=landed,
        time=np.array(times),
        x=positions[:, 0],
        y=positions[:, 1],
        z=positions[:, 2],
        vx=velocities[:, 0],
        vy=velocities[:, 1],
        vz=velocities[:, 2],
    )
