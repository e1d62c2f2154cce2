"""
Force Model
===========
Accelerations acting on a point projectile:
  - Gravity (constant, downward)
  - Linear drag relative to the air mass: F = -b (v - w)

Wind is not a separate force. It shifts the velocity the drag acts
on, so a projectile in steady wind drifts towards the wind velocity.
Everything here is a pure function of its inputs.
"""

from typing import Dict

import numpy as np

from .config import ProjectileConfig


def wind_velocity(config: ProjectileConfig) -> np.ndarray:
    """
    Horizontal wind velocity vector (m/s).

    0° blows towards +x, 90° towards +z. No vertical component.
    """
    if not config.wind_enabled or config.wind_speed == 0:
        return np.zeros(3)
    theta = np.radians(config.wind_direction)
    return np.array([
        np.cos(theta) * config.wind_speed,
        0.0,
        np.sin(theta) * config.wind_speed,
    ])


def gravity_acceleration(gravity: float) -> np.ndarray:
    return np.array([0.0, -gravity, 0.0])


def drag_acceleration(velocity: np.ndarray, wind: np.ndarray,
                      mass: float, damping: float) -> np.ndarray:
    """
    Linear drag acceleration a = -(b/m) (v - w).

    Exactly zero when damping is zero.
    """
    if damping == 0:
        return np.zeros(3)
    v_rel = np.asarray(velocity, dtype=float) - wind
    return -(damping / mass) * v_rel


def compute_acceleration(velocity: np.ndarray,
                         config: ProjectileConfig) -> np.ndarray:
    """
    Total acceleration vector [ax, ay, az] in m/s².

    Parameters
    ----------
    velocity : [vx, vy, vz] in m/s (ground frame)
    config : ProjectileConfig of the projectile
    """
    a_gravity = gravity_acceleration(config.gravity)
    a_drag = drag_acceleration(velocity, wind_velocity(config),
                               config.mass, config.damping)
    return a_gravity + a_drag


def force_breakdown(velocity: np.ndarray,
                    config: ProjectileConfig) -> Dict[str, object]:
    """
    Forces in newtons for a free-body diagram.

    Returns weight and drag vectors together with their magnitudes.
    """
    weight = config.mass * gravity_acceleration(config.gravity)
    drag = config.mass * drag_acceleration(velocity, wind_velocity(config),
                                           config.mass, config.damping)
    return {
        'weight': weight,
        'drag': drag,
        'net': weight + drag,
        'weight_magnitude': float(np.linalg.norm(weight)),
        'drag_magnitude': float(np.linalg.norm(drag)),
    }
