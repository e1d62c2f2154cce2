"""
Lifecycle & Impact Detection
============================
A projectile is either ``flying`` or ``landed``; the only transition is
flying -> landed and it happens at most once.

Landing is decided after each integration step:

  1. A projectile still close to its launch point, low, and climbing is
     launching. It cannot land, even though its altitude is near zero.
  2. Otherwise it has landed when it is below the ground threshold, or
     when it has (almost) stopped close to the ground.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .config import EngineSettings, DEFAULT_SETTINGS


class Status(str, Enum):
    FLYING = 'flying'
    LANDED = 'landed'


@dataclass(frozen=True)
class ImpactRecord:
    """Where and when a projectile came down. Written once, never changed."""
    projectile_id: str
    position: Tuple[float, float, float]
    range: float          # horizontal distance from the launch point (m)
    flight_time: float    # s
    impact_speed: float   # m/s


def horizontal_distance(position: np.ndarray, origin: np.ndarray) -> float:
    """Distance between two points projected on the x-z plane."""
    dx = position[0] - origin[0]
    dz = position[2] - origin[2]
    return float(np.hypot(dx, dz))


def is_launching(position: np.ndarray, velocity: np.ndarray,
                 origin: np.ndarray,
                 settings: EngineSettings = DEFAULT_SETTINGS) -> bool:
    return (horizontal_distance(position, origin) < settings.launch_radius
            and position[1] < settings.launch_ceiling
            and velocity[1] > 0)


def has_landed(position: np.ndarray, velocity: np.ndarray,
               origin: np.ndarray,
               settings: EngineSettings = DEFAULT_SETTINGS) -> bool:
    """
    Landing rule evaluated once per tick, after integration.

    Parameters
    ----------
    position, velocity : current kinematic state
    origin : launch position of the projectile
    settings : thresholds (see config.EngineSettings)
    """
    if is_launching(position, velocity, origin, settings):
        return False

    altitude = position[1]
    if altitude < settings.ground_altitude:
        return True

    speed = float(np.linalg.norm(velocity))
    return speed < settings.rest_speed and altitude < settings.rest_altitude


def make_impact(projectile_id: str, position: np.ndarray,
                velocity: np.ndarray, origin: np.ndarray,
                flight_time: float) -> ImpactRecord:
    return ImpactRecord(
        projectile_id=projectile_id,
        position=tuple(float(c) for c in position),
        range=horizontal_distance(position, origin),
        flight_time=float(flight_time),
        impact_speed=float(np.linalg.norm(velocity)),
    )


def heading(velocity: np.ndarray,
            min_speed: float = DEFAULT_SETTINGS.heading_min_speed) -> Optional[np.ndarray]:
    """
    Unit vector along the velocity, or None when too slow to normalise.
    """
    speed = float(np.linalg.norm(velocity))
    if speed <= min_speed:
        return None
    return np.asarray(velocity, dtype=float) / speed
