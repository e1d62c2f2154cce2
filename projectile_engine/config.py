"""
Launch Configuration & Engine Settings
======================================
Immutable launch configuration for one projectile, validated at the
point where a launch command enters the system, plus the named
thresholds the engine uses for time stepping, sampling and impact
detection.

Coordinate system:
  x = downrange (horizontal)
  y = altitude  (vertical, up positive)
  z = crossrange (horizontal)
"""

import math
from dataclasses import dataclass
from typing import Tuple

Vector3 = Tuple[float, float, float]


# ── Launch defaults ───────────────────────────────────────────────────────
DEFAULT_MASS           = 1.0              # kg
DEFAULT_GRAVITY        = 9.81             # m/s²
DEFAULT_DAMPING        = 0.5              # kg/s  linear drag coefficient b
DEFAULT_WIND_SPEED     = 0.5              # m/s
DEFAULT_WIND_DIRECTION = 0.0              # degrees, 0 = blowing towards +x
LAUNCH_POSITION        = (0.0, 0.02, 0.0)  # m  (top of the launch pad)


# ── Engine constants ──────────────────────────────────────────────────────
MAX_DT            = 0.1    # s    integration step ceiling (frame hitches)
SAMPLE_INTERVAL   = 0.1    # s    store sampling throttle
LAUNCH_RADIUS     = 1.0    # m    horizontal distance still counted as "on the pad"
LAUNCH_CEILING    = 2.0    # m    altitude still counted as "on the pad"
GROUND_ALTITUDE   = 0.15   # m    below this a descending projectile has landed
REST_SPEED        = 0.1    # m/s  below this a projectile is at rest
REST_ALTITUDE     = 0.5    # m    ... provided it is also this close to the ground
HEADING_MIN_SPEED = 0.1    # m/s  below this the visual heading is left untouched


def _vector(value, name: str) -> Vector3:
    components = tuple(float(c) for c in value)
    if len(components) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(components)}")
    if not all(math.isfinite(c) for c in components):
        raise ValueError(f"{name} must be finite, got {components}")
    return components


@dataclass(frozen=True)
class ProjectileConfig:
    """
    Static configuration of one launch.

    Values are checked here so that the force model and integrator can
    assume a sane configuration. ``wind_direction`` is folded into
    [0, 360).
    """
    mass: float = DEFAULT_MASS
    gravity: float = DEFAULT_GRAVITY
    damping: float = DEFAULT_DAMPING
    wind_enabled: bool = False
    wind_speed: float = DEFAULT_WIND_SPEED
    wind_direction: float = DEFAULT_WIND_DIRECTION
    initial_position: Vector3 = LAUNCH_POSITION
    initial_velocity: Vector3 = (0.0, 0.0, 0.0)

    def __post_init__(self):
        for name in ('mass', 'gravity', 'damping', 'wind_speed', 'wind_direction'):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite, got {getattr(self, name)}")
        if not self.mass > 0:
            raise ValueError(f"mass must be positive, got {self.mass}")
        if not self.gravity > 0:
            raise ValueError(f"gravity must be positive, got {self.gravity}")
        if not self.damping >= 0:
            raise ValueError(f"damping must be non-negative, got {self.damping}")
        if not self.wind_speed >= 0:
            raise ValueError(f"wind_speed must be non-negative, got {self.wind_speed}")

        # frozen: normalise through object.__setattr__
        object.__setattr__(self, 'wind_direction', float(self.wind_direction) % 360.0)
        object.__setattr__(self, 'wind_enabled', bool(self.wind_enabled))
        object.__setattr__(self, 'initial_position',
                           _vector(self.initial_position, 'initial_position'))
        object.__setattr__(self, 'initial_velocity',
                           _vector(self.initial_velocity, 'initial_velocity'))

    @classmethod
    def from_launch(cls, speed: float, elevation_deg: float,
                    azimuth_deg: float = 0.0,
                    position: Vector3 = LAUNCH_POSITION,
                    **kwargs) -> 'ProjectileConfig':
        """
        Build a configuration from launch speed and angles.

        elevation_deg is measured up from the horizontal, azimuth_deg
        rotates the shot in the horizontal plane (0 = +x).
        """
        if speed < 0:
            raise ValueError(f"launch speed must be non-negative, got {speed}")
        elev = math.radians(elevation_deg)
        azim = math.radians(azimuth_deg)
        velocity = (
            speed * math.cos(elev) * math.cos(azim),
            speed * math.sin(elev),
            speed * math.cos(elev) * math.sin(azim),
        )
        return cls(initial_position=position, initial_velocity=velocity, **kwargs)


@dataclass(frozen=True)
class EngineSettings:
    """Thresholds shared by the integrator, sampler and impact detection."""
    max_dt: float = MAX_DT
    sample_interval: float = SAMPLE_INTERVAL
    launch_radius: float = LAUNCH_RADIUS
    launch_ceiling: float = LAUNCH_CEILING
    ground_altitude: float = GROUND_ALTITUDE
    rest_speed: float = REST_SPEED
    rest_altitude: float = REST_ALTITUDE
    heading_min_speed: float = HEADING_MIN_SPEED

    def __post_init__(self):
        if not self.max_dt > 0:
            raise ValueError(f"max_dt must be positive, got {self.max_dt}")
        if not math.isfinite(self.max_dt):
            raise ValueError(f"max_dt must be finite, got {self.max_dt}")
        for name in ('sample_interval', 'launch_radius', 'launch_ceiling',
                     'ground_altitude', 'rest_speed', 'rest_altitude',
                     'heading_min_speed'):
            value = getattr(self, name)
            if not (math.isfinite(value) and value >= 0):
                raise ValueError(f"{name} must be finite and non-negative, got {value}")


DEFAULT_SETTINGS = EngineSettings()
