"""
Projectile Motion Engine
========================
Frame-driven simulation of point projectiles for interactive
visualization:
  - Gravity
  - Linear (velocity-proportional) drag
  - Constant horizontal wind acting through the drag term

Semi-implicit Euler integration over clamped, wall-clock time steps,
a flying -> landed lifecycle with launch-suppression, and throttled
sampling of trajectories into a shared store for the charts.
"""

from .config import ProjectileConfig, EngineSettings, DEFAULT_SETTINGS
from .forces import (
    wind_velocity, gravity_acceleration, drag_acceleration,
    compute_acceleration, force_breakdown,
)
from .integrator import clamp_dt, step, simulate, TrajectoryResult
from .lifecycle import (
    Status, ImpactRecord, is_launching, has_landed,
    horizontal_distance, heading,
)
from .sampler import TrajectoryPoint, TrajectorySampler
from .store import SimulationStore, ProjectileRecord
from .driver import (
    SimulationDriver, RuntimeState, RuntimeSnapshot,
    ProjectileRenderer, ManualClock, run_until_landed,
)
from .analysis import max_range, max_height, launch_angle, range_by_angle, optimal_angle
from .validation import (
    analytic_state, impact_time, validate_against_analytic, run_all_validations,
)

__version__ = "1.0.0"
__all__ = [
    'ProjectileConfig', 'EngineSettings', 'DEFAULT_SETTINGS',
    'wind_velocity', 'gravity_acceleration', 'drag_acceleration',
    'compute_acceleration', 'force_breakdown',
    'clamp_dt', 'step', 'simulate', 'TrajectoryResult',
    'Status', 'ImpactRecord', 'is_launching', 'has_landed',
    'horizontal_distance', 'heading',
    'TrajectoryPoint', 'TrajectorySampler',
    'SimulationStore', 'ProjectileRecord',
    'SimulationDriver', 'RuntimeState', 'RuntimeSnapshot',
    'ProjectileRenderer', 'ManualClock', 'run_until_landed',
    'max_range', 'max_height', 'launch_angle', 'range_by_angle', 'optimal_angle',
    'analytic_state', 'impact_time', 'validate_against_analytic', 'run_all_validations',
]
