"""
Shared Simulation State
=======================
In-memory state shared between the controls, the simulation driver
and the charts:

  - projectile records  {id, config, status}
  - trajectory logs     id -> [TrajectoryPoint, ...]
  - impact annotations  id -> ImpactRecord

Commands (launch, remove, clear) come from the UI side; status updates,
points and impacts come from the driver. Readers get copies, never the
live containers.
"""

import itertools
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from .config import ProjectileConfig
from .lifecycle import ImpactRecord, Status
from .sampler import TrajectoryPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectileRecord:
    """Externally visible record of one launched projectile."""
    id: str
    config: ProjectileConfig
    status: Status = Status.FLYING


class SimulationStore:
    """Single owner of launch records, trajectory logs and impacts."""

    def __init__(self):
        self._records: Dict[str, ProjectileRecord] = {}
        self._trajectories: Dict[str, List[TrajectoryPoint]] = {}
        self._impacts: Dict[str, ImpactRecord] = {}
        self._counter = itertools.count(1)

    # ── Commands ──────────────────────────────────────────────────────────

    def launch(self, config: ProjectileConfig) -> str:
        """Register a new flying projectile and return its id."""
        if not isinstance(config, ProjectileConfig):
            raise TypeError(f"expected ProjectileConfig, got {type(config).__name__}")
        projectile_id = f"projectile-{next(self._counter)}-{uuid.uuid4().hex[:9]}"
        self._records[projectile_id] = ProjectileRecord(projectile_id, config)
        self._trajectories[projectile_id] = []
        logger.debug("launched %s v0=%s", projectile_id, config.initial_velocity)
        return projectile_id

    def remove(self, projectile_id: str) -> bool:
        """Drop a projectile record. Its trajectory log is kept."""
        removed = self._records.pop(projectile_id, None)
        if removed is not None:
            logger.debug("removed %s (%s)", projectile_id, removed.status.value)
        return removed is not None

    def clear_projectiles(self):
        """Drop every projectile record, keeping the trajectory history."""
        logger.debug("clearing %d projectile records", len(self._records))
        self._records.clear()

    def clear_trajectories(self):
        """Wipe all trajectory logs and their impact annotations."""
        logger.debug("clearing %d trajectory logs", len(self._trajectories))
        self._trajectories.clear()
        self._impacts.clear()

    # ── Driver callbacks ──────────────────────────────────────────────────

    def update_status(self, projectile_id: str, status: Status) -> bool:
        """
        Set a projectile's status. Only flying -> landed is allowed.

        Returns False for an id that is no longer registered.
        """
        status = Status(status)
        record = self._records.get(projectile_id)
        if record is None:
            return False
        if record.status == status:
            return True
        if record.status == Status.LANDED:
            raise ValueError(f"{projectile_id} has landed and cannot be set to {status.value}")
        self._records[projectile_id] = replace(record, status=status)
        logger.debug("%s -> %s", projectile_id, status.value)
        return True

    def append_point(self, projectile_id: str, point: TrajectoryPoint):
        """Append one point to a trajectory log. Time may not go backwards."""
        log = self._trajectories.setdefault(projectile_id, [])
        if log and point.time < log[-1].time:
            raise ValueError(
                f"point at t={point.time} is older than the last point "
                f"of {projectile_id} (t={log[-1].time})"
            )
        log.append(point)

    def record_impact(self, impact: ImpactRecord):
        if impact.projectile_id in self._impacts:
            raise ValueError(f"impact of {impact.projectile_id} is already recorded")
        self._impacts[impact.projectile_id] = impact

    # ── Read surface ──────────────────────────────────────────────────────

    def records(self) -> Tuple[ProjectileRecord, ...]:
        return tuple(self._records.values())

    def get(self, projectile_id: str) -> Optional[ProjectileRecord]:
        return self._records.get(projectile_id)

    def has_flying(self) -> bool:
        """True while any projectile is in the air (UI launch gating)."""
        return any(r.status == Status.FLYING for r in self._records.values())

    def trajectory(self, projectile_id: str) -> List[TrajectoryPoint]:
        return list(self._trajectories.get(projectile_id, ()))

    def trajectories(self) -> Dict[str, List[TrajectoryPoint]]:
        return {pid: list(points) for pid, points in self._trajectories.items()}

    def impact(self, projectile_id: str) -> Optional[ImpactRecord]:
        return self._impacts.get(projectile_id)

    def impacts(self) -> Dict[str, ImpactRecord]:
        return dict(self._impacts)
