"""
Simulation Driver
=================
The per-frame tick loop. The driver is the only writer of in-flight
physics state; everything else sees the shared store or read-only
snapshots.

Every tick:
  1. Reconcile with the store: spawn a runtime state for each new
     flying record, tear down local states whose record was removed.
  2. For each active projectile: forces -> integration -> landing
     check -> sampling.
  3. Landed projectiles get a final sample, an impact annotation and a
     ``landed`` status in the store, then leave the active set.

One injected monotonic clock drives both the integration dt and the
sampling throttle.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .config import ProjectileConfig, EngineSettings, DEFAULT_SETTINGS
from .forces import compute_acceleration
from .integrator import clamp_dt, step
from .lifecycle import ImpactRecord, Status, has_landed, heading, make_impact
from .sampler import TrajectorySampler
from .store import ProjectileRecord, SimulationStore

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class RuntimeState:
    """Driver-local mutable state of one projectile in flight."""
    id: str
    config: ProjectileConfig
    position: np.ndarray
    velocity: np.ndarray
    origin: np.ndarray
    last_update: float                      # clock reading of the last step
    elapsed: float = 0.0                    # simulated seconds since launch
    last_sample: Optional[float] = None     # clock reading of the last store sample
    points: List[np.ndarray] = field(default_factory=list)
    heading: Optional[np.ndarray] = None
    status: Status = Status.FLYING
    handle: object = None


@dataclass(frozen=True)
class RuntimeSnapshot:
    id: str
    position: Tuple[float, float, float]
    velocity: Tuple[float, float, float]
    elapsed: float
    heading: Optional[Tuple[float, float, float]]


class ProjectileRenderer:
    """
    Hooks for whatever draws projectiles. The default draws nothing.

    ``spawn`` returns an opaque handle that is passed back to the other
    hooks; ``release`` is called exactly once per spawned handle.
    """

    def spawn(self, state: RuntimeState):
        return None

    def update(self, handle, state: RuntimeState):
        pass

    def impact(self, handle, impact: ImpactRecord):
        pass

    def release(self, handle):
        pass


class ManualClock:
    """Clock that only moves when told to. For offline runs and tests."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def advance(self, dt: float) -> float:
        self.now += dt
        return self.now

    def __call__(self) -> float:
        return self.now


class SimulationDriver:

    def __init__(self, store: SimulationStore, clock: Clock = time.monotonic,
                 settings: EngineSettings = DEFAULT_SETTINGS,
                 renderer: Optional[ProjectileRenderer] = None,
                 sampler: Optional[TrajectorySampler] = None):
        self.store = store
        self.clock = clock
        self.settings = settings
        self.renderer = renderer or ProjectileRenderer()
        self.sampler = sampler or TrajectorySampler(settings.sample_interval)
        self._active: Dict[str, RuntimeState] = {}

    # ── Read surface ──────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._active)

    @property
    def active_ids(self) -> Tuple[str, ...]:
        return tuple(self._active)

    def snapshot(self) -> Tuple[RuntimeSnapshot, ...]:
        return tuple(
            RuntimeSnapshot(
                id=s.id,
                position=tuple(float(c) for c in s.position),
                velocity=tuple(float(c) for c in s.velocity),
                elapsed=s.elapsed,
                heading=None if s.heading is None else tuple(float(c) for c in s.heading),
            )
            for s in self._active.values()
        )

    def local_points(self, projectile_id: str) -> List[np.ndarray]:
        """Copy of the per-frame polyline buffer of an active projectile."""
        state = self._active.get(projectile_id)
        if state is None:
            return []
        return [p.copy() for p in state.points]

    # ── Tick ──────────────────────────────────────────────────────────────

    def tick(self, now: Optional[float] = None) -> List[ImpactRecord]:
        """
        Run one frame. Returns the impacts detected during this frame.
        """
        if now is None:
            now = self.clock()

        self.reconcile(now)

        impacts = []
        for state in list(self._active.values()):
            if self._advance(state, now):
                impacts.append(self._land(state, now))
        return impacts

    def reconcile(self, now: float):
        """Bring the active set in line with the store's records."""
        records = self.store.records()
        known = {r.id for r in records}

        for projectile_id in [pid for pid in self._active if pid not in known]:
            logger.debug("%s removed externally while in flight", projectile_id)
            self._release(self._active.pop(projectile_id))

        # landed records keep their status and ids are never reused,
        # so a finished projectile is never spawned again
        for record in records:
            if record.status == Status.FLYING and record.id not in self._active:
                self._spawn(record, now)

    def _spawn(self, record: ProjectileRecord, now: float):
        config = record.config
        origin = np.array(config.initial_position, dtype=float)
        velocity = np.array(config.initial_velocity, dtype=float)
        state = RuntimeState(
            id=record.id,
            config=config,
            position=origin.copy(),
            velocity=velocity,
            origin=origin,
            last_update=now,
            heading=heading(velocity, self.settings.heading_min_speed),
        )
        state.points.append(state.position.copy())
        state.handle = self.renderer.spawn(state)
        # launch point opens the store log
        self.sampler.sample(state, now, self.store.append_point, final=True)
        self._active[record.id] = state
        logger.debug("spawned %s at %s", record.id, config.initial_position)

    def _advance(self, state: RuntimeState, now: float) -> bool:
        """Integrate one step. Returns True when the projectile has landed."""
        dt = clamp_dt(now - state.last_update, self.settings.max_dt)
        state.last_update = now
        if dt == 0:
            return False

        acc = compute_acceleration(state.velocity, state.config)
        state.position, state.velocity = step(state.position, state.velocity, acc, dt)
        state.elapsed += dt

        direction = heading(state.velocity, self.settings.heading_min_speed)
        if direction is not None:
            state.heading = direction

        state.points.append(state.position.copy())
        self.renderer.update(state.handle, state)

        landed = has_landed(state.position, state.velocity, state.origin, self.settings)
        self.sampler.sample(state, now, self.store.append_point, final=landed)
        return landed

    def _land(self, state: RuntimeState, now: float) -> ImpactRecord:
        impact = make_impact(state.id, state.position, state.velocity,
                             state.origin, state.elapsed)
        state.status = Status.LANDED
        del self._active[state.id]

        if self.store.update_status(state.id, Status.LANDED):
            self.store.record_impact(impact)
        else:
            logger.debug("%s landed after leaving the store", state.id)

        self.renderer.impact(state.handle, impact)
        self.renderer.release(state.handle)
        logger.info("%s landed: range %.3f m after %.2f s",
                    state.id, impact.range, impact.flight_time)
        return impact

    def _release(self, state: RuntimeState):
        self.renderer.release(state.handle)
        state.handle = None


def run_until_landed(driver: SimulationDriver, clock: ManualClock,
                     frame_dt: float = 1.0 / 60.0,
                     max_time: float = 120.0) -> List[ImpactRecord]:
    """
    Tick a driver on a manual clock until nothing is flying.

    Returns every impact seen, in landing order.
    """
    impacts = driver.tick(clock())
    elapsed = 0.0
    while (len(driver) or driver.store.has_flying()) and elapsed < max_time:
        clock.advance(frame_dt)
        elapsed += frame_dt
        impacts.extend(driver.tick(clock()))
    return impacts
