"""
Trajectory Sampler
==================
Feeds the shared trajectory log at a bounded rate. The live engine
ticks at the display refresh rate; analytics only need a point every
``interval`` seconds of clock time. The landing point is always
recorded so that a logged trajectory never stops short of the ground.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from .config import SAMPLE_INTERVAL


@dataclass(frozen=True)
class TrajectoryPoint:
    x: float
    y: float
    z: float
    time: float   # s since launch

    @classmethod
    def from_state(cls, position, elapsed: float) -> 'TrajectoryPoint':
        return cls(float(position[0]), float(position[1]),
                   float(position[2]), float(elapsed))


PointSink = Callable[[str, TrajectoryPoint], None]


class TrajectorySampler:
    """
    Throttled recorder of runtime states.

    ``sample`` reads ``id``, ``position``, ``elapsed`` and
    ``last_sample`` from the state and updates ``last_sample`` when it
    appends.
    """

    def __init__(self, interval: float = SAMPLE_INTERVAL):
        if interval < 0:
            raise ValueError(f"interval must be non-negative, got {interval}")
        self.interval = interval

    def due(self, last_sample: Optional[float], now: float) -> bool:
        return last_sample is None or now - last_sample >= self.interval

    def sample(self, state, now: float, sink: PointSink,
               final: bool = False) -> Optional[TrajectoryPoint]:
        """
        Append a point for ``state`` if the interval has elapsed.

        final=True bypasses the throttle. Returns the appended point,
        or None when throttled.
        """
        if not final and not self.due(state.last_sample, now):
            return None
        point = TrajectoryPoint.from_state(state.position, state.elapsed)
        sink(state.id, point)
        state.last_sample = now
        return point
