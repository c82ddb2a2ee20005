"""Progress simulation - the tick engine and its scheduler."""

from opsboard.simulation.engine import (
    ProgressSimulator,
    RandomSource,
    format_duration,
    tick,
)
from opsboard.simulation.loop import SimulationLoop

__all__ = [
    "ProgressSimulator",
    "RandomSource",
    "SimulationLoop",
    "format_duration",
    "tick",
]
