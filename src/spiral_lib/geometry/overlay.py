"""
Cycle overlay — stacks every cycle into the same vertical band so the same
seasonal moment of different cycles lines up.

With overlay on, each point's Y becomes

    progress_within_cycle * cycle_height + cycle_index * cycle_offset

and the points are split into contiguous runs, one per cycle index, so the
renderer can draw each cycle as its own line and slice the color array the
same way.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import TypeVar

from spiral_lib.core.models import PointGroup, PricePoint, SpiralConfig, SpiralPoint
from spiral_lib.geometry.cycles import (
    cycle_index,
    cycle_position,
    days_elapsed,
    resolve_cycle_days,
)

logger = logging.getLogger("spiral.overlay")

DEFAULT_CYCLE_HEIGHT = 2.0
DEFAULT_CYCLE_OFFSET = 0.1

T = TypeVar("T")


def apply_cycle_overlay(
    points: Sequence[SpiralPoint],
    series: Sequence[PricePoint],
    config: SpiralConfig,
    cycle_height: float = DEFAULT_CYCLE_HEIGHT,
    cycle_offset: float = DEFAULT_CYCLE_OFFSET,
) -> list[PointGroup]:
    """Group (and, in overlay mode, re-stack) projected points.

    *points* and *series* are parallel: ``points[i]`` is the projection of
    ``series[i]``. Without overlay the result is a single group holding the
    points unchanged.
    """
    if not points:
        return []

    if not config.cycle_overlay:
        return [PointGroup(cycle_index=0, start=0, points=tuple(points))]

    if len(points) != len(series):
        raise ValueError(
            f"points/series length mismatch: {len(points)} != {len(series)}"
        )

    cycle_days = resolve_cycle_days(config.cycle_duration, config.custom_days)
    base = series[0].timestamp

    groups: list[PointGroup] = []
    run: list[SpiralPoint] = []
    run_cycle = None
    run_start = 0

    for i, (point, source) in enumerate(zip(points, series)):
        days = days_elapsed(source.timestamp, base)
        idx = cycle_index(days, cycle_days)
        y = cycle_position(days, cycle_days) * cycle_height + idx * cycle_offset

        if run_cycle is not None and idx != run_cycle:
            groups.append(PointGroup(cycle_index=run_cycle, start=run_start, points=tuple(run)))
            run = []
            run_start = i
        run_cycle = idx
        run.append(replace(point, y=y))

    groups.append(PointGroup(cycle_index=run_cycle, start=run_start, points=tuple(run)))

    logger.debug("overlay produced %d cycle groups over %d points", len(groups), len(points))
    return groups


def slice_colors(colors: Sequence[T], groups: Sequence[PointGroup]) -> list[list[T]]:
    """Split a per-point array into the same runs as *groups*."""
    return [list(colors[g.start : g.stop]) for g in groups]
