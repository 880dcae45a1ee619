"""
Cascading Failure Simulation.

Illustrative estimate of what happens when one pipeline fails: nearby
pipelines are selected in planar (lat, lon) degree space, a bounded
random subset is marked as affected, and downtime and cost are scaled
from the size of that subset.

Distance is Euclidean in degrees, not geodesic.  Adequate for a bounded
demo region; not a physical propagation model.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from scipy.spatial.distance import cdist

from config import (
    CASCADE_RADIUS_DEG,
    CASCADE_MIN_AFFECTED,
    CASCADE_MAX_AFFECTED,
    CASCADE_FRACTION,
    CASCADE_BASE_DOWNTIME_H,
    CASCADE_DOWNTIME_SPREAD_H,
    CASCADE_COST_PER_PIPELINE_USD,
    CASCADE_COST_SPREAD_USD,
    CASCADE_CRITICAL_PATH_LENGTH,
    CASCADE_SEED,
)
from data.fleet import find_entity
from models.pipeline import FleetConfigError, PipelineEntity


@dataclass(frozen=True)
class CascadeResult:
    """Outcome of a single cascading-failure simulation."""

    origin_id: int
    affected_ids: Tuple[int, ...] = ()
    cascading_count: int = 0
    downtime_hours: float = 0.0
    cost_usd: float = 0.0
    critical_path_names: Tuple[str, ...] = ()


def find_neighbors(
    fleet: List[PipelineEntity],
    origin: PipelineEntity,
    radius_deg: float = CASCADE_RADIUS_DEG,
) -> List[PipelineEntity]:
    """
    Other pipelines strictly within ``radius_deg`` of the origin.

    Returns:
        Neighbours in fleet order (the origin itself is excluded).
    """
    if radius_deg <= 0:
        raise FleetConfigError(f"radius_deg must be > 0, got {radius_deg}")
    others = [p for p in fleet if p.id != origin.id]
    if not others:
        return []
    coords = np.array([[p.lat, p.lon] for p in others])
    distances = cdist(np.array([[origin.lat, origin.lon]]), coords)[0]
    return [p for p, d in zip(others, distances) if d < radius_deg]


def simulate_cascade(
    fleet: List[PipelineEntity],
    origin_id: int,
    rng: Optional[np.random.Generator] = None,
    radius_deg: float = CASCADE_RADIUS_DEG,
) -> CascadeResult:
    """
    Estimate the cascading impact of a failure at ``origin_id``.

    Model:
        affected  = first k neighbours, k ~ U{2..6}
        cascading = floor(0.6 * |affected|)
        downtime  = 24 + U(0, 1) * 48 hours
        cost      = 180k * |affected| + U(0, 1) * 100k USD

    Args:
        fleet: Pipeline entities (not modified).
        origin_id: Id of the failing pipeline.
        rng: Random generator for the illustrative terms.  A fresh
             generator seeded with CASCADE_SEED is used if omitted.
        radius_deg: Neighbour radius in degrees.

    Returns:
        CascadeResult.

    Raises:
        KeyError: If origin_id is not in the fleet.
    """
    if rng is None:
        rng = np.random.default_rng(CASCADE_SEED)

    origin = find_entity(fleet, origin_id)
    neighbors = find_neighbors(fleet, origin, radius_deg)

    subset_size = int(rng.integers(CASCADE_MIN_AFFECTED, CASCADE_MAX_AFFECTED + 1))
    affected = neighbors[:subset_size]

    downtime = CASCADE_BASE_DOWNTIME_H + rng.random() * CASCADE_DOWNTIME_SPREAD_H
    cost = len(affected) * CASCADE_COST_PER_PIPELINE_USD + rng.random() * CASCADE_COST_SPREAD_USD

    return CascadeResult(
        origin_id=origin.id,
        affected_ids=tuple(p.id for p in affected),
        cascading_count=math.floor(len(affected) * CASCADE_FRACTION),
        downtime_hours=float(downtime),
        cost_usd=float(cost),
        critical_path_names=(origin.name,)
        + tuple(p.name for p in affected[:CASCADE_CRITICAL_PATH_LENGTH]),
    )
