"""
Fleet generator for the Pipeline Leak Watch simulator.

Places a deterministic fleet of pipelines around named operational
clusters and scores each one.  Designed to be swapped out for real
SCADA readings later (see data/interfaces.py).
"""

import logging
import math
from typing import Iterable, List, Mapping, Optional, Union

from config import (
    DEFAULT_SEED,
    DEFAULT_CLUSTERS,
    PRESSURE_RANGE_BAR,
    FLOW_RANGE_M3H,
    COORD_DECIMALS,
    READING_DECIMALS,
    LEAK_PROB_DECIMALS,
)
from models.pipeline import ClusterDef, FleetConfigError, PipelineEntity, round_half_up
from models.risk import score_with_noise
from models.sequence import SeededSequence

logger = logging.getLogger(__name__)

ClusterLike = Union[ClusterDef, Mapping]


def get_default_clusters() -> List[ClusterDef]:
    """
    Return the eight reference operational clusters.

    Locations are estimated for demo purposes and do not reflect actual
    infrastructure coordinates.

    Returns:
        List of ClusterDef in generation order (100 pipelines in total).
    """
    return [ClusterDef.from_dict(c) for c in DEFAULT_CLUSTERS]


def _coerce_clusters(clusters: Iterable[ClusterLike]) -> List[ClusterDef]:
    """Validate a cluster table and convert mappings to ClusterDef."""
    table = [c if isinstance(c, ClusterDef) else ClusterDef.from_dict(c) for c in clusters]
    if not table:
        raise FleetConfigError("Cluster table must contain at least one cluster")
    names = [c.name for c in table]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise FleetConfigError(f"Duplicate cluster names: {duplicates}")
    return table


class FleetGenerationSession:
    """State for exactly one fleet generation run.

    Owns the shared sequence and the global id counter.  Draws happen in
    a fixed order per entity (angle, distance, pressure, flow, noise);
    reordering any of them changes every subsequent value.
    """

    def __init__(self, seed: int):
        self.rng = SeededSequence(seed)
        self.next_id = 1

    def draw_entity(self, cluster: ClusterDef, index: int) -> PipelineEntity:
        angle = self.rng.next() * 2 * math.pi
        distance = self.rng.next() * cluster.radius

        # Uniform in radius, not in area: points concentrate near the center
        lat = cluster.lat + distance * math.cos(angle)
        lon = cluster.lon + distance * math.sin(angle)

        pressure_bar = self.rng.range(*PRESSURE_RANGE_BAR)
        flow_m3h = self.rng.range(*FLOW_RANGE_M3H)
        leak_prob = score_with_noise(pressure_bar, flow_m3h, self.rng)

        entity = PipelineEntity(
            id=self.next_id,
            name=f"{cluster.name}-{index:02d}",
            lat=round_half_up(lat, COORD_DECIMALS),
            lon=round_half_up(lon, COORD_DECIMALS),
            pressure_bar=round_half_up(pressure_bar, READING_DECIMALS),
            flow_m3h=round_half_up(flow_m3h, READING_DECIMALS),
            leak_prob=round_half_up(leak_prob, LEAK_PROB_DECIMALS),
        )
        self.next_id += 1
        return entity

    def run(self, clusters: List[ClusterDef]) -> List[PipelineEntity]:
        fleet = []
        for cluster in clusters:
            for index in range(cluster.count):
                fleet.append(self.draw_entity(cluster, index))
            logger.debug("Generated %d pipelines for cluster %s", cluster.count, cluster.name)
        return fleet


def generate_fleet(
    seed: int = DEFAULT_SEED,
    clusters: Optional[Iterable[ClusterLike]] = None,
) -> List[PipelineEntity]:
    """
    Generate a reproducible fleet of pipelines.

    Entities appear in cluster-table order, then index order within each
    cluster.  Ids are global and contiguous from 1.

    Args:
        seed: Integer seed for the sequence generator.
        clusters: Ordered cluster table (ClusterDef or dicts with keys
                  'name', 'lat', 'lon', 'radius', 'count').
                  Defaults to the reference clusters.

    Returns:
        List of PipelineEntity.

    Raises:
        FleetConfigError: If the cluster table is empty or invalid.
        TypeError: If seed is not an integer.
    """
    table = get_default_clusters() if clusters is None else _coerce_clusters(clusters)
    fleet = FleetGenerationSession(seed).run(table)
    logger.info(
        "Generated fleet of %d pipelines across %d clusters (seed=%d)",
        len(fleet), len(table), seed,
    )
    return fleet


def find_entity(fleet: List[PipelineEntity], entity_id: int) -> PipelineEntity:
    """Return the entity with the given id.

    Raises:
        KeyError: If no entity has that id.
    """
    for entity in fleet:
        if entity.id == entity_id:
            return entity
    raise KeyError(f"No pipeline with id {entity_id}")
