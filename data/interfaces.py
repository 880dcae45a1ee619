"""
Abstract Fleet Provider interface for pluggable data sources.

Allows swapping the simulated fleet for real SCADA feeds without
changing downstream analytics or the dashboard.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from config import DEFAULT_SEED
from models.pipeline import ClusterDef, PipelineEntity

logger = logging.getLogger(__name__)


class FleetProvider(ABC):
    """Abstract base class for fleet sources.

    Entities are frozen dataclasses, so sharing them is safe.  The
    returned lists are fresh copies; callers may reorder or filter them
    without affecting the provider's cache.
    """

    @abstractmethod
    def get_clusters(self) -> List[ClusterDef]:
        """Return the ordered cluster table used to build the fleet."""
        ...

    @abstractmethod
    def get_fleet(self) -> List[PipelineEntity]:
        """Return the fleet in generation order."""
        ...


class SimulatedFleetProvider(FleetProvider):
    """Generates the fleet once from a seed and cluster table.

    Args:
        seed: Integer seed for the sequence generator.
        clusters: Optional cluster table; defaults to the reference clusters.
    """

    def __init__(self, seed: int = DEFAULT_SEED, clusters: Optional[List[ClusterDef]] = None):
        from data.fleet import get_default_clusters
        self.seed = seed
        self._clusters = list(clusters) if clusters is not None else get_default_clusters()
        self._fleet: Optional[List[PipelineEntity]] = None

    def get_clusters(self) -> List[ClusterDef]:
        return list(self._clusters)

    def get_fleet(self) -> List[PipelineEntity]:
        if self._fleet is None:
            from data.fleet import generate_fleet
            self._fleet = generate_fleet(self.seed, self._clusters)
        return list(self._fleet)


class FileClusterProvider(SimulatedFleetProvider):
    """Load the cluster table from a JSON file on disk and simulate from it.

    Args:
        clusters_path: Path to a JSON file with an array of cluster dicts
            (keys: 'name', 'lat', 'lon', 'radius', 'count').
        seed: Integer seed for the sequence generator.

    Raises:
        ValueError: If required keys are missing or data is invalid.
        FileNotFoundError: If the file does not exist.
    """

    _REQUIRED_CLUSTER_KEYS = {"name", "lat", "lon", "radius", "count"}

    def __init__(self, clusters_path: str, seed: int = DEFAULT_SEED):
        super().__init__(seed=seed, clusters=self._load_clusters(clusters_path))

    @classmethod
    def _load_clusters(cls, path: str) -> List[ClusterDef]:
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, list) or len(data) == 0:
            raise ValueError(f"Clusters file must contain a non-empty JSON array: {path}")
        for i, cluster in enumerate(data):
            if not isinstance(cluster, dict):
                raise ValueError(f"Cluster #{i} must be a JSON object in {path}")
            missing = cls._REQUIRED_CLUSTER_KEYS - set(cluster.keys())
            if missing:
                raise ValueError(
                    f"Cluster #{i} missing required keys {missing} in {path}"
                )
        logger.info("Loaded %d clusters from %s", len(data), path)
        return [ClusterDef.from_dict(c) for c in data]
