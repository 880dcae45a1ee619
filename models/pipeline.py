"""
Pipeline fleet data model.

Defines the static cluster configuration used to seed placement and the
immutable pipeline entity produced by fleet generation.
"""

import math
from dataclasses import dataclass, asdict
from typing import Mapping


class FleetConfigError(ValueError):
    """Invalid simulator input: cluster table, threshold, or reading."""


def round_half_up(value: float, digits: int) -> float:
    """Round to ``digits`` decimals with halves rounded towards +inf.

    Python's built-in ``round`` uses banker's rounding, which would make
    stored fields differ from the reference fleet at exact halves.
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


@dataclass(frozen=True)
class ClusterDef:
    """A named geographic grouping used to place and name pipelines.

    Args:
        name: Cluster name, also the prefix of every pipeline name.
        lat: Center latitude (degrees).
        lon: Center longitude (degrees).
        radius: Spread radius (degrees).  Must be > 0.
        count: Number of pipelines in the cluster.  Must be > 0.
    """

    name: str
    lat: float
    lon: float
    radius: float
    count: int

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise FleetConfigError("Cluster name must be a non-empty string")
        if self.radius <= 0:
            raise FleetConfigError(
                f"Cluster '{self.name}' radius must be > 0, got {self.radius}"
            )
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise FleetConfigError(
                f"Cluster '{self.name}' count must be an integer, got {self.count!r}"
            )
        if self.count <= 0:
            raise FleetConfigError(
                f"Cluster '{self.name}' count must be > 0, got {self.count}"
            )

    @property
    def short_name(self) -> str:
        """First word of the name, e.g. 'Ras' for 'Ras Tanura'."""
        return self.name.split()[0]

    @classmethod
    def from_dict(cls, data: Mapping) -> "ClusterDef":
        missing = {"name", "lat", "lon", "radius", "count"} - set(data.keys())
        if missing:
            raise FleetConfigError(f"Cluster definition missing keys {sorted(missing)}")
        return cls(
            name=data["name"],
            lat=float(data["lat"]),
            lon=float(data["lon"]),
            radius=float(data["radius"]),
            count=data["count"],
        )


@dataclass(frozen=True)
class PipelineEntity:
    """A single simulated pipeline.

    Entities are never mutated after generation.  What-if and cascade
    analyses produce separate result objects instead.

    Args:
        id: Unique, contiguous id starting at 1 in generation order.
        name: ``"{cluster}-{index:02d}"``.
        lat, lon: Position in degrees (4 decimals).
        pressure_bar: Line pressure in bar (1 decimal).
        flow_m3h: Flow rate in m^3/h (1 decimal).
        leak_prob: Heuristic leak probability in [0, 1] (3 decimals).
    """

    id: int
    name: str
    lat: float
    lon: float
    pressure_bar: float
    flow_m3h: float
    leak_prob: float

    def __post_init__(self):
        if not 0.0 <= self.leak_prob <= 1.0:
            raise FleetConfigError(
                f"leak_prob must be in [0, 1], got {self.leak_prob} for {self.name}"
            )
        if self.flow_m3h <= 0:
            raise FleetConfigError(
                f"flow_m3h must be > 0, got {self.flow_m3h} for {self.name}"
            )

    @property
    def leak_prob_percent(self) -> float:
        return round_half_up(self.leak_prob * 100, 1)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping) -> "PipelineEntity":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            lat=float(data["lat"]),
            lon=float(data["lon"]),
            pressure_bar=float(data["pressure_bar"]),
            flow_m3h=float(data["flow_m3h"]),
            leak_prob=float(data["leak_prob"]),
        )

    def diagnosis_payload(self) -> dict:
        """Payload handed to the narrative-generation boundary."""
        return {
            "id": self.id,
            "name": self.name,
            "pressure_bar": self.pressure_bar,
            "flow_m3h": self.flow_m3h,
            "leak_prob": self.leak_prob,
        }
