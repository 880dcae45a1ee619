"""
Regional risk aggregation.

Groups pipelines by operational region and summarises each group
independently.  There is no cross-region normalisation.
"""

from typing import Iterable, List, Optional

from config import DEFAULT_CLUSTERS, CRITICAL_LEAK_PROB
from models.pipeline import FleetConfigError, PipelineEntity, round_half_up


def _short_name(region: str) -> str:
    if not isinstance(region, str) or not region.strip():
        raise FleetConfigError(f"Region name must be a non-empty string, got {region!r}")
    return region.split()[0]


def compute_regional_risk(
    fleet: List[PipelineEntity],
    region_names: Optional[Iterable[str]] = None,
) -> List[dict]:
    """
    Summarise risk per region.

    A pipeline belongs to a region when its name starts with the region's
    short name (first word), so 'Ras Tanura' matches 'Ras Tanura-03'.

    Args:
        fleet: Pipeline entities.
        region_names: Regions to report, in output order.  Defaults to the
                      reference cluster names.

    Returns:
        List of dicts with keys 'region', 'risk_score' (int 0-100, mean
        leak probability x 100), 'pipeline_count', 'critical_count'.
        Empty regions report zeros.

    Raises:
        FleetConfigError: If a region name is blank.
    """
    if region_names is None:
        region_names = [c["name"] for c in DEFAULT_CLUSTERS]

    records = []
    for region in region_names:
        prefix = _short_name(region)
        members = [p for p in fleet if p.name.startswith(prefix)]
        if members:
            avg_risk = sum(p.leak_prob for p in members) / len(members)
        else:
            avg_risk = 0.0
        records.append({
            "region": region,
            "risk_score": int(round_half_up(avg_risk * 100, 0)),
            "pipeline_count": len(members),
            "critical_count": sum(1 for p in members if p.leak_prob > CRITICAL_LEAK_PROB),
        })
    return records


def rank_regions(records: List[dict]) -> List[dict]:
    """Return a new list of regional records, highest risk first."""
    return sorted(records, key=lambda r: r["risk_score"], reverse=True)
