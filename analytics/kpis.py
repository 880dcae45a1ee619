"""
Fleet-level KPI summaries.

Pure functions over a fleet snapshot and a risk threshold.
"""

import math
from typing import Dict, List

from config import (
    MTTR_BASE_HOURS,
    MTTR_SPREAD_HOURS,
    COST_PER_AT_RISK_USD,
    COST_IMPACT_SPREAD_USD,
    INCIDENTS_PER_AT_RISK,
    PREVENTED_FAILURE_FRACTION,
    RESOLUTION_TIME_FRACTION,
)
from models.pipeline import FleetConfigError, PipelineEntity, round_half_up


def _check_threshold(threshold: float) -> None:
    if not 0.0 <= threshold <= 1.0:
        raise FleetConfigError(f"threshold must be in [0, 1], got {threshold}")


def sine_fraction(seed: float) -> float:
    """Deterministic pseudo-random value in [0, 1) from ``frac(sin(seed) * 10000)``."""
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def count_at_risk(fleet: List[PipelineEntity], threshold: float) -> int:
    """Number of pipelines whose leak probability strictly exceeds threshold."""
    return sum(1 for p in fleet if p.leak_prob > threshold)


def compute_kpis(fleet: List[PipelineEntity], threshold: float) -> Dict[str, int]:
    """
    Count pipelines above and below the risk threshold.

    Args:
        fleet: Pipeline entities.
        threshold: Leak probability in [0, 1]; strictly greater counts as at risk.

    Returns:
        Dict with keys 'total', 'at_risk', 'normal' (at_risk + normal == total).
    """
    _check_threshold(threshold)
    at_risk = count_at_risk(fleet, threshold)
    return {
        "total": len(fleet),
        "at_risk": at_risk,
        "normal": len(fleet) - at_risk,
    }


def compute_advanced_kpis(fleet: List[PipelineEntity], threshold: float) -> dict:
    """
    Illustrative operations KPIs for the analytics panel.

    Values are derived from the at-risk count plus one deterministic
    pseudo-random term seeded from the fleet size and threshold, so the
    same fleet and threshold always show the same numbers.

    Returns:
        Dict with keys 'mttr_hours', 'failure_rate_pct', 'cost_impact_usd',
        'total_incidents', 'prevented_failures', 'avg_resolution_hours'.
    """
    _check_threshold(threshold)
    total = len(fleet)
    at_risk = count_at_risk(fleet, threshold)
    r = sine_fraction(total + threshold * 100)

    mttr = round_half_up(MTTR_BASE_HOURS + r * MTTR_SPREAD_HOURS, 1)
    failure_rate = round_half_up(at_risk / total * 100, 1) if total else 0.0

    return {
        "mttr_hours": mttr,
        "failure_rate_pct": failure_rate,
        "cost_impact_usd": int(round_half_up(
            at_risk * COST_PER_AT_RISK_USD + r * COST_IMPACT_SPREAD_USD, 0
        )),
        "total_incidents": math.floor(at_risk * INCIDENTS_PER_AT_RISK),
        "prevented_failures": math.floor(total * PREVENTED_FAILURE_FRACTION),
        "avg_resolution_hours": round_half_up(mttr * RESOLUTION_TIME_FRACTION, 1),
    }
