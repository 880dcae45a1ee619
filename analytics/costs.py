"""
Repair and failure cost projection for a single pipeline.
"""

from typing import Dict, Optional

import numpy as np

from config import (
    CRITICAL_LEAK_PROB,
    REPAIR_BASE_COST_USD,
    REPAIR_COST_SPREAD_USD,
    SEVERITY_MULTIPLIER_CRITICAL,
    SEVERITY_MULTIPLIER_DEFAULT,
    FAILURE_COST_MULTIPLIER,
)
from models.pipeline import PipelineEntity, round_half_up


def project_incident_costs(
    entity: PipelineEntity,
    rng: Optional[np.random.Generator] = None,
) -> Dict[str, int]:
    """
    Project planned-repair vs. unplanned-failure cost.

        repair  = (45k + U * 30k) * severity     severity = 1.5 if critical else 1.2
        failure = repair * U(3, 5)

    Args:
        entity: Pipeline to cost.
        rng: Random generator; a fresh unseeded one if omitted.

    Returns:
        Dict with integer 'repair_cost_usd' and 'failure_cost_usd'.
    """
    if rng is None:
        rng = np.random.default_rng()

    severity = (
        SEVERITY_MULTIPLIER_CRITICAL
        if entity.leak_prob > CRITICAL_LEAK_PROB
        else SEVERITY_MULTIPLIER_DEFAULT
    )
    base = REPAIR_BASE_COST_USD + rng.random() * REPAIR_COST_SPREAD_USD
    repair_cost = int(round_half_up(base * severity, 0))

    low, high = FAILURE_COST_MULTIPLIER
    failure_cost = int(round_half_up(repair_cost * rng.uniform(low, high), 0))

    return {"repair_cost_usd": repair_cost, "failure_cost_usd": failure_cost}
