"""
What-if recomputation of leak risk under a hypothetical reading change.

Results are separate objects; the source entity is never modified.
Uses the noise-free scorer so repeated what-if queries are stable and
do not consume the generation stream.
"""

from dataclasses import dataclass
from typing import Iterable, List

from models.pipeline import FleetConfigError, PipelineEntity
from models.risk import score_pure, risk_level, recommendation_for

ATTRIBUTES = ("pressure", "flow")


@dataclass(frozen=True)
class WhatIfResult:
    """Hypothetical risk for one changed reading."""

    entity_id: int
    attribute: str
    percent_change: float
    new_value: float
    new_leak_prob: float
    risk_level: str
    recommendation: str


def what_if(entity: PipelineEntity, attribute: str, percent_change: float) -> WhatIfResult:
    """
    Recompute leak probability with one reading scaled by ``percent_change``.

    Args:
        entity: Source pipeline.
        attribute: 'pressure' or 'flow'.
        percent_change: Signed percent, e.g. 20 for +20%.

    Returns:
        WhatIfResult with the new value, noise-free leak probability,
        risk level and recommended action.

    Raises:
        FleetConfigError: For an unknown attribute, or a flow change that
                          leaves flow <= 0.
    """
    if attribute not in ATTRIBUTES:
        raise FleetConfigError(
            f"attribute must be one of {ATTRIBUTES}, got {attribute!r}"
        )

    factor = 1 + percent_change / 100
    if attribute == "pressure":
        new_value = entity.pressure_bar * factor
        new_prob = score_pure(new_value, entity.flow_m3h)
    else:
        new_value = entity.flow_m3h * factor
        if new_value <= 0:
            raise FleetConfigError(
                f"Flow change of {percent_change}% leaves non-positive flow"
            )
        new_prob = score_pure(entity.pressure_bar, new_value)

    level = risk_level(new_prob)
    return WhatIfResult(
        entity_id=entity.id,
        attribute=attribute,
        percent_change=percent_change,
        new_value=new_value,
        new_leak_prob=new_prob,
        risk_level=level,
        recommendation=recommendation_for(level),
    )


def what_if_sweep(
    entity: PipelineEntity,
    attribute: str,
    percent_changes: Iterable[float],
) -> List[WhatIfResult]:
    """Evaluate ``what_if`` for each percent change, in order."""
    return [what_if(entity, attribute, pct) for pct in percent_changes]
