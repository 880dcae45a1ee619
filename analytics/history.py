"""
Synthetic 30-day reading history for trend charts.

Each day's values are the pipeline's current readings perturbed by a
deterministic sine-based term keyed on day offset and pipeline id, so a
pipeline always shows the same trend for a fixed end date.
"""

from datetime import date, timedelta
from typing import List, Optional

import numpy as np

from config import (
    HISTORY_DAYS,
    HISTORY_LEAK_VARIANCE,
    HISTORY_PRESSURE_VARIANCE_BAR,
    HISTORY_FLOW_VARIANCE_M3H,
)
from analytics.kpis import sine_fraction
from models.pipeline import FleetConfigError, PipelineEntity, round_half_up

# Offsets separating the pressure and flow perturbation streams
_PRESSURE_OFFSET = 100
_FLOW_OFFSET = 200


def generate_history(
    entity: PipelineEntity,
    days: int = HISTORY_DAYS,
    end_date: Optional[date] = None,
) -> List[dict]:
    """
    Build ``days + 1`` daily points ending at ``end_date`` (inclusive).

    Args:
        entity: Pipeline whose readings anchor the history.
        days: Number of days before end_date to include.
        end_date: Last day of the series.  Defaults to today.

    Returns:
        Oldest-first list of dicts with keys 'date', 'leak_prob_percent',
        'pressure_bar', 'flow_m3h'.
    """
    if days < 0:
        raise FleetConfigError(f"days must be >= 0, got {days}")
    if end_date is None:
        end_date = date.today()

    points = []
    for offset in range(days, -1, -1):
        variance = (sine_fraction(offset + entity.id) - 0.5) * HISTORY_LEAK_VARIANCE
        leak = float(np.clip(entity.leak_prob + variance, 0.0, 1.0))
        pressure = entity.pressure_bar + (
            sine_fraction(offset + _PRESSURE_OFFSET + entity.id) - 0.5
        ) * HISTORY_PRESSURE_VARIANCE_BAR
        flow = entity.flow_m3h + (
            sine_fraction(offset + _FLOW_OFFSET + entity.id) - 0.5
        ) * HISTORY_FLOW_VARIANCE_M3H
        points.append({
            "date": end_date - timedelta(days=offset),
            "leak_prob_percent": round_half_up(leak * 100, 1),
            "pressure_bar": round_half_up(pressure, 1),
            "flow_m3h": round_half_up(flow, 0),
        })
    return points
