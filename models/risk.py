"""
Risk Scoring Model for Pipeline Leak Probability.

Maps a (pressure, flow) reading pair to a bounded leak probability using
a fixed, explainable heuristic:

    abnormality = |pressure/flow - EXPECTED_RATIO| / EXPECTED_RATIO
    leakProb    = clamp(BASE_RISK + abnormality * ABNORMALITY_WEIGHT + noise, 0, 1)

Two entry points are kept separate on purpose.  ``score_with_noise`` is
used during fleet generation and consumes exactly one draw from the
shared sequence.  ``score_pure`` omits the noise term and is used by
what-if recomputation, which must not touch the generation stream.

This is not a physical leak-detection model.
"""

import numpy as np

from config import (
    EXPECTED_RATIO,
    BASE_RISK,
    ABNORMALITY_WEIGHT,
    NOISE_RANGE,
    RISK_LEVELS,
)
from models.pipeline import FleetConfigError
from models.sequence import SeededSequence


def abnormality(pressure_bar: float, flow_m3h: float) -> float:
    """
    Relative deviation of the pressure/flow ratio from the expected ratio.

    Args:
        pressure_bar: Line pressure (bar).
        flow_m3h: Flow rate (m^3/h).  Must be > 0.

    Returns:
        Non-negative abnormality score (0 at the expected ratio).

    Raises:
        FleetConfigError: If flow is zero or negative.
    """
    if flow_m3h <= 0:
        raise FleetConfigError(f"flow_m3h must be > 0, got {flow_m3h}")
    actual_ratio = pressure_bar / flow_m3h
    return abs(actual_ratio - EXPECTED_RATIO) / EXPECTED_RATIO


def score_pure(pressure_bar: float, flow_m3h: float) -> float:
    """Noise-free leak probability in [0, 1]."""
    raw = BASE_RISK + abnormality(pressure_bar, flow_m3h) * ABNORMALITY_WEIGHT
    return float(np.clip(raw, 0.0, 1.0))


def score_with_noise(pressure_bar: float, flow_m3h: float, rng: SeededSequence) -> float:
    """
    Leak probability with one noise draw from the generation stream.

    The noise is added before clamping, so this is not equivalent to
    ``score_pure(...) + noise``.

    Args:
        pressure_bar: Line pressure (bar).
        flow_m3h: Flow rate (m^3/h).  Must be > 0.
        rng: Shared sequence; advanced by exactly one draw.

    Returns:
        Leak probability in [0, 1] (unrounded).
    """
    score = abnormality(pressure_bar, flow_m3h)
    noise = rng.range(*NOISE_RANGE)
    raw = BASE_RISK + score * ABNORMALITY_WEIGHT + noise
    return float(np.clip(raw, 0.0, 1.0))


def risk_level(leak_prob: float) -> str:
    """Map a leak probability to Low / Medium / High / Critical."""
    for upper, label, _ in RISK_LEVELS:
        if upper is None or leak_prob < upper:
            return label
    # RISK_LEVELS always ends with an unbounded band
    raise FleetConfigError("RISK_LEVELS must end with an unbounded band")


def recommendation_for(level: str) -> str:
    """Recommended action text for a risk level label."""
    for _, label, action in RISK_LEVELS:
        if label == level:
            return action
    raise FleetConfigError(f"Unknown risk level: {level}")
