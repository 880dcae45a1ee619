"""
Parsing of free-text completion responses.

The completion service returns unstructured text.  These parsers pull
out a summary, numbered recommendations, and CAUSE / CONFIDENCE /
FACTORS tokens, falling back to fixed defaults when the text does not
contain them.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from config import MAX_RECOMMENDATIONS, MIN_RECOMMENDATION_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "Analysis complete. The pipeline metrics have been evaluated."

# Used when no numbered recommendation could be parsed
DEFAULT_RECOMMENDATIONS = [
    "Conduct immediate inspection of pipeline joints, welds, and high-stress areas.",
    "Implement real-time monitoring systems to track pressure and flow anomalies.",
    "Schedule preventive maintenance and leak detection assessment within 48 hours.",
]

# Appended when exactly one recommendation was parsed
SUPPLEMENTARY_RECOMMENDATIONS = [
    "Implement continuous monitoring and establish alert thresholds.",
    "Document current conditions and schedule follow-up inspection.",
]

DEFAULT_ROOT_CAUSE = (
    "Abnormal pressure-to-flow ratio indicating potential blockage or valve malfunction"
)

_NUMBERED = re.compile(r"^\d+\.")
_CAUSE = re.compile(r"CAUSE:\s*(.+?)(?:\n|$)", re.IGNORECASE)
_CONFIDENCE = re.compile(r"CONFIDENCE:\s*(\d+)", re.IGNORECASE)
_FACTORS = re.compile(r"FACTORS:\s*(\d+)", re.IGNORECASE)


@dataclass
class Diagnosis:
    summary: str
    recommendations: List[str] = field(default_factory=list)


@dataclass
class RootCause:
    cause: str
    confidence: int
    factors: int


def clean_markdown(text: str) -> str:
    """Strip bold/heading/emphasis markers."""
    return text.replace("**", "").replace("##", "").replace("*", "").strip()


def parse_diagnosis(text: str) -> Diagnosis:
    """
    Split a diagnosis response into summary and recommendations.

    Lines before the first numbered line form the summary.  A numbered
    line starts a recommendation (kept only if longer than 10 characters
    once the number is removed); later un-numbered lines longer than 10
    characters continue the previous recommendation.  A line mentioning
    'recommended action' switches to recommendation mode without adding
    anything.

    Returns:
        Diagnosis with a non-empty summary and 2-3 recommendations.
    """
    lines = [line.strip() for line in clean_markdown(text).split("\n") if line.strip()]

    summary_lines = []
    recommendations = []
    in_recommendations = False

    for line in lines:
        numbered = bool(_NUMBERED.match(line))
        if numbered or "recommended action" in line.lower():
            in_recommendations = True
            if numbered:
                item = _NUMBERED.sub("", line, count=1).strip()
                if len(item) > MIN_RECOMMENDATION_LENGTH:
                    recommendations.append(item)
        elif not in_recommendations:
            summary_lines.append(line)
        elif len(line) > MIN_RECOMMENDATION_LENGTH and recommendations:
            recommendations[-1] += " " + line

    summary = " ".join(summary_lines).strip() or DEFAULT_SUMMARY

    if not recommendations:
        logger.warning("No recommendations parsed from response; using defaults")
        recommendations = list(DEFAULT_RECOMMENDATIONS)
    elif len(recommendations) == 1:
        recommendations.extend(SUPPLEMENTARY_RECOMMENDATIONS)

    return Diagnosis(summary=summary, recommendations=recommendations[:MAX_RECOMMENDATIONS])


def parse_root_cause(text: str, rng: Optional[np.random.Generator] = None) -> RootCause:
    """
    Extract CAUSE / CONFIDENCE / FACTORS tokens.

    Missing tokens fall back to a fixed cause, a confidence drawn from
    75-94 and a factor count drawn from 2-4.

    Args:
        text: Raw completion text.
        rng: Generator for fallback values; a fresh unseeded one if omitted.
    """
    cause_match = _CAUSE.search(text)
    confidence_match = _CONFIDENCE.search(text)
    factors_match = _FACTORS.search(text)

    if not (cause_match and confidence_match and factors_match):
        logger.warning("Root-cause response missing tokens; filling defaults")
        if rng is None:
            rng = np.random.default_rng()

    cause = cause_match.group(1).strip() if cause_match else ""
    confidence = (
        int(confidence_match.group(1)) if confidence_match else int(rng.integers(75, 95))
    )
    factors = int(factors_match.group(1)) if factors_match else int(rng.integers(2, 5))

    return RootCause(cause=cause or DEFAULT_ROOT_CAUSE, confidence=confidence, factors=factors)
