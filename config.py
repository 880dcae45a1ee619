"""
Global configuration and constants for the Pipeline Leak Watch simulator.
"""

import os

# --- Fleet Generation ---
DEFAULT_SEED = 42              # Deterministic seed for a repeatable demo fleet

# Multiplicative-congruential recurrence: state = (state * a + c) mod m
# These exact constants are required for fleets to match across implementations.
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

# Reading domains drawn for every pipeline
PRESSURE_RANGE_BAR = (30.0, 70.0)
FLOW_RANGE_M3H = (600.0, 1400.0)

# Decimal places for stored entity fields
COORD_DECIMALS = 4
READING_DECIMALS = 1
LEAK_PROB_DECIMALS = 3

# Operational clusters (estimated locations, demo purposes only).
# name, center lat/lon (degrees), spread radius (degrees), pipeline count
DEFAULT_CLUSTERS = [
    {"name": "Ghawar",     "lat": 25.5,  "lon": 49.5,  "radius": 1.5, "count": 30},
    {"name": "Abqaiq",     "lat": 25.93, "lon": 49.67, "radius": 0.8, "count": 15},
    {"name": "Ras Tanura", "lat": 26.65, "lon": 50.17, "radius": 0.6, "count": 10},
    {"name": "Safaniya",   "lat": 27.85, "lon": 48.75, "radius": 1.0, "count": 10},
    {"name": "Shaybah",    "lat": 22.5,  "lon": 53.9,  "radius": 1.2, "count": 8},
    {"name": "Khurais",    "lat": 25.0,  "lon": 48.0,  "radius": 1.0, "count": 10},
    {"name": "Yanbu",      "lat": 24.08, "lon": 38.05, "radius": 0.7, "count": 8},
    {"name": "Dhahran",    "lat": 26.27, "lon": 50.15, "radius": 0.5, "count": 9},
]

# --- Risk Scoring ---
# leakProb = clamp(BASE_RISK + abnormality * ABNORMALITY_WEIGHT + noise, 0, 1)
# abnormality = |pressure/flow - EXPECTED_RATIO| / EXPECTED_RATIO
EXPECTED_RATIO = 0.05          # Normal operation: ~50 bar / ~1000 m3/h
BASE_RISK = 0.10               # Baseline probability for any pipeline
ABNORMALITY_WEIGHT = 0.3       # Contribution of ratio deviation
NOISE_RANGE = (-0.05, 0.05)    # One draw per entity at generation time

# Risk bands: (upper bound exclusive, label, recommended action).
# The last band has no upper bound.
RISK_LEVELS = [
    (0.2, "Low", "Conditions remain within safe operational parameters."),
    (0.35, "Medium", "Monitor closely and schedule preventive maintenance."),
    (0.5, "High", "Schedule urgent maintenance within 24 hours."),
    (None, "Critical",
     "Immediate intervention required. Consider shutting down pipeline for inspection."),
]

# --- Dashboard Thresholds ---
DEFAULT_THRESHOLD = 0.5        # leakProb above which a pipeline counts as at risk
CRITICAL_LEAK_PROB = 0.5       # leakProb above which a pipeline is critical

# --- Cascading Failure Simulation ---
CASCADE_RADIUS_DEG = 0.5       # Planar lat/lon distance (~50 km)
CASCADE_MIN_AFFECTED = 2       # Affected subset size is drawn from [min, max]
CASCADE_MAX_AFFECTED = 6
CASCADE_FRACTION = 0.6         # Share of affected pipelines that fail in turn
CASCADE_BASE_DOWNTIME_H = 24.0
CASCADE_DOWNTIME_SPREAD_H = 48.0
CASCADE_COST_PER_PIPELINE_USD = 180_000.0
CASCADE_COST_SPREAD_USD = 100_000.0
CASCADE_CRITICAL_PATH_LENGTH = 3  # Affected pipelines listed after the origin
CASCADE_SEED = 7

# --- Cost Projection ---
REPAIR_BASE_COST_USD = 45_000.0
REPAIR_COST_SPREAD_USD = 30_000.0
SEVERITY_MULTIPLIER_CRITICAL = 1.5
SEVERITY_MULTIPLIER_DEFAULT = 1.2
FAILURE_COST_MULTIPLIER = (3.0, 5.0)  # Failure cost as a multiple of repair cost

# --- Advanced KPIs ---
MTTR_BASE_HOURS = 12.5
MTTR_SPREAD_HOURS = 5.0
COST_PER_AT_RISK_USD = 125_000.0
COST_IMPACT_SPREAD_USD = 50_000.0
INCIDENTS_PER_AT_RISK = 1.5
PREVENTED_FAILURE_FRACTION = 0.15
RESOLUTION_TIME_FRACTION = 0.8  # Average resolution time as a share of MTTR

# --- Trend History ---
HISTORY_DAYS = 30
HISTORY_LEAK_VARIANCE = 0.2
HISTORY_PRESSURE_VARIANCE_BAR = 10.0
HISTORY_FLOW_VARIANCE_M3H = 200.0

# --- Narrative Service ---
NARRATIVE_MODEL = os.environ.get("LEAK_WATCH_MODEL", "gpt-4o-mini")
NARRATIVE_TEMPERATURE = 0.2
FOLLOW_UP_TEMPERATURE = 0.3
NARRATIVE_TIMEOUT_S = 30.0
NARRATIVE_MAX_RETRIES = 2
MAX_RECOMMENDATIONS = 3
MIN_RECOMMENDATION_LENGTH = 10  # Shorter numbered lines are treated as noise

# --- Logging ---
LOG_LEVEL = os.environ.get("LEAK_WATCH_LOG_LEVEL", "INFO")
