"""Shared fixtures for the Pipeline Leak Watch test suite."""

import sys
import os
import pytest
import numpy as np

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models.pipeline import ClusterDef, PipelineEntity


@pytest.fixture
def reference_fleet():
    """The 100-pipeline fleet for seed 42 and the reference clusters."""
    from data.fleet import generate_fleet
    return generate_fleet(42)


@pytest.fixture
def nominal_entity():
    """A pipeline running exactly at the expected 0.05 pressure/flow ratio."""
    return PipelineEntity(
        id=1, name="Test-00", lat=25.0, lon=49.0,
        pressure_bar=50.0, flow_m3h=1000.0, leak_prob=0.1,
    )


@pytest.fixture
def small_clusters():
    """Two tiny clusters far apart from each other."""
    return [
        ClusterDef(name="Alpha", lat=10.0, lon=10.0, radius=0.2, count=4),
        ClusterDef(name="Beta Field", lat=20.0, lon=20.0, radius=0.3, count=3),
    ]


@pytest.fixture
def dense_fleet():
    """Eight pipelines: seven packed near the origin, one far away."""
    fleet = []
    for i in range(7):
        fleet.append(PipelineEntity(
            id=i + 1, name=f"Dense-{i:02d}",
            lat=25.0 + 0.05 * i, lon=49.0,
            pressure_bar=50.0, flow_m3h=1000.0, leak_prob=0.1 * (i % 5),
        ))
    fleet.append(PipelineEntity(
        id=8, name="Remote-00", lat=30.0, lon=40.0,
        pressure_bar=65.0, flow_m3h=700.0, leak_prob=0.6,
    ))
    return fleet


@pytest.fixture
def seeded_rng():
    return np.random.default_rng(42)
