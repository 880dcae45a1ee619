"""Tests for the risk scoring model."""

import numpy as np
import pytest
from models.pipeline import FleetConfigError
from models.risk import (
    abnormality,
    score_pure,
    score_with_noise,
    risk_level,
    recommendation_for,
)
from models.sequence import SeededSequence


class TestAbnormality:
    def test_zero_at_expected_ratio(self):
        assert abnormality(50.0, 1000.0) == 0.0

    def test_symmetric_relative_deviation(self):
        """Ratios 0.06 and 0.04 are both 20% away from 0.05."""
        assert abnormality(60.0, 1000.0) == pytest.approx(0.2)
        assert abnormality(40.0, 1000.0) == pytest.approx(0.2)

    def test_zero_flow_rejected(self):
        with pytest.raises(FleetConfigError):
            abnormality(50.0, 0.0)

    def test_negative_flow_rejected(self):
        with pytest.raises(FleetConfigError):
            abnormality(50.0, -10.0)


class TestScorePure:
    def test_base_risk_at_expected_ratio(self):
        assert score_pure(50.0, 1000.0) == pytest.approx(0.1)

    def test_formula(self):
        """0.1 + 0.2 * 0.3 = 0.16 for a 20% ratio deviation."""
        assert score_pure(60.0, 1000.0) == pytest.approx(0.16)

    def test_clamped_to_one(self):
        assert score_pure(70.0, 100.0) == 1.0

    def test_bounded_over_domain(self):
        pressures = np.linspace(30, 70, 21)
        flows = np.linspace(600, 1400, 21)
        for p in pressures:
            for f in flows:
                assert 0.0 <= score_pure(p, f) <= 1.0

    def test_does_not_need_sequence(self):
        """Repeated calls give identical results (no noise)."""
        assert score_pure(45.0, 800.0) == score_pure(45.0, 800.0)


class TestScoreWithNoise:
    def test_consumes_exactly_one_draw(self):
        seq = SeededSequence(42)
        twin = SeededSequence(42)
        score_with_noise(50.0, 1000.0, seq)
        twin.next()
        assert seq.state == twin.state

    def test_noise_added_before_clamp(self):
        seq = SeededSequence(42)
        twin = SeededSequence(42)
        noise = twin.range(-0.05, 0.05)
        expected = 0.1 + abnormality(55.0, 900.0) * 0.3 + noise
        assert score_with_noise(55.0, 900.0, seq) == pytest.approx(expected)

    def test_noise_within_band(self):
        """Noise should keep the score within +/-0.05 of the pure score."""
        seq = SeededSequence(3)
        for _ in range(200):
            noisy = score_with_noise(50.0, 1000.0, seq)
            assert 0.05 <= noisy < 0.15

    def test_clamped_to_one(self):
        assert score_with_noise(70.0, 100.0, SeededSequence(1)) == 1.0

    def test_zero_flow_rejected(self):
        with pytest.raises(FleetConfigError):
            score_with_noise(50.0, 0.0, SeededSequence(1))


class TestRiskLevel:
    @pytest.mark.parametrize(
        "prob, level",
        [
            (0.0, "Low"),
            (0.1999, "Low"),
            (0.2, "Medium"),
            (0.3499, "Medium"),
            (0.35, "High"),
            (0.4999, "High"),
            (0.5, "Critical"),
            (1.0, "Critical"),
        ],
    )
    def test_band_boundaries(self, prob, level):
        assert risk_level(prob) == level

    def test_each_level_has_recommendation(self):
        for level in ("Low", "Medium", "High", "Critical"):
            assert len(recommendation_for(level)) > 10

    def test_critical_recommends_shutdown(self):
        assert "shutting down" in recommendation_for("Critical")

    def test_unknown_level_rejected(self):
        with pytest.raises(FleetConfigError):
            recommendation_for("Severe")
