"""Tests for the synthetic trend history."""

from datetime import date, timedelta

import pytest
from analytics.history import generate_history
from models.pipeline import FleetConfigError


END = date(2025, 6, 30)


class TestGenerateHistory:
    def test_length_and_order(self, nominal_entity):
        history = generate_history(nominal_entity, days=30, end_date=END)
        assert len(history) == 31
        assert history[0]["date"] == END - timedelta(days=30)
        assert history[-1]["date"] == END
        dates = [h["date"] for h in history]
        assert dates == sorted(dates)

    def test_deterministic(self, nominal_entity):
        assert generate_history(nominal_entity, end_date=END) == generate_history(
            nominal_entity, end_date=END
        )

    def test_values_near_current_readings(self, nominal_entity):
        for h in generate_history(nominal_entity, end_date=END):
            assert 0.0 <= h["leak_prob_percent"] <= 100.0
            assert abs(h["leak_prob_percent"] - 10.0) <= 10.0 + 1e-9
            assert abs(h["pressure_bar"] - 50.0) <= 5.0 + 0.05
            assert abs(h["flow_m3h"] - 1000.0) <= 100.0 + 0.5

    def test_differs_between_pipelines(self, reference_fleet):
        a = generate_history(reference_fleet[0], end_date=END)
        b = generate_history(reference_fleet[1], end_date=END)
        assert [h["pressure_bar"] for h in a] != [h["pressure_bar"] for h in b]

    def test_zero_days(self, nominal_entity):
        history = generate_history(nominal_entity, days=0, end_date=END)
        assert len(history) == 1
        assert history[0]["date"] == END

    def test_negative_days_rejected(self, nominal_entity):
        with pytest.raises(FleetConfigError):
            generate_history(nominal_entity, days=-1)
