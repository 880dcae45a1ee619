"""Tests for narrative prompts, response parsing and the completion client."""

from types import SimpleNamespace

import numpy as np
import pytest
from openai import OpenAIError

from narrative.client import NarrativeClient, NarrativeServiceError
from narrative.parsing import (
    DEFAULT_RECOMMENDATIONS,
    DEFAULT_ROOT_CAUSE,
    DEFAULT_SUMMARY,
    SUPPLEMENTARY_RECOMMENDATIONS,
    clean_markdown,
    parse_diagnosis,
    parse_root_cause,
)
from narrative.prompts import (
    DIAGNOSIS_SYSTEM_PROMPT,
    diagnosis_messages,
    follow_up_messages,
    root_cause_messages,
)


class _StubCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.content is None:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _stub_client(content=None, error=None):
    completions = _StubCompletions(content=content, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


class TestPrompts:
    def test_diagnosis_messages(self, nominal_entity):
        messages = diagnosis_messages(nominal_entity.diagnosis_payload())
        assert messages[0] == {"role": "system", "content": DIAGNOSIS_SYSTEM_PROMPT}
        user = messages[1]["content"]
        assert "Test-00" in user
        assert "50.0 bar" in user
        assert "10.0%" in user

    def test_root_cause_requests_tokens(self, nominal_entity):
        system = root_cause_messages(nominal_entity.diagnosis_payload())[0]["content"]
        for token in ("CAUSE:", "CONFIDENCE:", "FACTORS:"):
            assert token in system

    def test_follow_up_includes_previous_summary(self, nominal_entity):
        messages = follow_up_messages(
            nominal_entity.diagnosis_payload(), "Why is flow low?", previous_summary="All nominal."
        )
        assert "Previous Diagnosis: All nominal." in messages[0]["content"]
        assert messages[1] == {"role": "user", "content": "Why is flow low?"}

    def test_follow_up_without_summary(self, nominal_entity):
        messages = follow_up_messages(nominal_entity.diagnosis_payload(), "What next?")
        assert "Previous Diagnosis" not in messages[0]["content"]

    def test_follow_up_rejects_short_question(self, nominal_entity):
        with pytest.raises(ValueError):
            follow_up_messages(nominal_entity.diagnosis_payload(), " ? ")


class TestParseDiagnosis:
    def test_summary_and_recommendations(self):
        text = (
            "The line is running above its expected ratio.\n"
            "Pressure is elevated.\n"
            "1. Inspect the valve assembly now.\n"
            "with extra detail on seals\n"
            "2. Short\n"
            "3. Reduce pressure by ten percent"
        )
        result = parse_diagnosis(text)
        assert result.summary == (
            "The line is running above its expected ratio. Pressure is elevated."
        )
        assert result.recommendations == [
            "Inspect the valve assembly now. with extra detail on seals",
            "Reduce pressure by ten percent",
        ]

    def test_markdown_removed(self):
        assert clean_markdown("## **Summary**: *ok*") == "Summary: ok"
        result = parse_diagnosis("**Looks fine.**\n1. **Keep monitoring the line daily**")
        assert result.summary == "Looks fine."
        assert result.recommendations[0] == "Keep monitoring the line daily"

    def test_recommended_action_header_switches_mode(self):
        text = (
            "Summary sentence.\n"
            "Recommended Actions:\n"
            "1. Schedule an ultrasonic inspection\n"
            "2. Verify flow meter calibration"
        )
        result = parse_diagnosis(text)
        assert result.summary == "Summary sentence."
        assert len(result.recommendations) == 2

    def test_no_recommendations_falls_back(self):
        result = parse_diagnosis("Everything looks normal.")
        assert result.summary == "Everything looks normal."
        assert result.recommendations == DEFAULT_RECOMMENDATIONS

    def test_single_recommendation_supplemented(self):
        result = parse_diagnosis("Summary.\n1. Replace the damaged gasket")
        assert result.recommendations == ["Replace the damaged gasket"] + SUPPLEMENTARY_RECOMMENDATIONS

    def test_capped_at_three(self):
        text = "\n".join(f"{i}. Recommendation number {i}" for i in range(1, 6))
        assert len(parse_diagnosis(text).recommendations) == 3

    def test_empty_text(self):
        result = parse_diagnosis("")
        assert result.summary == DEFAULT_SUMMARY
        assert result.recommendations == DEFAULT_RECOMMENDATIONS


class TestParseRootCause:
    def test_all_tokens(self):
        text = "CAUSE: Corroded weld at joint 4\nCONFIDENCE: 88\nFACTORS: 3"
        result = parse_root_cause(text)
        assert result.cause == "Corroded weld at joint 4"
        assert result.confidence == 88
        assert result.factors == 3

    def test_case_insensitive(self):
        result = parse_root_cause("cause: Valve wear\nconfidence: 70\nfactors: 2")
        assert result.cause == "Valve wear"
        assert result.confidence == 70

    def test_defaults(self, seeded_rng):
        result = parse_root_cause("no structure here", rng=seeded_rng)
        assert result.cause == DEFAULT_ROOT_CAUSE
        assert 75 <= result.confidence <= 94
        assert 2 <= result.factors <= 4

    def test_defaults_reproducible(self):
        a = parse_root_cause("", rng=np.random.default_rng(5))
        b = parse_root_cause("", rng=np.random.default_rng(5))
        assert a == b


class TestNarrativeClient:
    def test_unconfigured(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        client = NarrativeClient()
        assert not client.configured

    def test_missing_key_raises(self, monkeypatch, nominal_entity):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(NarrativeServiceError):
            NarrativeClient().diagnose(nominal_entity)

    def test_diagnose(self, nominal_entity):
        stub, completions = _stub_client("Healthy line.\n1. Continue routine monitoring")
        client = NarrativeClient(client=stub, model="test-model")
        assert client.configured
        result = client.diagnose(nominal_entity)
        assert result.summary == "Healthy line."
        assert result.recommendations[0] == "Continue routine monitoring"
        assert completions.calls[0]["model"] == "test-model"
        assert completions.calls[0]["messages"][0]["role"] == "system"

    def test_root_cause_includes_costs(self, nominal_entity, seeded_rng):
        stub, _ = _stub_client("CAUSE: Pump cavitation\nCONFIDENCE: 81\nFACTORS: 2")
        result = NarrativeClient(client=stub).root_cause(nominal_entity, rng=seeded_rng)
        assert result["cause"] == "Pump cavitation"
        assert result["confidence"] == 81
        assert result["repair_cost_usd"] > 0
        assert result["failure_cost_usd"] >= 3 * result["repair_cost_usd"]

    def test_follow_up_empty_answer(self, nominal_entity):
        stub, _ = _stub_client(content=None)
        answer = NarrativeClient(client=stub).follow_up(nominal_entity, "What should we do?")
        assert answer == "Unable to generate answer."

    def test_follow_up_carries_previous_diagnosis(self, nominal_entity):
        stub, completions = _stub_client("Flow is within tolerance.")
        client = NarrativeClient(client=stub)
        previous = client.diagnose(nominal_entity)
        answer = client.follow_up(nominal_entity, "Is the flow normal?", previous=previous)
        assert answer == "Flow is within tolerance."
        messages = completions.calls[-1]["messages"]
        assert f"Previous Diagnosis: {previous.summary}" in messages[0]["content"]
        assert messages[1] == {"role": "user", "content": "Is the flow normal?"}
        assert completions.calls[-1]["temperature"] == 0.3

    def test_follow_up_short_question_not_sent(self, nominal_entity):
        stub, completions = _stub_client("unused")
        with pytest.raises(ValueError):
            NarrativeClient(client=stub).follow_up(nominal_entity, "ok")
        assert completions.calls == []

    def test_service_error_wrapped(self, nominal_entity):
        stub, _ = _stub_client(error=OpenAIError("upstream down"))
        with pytest.raises(NarrativeServiceError, match="upstream down"):
            NarrativeClient(client=stub).diagnose(nominal_entity)
