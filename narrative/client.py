"""
Narrative service client: LLM integration via the OpenAI chat API.

Sends prompts built in narrative/prompts.py and parses the free-text
answers with narrative/parsing.py.  The simulator core never depends on
this module.
"""

import logging
import os
from typing import Optional

import numpy as np
from openai import OpenAI, OpenAIError

from config import (
    NARRATIVE_MODEL,
    NARRATIVE_TEMPERATURE,
    FOLLOW_UP_TEMPERATURE,
    NARRATIVE_TIMEOUT_S,
    NARRATIVE_MAX_RETRIES,
)
from analytics.costs import project_incident_costs
from models.pipeline import PipelineEntity
from narrative.parsing import Diagnosis, parse_diagnosis, parse_root_cause
from narrative.prompts import diagnosis_messages, root_cause_messages, follow_up_messages

logger = logging.getLogger(__name__)


class NarrativeServiceError(RuntimeError):
    """The completion service is unconfigured or the request failed."""


class NarrativeClient:
    """Thin wrapper around an OpenAI-compatible chat completion client.

    Args:
        api_key: API key; defaults to the OPENAI_API_KEY environment variable.
        model: Chat model name.
        client: Pre-built client object exposing ``chat.completions.create``.
            When given, api_key is not required.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = NARRATIVE_MODEL,
        client=None,
    ):
        self.model = model
        self._api_key = api_key if api_key is not None else os.environ.get("OPENAI_API_KEY", "")
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self._api_key)

    def _get_client(self):
        if self._client is None:
            if not self._api_key:
                raise NarrativeServiceError(
                    "OpenAI API key not configured. Set OPENAI_API_KEY in the environment."
                )
            self._client = OpenAI(
                api_key=self._api_key,
                timeout=NARRATIVE_TIMEOUT_S,
                max_retries=NARRATIVE_MAX_RETRIES,
            )
        return self._client

    def _complete(self, messages, temperature: float) -> str:
        client = self._get_client()
        try:
            completion = client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                messages=messages,
            )
        except OpenAIError as e:
            logger.exception("Completion request failed")
            raise NarrativeServiceError(f"Completion request failed: {e}") from e
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    def diagnose(self, entity: PipelineEntity) -> Diagnosis:
        """Summary plus 2-3 recommendations for one pipeline."""
        text = self._complete(diagnosis_messages(entity.diagnosis_payload()), NARRATIVE_TEMPERATURE)
        return parse_diagnosis(text)

    def root_cause(self, entity: PipelineEntity, rng: Optional[np.random.Generator] = None) -> dict:
        """Root cause, confidence and factor count, with projected costs."""
        text = self._complete(root_cause_messages(entity.diagnosis_payload()), NARRATIVE_TEMPERATURE)
        result = parse_root_cause(text, rng=rng)
        costs = project_incident_costs(entity, rng=rng)
        return {
            "cause": result.cause,
            "confidence": result.confidence,
            "factors": result.factors,
            **costs,
        }

    def follow_up(
        self,
        entity: PipelineEntity,
        question: str,
        previous: Optional[Diagnosis] = None,
    ) -> str:
        """Free-form answer to a question about one pipeline."""
        messages = follow_up_messages(
            entity.diagnosis_payload(),
            question,
            previous_summary=previous.summary if previous else None,
        )
        answer = self._complete(messages, FOLLOW_UP_TEMPERATURE)
        return answer or "Unable to generate answer."
