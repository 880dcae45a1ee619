"""
Prompt builders for the narrative-generation service.

Each builder takes the payload produced by
``PipelineEntity.diagnosis_payload()`` and returns chat messages.
"""

from typing import List, Optional


DIAGNOSIS_SYSTEM_PROMPT = (
    "You are a senior pipeline reliability engineer. Provide a concise diagnostic "
    "summary followed by 2-3 specific actionable recommendations. Format your "
    "response as: First, a brief summary paragraph. Then, list each recommendation "
    "starting with a number (1., 2., 3.). Do not use markdown formatting like ** "
    "or ##. Be direct and professional."
)


def _details(payload: dict) -> str:
    return (
        f"- Name: {payload['name']}\n"
        f"- Pressure: {payload['pressure_bar']} bar\n"
        f"- Flow Rate: {payload['flow_m3h']} m³/h\n"
        f"- Leak Probability: {payload['leak_prob'] * 100:.1f}%"
    )


def diagnosis_messages(payload: dict) -> List[dict]:
    user_prompt = (
        "Analyze this pipeline:\n"
        f"- Name: {payload['name']}\n"
        f"- ID: {payload['id']}\n"
        f"- Pressure: {payload['pressure_bar']} bar\n"
        f"- Flow Rate: {payload['flow_m3h']} m³/h\n"
        f"- Calculated Leak Probability: {payload['leak_prob'] * 100:.1f}%\n\n"
        "Provide a concise diagnostic summary and 2-3 specific recommended actions."
    )
    return [
        {"role": "system", "content": DIAGNOSIS_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def root_cause_messages(payload: dict) -> List[dict]:
    system_prompt = (
        "You are a senior pipeline reliability engineer performing root cause analysis.\n\n"
        f"Pipeline Details:\n{_details(payload)}\n\n"
        "Analyze the root cause and provide:\n"
        "1. Primary root cause (one sentence)\n"
        "2. Confidence level (0-100%)\n"
        "3. Number of contributing factors\n\n"
        "Format your response as:\n"
        "CAUSE: [root cause]\n"
        "CONFIDENCE: [number]\n"
        "FACTORS: [number]"
    )
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": "Perform root cause analysis"},
    ]


def follow_up_messages(
    payload: dict,
    question: str,
    previous_summary: Optional[str] = None,
) -> List[dict]:
    """Messages for a free-form follow-up question about one pipeline.

    Raises:
        ValueError: If the question is shorter than 3 characters.
    """
    if len(question.strip()) < 3:
        raise ValueError("Follow-up question must be at least 3 characters")
    system_prompt = (
        "You are a senior pipeline reliability engineer answering follow-up "
        "questions about a specific pipeline.\n\n"
        f"Pipeline Details:\n{_details(payload)}\n\n"
    )
    if previous_summary:
        system_prompt += f"Previous Diagnosis: {previous_summary}\n\n"
    system_prompt += (
        "Provide a clear, concise answer to the user's question. "
        "Be technical but understandable."
    )
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": question},
    ]
