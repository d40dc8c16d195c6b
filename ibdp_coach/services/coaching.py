"""构思教练：校验输入、构造提示词、调用网关工具并返回结构化建议。"""

from __future__ import annotations

import json
import logging
from typing import Any

from ibdp_coach.errors import InvalidRequestError
from ibdp_coach.schemas.ai import CoachingRequest, CoachingResult
from ibdp_coach.services.ai import GatewayJSONClient

logger = logging.getLogger(__name__)

MAX_FIELD_LENGTH = 100
MAX_IDEA_LENGTH = 5000

COACHING_SYSTEM_PROMPT = """You are an IBDP writing coach. Your job is to COACH, not write.

Strict rules:
- Never write full paragraphs or full answers for the student.
- Use targeted questions, sentence starters, structure suggestions, and checklists.
- Align feedback to the provided rubric (criteria, descriptors, weightings).
- Provide evidence- and reasoning-focused guidance: thesis clarity, line of inquiry, structure, analysis vs. description, counterargument, academic integrity.
- When asked to "write it," refuse and restate policy; offer a scaffold or example pattern using placeholders.
- Keep feedback concise, prioritized (top 3 issues first), and actionable.
- Never fabricate sources or quotes. Do not fetch sources. Only suggest how to strengthen evidence."""

COACHING_TOOL = {
    "type": "function",
    "function": {
        "name": "provide_coaching",
        "description": "Provide coaching guidance for the student's idea",
        "parameters": {
            "type": "object",
            "properties": {
                "questions": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 3,
                    "maxItems": 3,
                    "description": "3 clarifying questions",
                },
                "thesisPattern": {
                    "type": "string",
                    "description": "A pattern/scaffold for a thesis statement with placeholders",
                },
                "evidenceChecklist": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 3,
                    "description": "Types of evidence needed (not specific sources)",
                },
            },
            "required": ["questions", "thesisPattern", "evidenceChecklist"],
            "additionalProperties": False,
        },
    },
}


def is_valid_label(value: Any) -> bool:
    return isinstance(value, str) and bool(value) and len(value) <= MAX_FIELD_LENGTH


def is_valid_rubric(value: Any) -> bool:
    return isinstance(value, (dict, list))


def parse_coaching_request(body: Any) -> CoachingRequest:
    """按固定顺序校验请求体，第一处不合法即抛出 ``InvalidRequestError``。"""

    if not isinstance(body, dict):
        raise InvalidRequestError("Invalid request body")
    if not is_valid_label(body.get("subject")):
        raise InvalidRequestError("Invalid subject")
    if not is_valid_label(body.get("taskType")):
        raise InvalidRequestError("Invalid task type")
    current_idea = body.get("currentIdea")
    if current_idea and (not isinstance(current_idea, str) or len(current_idea) > MAX_IDEA_LENGTH):
        raise InvalidRequestError("Current idea too long (max 5000 characters)")
    if not is_valid_rubric(body.get("rubric")):
        raise InvalidRequestError("Invalid rubric")

    return CoachingRequest(
        subject=body["subject"],
        task_type=body["taskType"],
        current_idea=current_idea or None,
        rubric=body["rubric"],
    )


def build_coaching_prompt(request: CoachingRequest) -> str:
    return f"""Context:
Subject: {request.subject}
Task Type: {request.task_type}
Student's current idea: {request.current_idea or "Just starting"}
Rubric: {json.dumps(request.rubric, indent=2, ensure_ascii=False)}

Coach the student with:
1. 3 clarifying questions to help them develop their thesis/research question
2. A one-sentence working thesis pattern with placeholders (NOT the actual thesis)
3. A checklist of what evidence/analysis would be needed (no specific sources)

Keep your response focused and actionable. Format as JSON with keys: questions (array), thesisPattern (string), evidenceChecklist (array)."""


def coach(request: CoachingRequest, client: GatewayJSONClient) -> CoachingResult:
    logger.info("Coaching request: subject=%s task_type=%s", request.subject, request.task_type)
    return client.structured_predict(
        CoachingResult,
        COACHING_TOOL,
        COACHING_SYSTEM_PROMPT,
        build_coaching_prompt(request),
    )
