"""草稿评价：按 IBDP 量规给出 1-7 分、优点、改进项与下一步。"""

from __future__ import annotations

import json
import logging
from typing import Any

from ibdp_coach.errors import InvalidRequestError
from ibdp_coach.schemas.ai import EvaluationRequest, EvaluationResult
from ibdp_coach.services.ai import GatewayJSONClient
from ibdp_coach.services.coaching import is_valid_label, is_valid_rubric

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 50000

EVALUATION_SYSTEM_PROMPT = """You are an IBDP writing evaluator. Evaluate student drafts against IBDP criteria.

STRICT RULES:
- Never rewrite content for the student
- Provide specific, actionable feedback tied to rubric criteria
- Identify strengths and areas for improvement
- Focus on: thesis clarity, evidence quality, analysis depth, structure, academic voice
- Suggest next steps without doing the work for them

Return your evaluation as JSON with this structure:
{
  "overallScore": "A number 1-7 indicating IBDP level",
  "strengths": ["strength 1", "strength 2", "strength 3"],
  "improvements": [
    {
      "criterion": "criterion name",
      "issue": "what needs improvement",
      "suggestion": "how to improve it (coaching, not rewriting)",
      "priority": "high|medium|low"
    }
  ],
  "nextSteps": ["actionable step 1", "actionable step 2", "actionable step 3"]
}"""

EVALUATION_TOOL = {
    "type": "function",
    "function": {
        "name": "evaluate_draft",
        "description": "Evaluate an IBDP student draft and return structured feedback.",
        "parameters": {
            "type": "object",
            "properties": {
                "overallScore": {"type": "number", "minimum": 1, "maximum": 7},
                "strengths": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 2,
                    "maxItems": 4,
                },
                "improvements": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "criterion": {"type": "string"},
                            "issue": {"type": "string"},
                            "suggestion": {"type": "string"},
                            "priority": {"type": "string", "enum": ["high", "medium", "low"]},
                        },
                        "required": ["criterion", "issue", "suggestion", "priority"],
                        "additionalProperties": False,
                    },
                },
                "nextSteps": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 3,
                    "maxItems": 5,
                },
            },
            "required": ["overallScore", "strengths", "improvements", "nextSteps"],
            "additionalProperties": False,
        },
    },
}


def parse_evaluation_request(body: Any) -> EvaluationRequest:
    if not isinstance(body, dict):
        raise InvalidRequestError("Invalid request body")
    content = body.get("content")
    if not isinstance(content, str) or not content or len(content) > MAX_CONTENT_LENGTH:
        raise InvalidRequestError("Invalid or too long content (max 50000 characters)")
    if not is_valid_label(body.get("subject")):
        raise InvalidRequestError("Invalid subject")
    if not is_valid_label(body.get("taskType")):
        raise InvalidRequestError("Invalid task type")
    if not is_valid_rubric(body.get("rubric")):
        raise InvalidRequestError("Invalid rubric")

    return EvaluationRequest(
        content=content,
        subject=body["subject"],
        task_type=body["taskType"],
        rubric=body["rubric"],
    )


def build_evaluation_prompt(request: EvaluationRequest) -> str:
    return f"""Subject: {request.subject}
Task Type: {request.task_type}
Rubric Criteria: {json.dumps(request.rubric, ensure_ascii=False)}

Student Draft:
{request.content}

Evaluate this draft against IBDP standards. Provide constructive coaching feedback."""


def evaluate(request: EvaluationRequest, client: GatewayJSONClient) -> EvaluationResult:
    logger.info(
        "Evaluation request: subject=%s task_type=%s chars=%d",
        request.subject,
        request.task_type,
        len(request.content),
    )
    return client.structured_predict(
        EvaluationResult,
        EVALUATION_TOOL,
        EVALUATION_SYSTEM_PROMPT,
        build_evaluation_prompt(request),
    )
