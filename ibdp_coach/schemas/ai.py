"""Wire contracts for the two AI functions (idea coaching and draft evaluation).

Field names on the wire are camelCase to match the existing web client;
Python attributes stay snake_case through aliases.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ibdp_coach.models.enums import ImprovementPriority


RubricPayload = Union[Dict[str, Any], List[Any]]


class CoachingRequest(BaseModel):
    """Validated input of the coaching function."""

    subject: str
    task_type: str = Field(alias="taskType")
    current_idea: Optional[str] = Field(default=None, alias="currentIdea")
    rubric: RubricPayload

    model_config = {"populate_by_name": True}


class CoachingResult(BaseModel):
    """Coaching output: questions, a thesis scaffold and an evidence checklist."""

    questions: List[str] = Field(min_length=3, max_length=3)
    thesis_pattern: str = Field(alias="thesisPattern", min_length=1)
    evidence_checklist: List[str] = Field(alias="evidenceChecklist", min_length=3)

    model_config = {"populate_by_name": True}


class EvaluationRequest(BaseModel):
    """Validated input of the evaluation function."""

    content: str
    subject: str
    task_type: str = Field(alias="taskType")
    rubric: RubricPayload

    model_config = {"populate_by_name": True}


class Improvement(BaseModel):
    """One prioritized improvement tied to a rubric criterion."""

    criterion: str
    issue: str
    suggestion: str
    priority: ImprovementPriority


class EvaluationResult(BaseModel):
    """Evaluation output on the IBDP 1-7 scale."""

    overall_score: float = Field(alias="overallScore", ge=1, le=7)
    strengths: List[str] = Field(min_length=2, max_length=4)
    improvements: List[Improvement] = Field(default_factory=list)
    next_steps: List[str] = Field(alias="nextSteps", min_length=3, max_length=5)

    model_config = {"populate_by_name": True}
