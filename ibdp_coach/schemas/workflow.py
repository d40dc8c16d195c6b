"""作业工作流各阶段的请求/响应模型。"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ibdp_coach.models.enums import AssignmentStatus, SubjectType, TaskType
from ibdp_coach.schemas.ai import EvaluationResult


# === 作业 ===

class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    subject: SubjectType
    task_type: TaskType
    deadline: Optional[datetime] = None
    no_ghostwriting_accepted: bool = False


class AssignmentResponse(BaseModel):
    id: int
    title: str
    subject: SubjectType
    task_type: TaskType
    deadline: Optional[datetime]
    status: AssignmentStatus
    user_id: int
    rubric_id: Optional[int]
    no_ghostwriting_accepted: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AssignmentListResponse(BaseModel):
    assignments: List[AssignmentResponse]
    total: int


class RouteResponse(BaseModel):
    """状态路由结果：前端应跳转到的页面。"""

    assignment_id: int
    status: str
    stage: str
    path: str


# === 计划 ===

class PlanPayload(BaseModel):
    thesis: Optional[str] = None
    audience: Optional[str] = None
    constraints: Optional[str] = None
    questions: List[str] = Field(default_factory=list)


class PlanResponse(PlanPayload):
    assignment_id: int
    status: AssignmentStatus
    next_path: Optional[str] = None


class CoachingPrompt(BaseModel):
    current_idea: str = Field(default="", alias="currentIdea")

    model_config = {"populate_by_name": True}


# === 大纲 ===

class OutlineSection(BaseModel):
    id: str
    title: str
    bullets: List[str] = Field(default_factory=list)
    order: int = 0


class OutlinePayload(BaseModel):
    sections: List[OutlineSection]


class OutlineResponse(OutlinePayload):
    assignment_id: int
    status: AssignmentStatus
    next_path: Optional[str] = None


class ReorderSection(BaseModel):
    op: Literal["reorder_section"]
    from_index: int
    to_index: int


class ReorderBullet(BaseModel):
    op: Literal["reorder_bullet"]
    section_index: int
    from_index: int
    to_index: int


class MoveBullet(BaseModel):
    op: Literal["move_bullet"]
    from_section: int
    from_index: int
    to_section: int
    to_index: int


class EditTitle(BaseModel):
    op: Literal["edit_title"]
    section_index: int
    title: str


class EditBullet(BaseModel):
    op: Literal["edit_bullet"]
    section_index: int
    bullet_index: int
    text: str


class AddBullet(BaseModel):
    op: Literal["add_bullet"]
    section_index: int
    text: str = ""


class AddSection(BaseModel):
    op: Literal["add_section"]
    title: str = "New Section"


OutlineCommand = Annotated[
    Union[ReorderSection, ReorderBullet, MoveBullet, EditTitle, EditBullet, AddBullet, AddSection],
    Field(discriminator="op"),
]


class OutlineCommandBatch(BaseModel):
    commands: List[OutlineCommand] = Field(min_length=1)


# === 草稿 ===

class DraftPayload(BaseModel):
    content: str = ""
    citations: List[Dict[str, Any]] = Field(default_factory=list)


class DraftResponse(DraftPayload):
    assignment_id: int
    word_count: int
    status: AssignmentStatus
    next_path: Optional[str] = None


class EvaluationPrompt(BaseModel):
    """为空时评价已保存的草稿正文。"""

    content: Optional[str] = None
    save: bool = False


class AssignmentEvaluationResponse(BaseModel):
    evaluation: EvaluationResult
    review_id: Optional[int] = None
    status: AssignmentStatus


# === 评价记录 ===

class ReviewResponse(BaseModel):
    id: int
    assignment_id: int
    rubric_id: Optional[int]
    scores: Dict[str, Any]
    feedback: Dict[str, Any]
    actions: List[str]
    overall_summary: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    total: int


# === 量规 ===

class RubricCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    subject: SubjectType
    task_type: TaskType
    is_default: bool = False
    criteria: List[Dict[str, Any]] = Field(default_factory=list)


class RubricResponse(BaseModel):
    id: int
    name: str
    subject: SubjectType
    task_type: TaskType
    is_default: bool
    criteria: List[Dict[str, Any]]
    created_by: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True


class RubricListResponse(BaseModel):
    rubrics: List[RubricResponse]
    total: int


# === 功能开关 ===

class FeatureFlagsResponse(BaseModel):
    flags: Dict[str, bool]


class FeatureFlagUpdate(BaseModel):
    enabled: bool
