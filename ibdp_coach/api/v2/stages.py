"""作业阶段 API：计划、大纲、草稿，以及挂在作业上的教练与评价。"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ibdp_coach.api.v2.assignments import get_assignment_service, get_owned_assignment
from ibdp_coach.db import get_db
from ibdp_coach.errors import InvalidRequestError
from ibdp_coach.models import Assignment
from ibdp_coach.schemas.ai import CoachingResult
from ibdp_coach.schemas.workflow import (
    AssignmentEvaluationResponse,
    CoachingPrompt,
    DraftPayload,
    DraftResponse,
    EvaluationPrompt,
    OutlineCommandBatch,
    OutlinePayload,
    OutlineResponse,
    PlanPayload,
    PlanResponse,
)
from ibdp_coach.services.ai import GatewayJSONClient, get_ai_client
from ibdp_coach.services.assignments import AssignmentService
from ibdp_coach.services.coaching import coach, parse_coaching_request
from ibdp_coach.services.evaluation import evaluate, parse_evaluation_request
from ibdp_coach.services.outline import load_sections
from ibdp_coach.services.workflow import WorkflowEvent, next_path

logger = logging.getLogger(__name__)

router = APIRouter()


# === 计划 ===

@router.get("/{assignment_id}/plan", response_model=PlanResponse)
async def get_plan(
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    plan = service.get_plan(db, assignment)
    return PlanResponse(
        assignment_id=assignment.id,
        status=assignment.status,
        thesis=plan.thesis if plan else None,
        audience=plan.audience if plan else None,
        constraints=plan.constraints if plan else None,
        questions=list(plan.questions or []) if plan else [],
    )


@router.put("/{assignment_id}/plan", response_model=PlanResponse)
async def save_plan(
    payload: PlanPayload,
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """保存计划并进入大纲阶段。"""
    plan = service.save_plan(db, assignment, payload)
    return PlanResponse(
        assignment_id=assignment.id,
        status=assignment.status,
        thesis=plan.thesis,
        audience=plan.audience,
        constraints=plan.constraints,
        questions=list(plan.questions or []),
        next_path=next_path(assignment.id, WorkflowEvent.PLAN_SAVED),
    )


@router.post("/{assignment_id}/coaching", response_model=CoachingResult)
def coach_assignment(
    prompt: CoachingPrompt,
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
    client: GatewayJSONClient = Depends(get_ai_client),
):
    """针对作业的构思教练，结果记录到 coaching_sessions。

    同步处理函数：网关调用是阻塞的，FastAPI 会放到线程池执行。
    """
    if not prompt.current_idea.strip():
        raise InvalidRequestError("Please describe your idea first")

    request = parse_coaching_request(
        {
            "subject": assignment.subject.value,
            "taskType": assignment.task_type.value,
            "currentIdea": prompt.current_idea,
            "rubric": service.rubric_criteria(db, assignment),
        }
    )
    result = coach(request, client)
    service.record_coaching(db, assignment, prompt.current_idea, result)
    return result


# === 大纲 ===

@router.get("/{assignment_id}/outline", response_model=OutlineResponse)
async def get_outline(
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """已保存的大纲；尚未保存时返回六个默认章节。"""
    return OutlineResponse(
        assignment_id=assignment.id,
        status=assignment.status,
        sections=service.outline_sections(db, assignment),
    )


@router.put("/{assignment_id}/outline", response_model=OutlineResponse)
async def save_outline(
    payload: OutlinePayload,
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    outline = service.save_outline(db, assignment, payload.sections)
    return OutlineResponse(
        assignment_id=assignment.id,
        status=assignment.status,
        sections=load_sections(outline.sections),
        next_path=next_path(assignment.id, WorkflowEvent.OUTLINE_SAVED),
    )


@router.post("/{assignment_id}/outline/commands", response_model=OutlineResponse)
async def apply_outline_commands(
    batch: OutlineCommandBatch,
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """按顺序执行大纲编辑命令并保存，作业状态不变。"""
    outline = service.apply_outline_commands(db, assignment, batch.commands)
    return OutlineResponse(
        assignment_id=assignment.id,
        status=assignment.status,
        sections=load_sections(outline.sections),
    )


# === 草稿 ===

def _draft_response(assignment: Assignment, draft, event=None) -> DraftResponse:
    return DraftResponse(
        assignment_id=assignment.id,
        status=assignment.status,
        content=(draft.content or "") if draft else "",
        citations=list(draft.citations or []) if draft else [],
        word_count=draft.word_count if draft else 0,
        next_path=next_path(assignment.id, event) if event else None,
    )


@router.get("/{assignment_id}/draft", response_model=DraftResponse)
async def get_draft(
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    return _draft_response(assignment, service.get_draft(db, assignment))


@router.put("/{assignment_id}/draft", response_model=DraftResponse)
async def save_draft(
    payload: DraftPayload,
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """保存草稿，重新计算字数。"""
    draft = service.save_draft(db, assignment, payload)
    return _draft_response(assignment, draft, WorkflowEvent.DRAFT_SAVED)


@router.post("/{assignment_id}/evaluation", response_model=AssignmentEvaluationResponse)
def evaluate_assignment(
    prompt: EvaluationPrompt,
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
    client: GatewayJSONClient = Depends(get_ai_client),
):
    """评价草稿；``save=true`` 时保存评价并进入 reviewing。"""
    content = prompt.content
    if content is None:
        draft = service.get_draft(db, assignment)
        content = draft.content if draft else ""
    if not (content or "").strip():
        raise InvalidRequestError("Please write some content first")

    request = parse_evaluation_request(
        {
            "content": content,
            "subject": assignment.subject.value,
            "taskType": assignment.task_type.value,
            "rubric": service.rubric_criteria(db, assignment),
        }
    )
    result = evaluate(request, client)

    review_id = None
    if prompt.save:
        review_id = service.save_review(db, assignment, result).id
    return AssignmentEvaluationResponse(
        evaluation=result, review_id=review_id, status=assignment.status
    )
