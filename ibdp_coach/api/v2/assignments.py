"""作业 CRUD 与状态路由 API。"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ibdp_coach.api.v2.auth import get_current_user
from ibdp_coach.db import get_db
from ibdp_coach.models import Assignment, User
from ibdp_coach.schemas.workflow import (
    AssignmentCreate,
    AssignmentListResponse,
    AssignmentResponse,
    ReviewListResponse,
    RouteResponse,
)
from ibdp_coach.services.assignments import AssignmentService
from ibdp_coach.services.workflow import DASHBOARD_PATH, route_for, stage_for_status

logger = logging.getLogger(__name__)

router = APIRouter()


def get_assignment_service() -> AssignmentService:
    return AssignmentService()


def get_owned_assignment(
    assignment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
) -> Assignment:
    """加载当前用户的作业；不存在或不属于该用户时返回 404。"""
    try:
        return service.get_owned_assignment(db, current_user, assignment_id)
    except LookupError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")


# === API 端点 ===

@router.post("/", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    data: AssignmentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """创建作业：必须接受 No Ghostwriting 条款，自动匹配默认量规。"""
    try:
        return service.create_assignment(db, current_user, data)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/", response_model=AssignmentListResponse)
async def list_assignments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """当前用户的作业列表（最新在前）。"""
    assignments = service.list_assignments(db, current_user)
    return {"assignments": assignments, "total": len(assignments)}


@router.get("/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(assignment: Assignment = Depends(get_owned_assignment)):
    return assignment


@router.get("/{assignment_id}/route", response_model=RouteResponse)
async def route_assignment(
    assignment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """状态路由：根据作业状态返回应跳转的阶段页面。"""
    try:
        assignment = service.get_owned_assignment(db, current_user, assignment_id)
    except LookupError:
        logger.warning("Route lookup failed for assignment %s", assignment_id)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Failed to load assignment", "path": DASHBOARD_PATH},
        )

    return RouteResponse(
        assignment_id=assignment.id,
        status=assignment.status.value,
        stage=stage_for_status(assignment.status).value,
        path=route_for(assignment.id, assignment.status),
    )


@router.get("/{assignment_id}/reviews", response_model=ReviewListResponse)
async def list_reviews(
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """已保存的评价记录（最新在前）。"""
    reviews = service.list_reviews(db, assignment)
    return {"reviews": reviews, "total": len(reviews)}


@router.post("/{assignment_id}/complete", response_model=AssignmentResponse)
async def complete_assignment(
    assignment: Assignment = Depends(get_owned_assignment),
    db: Session = Depends(get_db),
    service: AssignmentService = Depends(get_assignment_service),
):
    """标记作业完成。"""
    service.complete(db, assignment)
    return assignment
