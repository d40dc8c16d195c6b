"""IBDP 评分量规API。"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ibdp_coach.api.v2.auth import get_current_user, require_admin, require_teacher_or_admin
from ibdp_coach.db import get_db
from ibdp_coach.models import Rubric, SubjectType, TaskType, User
from ibdp_coach.schemas.workflow import RubricCreate, RubricListResponse, RubricResponse
from ibdp_coach.services.rubrics import list_rubrics, seed_preset_rubrics

router = APIRouter()


@router.get("/", response_model=RubricListResponse)
async def get_rubrics(
    subject: Optional[SubjectType] = None,
    task_type: Optional[TaskType] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """获取量规列表，可按学科和任务类型筛选。"""
    rubrics = list_rubrics(db, subject, task_type)
    return {"rubrics": rubrics, "total": len(rubrics)}


@router.get("/{rubric_id}", response_model=RubricResponse)
async def get_rubric(
    rubric_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rubric = db.get(Rubric, rubric_id)
    if not rubric:
        raise HTTPException(status_code=404, detail="Rubric not found")
    return rubric


@router.post("/", response_model=RubricResponse, status_code=201)
async def create_rubric(
    data: RubricCreate,
    current_user: User = Depends(require_teacher_or_admin),
    db: Session = Depends(get_db),
):
    """新建量规（教师或管理员）。"""
    rubric = Rubric(**data.model_dump(), created_by=current_user.id)
    db.add(rubric)
    db.commit()
    db.refresh(rubric)
    return rubric


@router.post("/init")
async def init_rubrics(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """初始化预置量规（仅管理员）。"""
    created = seed_preset_rubrics(db)
    if not created:
        return {"message": "Rubrics already initialized", "count": db.query(Rubric).count()}
    return {"message": "Preset rubrics created", "count": created}
