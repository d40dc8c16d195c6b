"""功能开关API：所有登录用户可读，管理员可写。"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ibdp_coach.api.v2.auth import get_current_user, require_admin
from ibdp_coach.db import get_db
from ibdp_coach.models import User
from ibdp_coach.schemas.workflow import FeatureFlagsResponse, FeatureFlagUpdate
from ibdp_coach.services import feature_flags

router = APIRouter()
admin_router = APIRouter()


@router.get("/", response_model=FeatureFlagsResponse)
async def get_feature_flags(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"flags": feature_flags.get_flags(db)}


@admin_router.put("/feature-flags/{key}", response_model=FeatureFlagsResponse)
async def update_feature_flag(
    key: str,
    data: FeatureFlagUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    flag = feature_flags.parse_flag(key)
    if flag is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown feature flag")
    return {"flags": feature_flags.set_flag(db, flag, data.enabled, current_user.id)}


@admin_router.post("/feature-flags/reset", response_model=FeatureFlagsResponse)
async def reset_feature_flags(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """清除所有覆盖值，恢复默认。"""
    return {"flags": feature_flags.reset_flags(db)}
