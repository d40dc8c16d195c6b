"""API v2 路由包入口。"""

from fastapi import APIRouter

from ibdp_coach.api.v2 import assignments, auth, feature_flags, functions, rubrics, stages

router = APIRouter(prefix="/api/v2")

# 注册子路由
router.include_router(auth.router, prefix="/auth", tags=["认证"])
router.include_router(assignments.router, prefix="/assignments", tags=["作业"])
router.include_router(stages.router, prefix="/assignments", tags=["写作阶段"])
router.include_router(rubrics.router, prefix="/rubrics", tags=["量规"])
router.include_router(functions.router, prefix="/functions", tags=["AI 函数"])
router.include_router(feature_flags.router, prefix="/feature-flags", tags=["功能开关"])
router.include_router(feature_flags.admin_router, prefix="/admin", tags=["管理"])
