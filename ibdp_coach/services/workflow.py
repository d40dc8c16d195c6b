"""作业状态机与状态路由。

状态只由显式的保存事件推进，每个事件直接写入其目标状态；
路由规则把任意状态映射到前端的阶段页面，未知状态回落到计划页。
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from ibdp_coach.config import Settings, get_settings
from ibdp_coach.models.enums import AssignmentStatus

logger = logging.getLogger(__name__)


class WorkflowEvent(str, enum.Enum):
    """触发状态变化的用户动作。"""

    CREATED = "created"
    PLAN_SAVED = "plan_saved"
    OUTLINE_SAVED = "outline_saved"
    DRAFT_SAVED = "draft_saved"
    REVIEW_SAVED = "review_saved"
    COMPLETED = "completed"


class Stage(str, enum.Enum):
    """前端阶段页面。"""

    PLAN = "plan"
    OUTLINE = "outline"
    DRAFT = "draft"


_EVENT_TARGETS = {
    WorkflowEvent.CREATED: AssignmentStatus.PLANNING,
    WorkflowEvent.PLAN_SAVED: AssignmentStatus.OUTLINING,
    WorkflowEvent.DRAFT_SAVED: AssignmentStatus.WRITING,
    WorkflowEvent.REVIEW_SAVED: AssignmentStatus.REVIEWING,
    WorkflowEvent.COMPLETED: AssignmentStatus.COMPLETE,
}

_STATUS_STAGES = {
    AssignmentStatus.DRAFT: Stage.PLAN,
    AssignmentStatus.PLANNING: Stage.PLAN,
    AssignmentStatus.OUTLINING: Stage.OUTLINE,
    AssignmentStatus.WRITING: Stage.DRAFT,
    AssignmentStatus.REVIEWING: Stage.DRAFT,
    AssignmentStatus.COMPLETE: Stage.DRAFT,
}

# 事件完成后前端跳转的阶段；None 表示停留在当前页
_EVENT_NEXT_STAGE = {
    WorkflowEvent.CREATED: Stage.PLAN,
    WorkflowEvent.PLAN_SAVED: Stage.OUTLINE,
    WorkflowEvent.OUTLINE_SAVED: Stage.DRAFT,
    WorkflowEvent.DRAFT_SAVED: None,
    WorkflowEvent.REVIEW_SAVED: None,
    WorkflowEvent.COMPLETED: None,
}


def target_status(event: WorkflowEvent, settings: Settings | None = None) -> AssignmentStatus:
    """返回事件对应的目标状态。

    保存大纲写入 ``outline_saved_status``（默认 ``draft``）。
    """

    if event == WorkflowEvent.OUTLINE_SAVED:
        settings = settings or get_settings()
        return AssignmentStatus(settings.outline_saved_status)
    return _EVENT_TARGETS[event]


def apply_event(assignment: Any, event: WorkflowEvent, settings: Settings | None = None) -> AssignmentStatus:
    """把事件作用在作业上（只修改 ``status``），返回新状态。不提交事务。"""

    previous = assignment.status
    new_status = target_status(event, settings)
    assignment.status = new_status
    logger.info(
        "Assignment %s status %s -> %s (%s)",
        getattr(assignment, "id", None),
        _status_value(previous),
        new_status.value,
        event.value,
    )
    return new_status


def stage_for_status(status: Any) -> Stage:
    """状态 → 阶段页面。精确匹配枚举值，其他任何值一律返回计划页，从不抛错。"""

    try:
        normalized = AssignmentStatus(_status_value(status))
    except (TypeError, ValueError):
        return Stage.PLAN
    return _STATUS_STAGES.get(normalized, Stage.PLAN)


def next_stage(event: WorkflowEvent) -> Stage | None:
    return _EVENT_NEXT_STAGE[event]


# === 前端路由 ===

DASHBOARD_PATH = "/"


def assignment_path(assignment_id: Any) -> str:
    return f"/assignment/{assignment_id}"


def stage_path(assignment_id: Any, stage: Stage) -> str:
    return f"{assignment_path(assignment_id)}/{stage.value}"


def route_for(assignment_id: Any, status: Any) -> str:
    """状态路由：作业当前状态对应的前端路径。"""

    return stage_path(assignment_id, stage_for_status(status))


def next_path(assignment_id: Any, event: WorkflowEvent) -> str | None:
    stage = next_stage(event)
    if stage is None:
        return None
    return stage_path(assignment_id, stage)


def _status_value(status: Any) -> Any:
    if isinstance(status, AssignmentStatus):
        return status.value
    return status
