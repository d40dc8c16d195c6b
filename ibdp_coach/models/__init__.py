"""核心 SQLAlchemy 模型定义。"""

from ibdp_coach.models.enums import (
    AppRole,
    AssignmentStatus,
    FeatureFlag,
    ImprovementPriority,
    SubjectType,
    TaskType,
)
from ibdp_coach.models.user import User, UserRole
from ibdp_coach.models.rubric import PRESET_RUBRICS, Rubric
from ibdp_coach.models.assignment import Assignment, Draft, Outline, Plan
from ibdp_coach.models.review import CoachingSession, Review
from ibdp_coach.models.feature_flag import DEFAULT_FEATURE_FLAGS, FeatureFlagSetting

__all__ = [
    "AppRole",
    "Assignment",
    "AssignmentStatus",
    "CoachingSession",
    "DEFAULT_FEATURE_FLAGS",
    "Draft",
    "FeatureFlag",
    "FeatureFlagSetting",
    "ImprovementPriority",
    "Outline",
    "PRESET_RUBRICS",
    "Plan",
    "Review",
    "Rubric",
    "SubjectType",
    "TaskType",
    "User",
    "UserRole",
]
