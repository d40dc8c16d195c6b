"""作业流程相关枚举定义 - 学科、任务类型、作业状态、角色等。"""

import enum


class SubjectType(str, enum.Enum):
    """IBDP 学科。"""
    LANG_A = "lang_a"            # Language A: Literature / Language & Literature
    LANG_B = "lang_b"            # Language B
    HISTORY = "history"
    ECONOMICS = "economics"
    BIOLOGY = "biology"
    CHEMISTRY = "chemistry"
    PHYSICS = "physics"
    MATH = "math"
    TOK = "tok"                  # Theory of Knowledge
    OTHER = "other"


class TaskType(str, enum.Enum):
    """写作任务类型。"""
    ESSAY = "essay"
    COMMENTARY = "commentary"
    TOK = "tok"                  # TOK essay / exhibition
    IA = "ia"                    # Internal Assessment
    EE = "ee"                    # Extended Essay
    OTHER = "other"


class AssignmentStatus(str, enum.Enum):
    """作业工作流状态。

    只由各阶段的保存动作推进，见 ``services/workflow.py``。
    """
    DRAFT = "draft"
    PLANNING = "planning"
    OUTLINING = "outlining"
    WRITING = "writing"
    REVIEWING = "reviewing"
    COMPLETE = "complete"


class AppRole(str, enum.Enum):
    """用户角色，一个用户可以拥有多个角色。"""
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class ImprovementPriority(str, enum.Enum):
    """评价改进项的优先级。"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FeatureFlag(str, enum.Enum):
    """界面功能开关。键名与前端保持一致（camelCase）。"""
    PDF_DOWNLOAD = "pdfDownload"
    EQUATION_EDITOR = "equationEditor"
    DRAGGABLE_BULLETS = "draggableBullets"
    THEME_TOGGLE = "themeToggle"
    ADMIN_ACCESS = "adminAccess"
