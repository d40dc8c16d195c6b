"""作业模型定义 - 作业及其三个阶段实体（计划/大纲/草稿）。"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from ibdp_coach.db import Base
from ibdp_coach.models.enums import AssignmentStatus, SubjectType, TaskType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Assignment(Base):
    """学生的写作作业。

    创建后工作流只修改 ``status`` 字段；应用逻辑不删除作业。
    """

    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[SubjectType] = mapped_column(Enum(SubjectType), nullable=False)
    task_type: Mapped[TaskType] = mapped_column(Enum(TaskType), nullable=False)
    deadline: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    status: Mapped[AssignmentStatus] = mapped_column(
        Enum(AssignmentStatus), default=AssignmentStatus.DRAFT, nullable=False
    )
    no_ghostwriting_accepted: Mapped[bool] = mapped_column(Boolean, default=False)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    rubric_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("rubrics.id", ondelete="SET NULL")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    # === 关系定义 ===
    owner = relationship("User", back_populates="assignments")
    rubric = relationship("Rubric")
    plan: Mapped[Optional["Plan"]] = relationship(
        back_populates="assignment", cascade="all, delete-orphan", uselist=False
    )
    outline: Mapped[Optional["Outline"]] = relationship(
        back_populates="assignment", cascade="all, delete-orphan", uselist=False
    )
    draft: Mapped[Optional["Draft"]] = relationship(
        back_populates="assignment", cascade="all, delete-orphan", uselist=False
    )
    reviews = relationship("Review", back_populates="assignment", cascade="all, delete-orphan")
    coaching_sessions = relationship(
        "CoachingSession", back_populates="assignment", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Assignment(id={self.id}, title={self.title}, status={self.status.value})>"


class Plan(Base):
    """计划阶段：论点、读者、约束与教练问题。每个作业最多一条。"""

    __tablename__ = "plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    thesis: Mapped[Optional[str]] = mapped_column(Text)
    audience: Mapped[Optional[str]] = mapped_column(Text)
    constraints: Mapped[Optional[str]] = mapped_column(Text)
    # 格式: ["问题1", "问题2", ...]
    questions: Mapped[List[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    assignment: Mapped[Assignment] = relationship(back_populates="plan")


class Outline(Base):
    """大纲阶段：有序的章节列表，整体作为 JSON 存储。"""

    __tablename__ = "outlines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    # 格式: [{"id": "1", "title": "Introduction", "bullets": ["..."], "order": 0}]
    sections: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    assignment: Mapped[Assignment] = relationship(back_populates="outline")


class Draft(Base):
    """草稿阶段：正文、字数与引用。"""

    __tablename__ = "drafts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    content: Mapped[Optional[str]] = mapped_column(Text)
    word_count: Mapped[int] = mapped_column(Integer, default=0)
    # 格式: [{"source": "...", "note": "..."}]
    citations: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    assignment: Mapped[Assignment] = relationship(back_populates="draft")
