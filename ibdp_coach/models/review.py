"""评价结果与教练会话模型定义。"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from ibdp_coach.db import Base


class Review(Base):
    """保存下来的草稿评价。

    评价接口本身是无状态的，只有显式保存时才写入本表。
    """

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False
    )
    rubric_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("rubrics.id", ondelete="SET NULL")
    )

    # 格式: {"overallScore": 5}
    scores: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    # 格式: {"strengths": [...], "improvements": [{"criterion", "issue", "suggestion", "priority"}]}
    feedback: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    # 下一步行动列表
    actions: Mapped[List[str]] = mapped_column(JSON, default=list)
    overall_summary: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    assignment = relationship("Assignment", back_populates="reviews")

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, assignment_id={self.assignment_id})>"


class CoachingSession(Base):
    """一次 AI 教练调用的输入与输出记录。"""

    __tablename__ = "coaching_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False
    )
    session_type: Mapped[str] = mapped_column(String(50), nullable=False)  # plan
    input_text: Mapped[Optional[str]] = mapped_column(Text)
    output_text: Mapped[Optional[str]] = mapped_column(Text)  # JSON 字符串
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    assignment = relationship("Assignment", back_populates="coaching_sessions")
