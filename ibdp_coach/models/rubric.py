"""评分量规模型定义 - 按学科与任务类型划分的 IBDP 评分标准。"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from ibdp_coach.db import Base
from ibdp_coach.models.enums import SubjectType, TaskType


class Rubric(Base):
    """评分量规。

    从工作流的角度只读；创建作业时按 ``is_default`` 查找默认量规。
    """

    __tablename__ = "rubrics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[SubjectType] = mapped_column(Enum(SubjectType), nullable=False)
    task_type: Mapped[TaskType] = mapped_column(Enum(TaskType), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)

    # 格式: [{"criterion": "A", "name": "...", "maxMarks": 5, "descriptor": "..."}]
    criteria: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Rubric(id={self.id}, name={self.name}, subject={self.subject.value})>"


# 预置默认量规（IBDP 2021 起的评估大纲）
PRESET_RUBRICS = [
    {
        "name": "Language A: Higher Level Essay",
        "subject": SubjectType.LANG_A,
        "task_type": TaskType.ESSAY,
        "is_default": True,
        "criteria": [
            {"criterion": "A", "name": "Knowledge, understanding and interpretation", "maxMarks": 5,
             "descriptor": "How well the essay shows knowledge and understanding of the work and draws conclusions supported by references."},
            {"criterion": "B", "name": "Analysis and evaluation", "maxMarks": 5,
             "descriptor": "How well authorial choices are analysed and evaluated in relation to the line of inquiry."},
            {"criterion": "C", "name": "Focus, organization and development", "maxMarks": 5,
             "descriptor": "How focused, coherent and effectively developed the argument is."},
            {"criterion": "D", "name": "Language", "maxMarks": 5,
             "descriptor": "Clarity, variety, accuracy and appropriateness of register and style."},
        ],
    },
    {
        "name": "Language A: Paper 1 Guided Analysis",
        "subject": SubjectType.LANG_A,
        "task_type": TaskType.COMMENTARY,
        "is_default": True,
        "criteria": [
            {"criterion": "A", "name": "Understanding and interpretation", "maxMarks": 5,
             "descriptor": "Understanding of the text and inferences supported by references."},
            {"criterion": "B", "name": "Analysis and evaluation", "maxMarks": 5,
             "descriptor": "Analysis of textual features and authorial choices and their effect."},
            {"criterion": "C", "name": "Focus and organization", "maxMarks": 5,
             "descriptor": "Structure, balance and focus of the analysis."},
            {"criterion": "D", "name": "Language", "maxMarks": 5,
             "descriptor": "Clarity, accuracy and effectiveness of language."},
        ],
    },
    {
        "name": "History Internal Assessment",
        "subject": SubjectType.HISTORY,
        "task_type": TaskType.IA,
        "is_default": True,
        "criteria": [
            {"criterion": "A", "name": "Identification and evaluation of sources", "maxMarks": 6,
             "descriptor": "Appropriate question, relevant sources, evaluation of origin, purpose, content, value and limitations."},
            {"criterion": "B", "name": "Investigation", "maxMarks": 15,
             "descriptor": "Clear, coherent and well-organized analysis leading to a reasoned argument."},
            {"criterion": "C", "name": "Reflection", "maxMarks": 4,
             "descriptor": "Reflection on methods used by historians and the challenges they face."},
        ],
    },
    {
        "name": "Economics Internal Assessment Commentary",
        "subject": SubjectType.ECONOMICS,
        "task_type": TaskType.COMMENTARY,
        "is_default": True,
        "criteria": [
            {"criterion": "A", "name": "Diagrams", "maxMarks": 3,
             "descriptor": "Relevant, accurate and fully explained diagrams."},
            {"criterion": "B", "name": "Terminology", "maxMarks": 2,
             "descriptor": "Appropriate economic terminology used throughout."},
            {"criterion": "C", "name": "Application and analysis", "maxMarks": 3,
             "descriptor": "Effective application of concepts and theories to the article."},
            {"criterion": "D", "name": "Key concept", "maxMarks": 3,
             "descriptor": "Effective link to the chosen key concept."},
            {"criterion": "E", "name": "Evaluation", "maxMarks": 3,
             "descriptor": "Judgements supported by effective and balanced reasoning."},
        ],
    },
    {
        "name": "Theory of Knowledge Essay",
        "subject": SubjectType.TOK,
        "task_type": TaskType.TOK,
        "is_default": True,
        "criteria": [
            {"criterion": "Overall", "name": "Does the student provide a clear, coherent and critical exploration of the essay title?", "maxMarks": 10,
             "descriptor": "Sustained focus on the title, linked effectively to areas of knowledge, arguments supported by examples, implications and counterclaims considered."},
        ],
    },
    {
        "name": "Extended Essay",
        "subject": SubjectType.OTHER,
        "task_type": TaskType.EE,
        "is_default": True,
        "criteria": [
            {"criterion": "A", "name": "Framework for the essay", "maxMarks": 6,
             "descriptor": "Topic, research question, methodology and structure form a coherent framework."},
            {"criterion": "B", "name": "Knowledge and understanding", "maxMarks": 6,
             "descriptor": "Knowledge and understanding of the topic, use of terminology and sources."},
            {"criterion": "C", "name": "Analysis and line of argument", "maxMarks": 6,
             "descriptor": "Analysis of research and development of a reasoned argument."},
            {"criterion": "D", "name": "Discussion and evaluation", "maxMarks": 8,
             "descriptor": "Evaluation of the research and its conclusions."},
            {"criterion": "E", "name": "Engagement", "maxMarks": 4,
             "descriptor": "Reflection on engagement with the research process, recorded in the reflection form."},
        ],
    },
]
