"""Assignment workflow service.

封装作业创建以及计划 / 大纲 / 草稿三个阶段的读取与保存。
每个阶段实体与作业一一对应：保存时先查找、再更新或插入。
状态变化统一通过 ``services.workflow.apply_event`` 完成。
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional

from sqlalchemy.orm import Session

from ibdp_coach.config import Settings, get_settings
from ibdp_coach.models import (
    Assignment,
    AssignmentStatus,
    CoachingSession,
    Draft,
    Outline,
    Plan,
    Review,
    Rubric,
    SubjectType,
    TaskType,
    User,
)
from ibdp_coach.schemas.ai import CoachingResult, EvaluationResult
from ibdp_coach.schemas.workflow import (
    AssignmentCreate,
    DraftPayload,
    OutlineSection,
    PlanPayload,
)
from ibdp_coach.services import outline as outline_commands
from ibdp_coach.services.workflow import WorkflowEvent, apply_event
from ibdp_coach.utils.text_processing import count_words

logger = logging.getLogger(__name__)

GHOSTWRITING_REQUIRED_MESSAGE = "Please accept the No Ghostwriting policy"


class AssignmentService:
    """作业及其阶段实体的查询与保存逻辑。"""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    # === 作业 ===

    def find_default_rubric(
        self, db: Session, subject: SubjectType, task_type: TaskType
    ) -> Optional[Rubric]:
        return (
            db.query(Rubric)
            .filter(
                Rubric.subject == subject,
                Rubric.task_type == task_type,
                Rubric.is_default.is_(True),
            )
            .order_by(Rubric.id.asc())
            .first()
        )

    def create_assignment(self, db: Session, owner: User, data: AssignmentCreate) -> Assignment:
        if not data.no_ghostwriting_accepted:
            raise ValueError(GHOSTWRITING_REQUIRED_MESSAGE)

        rubric = self.find_default_rubric(db, data.subject, data.task_type)
        assignment = Assignment(
            title=data.title,
            subject=data.subject,
            task_type=data.task_type,
            deadline=data.deadline,
            no_ghostwriting_accepted=True,
            user_id=owner.id,
            rubric_id=rubric.id if rubric else None,
        )
        apply_event(assignment, WorkflowEvent.CREATED, self.settings)
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        logger.info(
            "Created assignment %s for user %s (rubric=%s)",
            assignment.id,
            owner.id,
            assignment.rubric_id,
        )
        return assignment

    def list_assignments(self, db: Session, owner: User) -> List[Assignment]:
        return (
            db.query(Assignment)
            .filter(Assignment.user_id == owner.id)
            .order_by(Assignment.created_at.desc(), Assignment.id.desc())
            .all()
        )

    def get_owned_assignment(self, db: Session, owner: User, assignment_id: int) -> Assignment:
        assignment = db.get(Assignment, assignment_id)
        if not assignment or assignment.user_id != owner.id:
            raise LookupError("Assignment not found")
        return assignment

    def rubric_criteria(self, db: Session, assignment: Assignment) -> List[Any]:
        if assignment.rubric_id is None:
            return []
        rubric = db.get(Rubric, assignment.rubric_id)
        return list(rubric.criteria or []) if rubric else []

    # === 计划 ===

    def get_plan(self, db: Session, assignment: Assignment) -> Optional[Plan]:
        return db.query(Plan).filter(Plan.assignment_id == assignment.id).first()

    def save_plan(self, db: Session, assignment: Assignment, payload: PlanPayload) -> Plan:
        plan = self.get_plan(db, assignment)
        if plan is None:
            plan = Plan(assignment_id=assignment.id)
            db.add(plan)
        plan.thesis = payload.thesis
        plan.audience = payload.audience
        plan.constraints = payload.constraints
        plan.questions = list(payload.questions)
        apply_event(assignment, WorkflowEvent.PLAN_SAVED, self.settings)
        db.commit()
        db.refresh(plan)
        return plan

    def record_coaching(
        self,
        db: Session,
        assignment: Assignment,
        current_idea: str,
        result: CoachingResult,
    ) -> CoachingSession:
        session = CoachingSession(
            assignment_id=assignment.id,
            session_type="plan",
            input_text=current_idea,
            output_text=json.dumps(result.model_dump(by_alias=True), ensure_ascii=False),
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    # === 大纲 ===

    def get_outline(self, db: Session, assignment: Assignment) -> Optional[Outline]:
        return db.query(Outline).filter(Outline.assignment_id == assignment.id).first()

    def outline_sections(self, db: Session, assignment: Assignment) -> List[OutlineSection]:
        """已保存的章节；尚无大纲时返回默认章节。"""

        outline = self.get_outline(db, assignment)
        if outline is None or not outline.sections:
            return outline_commands.default_sections()
        return outline_commands.load_sections(outline.sections)

    def _store_sections(
        self, db: Session, assignment: Assignment, sections: Iterable[OutlineSection]
    ) -> Outline:
        outline = self.get_outline(db, assignment)
        if outline is None:
            outline = Outline(assignment_id=assignment.id)
            db.add(outline)
        ordered = [
            section.model_copy(update={"order": idx}) for idx, section in enumerate(sections)
        ]
        outline.sections = outline_commands.dump_sections(ordered)
        return outline

    def save_outline(
        self, db: Session, assignment: Assignment, sections: Iterable[OutlineSection]
    ) -> Outline:
        outline = self._store_sections(db, assignment, sections)
        apply_event(assignment, WorkflowEvent.OUTLINE_SAVED, self.settings)
        db.commit()
        db.refresh(outline)
        return outline

    def apply_outline_commands(
        self, db: Session, assignment: Assignment, commands: Iterable[Any]
    ) -> Outline:
        """执行编辑命令并持久化，不改变作业状态。"""

        sections = outline_commands.apply_commands(self.outline_sections(db, assignment), commands)
        outline = self._store_sections(db, assignment, sections)
        db.commit()
        db.refresh(outline)
        return outline

    # === 草稿 ===

    def get_draft(self, db: Session, assignment: Assignment) -> Optional[Draft]:
        return db.query(Draft).filter(Draft.assignment_id == assignment.id).first()

    def save_draft(self, db: Session, assignment: Assignment, payload: DraftPayload) -> Draft:
        draft = self.get_draft(db, assignment)
        if draft is None:
            draft = Draft(assignment_id=assignment.id)
            db.add(draft)
        draft.content = payload.content
        draft.word_count = count_words(payload.content)
        draft.citations = list(payload.citations)
        apply_event(assignment, WorkflowEvent.DRAFT_SAVED, self.settings)
        db.commit()
        db.refresh(draft)
        return draft

    # === 评价与完成 ===

    def save_review(
        self, db: Session, assignment: Assignment, result: EvaluationResult
    ) -> Review:
        data = result.model_dump(by_alias=True, mode="json")
        review = Review(
            assignment_id=assignment.id,
            rubric_id=assignment.rubric_id,
            scores={"overallScore": data["overallScore"]},
            feedback={"strengths": data["strengths"], "improvements": data["improvements"]},
            actions=data["nextSteps"],
            overall_summary=f"IBDP level {result.overall_score:g}/7",
        )
        db.add(review)
        apply_event(assignment, WorkflowEvent.REVIEW_SAVED, self.settings)
        db.commit()
        db.refresh(review)
        return review

    def list_reviews(self, db: Session, assignment: Assignment) -> List[Review]:
        return (
            db.query(Review)
            .filter(Review.assignment_id == assignment.id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    def complete(self, db: Session, assignment: Assignment) -> AssignmentStatus:
        status = apply_event(assignment, WorkflowEvent.COMPLETED, self.settings)
        db.commit()
        db.refresh(assignment)
        return status
