"""量规数据的初始化与查询。"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ibdp_coach.models import PRESET_RUBRICS, Rubric, SubjectType, TaskType

logger = logging.getLogger(__name__)


def seed_preset_rubrics(db: Session) -> int:
    """写入预置量规；表中已有数据时不做任何事。返回新增条数。"""

    if db.query(Rubric).first() is not None:
        return 0
    for data in PRESET_RUBRICS:
        db.add(Rubric(**data))
    db.commit()
    logger.info("Seeded %d preset rubrics", len(PRESET_RUBRICS))
    return len(PRESET_RUBRICS)


def list_rubrics(
    db: Session,
    subject: Optional[SubjectType] = None,
    task_type: Optional[TaskType] = None,
) -> List[Rubric]:
    query = db.query(Rubric)
    if subject is not None:
        query = query.filter(Rubric.subject == subject)
    if task_type is not None:
        query = query.filter(Rubric.task_type == task_type)
    return query.order_by(Rubric.id.asc()).all()
