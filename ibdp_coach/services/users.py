"""用户与角色的查询和授予。"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ibdp_coach.models import AppRole, User, UserRole

logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def grant_role(db: Session, user: User, role: AppRole) -> bool:
    """授予角色；已拥有时返回 False。调用方负责提交事务。"""

    if user.has_role(role):
        return False
    user.roles.append(UserRole(role=role))
    logger.info("Granted role %s to user %s", role.value, user.username)
    return True


def revoke_role(db: Session, user: User, role: AppRole) -> bool:
    for assigned in list(user.roles):
        if assigned.role == role:
            user.roles.remove(assigned)
            logger.info("Revoked role %s from user %s", role.value, user.username)
            return True
    return False
