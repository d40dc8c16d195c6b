"""功能开关：默认值与数据库覆盖值合并。

开关只控制界面行为，不作为权限边界；写入需要 admin 角色（由路由层校验）。
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session

from ibdp_coach.models import DEFAULT_FEATURE_FLAGS, FeatureFlag, FeatureFlagSetting

logger = logging.getLogger(__name__)


def parse_flag(key: str) -> Optional[FeatureFlag]:
    try:
        return FeatureFlag(key)
    except ValueError:
        return None


def get_flags(db: Session) -> Dict[str, bool]:
    flags = {flag.value: enabled for flag, enabled in DEFAULT_FEATURE_FLAGS.items()}
    for setting in db.query(FeatureFlagSetting).all():
        if setting.key in flags:
            flags[setting.key] = bool(setting.enabled)
    return flags


def set_flag(db: Session, flag: FeatureFlag, enabled: bool, user_id: Optional[int] = None) -> Dict[str, bool]:
    setting = db.get(FeatureFlagSetting, flag.value)
    if setting is None:
        setting = FeatureFlagSetting(key=flag.value, enabled=enabled)
        db.add(setting)
    setting.enabled = enabled
    setting.updated_by = user_id
    db.commit()
    logger.info("Feature flag %s set to %s by user %s", flag.value, enabled, user_id)
    return get_flags(db)


def reset_flags(db: Session) -> Dict[str, bool]:
    db.query(FeatureFlagSetting).delete()
    db.commit()
    logger.info("Feature flags reset to defaults")
    return get_flags(db)
