"""功能开关覆盖值。未存储的开关使用默认值。"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from ibdp_coach.db import Base
from ibdp_coach.models.enums import FeatureFlag


DEFAULT_FEATURE_FLAGS = {
    FeatureFlag.PDF_DOWNLOAD: True,
    FeatureFlag.EQUATION_EDITOR: True,
    FeatureFlag.DRAGGABLE_BULLETS: True,
    FeatureFlag.THEME_TOGGLE: True,
    FeatureFlag.ADMIN_ACCESS: False,
}


class FeatureFlagSetting(Base):
    """管理员设置的开关值。"""

    __tablename__ = "feature_flags"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False)
    updated_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<FeatureFlagSetting(key={self.key}, enabled={self.enabled})>"
