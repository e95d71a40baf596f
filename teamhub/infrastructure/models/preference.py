"""SQLAlchemy model for per-user notification preferences."""

from sqlalchemy import Boolean, Column, Integer, JSON, String

from teamhub.infrastructure.database import Base


class PreferenceModel(Base):
    """One row per user, created the first time a preference is changed."""

    __tablename__ = "user_preference"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    category_settings = Column(JSON, nullable=False, default=dict)
    # [{"forum_id": str, "notifications": bool}, ...], one entry per forum.
    forum_subscriptions = Column(JSON, nullable=False, default=list)


__all__ = ["PreferenceModel"]
