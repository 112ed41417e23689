"""
Free-form per-user settings (e.g. custom_meta_title for the studio page SEO title).
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, UniqueConstraint
from datetime import datetime
from app.db.base import Base


class UserMetadata(Base):
    __tablename__ = "user_metadata"
    __table_args__ = (
        UniqueConstraint("user_id", "key", name="uq_user_metadata_user_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    key = Column(String, nullable=False)
    value = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
