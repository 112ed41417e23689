"""
Studio listing (public profile page) owned by exactly one user.
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Enum as SQLEnum
from datetime import datetime
from enum import Enum
from app.db.base import Base


class StudioStatus(str, Enum):
    ACTIVE = "ACTIVE"  # Listed in search and reachable
    INACTIVE = "INACTIVE"  # Hidden until membership is in good standing


class StudioType(str, Enum):
    HOME = "HOME"
    RECORDING = "RECORDING"
    PODCAST = "PODCAST"
    VOICEOVER = "VOICEOVER"
    EDITING = "EDITING"
    MOBILE = "MOBILE"


class StudioProfile(Base):
    __tablename__ = "studio_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    name = Column(String, nullable=False)
    status = Column(SQLEnum(StudioStatus), default=StudioStatus.ACTIVE, nullable=False, index=True)

    # Time-boxed promotion
    is_featured = Column(Boolean, default=False, nullable=False)
    featured_until = Column(DateTime, nullable=True)

    # Premium-only visibility flags
    show_phone = Column(Boolean, default=False, nullable=False)
    show_directions = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<StudioProfile(id={self.id}, user_id={self.user_id}, status={self.status}, featured={self.is_featured})>"
