from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, Enum as SQLEnum
from app.db.base import Base
from app.models.studio_profile import StudioType


class StudioStudioType(Base):
    __tablename__ = "studio_studio_types"
    __table_args__ = (
        UniqueConstraint("studio_id", "studio_type", name="uq_studio_studio_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    studio_id = Column(Integer, ForeignKey("studio_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    studio_type = Column(SQLEnum(StudioType), nullable=False)
