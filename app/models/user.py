from enum import Enum

from sqlalchemy import Column, Integer, String, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from app.db.base import Base


class MembershipTier(str, Enum):
    BASIC = "BASIC"  # Free tier, studio always listed
    PREMIUM = "PREMIUM"  # Paid tier, listing requires a current subscription


class User(Base):
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    membership_tier = Column(SQLEnum(MembershipTier), default=MembershipTier.BASIC, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, tier={self.membership_tier})>"
