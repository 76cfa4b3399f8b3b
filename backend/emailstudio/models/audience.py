"""
Audience model. Owned by the audience management feature; read-only here.
"""
from sqlalchemy import Column, String, DateTime, Text, Boolean, Integer, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid
from emailstudio.database import Base, JSONType


class Audience(Base):
    __tablename__ = "audiences"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    # {"age_range": {"min": 25, "max": 40}, "income": "...", "location": [...]}
    demographics = Column(JSONType, nullable=True, default=dict)

    propensity_level = Column(String(20), nullable=False, default="Medium")
    interests = Column(JSONType, nullable=True, default=list)
    pain_points = Column(JSONType, nullable=True, default=list)
    key_motivators = Column(JSONType, nullable=True, default=list)
    preferred_tone = Column(String(200), nullable=True)

    estimated_size = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Audience(id={self.id}, name={self.name})>"
