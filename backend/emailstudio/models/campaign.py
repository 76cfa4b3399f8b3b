"""
Campaign model. Owned by the campaign management feature; read-only here.
"""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid
from emailstudio.database import Base, JSONType


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    brand_guide_id = Column(Uuid, ForeignKey('brand_guides.id'), nullable=False)

    name = Column(String(200), nullable=False)
    objective = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    status = Column(String(50), nullable=False, default="draft")

    # [{"audience_id": "...", "custom_instructions": "...", "enabled": true}]
    segments = Column(JSONType, nullable=False, default=list)
    # [{"type": "email", "enabled": true, "purpose": "..."}]
    channels = Column(JSONType, nullable=False, default=list)

    key_messages = Column(JSONType, nullable=False, default=list)
    call_to_action = Column(String(100), nullable=True)
    urgency_level = Column(String(20), nullable=False, default="medium")

    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Campaign(id={self.id}, name={self.name}, user_id={self.user_id})>"
