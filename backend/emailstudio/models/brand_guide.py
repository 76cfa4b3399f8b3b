"""
BrandGuide model. Owned by the brand management feature; read-only here.
"""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid
from emailstudio.database import Base, JSONType


class BrandGuide(Base):
    __tablename__ = "brand_guides"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(100), nullable=False)
    colors = Column(JSONType, nullable=False, default=list)  # hex strings, primary first
    tone = Column(String(500), nullable=True)
    core_message = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<BrandGuide(id={self.id}, name={self.name})>"
