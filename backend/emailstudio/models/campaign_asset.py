"""
CampaignAsset model: per-channel copy generated earlier for a campaign.

Each row holds a list of versions; the shape of version["content"] depends
on channel_type and is resolved into a typed union by the campaign lookup.
Read-only here.
"""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid
from emailstudio.database import Base, JSONType


class CampaignAsset(Base):
    __tablename__ = "campaign_assets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    campaign_id = Column(Uuid, ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False)
    audience_id = Column(Uuid, ForeignKey('audiences.id', ondelete='CASCADE'), nullable=False)

    channel_type = Column(String(20), nullable=False)  # email | meta_ads
    asset_type = Column(String(50), nullable=False)  # hero_email, carousel_ad, ...
    name = Column(String(200), nullable=False)

    # [{"version_name": "A", "strategy": "conversion", "content": {...}, "status": "generated"}]
    versions = Column(JSONType, nullable=False, default=list)
    generation_prompt = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<CampaignAsset(id={self.id}, channel_type={self.channel_type}, campaign_id={self.campaign_id})>"
