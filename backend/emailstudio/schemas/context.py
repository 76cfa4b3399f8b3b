"""
Read-only snapshots of campaign, brand guide and audience data used to
build generation contexts.
"""
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID

from emailstudio.constants import ChannelType, DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR


class BrandContext(BaseModel):
    id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    name: str
    colors: List[str] = Field(default_factory=list)
    tone: Optional[str] = None
    core_message: Optional[str] = None
    logo_url: Optional[str] = None

    @property
    def primary_color(self) -> str:
        return self.colors[0] if self.colors else DEFAULT_PRIMARY_COLOR

    @property
    def secondary_color(self) -> str:
        return self.colors[1] if len(self.colors) > 1 else DEFAULT_SECONDARY_COLOR

    def snapshot(self) -> dict:
        return {
            "company_name": self.name,
            "primary_color": self.primary_color,
            "voice_attributes": [self.tone] if self.tone else [],
        }


class AgeRange(BaseModel):
    min: Optional[int] = None
    max: Optional[int] = None


class Demographics(BaseModel):
    age_range: Optional[AgeRange] = None
    income: Optional[str] = None
    location: List[str] = Field(default_factory=list)


class AudienceContext(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    demographics: Demographics = Field(default_factory=Demographics)
    propensity_level: str = "Medium"
    interests: List[str] = Field(default_factory=list)
    pain_points: List[str] = Field(default_factory=list)
    key_motivators: List[str] = Field(default_factory=list)
    preferred_tone: Optional[str] = None
    is_active: bool = True

    def snapshot(self) -> dict:
        return {"name": self.name, "propensity_level": self.propensity_level}


class SegmentConfig(BaseModel):
    audience_id: UUID
    custom_instructions: Optional[str] = None
    enabled: bool = True


class ChannelConfig(BaseModel):
    type: str
    enabled: bool = True
    purpose: Optional[str] = None


class CampaignContext(BaseModel):
    id: UUID
    user_id: UUID
    brand_guide_id: UUID
    name: str
    objective: Optional[str] = None
    description: Optional[str] = None
    key_messages: List[str] = Field(default_factory=list)
    call_to_action: Optional[str] = None
    urgency_level: str = "medium"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    segments: List[SegmentConfig] = Field(default_factory=list)
    channels: List[ChannelConfig] = Field(default_factory=list)

    def has_enabled_email_channel(self) -> bool:
        return any(c.enabled and c.type == ChannelType.EMAIL for c in self.channels)

    def enabled_segments(self) -> List[SegmentConfig]:
        return [s for s in self.segments if s.enabled]


class GenerationContext(BaseModel):
    """Everything the prompt builder needs for one (segment, strategy) pair."""
    campaign: CampaignContext
    audience: AudienceContext
    brand: BrandContext
    email_type: str
    version_strategy: str
    custom_instructions: Optional[str] = None
