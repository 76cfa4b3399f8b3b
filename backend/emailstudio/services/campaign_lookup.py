"""
Read-only access to campaigns, brand guides, audiences and the per-channel
copy generated for a campaign earlier.

Stored version content carries no type information of its own; it is tagged
with its row's channel here and validated into the ChannelContent union.
"""

import logging
from typing import List, Optional, Protocol
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.orm import Session

from emailstudio.constants import ChannelType
from emailstudio.models import Audience, BrandGuide, Campaign, CampaignAsset
from emailstudio.schemas.content import ContentRecord, ContentVersion
from emailstudio.schemas.context import (
    AudienceContext,
    BrandContext,
    CampaignContext,
    ChannelConfig,
    Demographics,
    SegmentConfig,
)

logger = logging.getLogger(__name__)


class CampaignLookup(Protocol):
    def get_campaign(self, campaign_id: UUID) -> Optional[CampaignContext]:
        ...

    def get_brand_guide(self, brand_guide_id: UUID) -> Optional[BrandContext]:
        ...

    def get_audience(self, audience_id: UUID) -> Optional[AudienceContext]:
        ...

    def list_email_content(self, campaign_id: UUID) -> List[ContentRecord]:
        ...


def resolve_versions(channel_type: str, versions: Optional[list]) -> List[ContentVersion]:
    """Validate stored versions, tagging each content dict with its channel. Bad versions are dropped."""
    resolved: List[ContentVersion] = []
    for index, version in enumerate(versions or []):
        if not isinstance(version, dict):
            continue
        content = dict(version.get("content") or {})
        content["channel"] = channel_type
        try:
            resolved.append(ContentVersion.model_validate({**version, "content": content}))
        except ValidationError as e:
            logger.warning(f"Skipping unreadable {channel_type} content version {index}: {e.error_count()} error(s)")
    return resolved


def _segments(raw: Optional[list]) -> List[SegmentConfig]:
    segments = []
    for item in raw or []:
        if not isinstance(item, dict) or not item.get("audience_id"):
            continue
        segments.append(SegmentConfig(
            audience_id=item["audience_id"],
            custom_instructions=item.get("custom_instructions"),
            enabled=item.get("enabled") is not False,
        ))
    return segments


def _channels(raw: Optional[list]) -> List[ChannelConfig]:
    return [
        ChannelConfig(type=item["type"], enabled=bool(item.get("enabled")), purpose=item.get("purpose"))
        for item in raw or []
        if isinstance(item, dict) and item.get("type")
    ]


class SqlCampaignLookup:
    """CampaignLookup over the shared database."""

    def __init__(self, db: Session):
        self.db = db

    def get_campaign(self, campaign_id: UUID) -> Optional[CampaignContext]:
        campaign = self.db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            return None
        return CampaignContext(
            id=campaign.id,
            user_id=campaign.user_id,
            brand_guide_id=campaign.brand_guide_id,
            name=campaign.name,
            objective=campaign.objective,
            description=campaign.description,
            key_messages=campaign.key_messages or [],
            call_to_action=campaign.call_to_action,
            urgency_level=campaign.urgency_level or "medium",
            start_date=campaign.start_date,
            end_date=campaign.end_date,
            segments=_segments(campaign.segments),
            channels=_channels(campaign.channels),
        )

    def get_brand_guide(self, brand_guide_id: UUID) -> Optional[BrandContext]:
        brand = self.db.query(BrandGuide).filter(BrandGuide.id == brand_guide_id).first()
        if not brand:
            return None
        return BrandContext(
            id=brand.id,
            user_id=brand.user_id,
            name=brand.name,
            colors=brand.colors or [],
            tone=brand.tone,
            core_message=brand.core_message,
            logo_url=brand.logo_url,
        )

    def get_audience(self, audience_id: UUID) -> Optional[AudienceContext]:
        audience = self.db.query(Audience).filter(Audience.id == audience_id).first()
        if not audience:
            return None
        return AudienceContext(
            id=audience.id,
            name=audience.name,
            description=audience.description,
            demographics=Demographics.model_validate(audience.demographics or {}),
            propensity_level=audience.propensity_level or "Medium",
            interests=audience.interests or [],
            pain_points=audience.pain_points or [],
            key_motivators=audience.key_motivators or [],
            preferred_tone=audience.preferred_tone,
            is_active=audience.is_active,
        )

    def list_email_content(self, campaign_id: UUID) -> List[ContentRecord]:
        rows = self.db.query(CampaignAsset).filter(
            CampaignAsset.campaign_id == campaign_id,
            CampaignAsset.channel_type == ChannelType.EMAIL,
        ).order_by(CampaignAsset.created_at.asc()).all()

        return [
            ContentRecord(
                id=row.id,
                campaign_id=row.campaign_id,
                audience_id=row.audience_id,
                channel_type=row.channel_type,
                asset_type=row.asset_type,
                versions=resolve_versions(row.channel_type, row.versions),
            )
            for row in rows
        ]
