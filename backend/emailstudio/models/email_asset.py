"""
EmailAsset model: one generated email document for one audience segment
and one messaging strategy.

Brand and audience data are snapshotted at generation time so later edits
to those records do not change assets that already exist.
"""
from sqlalchemy import Column, String, DateTime, Text, Integer, Boolean, ForeignKey, Uuid, CheckConstraint, Index
from sqlalchemy.sql import func
import uuid
from emailstudio.constants import AssetStatus, CONTENT_CHAR_CAPS
from emailstudio.database import Base, JSONType


class EmailAsset(Base):
    __tablename__ = "email_assets"
    __table_args__ = (
        CheckConstraint("version_number >= 1 AND version_number <= 4", name="ck_email_assets_version_number"),
        Index("ix_email_assets_campaign_audience", "campaign_id", "audience_id"),
        Index("ix_email_assets_user_status", "user_id", "status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    campaign_id = Column(Uuid, ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    audience_id = Column(Uuid, ForeignKey('audiences.id'), nullable=False)

    # Classification
    email_type = Column(String(50), nullable=False)
    version_strategy = Column(String(20), nullable=False)
    version_number = Column(Integer, nullable=False, default=1)

    # Content
    subject_line = Column(String(CONTENT_CHAR_CAPS["subject_line"]), nullable=False)
    preheader = Column(String(CONTENT_CHAR_CAPS["preheader"]), nullable=False, default="")
    headline = Column(String(CONTENT_CHAR_CAPS["headline"]), nullable=False, default="")
    body_copy = Column(Text, nullable=False)
    cta_text = Column(String(CONTENT_CHAR_CAPS["cta_text"]), nullable=False)

    # Document artifacts
    full_html = Column(Text, nullable=False)
    inlined_html = Column(Text, nullable=False)
    liquid_html = Column(Text, nullable=True)
    plain_text = Column(Text, nullable=False)

    # Snapshots: {"company_name", "primary_color", "voice_attributes"} / {"name", "propensity_level"}
    brand_snapshot = Column(JSONType, nullable=False)
    audience_snapshot = Column(JSONType, nullable=False)

    # Status workflow: generated -> edited <-> approved
    status = Column(String(20), nullable=False, default=AssetStatus.GENERATED)

    # Meta
    template_id = Column(String(50), nullable=False, default="ai-generated")
    generation_mode = Column(String(20), nullable=False)
    generated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    last_edited_at = Column(DateTime(timezone=True), nullable=True)
    export_count = Column(Integer, nullable=False, default=0)
    tokens_used = Column(Integer, nullable=True)
    extraction_confident = Column(Boolean, nullable=True)  # None for template-based assets

    # [{"timestamp", "edit_type", "prompt", "previous_html"}], oldest first
    edit_history = Column(JSONType, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def content(self) -> dict:
        return {
            "subject_line": self.subject_line,
            "preheader": self.preheader,
            "headline": self.headline,
            "body_copy": self.body_copy,
            "cta_text": self.cta_text,
        }

    @property
    def html(self) -> dict:
        return {
            "full_html": self.full_html,
            "inlined_html": self.inlined_html,
            "liquid_html": self.liquid_html,
            "plain_text": self.plain_text,
        }

    def __repr__(self):
        return f"<EmailAsset(id={self.id}, campaign_id={self.campaign_id}, strategy={self.version_strategy})>"
