"""
Email asset generation for a campaign.

Two modes: ai-designed (the text generator writes the full HTML for every
enabled segment and strategy) and template-based (copy generated earlier for
the campaign is poured into a static template). An ai-designed sweep that
produces nothing falls back to template-based.

Assets are committed one by one as they are produced, so a sweep that dies
midway leaves the assets it already made.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from emailstudio.authorization import verify_campaign_access
from emailstudio.config import Settings
from emailstudio.constants import (
    AI_STRATEGIES,
    AssetStatus,
    EMAIL_ASSET_TYPE_MAPPING,
    EmailType,
    GenerationMode,
    MAX_VERSION_NUMBER,
    VersionStrategy,
)
from emailstudio.exceptions import GenerationFailedError, NoEmailChannelError, NoGeneratedContentError
from emailstudio.models import EmailAsset
from emailstudio.schemas.content import EmailContent
from emailstudio.schemas.context import AudienceContext, BrandContext, CampaignContext, GenerationContext
from emailstudio.services.campaign_lookup import CampaignLookup
from emailstudio.services.email_document import DocumentRenderer
from emailstudio.services.email_html_generator import generate_email_html
from emailstudio.services.email_validator import sanitize_email_html, validate_email_html
from emailstudio.services.llm_service import TextGenerator
from emailstudio.services.template_engine import EmailTemplateEngine, resolve_template_id

logger = logging.getLogger(__name__)

AI_TEMPLATE_ID = "ai-generated"


@dataclass
class TemplateContentItem:
    """One version of earlier email copy, ready for a template."""
    audience_id: UUID
    email_type: str
    strategy: str
    version_number: int
    content: EmailContent


@dataclass
class GenerationOutcome:
    assets: List[EmailAsset] = field(default_factory=list)
    elapsed_ms: int = 0
    generation_mode: str = GenerationMode.AI_DESIGNED

    @property
    def total_generated(self) -> int:
        return len(self.assets)


class EmailGenerationService:
    def __init__(
        self,
        db: Session,
        lookup: CampaignLookup,
        generator: TextGenerator,
        renderer: DocumentRenderer,
        settings: Settings,
        template_engine: Optional[EmailTemplateEngine] = None,
    ):
        self.db = db
        self.lookup = lookup
        self.generator = generator
        self.renderer = renderer
        self.settings = settings
        self.template_engine = template_engine or EmailTemplateEngine()

    def generate(
        self,
        campaign_id: UUID,
        user_id: UUID,
        template_id: Optional[str] = None,
        regenerate: bool = False,
        generation_mode: str = GenerationMode.AI_DESIGNED,
    ) -> GenerationOutcome:
        """
        Generate email assets for a campaign.

        All precondition checks run before anything is deleted. With
        regenerate, existing assets are deleted up front, or (with the
        staged_regenerate setting) only once the new sweep produced assets.

        Raises:
            NotFoundError / AccessDeniedError: campaign or brand guide
            NoEmailChannelError: no enabled email channel
            NoGeneratedContentError: template mode without earlier copy
            GenerationFailedError: the sweep (and any fallback) produced nothing
        """
        start = time.monotonic()
        template_id = resolve_template_id(template_id or self.settings.default_template_id)

        campaign, brand = verify_campaign_access(campaign_id, user_id, self.lookup)
        if not campaign.has_enabled_email_channel():
            raise NoEmailChannelError()

        content_items: Optional[List[TemplateContentItem]] = None
        if generation_mode == GenerationMode.TEMPLATE_BASED:
            content_items = self.collect_template_content(campaign.id)
            if not content_items:
                raise NoGeneratedContentError()

        stale_ids: List[UUID] = []
        if regenerate:
            if self.settings.staged_regenerate:
                stale_ids = self._existing_asset_ids(campaign.id, user_id)
            else:
                deleted = self.delete_campaign_assets(campaign.id, user_id)
                logger.info(f"Regenerate: deleted {deleted} existing email assets for campaign {campaign.id}")

        used_mode = generation_mode
        if generation_mode == GenerationMode.AI_DESIGNED:
            assets = self._generate_with_ai(campaign, brand, user_id)
            if not assets:
                logger.warning(f"AI generation produced no emails for campaign {campaign.id}, falling back to templates")
                used_mode = GenerationMode.TEMPLATE_BASED
                content_items = self.collect_template_content(campaign.id)
                if not content_items:
                    raise GenerationFailedError(
                        "AI-designed generation failed for every segment and the template-based "
                        "fallback had nothing to render: No generated content found. "
                        "Please generate campaign assets first."
                    )
                assets = self._generate_with_template(campaign, brand, user_id, template_id, content_items)
                if not assets:
                    raise GenerationFailedError(
                        "AI-designed generation and the template-based fallback both produced no emails"
                    )
        else:
            assets = self._generate_with_template(campaign, brand, user_id, template_id, content_items)
            if not assets:
                raise GenerationFailedError("Template-based generation produced no emails")

        if stale_ids:
            deleted = self._delete_assets(stale_ids)
            logger.info(f"Regenerate: replaced {deleted} email assets for campaign {campaign.id}")

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(f"Generated {len(assets)} email assets for campaign {campaign.id} ({used_mode}) in {elapsed_ms}ms")
        return GenerationOutcome(assets=assets, elapsed_ms=elapsed_ms, generation_mode=used_mode)

    def collect_template_content(self, campaign_id: UUID) -> List[TemplateContentItem]:
        """Complete email versions from earlier campaign copy; at most four per record."""
        items: List[TemplateContentItem] = []
        for record in self.lookup.list_email_content(campaign_id):
            email_type = EMAIL_ASSET_TYPE_MAPPING.get(record.asset_type, EmailType.PROMOTIONAL)
            for index, version in enumerate(record.versions):
                version_number = index + 1
                if version_number > MAX_VERSION_NUMBER:
                    logger.warning(f"Content record {record.id} has more than {MAX_VERSION_NUMBER} versions, ignoring the rest")
                    break
                content = version.content
                if content.channel != "email" or not content.has_required_fields():
                    continue
                strategy = version.strategy if version.strategy in VersionStrategy.ALL else VersionStrategy.CONVERSION
                items.append(TemplateContentItem(
                    audience_id=record.audience_id,
                    email_type=email_type,
                    strategy=strategy,
                    version_number=version_number,
                    content=content.to_email_content(),
                ))
        return items

    def delete_campaign_assets(self, campaign_id: UUID, user_id: UUID) -> int:
        deleted = self.db.query(EmailAsset).filter(
            EmailAsset.campaign_id == campaign_id,
            EmailAsset.user_id == user_id,
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted

    def _existing_asset_ids(self, campaign_id: UUID, user_id: UUID) -> List[UUID]:
        rows = self.db.query(EmailAsset.id).filter(
            EmailAsset.campaign_id == campaign_id,
            EmailAsset.user_id == user_id,
        ).all()
        return [row[0] for row in rows]

    def _delete_assets(self, asset_ids: List[UUID]) -> int:
        deleted = self.db.query(EmailAsset).filter(
            EmailAsset.id.in_(asset_ids)
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted

    def _active_segments(self, campaign: CampaignContext):
        for segment in campaign.enabled_segments():
            audience = self.lookup.get_audience(segment.audience_id)
            if not audience:
                logger.warning(f"Audience {segment.audience_id} not found for campaign {campaign.id}, skipping segment")
                continue
            if not audience.is_active:
                logger.info(f"Audience '{audience.name}' is inactive, skipping segment")
                continue
            yield segment, audience

    def _generate_with_ai(self, campaign: CampaignContext, brand: BrandContext, user_id: UUID) -> List[EmailAsset]:
        assets: List[EmailAsset] = []
        for segment, audience in self._active_segments(campaign):
            for index, strategy in enumerate(AI_STRATEGIES):
                context = GenerationContext(
                    campaign=campaign,
                    audience=audience,
                    brand=brand,
                    email_type=EmailType.PROMOTIONAL,
                    version_strategy=strategy,
                    custom_instructions=segment.custom_instructions,
                )
                try:
                    generated = generate_email_html(context, self.generator, self.settings.generation_max_tokens)

                    full_html = generated.full_html
                    validation = validate_email_html(full_html)
                    if not validation.valid:
                        logger.warning(f"HTML validation issues for '{audience.name}' ({strategy}): {validation.errors}")
                        full_html = sanitize_email_html(full_html)
                    if validation.warnings:
                        logger.debug(f"HTML validation warnings for '{audience.name}' ({strategy}): {validation.warnings}")

                    asset = self._save_asset(
                        campaign=campaign,
                        brand=brand,
                        audience=audience,
                        user_id=user_id,
                        email_type=EmailType.PROMOTIONAL,
                        strategy=strategy,
                        version_number=index + 1,
                        content=generated.extraction.content,
                        full_html=full_html,
                        template_id=AI_TEMPLATE_ID,
                        generation_mode=GenerationMode.AI_DESIGNED,
                        tokens_used=generated.tokens_used,
                        extraction_confident=generated.extraction.confident,
                    )
                    assets.append(asset)
                    logger.info(f"Saved email asset {asset.id} for '{audience.name}' ({strategy})")
                except Exception as e:
                    self.db.rollback()
                    logger.error(f"Email generation failed for '{audience.name}' ({strategy}): {e}")
        return assets

    def _generate_with_template(
        self,
        campaign: CampaignContext,
        brand: BrandContext,
        user_id: UUID,
        template_id: str,
        content_items: List[TemplateContentItem],
    ) -> List[EmailAsset]:
        assets: List[EmailAsset] = []
        audiences = {}
        for item in content_items:
            if item.audience_id not in audiences:
                audiences[item.audience_id] = self.lookup.get_audience(item.audience_id)
            audience = audiences[item.audience_id]
            if not audience:
                logger.warning(f"Audience {item.audience_id} not found, skipping template content")
                continue
            try:
                full_html = self.template_engine.render(template_id, item.content, brand, audience, campaign)
                asset = self._save_asset(
                    campaign=campaign,
                    brand=brand,
                    audience=audience,
                    user_id=user_id,
                    email_type=item.email_type,
                    strategy=item.strategy,
                    version_number=item.version_number,
                    content=item.content,
                    full_html=full_html,
                    template_id=template_id,
                    generation_mode=GenerationMode.TEMPLATE_BASED,
                )
                assets.append(asset)
            except Exception as e:
                self.db.rollback()
                logger.error(f"Template rendering failed for '{audience.name}' ({item.strategy}): {e}")
        return assets

    def _save_asset(
        self,
        campaign: CampaignContext,
        brand: BrandContext,
        audience: AudienceContext,
        user_id: UUID,
        email_type: str,
        strategy: str,
        version_number: int,
        content: EmailContent,
        full_html: str,
        template_id: str,
        generation_mode: str,
        tokens_used: Optional[int] = None,
        extraction_confident: Optional[bool] = None,
    ) -> EmailAsset:
        document = self.renderer.render(full_html)
        asset = EmailAsset(
            campaign_id=campaign.id,
            user_id=user_id,
            audience_id=audience.id,
            email_type=email_type,
            version_strategy=strategy,
            version_number=version_number,
            subject_line=content.subject_line,
            preheader=content.preheader,
            headline=content.headline,
            body_copy=content.body_copy,
            cta_text=content.cta_text,
            full_html=document.full_html,
            inlined_html=document.inlined_html,
            liquid_html=document.liquid_html,
            plain_text=document.plain_text,
            brand_snapshot=brand.snapshot(),
            audience_snapshot=audience.snapshot(),
            status=AssetStatus.GENERATED,
            template_id=template_id,
            generation_mode=generation_mode,
            export_count=0,
            tokens_used=tokens_used,
            extraction_confident=extraction_confident,
            edit_history=[],
        )
        self.db.add(asset)
        self.db.commit()
        self.db.refresh(asset)
        return asset
