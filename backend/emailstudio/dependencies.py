"""
FastAPI dependencies wiring the email services to their collaborators.
Tests override the collaborator dependencies (generator, lookup, inliner,
text converter) through app.dependency_overrides.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from emailstudio.config import Settings, get_settings
from emailstudio.database import get_db
from emailstudio.services.campaign_lookup import CampaignLookup, SqlCampaignLookup
from emailstudio.services.css_inliner import CssInliner, PremailerInliner
from emailstudio.services.email_document import DocumentRenderer
from emailstudio.services.email_editor import EmailEditorService
from emailstudio.services.email_exporter import EmailExportService
from emailstudio.services.email_generation_service import EmailGenerationService
from emailstudio.services.llm_service import TextGenerator
from emailstudio.services.plain_text import SoupTextConverter, TextConverter


def get_text_generator(request: Request) -> TextGenerator:
    """Dependency to get the LLM service from app state"""
    return request.app.state.llm_service


def get_campaign_lookup(db: Session = Depends(get_db)) -> CampaignLookup:
    return SqlCampaignLookup(db)


def get_css_inliner() -> CssInliner:
    return PremailerInliner()


def get_text_converter() -> TextConverter:
    return SoupTextConverter()


def get_document_renderer(
    inliner: CssInliner = Depends(get_css_inliner),
    text_converter: TextConverter = Depends(get_text_converter),
) -> DocumentRenderer:
    return DocumentRenderer(inliner, text_converter)


def get_generation_service(
    db: Session = Depends(get_db),
    lookup: CampaignLookup = Depends(get_campaign_lookup),
    generator: TextGenerator = Depends(get_text_generator),
    renderer: DocumentRenderer = Depends(get_document_renderer),
    settings: Settings = Depends(get_settings),
) -> EmailGenerationService:
    return EmailGenerationService(db, lookup, generator, renderer, settings)


def get_editor_service(
    db: Session = Depends(get_db),
    renderer: DocumentRenderer = Depends(get_document_renderer),
    generator: TextGenerator = Depends(get_text_generator),
    settings: Settings = Depends(get_settings),
) -> EmailEditorService:
    return EmailEditorService(db, renderer, settings, generator=generator)


def get_export_service(db: Session = Depends(get_db)) -> EmailExportService:
    return EmailExportService(db)
