"""
Email asset routes: generation, editing, approval, undo and export.
Access: the authenticated user's own campaigns and assets only.
"""
from fastapi import APIRouter, Depends, Query, Response
from uuid import UUID
from typing import List
import logging

from emailstudio.models import User
from emailstudio.schemas import (
    AiEditRequest,
    AiEditResponse,
    BulkExportRequest,
    DeleteEmailsResponse,
    EmailAssetResponse,
    ExportResponse,
    GenerateEmailsRequest,
    GenerateEmailsResponse,
    UpdateEmailRequest,
)
from emailstudio.auth import get_current_user
from emailstudio.dependencies import get_editor_service, get_export_service, get_generation_service
from emailstudio.services.email_editor import EmailEditorService
from emailstudio.services.email_exporter import BULK_EXPORT_FILENAME, EmailExportService
from emailstudio.services.email_generation_service import EmailGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/emails", tags=["emails"])


@router.post("/generate", response_model=GenerateEmailsResponse, status_code=201)
def generate_emails(
    request: GenerateEmailsRequest,
    current_user: User = Depends(get_current_user),
    service: EmailGenerationService = Depends(get_generation_service),
):
    """Generate email assets for every enabled segment of a campaign."""
    logger.info(
        f"Generate emails for campaign {request.campaign_id} "
        f"(mode={request.generation_mode}, regenerate={request.regenerate})"
    )
    outcome = service.generate(
        campaign_id=request.campaign_id,
        user_id=current_user.id,
        template_id=request.template_id,
        regenerate=request.regenerate,
        generation_mode=request.generation_mode,
    )
    return GenerateEmailsResponse(
        assets=[EmailAssetResponse.model_validate(asset) for asset in outcome.assets],
        total_generated=outcome.total_generated,
        elapsed_ms=outcome.elapsed_ms,
        generation_mode=outcome.generation_mode,
    )


@router.get("/campaign/{campaign_id}", response_model=List[EmailAssetResponse])
def list_campaign_emails(
    campaign_id: UUID,
    current_user: User = Depends(get_current_user),
    editor: EmailEditorService = Depends(get_editor_service),
):
    assets = editor.list_for_campaign(campaign_id, current_user.id)
    return [EmailAssetResponse.model_validate(asset) for asset in assets]


@router.delete("/campaign/{campaign_id}", response_model=DeleteEmailsResponse)
def delete_campaign_emails(
    campaign_id: UUID,
    current_user: User = Depends(get_current_user),
    service: EmailGenerationService = Depends(get_generation_service),
):
    deleted = service.delete_campaign_assets(campaign_id, current_user.id)
    logger.info(f"Deleted {deleted} email assets for campaign {campaign_id}")
    return DeleteEmailsResponse(deleted_count=deleted)


@router.post("/export/bulk")
def bulk_export_emails(
    request: BulkExportRequest,
    current_user: User = Depends(get_current_user),
    exporter: EmailExportService = Depends(get_export_service),
):
    """Export several assets as a ZIP archive."""
    archive = exporter.bulk_export(
        request.asset_ids,
        current_user.id,
        export_format=request.format,
        organization=request.organization,
    )
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{BULK_EXPORT_FILENAME}"'},
    )


@router.get("/{asset_id}", response_model=EmailAssetResponse)
def get_email(
    asset_id: UUID,
    current_user: User = Depends(get_current_user),
    editor: EmailEditorService = Depends(get_editor_service),
):
    return EmailAssetResponse.model_validate(editor.get(asset_id, current_user.id))


@router.put("/{asset_id}", response_model=EmailAssetResponse)
def update_email(
    asset_id: UUID,
    request: UpdateEmailRequest,
    current_user: User = Depends(get_current_user),
    editor: EmailEditorService = Depends(get_editor_service),
):
    """Replace an asset's HTML; the previous HTML goes to its edit history."""
    asset = editor.update(asset_id, current_user.id, request.html, request.edit_type, request.prompt)
    return EmailAssetResponse.model_validate(asset)


@router.post("/{asset_id}/ai-edit", response_model=AiEditResponse)
def ai_edit_email(
    asset_id: UUID,
    request: AiEditRequest,
    current_user: User = Depends(get_current_user),
    editor: EmailEditorService = Depends(get_editor_service),
):
    """Propose an AI modification of an asset's HTML without saving it."""
    result = editor.ai_edit(asset_id, current_user.id, request.prompt, request.preserve_structure)
    return AiEditResponse(
        modified_html=result.modified_html,
        changes=result.changes,
        tokens_used=result.tokens_used,
    )


@router.patch("/{asset_id}/approve", response_model=EmailAssetResponse)
def approve_email(
    asset_id: UUID,
    current_user: User = Depends(get_current_user),
    editor: EmailEditorService = Depends(get_editor_service),
):
    return EmailAssetResponse.model_validate(editor.approve(asset_id, current_user.id))


@router.post("/{asset_id}/undo", response_model=EmailAssetResponse)
def undo_email_edit(
    asset_id: UUID,
    current_user: User = Depends(get_current_user),
    editor: EmailEditorService = Depends(get_editor_service),
):
    return EmailAssetResponse.model_validate(editor.undo(asset_id, current_user.id))


@router.get("/{asset_id}/export")
def export_email(
    asset_id: UUID,
    export_format: str = Query("html", alias="format", description="html, liquid, plain_text or json"),
    download: bool = Query(False, description="Return the file itself instead of a JSON envelope"),
    current_user: User = Depends(get_current_user),
    exporter: EmailExportService = Depends(get_export_service),
):
    exported = exporter.export(asset_id, current_user.id, export_format)
    if download:
        return Response(
            content=exported.content,
            media_type=exported.mime_type,
            headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
        )
    return ExportResponse(
        content=exported.content,
        filename=exported.filename,
        mime_type=exported.mime_type,
    )
