"""
EmailAsset schemas for generation, editing and export.
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime
from uuid import UUID

from emailstudio.constants import MAX_PROMPT_LENGTH


class EditRecord(BaseModel):
    """One entry of an asset's edit history; holds the HTML that was replaced"""
    timestamp: datetime
    edit_type: Literal["manual", "ai_assisted"]
    prompt: Optional[str] = None
    previous_html: str


class EmailContentResponse(BaseModel):
    subject_line: str
    preheader: str
    headline: str
    body_copy: str
    cta_text: str


class EmailHtmlResponse(BaseModel):
    full_html: str
    inlined_html: str
    liquid_html: Optional[str] = None
    plain_text: str


class EmailAssetResponse(BaseModel):
    """Response schema for a generated email asset"""
    id: UUID
    campaign_id: UUID
    user_id: UUID
    audience_id: UUID
    email_type: str
    version_strategy: str
    version_number: int
    content: EmailContentResponse
    html: EmailHtmlResponse
    brand_snapshot: dict
    audience_snapshot: dict
    status: str
    template_id: str
    generation_mode: str
    generated_at: Optional[datetime] = None
    last_edited_at: Optional[datetime] = None
    export_count: int = 0
    tokens_used: Optional[int] = None
    extraction_confident: Optional[bool] = None
    edit_history: List[EditRecord] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GenerateEmailsRequest(BaseModel):
    """Request body for the generate endpoint"""
    campaign_id: UUID
    template_id: Optional[str] = Field(None, max_length=50, description="Template for template-based mode")
    regenerate: bool = Field(False, description="Replace existing assets for this campaign")
    generation_mode: Literal["ai-designed", "template-based"] = "ai-designed"


class GenerateEmailsResponse(BaseModel):
    assets: List[EmailAssetResponse]
    total_generated: int
    elapsed_ms: int
    generation_mode: str


class UpdateEmailRequest(BaseModel):
    """Replace the full HTML of an asset"""
    html: str = Field(..., min_length=1, description="New full HTML document")
    edit_type: Literal["manual", "ai_assisted"] = "manual"
    prompt: Optional[str] = Field(None, max_length=MAX_PROMPT_LENGTH)


class AiEditRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=MAX_PROMPT_LENGTH)
    preserve_structure: bool = True


class AiEditResponse(BaseModel):
    modified_html: str
    changes: List[str] = Field(default_factory=list)
    tokens_used: int = 0


class ExportResponse(BaseModel):
    content: str
    filename: str
    mime_type: str


class BulkExportRequest(BaseModel):
    asset_ids: List[UUID] = Field(..., min_length=1)
    format: Literal["html", "liquid", "plain_text", "json"] = "html"
    organization: Literal["flat", "by_audience", "by_type"] = "flat"


class DeleteEmailsResponse(BaseModel):
    deleted_count: int
