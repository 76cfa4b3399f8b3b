"""
Pydantic schemas organized by domain.
"""

from .context import (
    BrandContext,
    AgeRange,
    Demographics,
    AudienceContext,
    SegmentConfig,
    ChannelConfig,
    CampaignContext,
    GenerationContext,
)

from .content import (
    EmailContent,
    EmailChannelContent,
    MetaAdChannelContent,
    ChannelContent,
    ContentVersion,
    ContentRecord,
)

from .email_asset import (
    EditRecord,
    EmailContentResponse,
    EmailHtmlResponse,
    EmailAssetResponse,
    GenerateEmailsRequest,
    GenerateEmailsResponse,
    UpdateEmailRequest,
    AiEditRequest,
    AiEditResponse,
    ExportResponse,
    BulkExportRequest,
    DeleteEmailsResponse,
)
