"""
Email copy schemas and the per-channel content union.

Previously generated campaign copy is stored per channel with different
shapes; it is resolved into EmailChannelContent or MetaAdChannelContent
(discriminated by ``channel``) where it is read, never passed around as a
raw dict.
"""
from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID

from emailstudio.constants import CONTENT_CHAR_CAPS


class EmailContent(BaseModel):
    """The five structured fields of an email, within their storage caps."""
    subject_line: str = Field(..., max_length=CONTENT_CHAR_CAPS["subject_line"])
    preheader: str = Field("", max_length=CONTENT_CHAR_CAPS["preheader"])
    headline: str = Field("", max_length=CONTENT_CHAR_CAPS["headline"])
    body_copy: str = Field(..., max_length=CONTENT_CHAR_CAPS["body_copy"])
    cta_text: str = Field(..., max_length=CONTENT_CHAR_CAPS["cta_text"])

    @classmethod
    def truncated(cls, **fields: Optional[str]) -> "EmailContent":
        """Build content, clipping every field to its cap."""
        return cls(**{
            name: (fields.get(name) or "")[:cap]
            for name, cap in CONTENT_CHAR_CAPS.items()
        })


class EmailChannelContent(BaseModel):
    channel: Literal["email"] = "email"
    subject_line: Optional[str] = None
    preheader: Optional[str] = None
    headline: Optional[str] = None
    body_copy: Optional[str] = None
    cta_text: Optional[str] = None

    def has_required_fields(self) -> bool:
        return all([self.subject_line, self.headline, self.body_copy, self.cta_text])

    def to_email_content(self) -> EmailContent:
        return EmailContent.truncated(
            subject_line=self.subject_line,
            preheader=self.preheader,
            headline=self.headline,
            body_copy=self.body_copy,
            cta_text=self.cta_text,
        )


class MetaAdChannelContent(BaseModel):
    channel: Literal["meta_ads"] = "meta_ads"
    primary_text: Optional[str] = None
    headline: Optional[str] = None
    description: Optional[str] = None
    cta_button: Optional[str] = None


ChannelContent = Annotated[
    Union[EmailChannelContent, MetaAdChannelContent],
    Field(discriminator="channel"),
]


class ContentVersion(BaseModel):
    version_name: str = ""
    strategy: Optional[str] = None
    status: Optional[str] = None
    content: ChannelContent


class ContentRecord(BaseModel):
    """One previously generated campaign asset (campaign x audience x channel)."""
    id: UUID
    campaign_id: UUID
    audience_id: UUID
    channel_type: str
    asset_type: str
    versions: List[ContentVersion] = Field(default_factory=list)
