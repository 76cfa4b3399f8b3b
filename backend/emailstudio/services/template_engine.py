"""
Populates the static email templates with content, brand and campaign data.
"""

import html
import logging
import re
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Optional

from emailstudio.constants import EMAIL_TEMPLATES
from emailstudio.schemas.content import EmailContent
from emailstudio.schemas.context import AudienceContext, BrandContext, CampaignContext

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"
DEFAULT_TEMPLATE_ID = "minimal"

TOKEN_PATTERN = re.compile(r"\{\{([A-Z_]+)\}\}")
LOGO_BLOCK_PATTERN = re.compile(r"<!--LOGO_START-->.*?<!--LOGO_END-->", re.DOTALL)
HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

PARAGRAPH_STYLE = "margin: 0 0 16px 0; line-height: 1.6;"


def resolve_template_id(template_id: Optional[str]) -> str:
    if template_id in EMAIL_TEMPLATES:
        return template_id
    if template_id:
        logger.warning(f"Unknown email template '{template_id}', using '{DEFAULT_TEMPLATE_ID}'")
    return DEFAULT_TEMPLATE_ID


@lru_cache(maxsize=None)
def load_template(template_id: str) -> str:
    path = TEMPLATE_DIR / f"{resolve_template_id(template_id)}.html"
    return path.read_text(encoding="utf-8")


def get_contrast_color(hex_color: str) -> str:
    """Black or white text for a background, by perceived luminance."""
    match = HEX_COLOR_PATTERN.match((hex_color or "").strip())
    if not match:
        return "#ffffff"
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luminance > 0.5 else "#ffffff"


def format_body_copy(text: str) -> str:
    """Split body copy on blank lines into styled paragraphs."""
    paragraphs = [p.strip() for p in (text or "").split("\n\n") if p.strip()]
    return "\n".join(
        f'<p style="{PARAGRAPH_STYLE}">{html.escape(p)}</p>' for p in paragraphs
    )


class EmailTemplateEngine:
    """Renders one of the fixed template skeletons; unknown ids fall back to minimal."""

    def render(
        self,
        template_id: str,
        content: EmailContent,
        brand: BrandContext,
        audience: AudienceContext,
        campaign: CampaignContext,
        year: Optional[int] = None,
    ) -> str:
        template = load_template(resolve_template_id(template_id))

        if not brand.logo_url:
            template = LOGO_BLOCK_PATTERN.sub("", template)

        values = {
            "SUBJECT_LINE": html.escape(content.subject_line),
            "PREHEADER": html.escape(content.preheader),
            "HEADLINE": html.escape(content.headline),
            "BODY_COPY": format_body_copy(content.body_copy),
            "CTA_TEXT": html.escape(content.cta_text),
            "COMPANY_NAME": html.escape(brand.name),
            "PRIMARY_COLOR": html.escape(brand.primary_color),
            "BUTTON_TEXT_COLOR": get_contrast_color(brand.primary_color),
            "LOGO_URL": html.escape(brand.logo_url or ""),
            "CAMPAIGN_NAME": html.escape(campaign.name),
            "AUDIENCE_NAME": html.escape(audience.name),
            "CURRENT_YEAR": str(year or datetime.now(timezone.utc).year),
        }

        # Single pass, so substituted values are never re-scanned for tokens
        return TOKEN_PATTERN.sub(lambda m: values.get(m.group(1), m.group(0)), template)
