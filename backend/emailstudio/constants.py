"""
Fixed vocabularies shared by models, schemas and services.
"""
from typing import Dict, List


class AssetStatus:
    PENDING = "pending"
    GENERATED = "generated"
    EDITED = "edited"
    APPROVED = "approved"

    ALL = [PENDING, GENERATED, EDITED, APPROVED]


class ChannelType:
    EMAIL = "email"
    META_ADS = "meta_ads"


class GenerationMode:
    AI_DESIGNED = "ai-designed"
    TEMPLATE_BASED = "template-based"

    ALL = [AI_DESIGNED, TEMPLATE_BASED]


class VersionStrategy:
    CONVERSION = "conversion"
    AWARENESS = "awareness"
    URGENCY = "urgency"
    EMOTIONAL = "emotional"

    ALL = [CONVERSION, AWARENESS, URGENCY, EMOTIONAL]


class EmailType:
    PROMOTIONAL = "promotional"
    WELCOME = "welcome"
    ABANDONED_CART = "abandoned_cart"
    NEWSLETTER = "newsletter"
    ANNOUNCEMENT = "announcement"

    ALL = [PROMOTIONAL, WELCOME, ABANDONED_CART, NEWSLETTER, ANNOUNCEMENT]


class EditType:
    MANUAL = "manual"
    AI_ASSISTED = "ai_assisted"


class ExportFormat:
    HTML = "html"
    LIQUID = "liquid"
    PLAIN_TEXT = "plain_text"
    JSON = "json"

    ALL = [HTML, LIQUID, PLAIN_TEXT, JSON]


class OrganizationStrategy:
    FLAT = "flat"
    BY_AUDIENCE = "by_audience"
    BY_TYPE = "by_type"

    ALL = [FLAT, BY_AUDIENCE, BY_TYPE]


EMAIL_TEMPLATES: List[str] = ["minimal", "hero_image", "product_grid", "newsletter"]

# Strategies generated per segment in ai-designed mode
AI_STRATEGIES: List[str] = [VersionStrategy.CONVERSION, VersionStrategy.AWARENESS]

MIN_VERSION_NUMBER = 1
MAX_VERSION_NUMBER = 4

# Hard caps on the stored content fields
CONTENT_CHAR_CAPS: Dict[str, int] = {
    "subject_line": 100,
    "preheader": 150,
    "headline": 120,
    "body_copy": 5000,
    "cta_text": 50,
}

# Copy guidance given to the model (tighter than the storage caps)
COPY_GUIDELINES: Dict[str, int] = {
    "subject_line": 60,
    "preheader": 90,
    "headline": 80,
    "cta_text": 25,
}

DEFAULT_PRIMARY_COLOR = "#6366f1"
DEFAULT_SECONDARY_COLOR = "#4f46e5"

MAX_PROMPT_LENGTH = 1000

# Previously generated copy that can feed template mode
EMAIL_ASSET_TYPE_MAPPING: Dict[str, str] = {
    "hero_email": EmailType.PROMOTIONAL,
    "follow_up_email": EmailType.PROMOTIONAL,
    "promotional_email": EmailType.PROMOTIONAL,
}
