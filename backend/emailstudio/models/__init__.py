from emailstudio.models.user import User
from emailstudio.models.brand_guide import BrandGuide
from emailstudio.models.audience import Audience
from emailstudio.models.campaign import Campaign
from emailstudio.models.campaign_asset import CampaignAsset
from emailstudio.models.email_asset import EmailAsset

__all__ = [
    "User",
    "BrandGuide",
    "Audience",
    "Campaign",
    "CampaignAsset",
    "EmailAsset",
]
