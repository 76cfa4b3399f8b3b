"""
Centralized ownership checks for campaigns and email assets.
"""
from typing import List, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from emailstudio.exceptions import AccessDeniedError, NotFoundError
from emailstudio.models import EmailAsset
from emailstudio.schemas.context import BrandContext, CampaignContext
from emailstudio.services.campaign_lookup import CampaignLookup


def verify_campaign_access(
    campaign_id: UUID,
    user_id: UUID,
    lookup: CampaignLookup,
) -> Tuple[CampaignContext, BrandContext]:
    """
    Load a campaign and its brand guide, checking both belong to the user.

    Raises:
        NotFoundError: campaign or brand guide does not exist
        AccessDeniedError: either belongs to another user
    """
    campaign = lookup.get_campaign(campaign_id)
    if not campaign:
        raise NotFoundError("Campaign not found")
    if campaign.user_id != user_id:
        raise AccessDeniedError("You do not have access to this campaign")

    brand = lookup.get_brand_guide(campaign.brand_guide_id)
    if not brand:
        raise NotFoundError("Brand guide not found")
    if brand.user_id is not None and brand.user_id != user_id:
        raise AccessDeniedError("You do not have access to this brand guide")

    return campaign, brand


def get_owned_email_asset(asset_id: UUID, user_id: UUID, db: Session) -> EmailAsset:
    """
    Get an email asset owned by the user.

    Raises:
        NotFoundError: 404 if the asset does not exist
        AccessDeniedError: 403 if it belongs to another user
    """
    asset = db.query(EmailAsset).filter(EmailAsset.id == asset_id).first()
    if not asset:
        raise NotFoundError("Email asset not found")
    if asset.user_id != user_id:
        raise AccessDeniedError("You do not have access to this email asset")
    return asset


def get_owned_email_assets(asset_ids: List[UUID], user_id: UUID, db: Session) -> List[EmailAsset]:
    """
    Get several assets in request order (duplicates dropped).

    Missing and foreign ids are reported the same way, so the response does
    not reveal which ids exist for other users.
    """
    unique_ids = list(dict.fromkeys(asset_ids))
    assets = db.query(EmailAsset).filter(
        EmailAsset.id.in_(unique_ids),
        EmailAsset.user_id == user_id,
    ).all()
    by_id = {asset.id: asset for asset in assets}

    missing = [str(asset_id) for asset_id in unique_ids if asset_id not in by_id]
    if missing:
        raise NotFoundError(f"Email assets not found: {', '.join(missing)}")

    return [by_id[asset_id] for asset_id in unique_ids]
