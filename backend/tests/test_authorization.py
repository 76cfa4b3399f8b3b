"""
Tests for centralized authorization module.
"""
import pytest
from uuid import uuid4
from unittest.mock import Mock

from emailstudio.authorization import (
    get_owned_email_asset,
    get_owned_email_assets,
    verify_campaign_access,
)
from emailstudio.exceptions import AccessDeniedError, NotFoundError
from emailstudio.schemas.context import BrandContext, CampaignContext

from conftest import make_email_asset


def make_lookup(campaign=None, brand=None):
    lookup = Mock()
    lookup.get_campaign.return_value = campaign
    lookup.get_brand_guide.return_value = brand
    return lookup


class TestVerifyCampaignAccess:
    """Tests for verify_campaign_access function."""

    def test_owner_gets_campaign_and_brand(self):
        user_id = uuid4()
        campaign = CampaignContext(id=uuid4(), user_id=user_id, brand_guide_id=uuid4(), name="Spring Sale")
        brand = BrandContext(id=campaign.brand_guide_id, user_id=user_id, name="Acme")
        lookup = make_lookup(campaign, brand)

        result = verify_campaign_access(campaign.id, user_id, lookup)

        assert result == (campaign, brand)
        lookup.get_brand_guide.assert_called_once_with(campaign.brand_guide_id)

    def test_campaign_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            verify_campaign_access(uuid4(), uuid4(), make_lookup())

        assert exc_info.value.status_code == 404

    def test_campaign_of_another_user(self):
        campaign = CampaignContext(id=uuid4(), user_id=uuid4(), brand_guide_id=uuid4(), name="Spring Sale")
        lookup = make_lookup(campaign)

        with pytest.raises(AccessDeniedError) as exc_info:
            verify_campaign_access(campaign.id, uuid4(), lookup)

        assert exc_info.value.status_code == 403
        lookup.get_brand_guide.assert_not_called()

    def test_brand_guide_not_found(self):
        user_id = uuid4()
        campaign = CampaignContext(id=uuid4(), user_id=user_id, brand_guide_id=uuid4(), name="Spring Sale")

        with pytest.raises(NotFoundError):
            verify_campaign_access(campaign.id, user_id, make_lookup(campaign))

    def test_brand_guide_of_another_user(self):
        user_id = uuid4()
        campaign = CampaignContext(id=uuid4(), user_id=user_id, brand_guide_id=uuid4(), name="Spring Sale")
        brand = BrandContext(id=campaign.brand_guide_id, user_id=uuid4(), name="Acme")

        with pytest.raises(AccessDeniedError):
            verify_campaign_access(campaign.id, user_id, make_lookup(campaign, brand))


class TestOwnedEmailAssets:
    def test_owned_asset(self, db, user, campaign, audiences):
        asset = make_email_asset(db, user, campaign, audiences[0])

        assert get_owned_email_asset(asset.id, user.id, db).id == asset.id

    def test_missing_asset(self, db, user):
        with pytest.raises(NotFoundError):
            get_owned_email_asset(uuid4(), user.id, db)

    def test_foreign_asset(self, db, user, other_user, campaign, audiences):
        asset = make_email_asset(db, user, campaign, audiences[0])

        with pytest.raises(AccessDeniedError):
            get_owned_email_asset(asset.id, other_user.id, db)

    def test_several_assets_keep_request_order(self, db, user, campaign, audiences):
        first = make_email_asset(db, user, campaign, audiences[0])
        second = make_email_asset(db, user, campaign, audiences[1])

        assets = get_owned_email_assets([second.id, first.id, second.id], user.id, db)

        assert [a.id for a in assets] == [second.id, first.id]

    def test_missing_ids_are_listed(self, db, user, campaign, audiences):
        asset = make_email_asset(db, user, campaign, audiences[0])
        missing = uuid4()

        with pytest.raises(NotFoundError) as exc_info:
            get_owned_email_assets([asset.id, missing], user.id, db)

        assert str(missing) in exc_info.value.message
        assert str(asset.id) not in exc_info.value.message
