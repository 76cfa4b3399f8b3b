"""
Shared fixtures: an in-memory SQLite database, seeded campaign data and
stand-ins for the text generator and CSS inliner.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATABASE_PUBLIC_URL"] = ""

import pytest
from uuid import uuid4
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from emailstudio.config import Settings
from emailstudio.database import Base
from emailstudio.models import Audience, BrandGuide, Campaign, CampaignAsset, EmailAsset, User
from emailstudio.services.email_document import DocumentRenderer
from emailstudio.services.llm_service import GenerationResult
from emailstudio.services.plain_text import SoupTextConverter


AI_EMAIL_HTML = """<!DOCTYPE html>
<html lang="en" xmlns="http://www.w3.org/1999/xhtml">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <meta name="x-apple-disable-message-reformatting">
  <title>Spring sale starts now</title>
  <!--[if mso]><style>table { border-collapse: collapse; }</style><![endif]-->
</head>
<body style="margin: 0; padding: 0;">
  <!-- SUBJECT: Spring sale: 20% off everything -->
  <div style="display: none; max-height: 0; overflow: hidden;">Your spring picks are waiting&zwnj;&nbsp;&zwnj;&nbsp;</div>
  <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="600" style="margin: 0 auto;">
    <tr>
      <td style="padding: 24px;">
        <h1 style="margin: 0 0 16px 0;">Fresh gear for a fresh season</h1>
        <p style="margin: 0 0 16px 0;">Our spring collection just landed and it is built for long days outside.</p>
        <p style="margin: 0 0 16px 0;">Take twenty percent off every order placed before Sunday night.</p>
      </td>
    </tr>
    <tr>
      <td align="center" style="background-color: #6366f1; border-radius: 6px;">
        <a href="https://shop.example.com/spring" class="cta" style="color: #ffffff;">Shop the sale</a>
      </td>
    </tr>
    <tr>
      <td style="padding: 24px; font-size: 12px;">
        <p style="margin: 0;">&copy; 2026 Acme Outdoors. All rights reserved.</p>
        <p style="margin: 0;"><a href="https://shop.example.com/unsubscribe">Unsubscribe</a></p>
      </td>
    </tr>
  </table>
</body>
</html>"""


class FakeGenerator:
    """TextGenerator stand-in that records prompts and fails on chosen calls."""

    def __init__(self, text=AI_EMAIL_HTML, tokens_used=1200, fail_calls=None, fail_all=False):
        self.text = text
        self.tokens_used = tokens_used
        self.fail_calls = set(fail_calls or [])
        self.fail_all = fail_all
        self.calls = []

    def generate(self, prompt, max_tokens, system_message=None):
        index = len(self.calls)
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "system_message": system_message})
        if self.fail_all or index in self.fail_calls:
            raise RuntimeError("model unavailable")
        return GenerationResult(text=self.text, tokens_used=self.tokens_used)


class IdentityInliner:
    def inline(self, html):
        return html


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        edit_history_limit=10,
        undo_preserves_history=False,
        staged_regenerate=False,
    )


@pytest.fixture
def renderer():
    return DocumentRenderer(IdentityInliner(), SoupTextConverter())


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def user(db):
    user = User(id=uuid4(), email="owner@example.com", name="Owner")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def other_user(db):
    user = User(id=uuid4(), email="someone-else@example.com", name="Someone Else")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def brand(db, user):
    brand = BrandGuide(
        id=uuid4(),
        user_id=user.id,
        name="Acme Outdoors",
        colors=["#ff6600", "#222222"],
        tone="Friendly and direct",
        core_message="Gear that lasts",
        logo_url=None,
    )
    db.add(brand)
    db.commit()
    return brand


def make_audience(db, user, name, is_active=True):
    audience = Audience(
        id=uuid4(),
        user_id=user.id,
        name=name,
        description=f"{name} segment",
        demographics={"age_range": {"min": 25, "max": 45}, "location": ["UK"]},
        propensity_level="High",
        interests=["hiking"],
        pain_points=["gear wears out"],
        key_motivators=["durability"],
        is_active=is_active,
    )
    db.add(audience)
    db.commit()
    return audience


@pytest.fixture
def audiences(db, user):
    return [make_audience(db, user, "VIP Buyers"), make_audience(db, user, "New Subscribers")]


def make_campaign(db, user, brand, audiences, channels=None):
    campaign = Campaign(
        id=uuid4(),
        user_id=user.id,
        brand_guide_id=brand.id,
        name="Spring Sale",
        objective="Drive spring collection sales",
        key_messages=["20% off", "Ends Sunday"],
        call_to_action="Shop now",
        segments=[
            {"audience_id": str(audience.id), "custom_instructions": None, "enabled": True}
            for audience in audiences
        ],
        channels=channels if channels is not None else [
            {"type": "email", "enabled": True, "purpose": "Announce the sale"},
            {"type": "meta_ads", "enabled": True},
        ],
    )
    db.add(campaign)
    db.commit()
    return campaign


@pytest.fixture
def campaign(db, user, brand, audiences):
    return make_campaign(db, user, brand, audiences)


def email_version(name, strategy, headline="Fresh gear for spring", complete=True):
    content = {
        "subject_line": f"{name}: spring sale",
        "preheader": "Twenty percent off ends Sunday",
        "headline": headline,
        "body_copy": "Our spring collection just landed.\n\nTake twenty percent off before Sunday.",
        "cta_text": "Shop now",
    }
    if not complete:
        content.pop("cta_text")
    return {"version_name": name, "strategy": strategy, "status": "generated", "content": content}


def make_content_record(db, campaign, audience, versions, channel_type="email", asset_type="hero_email"):
    record = CampaignAsset(
        id=uuid4(),
        campaign_id=campaign.id,
        audience_id=audience.id,
        channel_type=channel_type,
        asset_type=asset_type,
        name=f"{audience.name} {asset_type}",
        versions=versions,
    )
    db.add(record)
    db.commit()
    return record


def make_email_asset(db, user, campaign, audience, **overrides):
    values = dict(
        id=uuid4(),
        campaign_id=campaign.id,
        user_id=user.id,
        audience_id=audience.id,
        email_type="promotional",
        version_strategy="conversion",
        version_number=1,
        subject_line="Spring sale",
        preheader="Twenty percent off",
        headline="Fresh gear",
        body_copy="Our spring collection just landed.",
        cta_text="Shop now",
        full_html="<!DOCTYPE html><html><body><h1>Fresh gear</h1></body></html>",
        inlined_html="<!DOCTYPE html><html><body><h1 style=\"margin:0\">Fresh gear</h1></body></html>",
        liquid_html="{% comment %}Generated by Email Studio{% endcomment %}\n<h1>{{ email.headline }}</h1>",
        plain_text="Fresh gear",
        brand_snapshot={"company_name": "Acme Outdoors", "primary_color": "#ff6600", "voice_attributes": []},
        audience_snapshot={"name": audience.name, "propensity_level": "High"},
        status="generated",
        template_id="ai-generated",
        generation_mode="ai-designed",
        export_count=0,
        edit_history=[],
    )
    values.update(overrides)
    asset = EmailAsset(**values)
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset
