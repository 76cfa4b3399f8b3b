"""
Integration tests for the email routes.
"""
import io
import zipfile
import pytest
from uuid import uuid4
from fastapi.testclient import TestClient

from emailstudio.auth import get_current_user
from emailstudio.database import get_db
from emailstudio.dependencies import get_css_inliner, get_text_generator
from emailstudio.main import app

from conftest import FakeGenerator, IdentityInliner, make_campaign, make_email_asset


@pytest.fixture
def client(db, user, generator):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_text_generator] = lambda: generator
    app.dependency_overrides[get_css_inliner] = lambda: IdentityInliner()
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestCoreRoutes:
    def test_api_info(self, client):
        response = client.get("/api")

        assert response.status_code == 200
        assert response.json() == {"message": "Email Studio API", "version": "0.1.0"}

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}

    def test_routes_require_a_token(self, db):
        app.dependency_overrides[get_db] = lambda: db
        try:
            response = TestClient(app).get(f"/api/emails/{uuid4()}")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code in (401, 403)


class TestGenerateRoute:
    """Tests for POST /api/emails/generate."""

    def test_generate(self, client, campaign):
        response = client.post("/api/emails/generate", json={"campaign_id": str(campaign.id)})

        assert response.status_code == 201
        data = response.json()
        assert data["total_generated"] == 4
        assert data["generation_mode"] == "ai-designed"
        assert data["elapsed_ms"] >= 0
        asset = data["assets"][0]
        assert asset["content"]["cta_text"] == "Shop the sale"
        assert asset["html"]["liquid_html"].startswith("{% comment %}")
        assert asset["status"] == "generated"

    def test_generate_without_email_channel(self, client, db, user, brand, audiences):
        campaign = make_campaign(db, user, brand, audiences, channels=[{"type": "meta_ads", "enabled": True}])

        response = client.post("/api/emails/generate", json={"campaign_id": str(campaign.id)})

        assert response.status_code == 400
        assert response.json()["detail"] == "No email channel enabled for this campaign"

    def test_total_failure_is_reported(self, client, campaign):
        app.dependency_overrides[get_text_generator] = lambda: FakeGenerator(fail_all=True)

        response = client.post("/api/emails/generate", json={"campaign_id": str(campaign.id)})

        assert response.status_code == 422
        assert "No generated content found" in response.json()["detail"]

    def test_unknown_generation_mode(self, client, campaign):
        response = client.post(
            "/api/emails/generate",
            json={"campaign_id": str(campaign.id), "generation_mode": "handwritten"},
        )

        assert response.status_code == 422

    def test_missing_campaign(self, client):
        response = client.post("/api/emails/generate", json={"campaign_id": str(uuid4())})

        assert response.status_code == 404


class TestAssetRoutes:
    """Tests for listing, editing, approval and undo."""

    @pytest.fixture
    def asset(self, db, user, campaign, audiences):
        return make_email_asset(db, user, campaign, audiences[0])

    def test_list_and_get(self, client, campaign, asset):
        listed = client.get(f"/api/emails/campaign/{campaign.id}")
        fetched = client.get(f"/api/emails/{asset.id}")

        assert listed.status_code == 200
        assert [item["id"] for item in listed.json()] == [str(asset.id)]
        assert fetched.status_code == 200
        assert fetched.json()["content"]["headline"] == "Fresh gear"

    def test_foreign_asset(self, client, db, other_user, campaign, audiences):
        foreign = make_email_asset(db, other_user, campaign, audiences[0])

        response = client.get(f"/api/emails/{foreign.id}")

        assert response.status_code == 403

    def test_edit_approve_undo(self, client, asset):
        original_html = asset.full_html

        edited = client.put(f"/api/emails/{asset.id}", json={"html": "<p>Second draft</p>"})
        assert edited.status_code == 200
        assert edited.json()["status"] == "edited"
        assert edited.json()["edit_history"][0]["previous_html"] == original_html

        approved = client.patch(f"/api/emails/{asset.id}/approve")
        assert approved.json()["status"] == "approved"
        assert len(approved.json()["edit_history"]) == 1

        undone = client.post(f"/api/emails/{asset.id}/undo")
        assert undone.status_code == 200
        assert undone.json()["html"]["full_html"] == original_html
        assert undone.json()["edit_history"] == []

        nothing_left = client.post(f"/api/emails/{asset.id}/undo")
        assert nothing_left.status_code == 409

    def test_empty_html_is_rejected(self, client, asset):
        response = client.put(f"/api/emails/{asset.id}", json={"html": ""})

        assert response.status_code == 422

    def test_ai_edit(self, client, asset):
        response = client.post(f"/api/emails/{asset.id}/ai-edit", json={"prompt": "Make it warmer"})

        assert response.status_code == 200
        data = response.json()
        assert data["modified_html"].startswith("<!DOCTYPE html>")
        assert data["changes"] == ['Applied modification: "Make it warmer"']
        assert data["tokens_used"] == 1200

    def test_delete_campaign_emails(self, client, campaign, asset):
        asset_id = asset.id

        response = client.delete(f"/api/emails/campaign/{campaign.id}")

        assert response.status_code == 200
        assert response.json() == {"deleted_count": 1}
        assert client.get(f"/api/emails/{asset_id}").status_code == 404


class TestExportRoutes:
    @pytest.fixture
    def asset(self, db, user, campaign, audiences):
        return make_email_asset(db, user, campaign, audiences[0], version_strategy="urgency", version_number=2)

    def test_export_envelope(self, client, asset):
        response = client.get(f"/api/emails/{asset.id}/export", params={"format": "html"})

        assert response.status_code == 200
        assert response.json()["filename"] == "VIP_Buyers-urgency-2.html"
        assert response.json()["mime_type"] == "text/html"

    def test_export_download(self, client, asset):
        response = client.get(f"/api/emails/{asset.id}/export", params={"format": "plain_text", "download": True})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert 'filename="VIP_Buyers-urgency-2.txt"' in response.headers["content-disposition"]
        assert response.text == "Fresh gear"

    def test_unsupported_format(self, client, asset):
        response = client.get(f"/api/emails/{asset.id}/export", params={"format": "pdf"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported format: pdf"

    def test_bulk_export(self, client, asset):
        response = client.post(
            "/api/emails/export/bulk",
            json={"asset_ids": [str(asset.id)], "format": "html", "organization": "by_audience"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="emails-export.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            assert archive.namelist() == ["VIP_Buyers/VIP_Buyers-urgency-2.html"]

    def test_bulk_export_needs_ids(self, client):
        response = client.post("/api/emails/export/bulk", json={"asset_ids": []})

        assert response.status_code == 422
