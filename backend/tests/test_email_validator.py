"""
Tests for email HTML validation and sanitization.
"""
from emailstudio.services.email_validator import (
    sanitize_email_html,
    validate_email_html,
)

from conftest import AI_EMAIL_HTML


class TestValidateEmailHtml:
    """Tests for validate_email_html."""

    def test_well_formed_email_is_valid(self):
        result = validate_email_html(AI_EMAIL_HTML)

        assert result.valid is True
        assert result.errors == []

    def test_missing_doctype_is_an_error(self):
        html = AI_EMAIL_HTML.replace("<!DOCTYPE html>", "")

        result = validate_email_html(html)

        assert result.valid is False
        assert "Missing DOCTYPE declaration" in result.errors

    def test_flexbox_and_grid_are_errors(self):
        html = AI_EMAIL_HTML.replace(
            '<td style="padding: 24px;">',
            '<td style="padding: 24px;"><div style="display: flex;"></div><div style="display:grid"></div>',
        )

        result = validate_email_html(html)

        assert result.valid is False
        assert any("Flexbox" in error for error in result.errors)
        assert any("CSS Grid" in error for error in result.errors)

    def test_div_layout_without_tables_or_styles(self):
        result = validate_email_html("<!DOCTYPE html><html><body><div>Hello</div></body></html>")

        assert result.valid is False
        assert any("table" in error for error in result.errors)
        assert any("inline styles" in error for error in result.errors)

    def test_recommendations_are_warnings_not_errors(self):
        html = (
            '<!DOCTYPE html><html><body>'
            '<table style="width: 100%;"><tr><td><h1>One</h1><h1>Two</h1>'
            '<img src="a.png"></td></tr></table></body></html>'
        )

        result = validate_email_html(html)

        assert result.valid is True
        assert "Multiple H1 headings found - consider using only one" in result.warnings
        assert "1 image(s) missing alt text" in result.warnings
        assert any("unsubscribe" in warning for warning in result.warnings)
        assert any('role="presentation"' in warning for warning in result.warnings)
        assert "No hidden preheader detected" in result.warnings


class TestSanitizeEmailHtml:
    """Tests for sanitize_email_html."""

    def test_prepends_doctype(self):
        html = '<html><body><table role="presentation" cellpadding="0" cellspacing="0" border="0"></table></body></html>'

        sanitized = sanitize_email_html(html)

        assert sanitized.startswith("<!DOCTYPE html>\n")
        assert sanitized == "<!DOCTYPE html>\n" + html

    def test_existing_doctype_is_kept(self):
        sanitized = sanitize_email_html(AI_EMAIL_HTML)

        assert sanitized.count("<!DOCTYPE html>") == 1

    def test_tables_get_role_and_spacing_attributes(self):
        sanitized = sanitize_email_html('<!DOCTYPE html><table width="600"><tr><td>x</td></tr></table>')

        assert '<table role="presentation" width="600" cellpadding="0" cellspacing="0" border="0">' in sanitized

    def test_existing_attributes_are_not_duplicated(self):
        html = '<!DOCTYPE html><table role="grid" cellpadding="4" style="border-collapse: collapse;"></table>'

        sanitized = sanitize_email_html(html)

        assert sanitized.count("role=") == 1
        assert sanitized.count("cellpadding=") == 1
        assert 'cellspacing="0"' in sanitized
        assert 'border="0"' in sanitized

    def test_sanitize_is_idempotent(self):
        html = '<p>Hi</p><table><tr><td>a</td></tr></table><TABLE class="x"/>'

        once = sanitize_email_html(html)
        twice = sanitize_email_html(once)

        assert once == twice

    def test_sanitized_output_passes_doctype_check(self):
        html = AI_EMAIL_HTML.replace("<!DOCTYPE html>\n", "")

        assert validate_email_html(html).valid is False
        assert validate_email_html(sanitize_email_html(html)).valid is True
