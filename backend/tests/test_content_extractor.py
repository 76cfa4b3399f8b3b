"""
Tests for structured field extraction from generated email HTML.
"""
from emailstudio.services.content_extractor import (
    DEFAULT_BODY_COPY,
    DEFAULT_CTA_TEXT,
    DEFAULT_SUBJECT_LINE,
    extract_content,
)

from conftest import AI_EMAIL_HTML


class TestExtractContent:
    """Tests for extract_content."""

    def test_extracts_every_field_from_a_complete_email(self):
        result = extract_content(AI_EMAIL_HTML)

        assert result.confident is True
        assert result.defaulted_fields == []
        assert result.content.subject_line == "Spring sale: 20% off everything"
        assert result.content.preheader == "Your spring picks are waiting"
        assert result.content.headline == "Fresh gear for a fresh season"
        assert result.content.cta_text == "Shop the sale"

    def test_body_skips_footer_paragraphs(self):
        result = extract_content(AI_EMAIL_HTML)

        assert result.content.body_copy == (
            "Our spring collection just landed and it is built for long days outside.\n\n"
            "Take twenty percent off every order placed before Sunday night."
        )
        assert "Unsubscribe" not in result.content.body_copy
        assert "rights reserved" not in result.content.body_copy

    def test_subject_falls_back_to_title(self):
        html = AI_EMAIL_HTML.replace("<!-- SUBJECT: Spring sale: 20% off everything -->", "")

        result = extract_content(html)

        assert result.content.subject_line == "Spring sale starts now"
        assert "subject_line" not in result.defaulted_fields

    def test_cta_falls_back_to_last_button_cell(self):
        html = (
            '<table><tr><td style="background-color: #000;"><a href="/a">First</a></td></tr>'
            '<tr><td style="background-color: #111;"><a href="/b">Buy now</a></td></tr></table>'
        )

        result = extract_content(html)

        assert result.content.cta_text == "Buy now"

    def test_nested_button_wins_over_footer_cell(self):
        html = (
            '<table><tr><td align="center">'
            '<table><tr><td style="border-radius:6px;background-color:#6366f1;">'
            '<a href="/shop">Shop Now</a></td></tr></table>'
            "</td></tr>"
            '<tr><td style="background-color:#f4f4f4;font-size:12px;">'
            '<a href="/unsubscribe">Unsubscribe</a> from these emails</td></tr></table>'
        )

        result = extract_content(html)

        assert result.content.cta_text == "Shop Now"
        assert "cta_text" not in result.defaulted_fields

    def test_footer_links_are_never_the_cta(self):
        html = (
            '<table><tr><td style="background-color:#f4f4f4;">'
            '<a href="/unsubscribe">Unsubscribe</a></td></tr></table>'
        )

        result = extract_content(html)

        assert result.content.cta_text == DEFAULT_CTA_TEXT
        assert "cta_text" in result.defaulted_fields

    def test_subject_comes_from_the_marker_comment_only(self):
        html = "<!--[if mso]><style>td { padding: 0; }</style><![endif]--><!-- SUBJECT:  Last   call --><title>Fallback</title>"

        result = extract_content(html)

        assert result.content.subject_line == "Last call"

    def test_defaults_are_named_and_reported(self):
        result = extract_content("<html><body><div>No structure at all</div></body></html>")

        assert result.confident is False
        assert result.content.subject_line == DEFAULT_SUBJECT_LINE
        assert result.content.cta_text == DEFAULT_CTA_TEXT
        assert result.content.body_copy == DEFAULT_BODY_COPY
        assert result.content.preheader == ""
        assert result.content.headline == ""
        assert set(result.defaulted_fields) == {"subject_line", "preheader", "headline", "cta_text", "body_copy"}

    def test_short_paragraphs_are_ignored(self):
        html = '<p style="margin: 0;">Too short.</p><p style="margin: 0;">This paragraph is long enough to keep.</p>'

        result = extract_content(html)

        assert result.content.body_copy == "This paragraph is long enough to keep."

    def test_body_is_limited_to_five_paragraphs(self):
        html = "".join(
            f'<p style="margin: 0 0 16px 0;">Paragraph number {i} has enough words in it.</p>'
            for i in range(1, 8)
        )

        result = extract_content(html)

        paragraphs = result.content.body_copy.split("\n\n")
        assert len(paragraphs) == 5
        assert paragraphs[-1].startswith("Paragraph number 5")

    def test_fields_are_clipped_to_storage_caps(self):
        html = f"<!-- SUBJECT: {'x' * 300} --><h1>{'h' * 400}</h1>"

        result = extract_content(html)

        assert len(result.content.subject_line) == 100
        assert len(result.content.headline) == 120

    def test_entities_are_decoded(self):
        html = '<h1>Save &amp; explore</h1><a class="btn cta" href="#">Go &rarr;</a>'

        result = extract_content(html)

        assert result.content.headline == "Save & explore"
        assert result.content.cta_text == "Go →"
