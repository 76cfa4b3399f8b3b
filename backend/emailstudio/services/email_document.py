"""
Derived artifacts of an email document: CSS-inlined HTML, the Liquid
variant and plain text.
"""

import logging
import re
from dataclasses import dataclass

from emailstudio.services.css_inliner import CssInliner
from emailstudio.services.plain_text import TextConverter

logger = logging.getLogger(__name__)

LIQUID_HEADER = "{% comment %}Generated by Email Studio{% endcomment %}"

CODE_FENCE_PATTERN = re.compile(r"```(?:html?)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
DOCTYPE_PATTERN = re.compile(r"<!doctype", re.IGNORECASE)

PREHEADER_MARKER_PATTERN = re.compile(r"<!--\s*preheader\s*-->.*?<!--\s*/preheader\s*-->", re.IGNORECASE | re.DOTALL)
HIDDEN_TEXT_PATTERN = re.compile(
    r"""(<(?:div|span)\b[^>]*style=(?:"[^"]*display\s*:\s*none[^"]*"|'[^']*display\s*:\s*none[^']*')[^>]*>)[^<]*""",
    re.IGNORECASE,
)
H1_PATTERN = re.compile(r"(<h1\b[^>]*>)(.*?)(</h1>)", re.IGNORECASE | re.DOTALL)
CTA_PATTERN = re.compile(
    r"""(<a\b[^>]*class=(?:"[^"]*\bcta\b[^"]*"|'[^']*\bcta\b[^']*')[^>]*>)(.*?)(</a>)""",
    re.IGNORECASE | re.DOTALL,
)


def extract_html_from_response(response: str) -> str:
    """Unwrap a fenced code block and drop any preamble before the DOCTYPE."""
    text = (response or "").strip()
    fenced = CODE_FENCE_PATTERN.search(text)
    if fenced:
        text = fenced.group(1).strip()
    doctype = DOCTYPE_PATTERN.search(text)
    if doctype and doctype.start() > 0:
        text = text[doctype.start():]
    return text


def to_liquid(html: str) -> str:
    """Swap the preheader, headline and CTA text for Liquid variables."""
    liquid, replaced = PREHEADER_MARKER_PATTERN.subn("{{ email.preheader }}", html)
    if not replaced:
        liquid = HIDDEN_TEXT_PATTERN.sub(r"\1{{ email.preheader }}", liquid, count=1)
    liquid = H1_PATTERN.sub(r"\1{{ email.headline }}\3", liquid)
    liquid = CTA_PATTERN.sub(r"\1{{ email.cta_text }}\3", liquid)
    return f"{LIQUID_HEADER}\n{liquid}"


@dataclass
class RenderedDocument:
    full_html: str
    inlined_html: str
    liquid_html: str
    plain_text: str


class DocumentRenderer:
    def __init__(self, inliner: CssInliner, text_converter: TextConverter):
        self.inliner = inliner
        self.text_converter = text_converter

    def render(self, full_html: str) -> RenderedDocument:
        return RenderedDocument(
            full_html=full_html,
            inlined_html=self.inliner.inline(full_html),
            liquid_html=to_liquid(full_html),
            plain_text=self.text_converter.to_text(full_html),
        )
