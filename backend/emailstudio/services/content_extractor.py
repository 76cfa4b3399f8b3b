"""
Best-effort recovery of structured email fields from generated HTML.

The model writes free-form HTML, so every field has a named default that is
used when nothing in the document matches. Fields that fell back to a default
are reported so callers can flag the asset as a low-confidence extraction.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup, Comment, Tag

from emailstudio.schemas.content import EmailContent

DEFAULT_SUBJECT_LINE = "Your Email Subject"
DEFAULT_CTA_TEXT = "Learn More"
DEFAULT_BODY_COPY = "Email body content"

MAX_BODY_PARAGRAPHS = 5
MIN_PARAGRAPH_LENGTH = 20
MAX_BUTTON_LABEL_LENGTH = 30

SUBJECT_MARKER = re.compile(r"^\s*SUBJECT:\s*(.+?)\s*$", re.IGNORECASE | re.DOTALL)
HIDDEN_STYLE = re.compile(r"display\s*:\s*none", re.IGNORECASE)
MARGIN_STYLE = re.compile(r"margin", re.IGNORECASE)
BACKGROUND_STYLE = re.compile(r"background-color", re.IGNORECASE)
CTA_CLASS = re.compile(r"cta", re.IGNORECASE)
WHITESPACE = re.compile(r"\s+")

BOILERPLATE_MARKERS = ("©", "unsubscribe")

# A button is an anchor closing td > tr > table > td > tr
BUTTON_TABLE_CHAIN = ("td", "tr", "table", "td", "tr")
TRANSPARENT_TAGS = ("tbody", "thead")


@dataclass
class ExtractionResult:
    content: EmailContent
    defaulted_fields: List[str] = field(default_factory=list)

    @property
    def confident(self) -> bool:
        return not self.defaulted_fields


def _text(tag: Optional[Tag]) -> Optional[str]:
    if tag is None:
        return None
    # Preheaders are padded with &zwnj;&nbsp; runs
    text = tag.get_text().replace("\u200c", "").replace("\xa0", " ")
    return WHITESPACE.sub(" ", text).strip() or None


def _is_boilerplate(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in BOILERPLATE_MARKERS)


def _extract_subject(soup: BeautifulSoup) -> Optional[str]:
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        match = SUBJECT_MARKER.match(str(comment))
        if match:
            subject = WHITESPACE.sub(" ", match.group(1)).strip()
            if subject:
                return subject
    return _text(soup.find("title"))


def _extract_preheader(soup: BeautifulSoup) -> Optional[str]:
    for element in soup.find_all(["div", "span", "p"], style=HIDDEN_STYLE):
        text = _text(element)
        if text:
            return text
    return None


def _closes_button_table(anchor: Tag) -> bool:
    node = anchor
    for name in BUTTON_TABLE_CHAIN:
        if node.find_next_sibling() is not None:
            return False
        node = node.parent
        while node is not None and node.name in TRANSPARENT_TAGS:
            if node.find_next_sibling() is not None:
                return False
            node = node.parent
        if node is None or node.name != name:
            return False
    return True


def _opens_with_anchor(cell: Tag) -> Optional[Tag]:
    for child in cell.children:
        if isinstance(child, Tag):
            return child if child.name == "a" else None
        if str(child).strip():
            return None
    return None


def _last_label(anchors: List[Tag]) -> Optional[str]:
    labels = [_text(anchor) for anchor in anchors]
    labels = [label for label in labels if label and not _is_boilerplate(label)]
    return labels[-1] if labels else None


def _extract_cta(soup: BeautifulSoup) -> Optional[str]:
    tagged = _text(soup.find("a", class_=CTA_CLASS))
    if tagged:
        return tagged

    buttons = [
        anchor
        for anchor in soup.find_all("a")
        if _closes_button_table(anchor)
        and len(_text(anchor) or "") <= MAX_BUTTON_LABEL_LENGTH
    ]
    button = _last_label(buttons)
    if button:
        return button

    cells = [_opens_with_anchor(cell) for cell in soup.find_all("td", style=BACKGROUND_STYLE)]
    return _last_label([anchor for anchor in cells if anchor is not None])


def _extract_body(soup: BeautifulSoup) -> Optional[str]:
    paragraphs = []
    for paragraph in soup.find_all("p", style=MARGIN_STYLE):
        text = _text(paragraph)
        if not text or len(text) <= MIN_PARAGRAPH_LENGTH or _is_boilerplate(text):
            continue
        paragraphs.append(text)
        if len(paragraphs) == MAX_BODY_PARAGRAPHS:
            break
    return "\n\n".join(paragraphs) or None


def extract_content(html: str) -> ExtractionResult:
    """Pull subject, preheader, headline, body and CTA out of an email document."""
    soup = BeautifulSoup(html, "html.parser")
    defaulted: List[str] = []

    def pick(name: str, value: Optional[str], default: str) -> str:
        if value:
            return value
        defaulted.append(name)
        return default

    subject_line = pick("subject_line", _extract_subject(soup), DEFAULT_SUBJECT_LINE)
    preheader = pick("preheader", _extract_preheader(soup), "")
    headline = pick("headline", _text(soup.find("h1")), "")
    cta_text = pick("cta_text", _extract_cta(soup), DEFAULT_CTA_TEXT)
    body_copy = pick("body_copy", _extract_body(soup), DEFAULT_BODY_COPY)

    content = EmailContent.truncated(
        subject_line=subject_line,
        preheader=preheader,
        headline=headline,
        body_copy=body_copy,
        cta_text=cta_text,
    )
    return ExtractionResult(content=content, defaulted_fields=defaulted)
