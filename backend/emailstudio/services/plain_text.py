"""
HTML email to plain text conversion.
"""

import logging
import re
import textwrap
from typing import Protocol

from bs4 import BeautifulSoup, Comment, Doctype

logger = logging.getLogger(__name__)

WRAP_WIDTH = 80

SKIPPED_TAGS = ["head", "style", "script", "title", "img"]

BLOCK_TAGS = [
    "p", "div", "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "tr", "li", "ul", "ol", "blockquote", "hr",
]


class TextConverter(Protocol):
    def to_text(self, html: str) -> str:
        ...


class SoupTextConverter:
    """Renders the readable text of an email; links become ``text [href]``."""

    def __init__(self, width: int = WRAP_WIDTH):
        self.width = width

    def to_text(self, html: str) -> str:
        try:
            soup = BeautifulSoup(html, "html.parser")
        except Exception as e:
            logger.error(f"HTML to text conversion error: {e}")
            return ""

        for node in soup.find_all(string=lambda s: isinstance(s, (Comment, Doctype))):
            node.extract()
        for tag in soup.find_all(SKIPPED_TAGS):
            tag.decompose()
        for table in soup.select("table.footer"):
            table.decompose()

        for br in soup.find_all("br"):
            br.replace_with("\n")

        for link in soup.find_all("a"):
            label = link.get_text(" ", strip=True)
            href = (link.get("href") or "").strip()
            if href and href != "#" and href != label:
                link.replace_with(f"{label} [{href}]" if label else f"[{href}]")
            else:
                link.replace_with(label)

        for block in soup.find_all(BLOCK_TAGS):
            block.insert_before("\n")
            block.insert_after("\n")

        text = soup.get_text()
        text = text.replace("\u200c", "").replace("\xa0", " ")

        lines = [re.sub(r"[ \t]+", " ", line).strip() for line in text.splitlines()]
        text = re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()

        wrapped = "\n".join(
            textwrap.fill(line, self.width, break_long_words=False, break_on_hyphens=False) if line else ""
            for line in text.split("\n")
        )
        return wrapped.replace("<", "").replace(">", "")
