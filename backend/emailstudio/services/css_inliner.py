"""
CSS inlining for email-client compatibility.
"""

import logging
from typing import Protocol

from premailer import Premailer

logger = logging.getLogger(__name__)


class CssInliner(Protocol):
    def inline(self, html: str) -> str:
        ...


class PremailerInliner:
    """Moves <style> rules onto element style attributes; keeps the style blocks for clients that read them."""

    def __init__(self, keep_style_tags: bool = True):
        self.keep_style_tags = keep_style_tags

    def inline(self, html: str) -> str:
        try:
            return Premailer(
                html,
                keep_style_tags=self.keep_style_tags,
                strip_important=False,
                remove_classes=False,
                disable_validation=True,
                allow_network=False,
                cssutils_logging_level=logging.CRITICAL,
            ).transform()
        except Exception as e:
            logger.error(f"CSS inlining failed, returning original HTML: {e}")
            return html
