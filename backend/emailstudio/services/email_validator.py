"""
Email HTML validation and sanitization.

Validation is a set of string-level checks for email-client compatibility;
sanitization applies the deterministic fixes that can be made without
understanding the document (DOCTYPE, table role and spacing attributes).
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)

DOCTYPE = "<!DOCTYPE html>"

FLEX_PATTERN = re.compile(r"display\s*:\s*(?:inline-)?flex", re.IGNORECASE)
GRID_PATTERN = re.compile(r"display\s*:\s*(?:inline-)?grid", re.IGNORECASE)
HIDDEN_PATTERN = re.compile(r"display\s*:\s*none", re.IGNORECASE)
H1_PATTERN = re.compile(r"<h1\b", re.IGNORECASE)
IMG_PATTERN = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
TABLE_TAG_PATTERN = re.compile(r"<table\b([^>]*)>", re.IGNORECASE)
TABLE_WITHOUT_ROLE_PATTERN = re.compile(r"<table\b(?![^>]*\brole\s*=)", re.IGNORECASE)

ROLE_ATTR = re.compile(r"\brole\s*=", re.IGNORECASE)
ALT_ATTR = re.compile(r"\balt\s*=", re.IGNORECASE)
CELLPADDING_ATTR = re.compile(r"\bcellpadding\s*=", re.IGNORECASE)
CELLSPACING_ATTR = re.compile(r"\bcellspacing\s*=", re.IGNORECASE)
BORDER_ATTR = re.compile(r"(?<![-\w])border\s*=", re.IGNORECASE)

# Common max widths for a single-column email body
WIDTH_MARKERS = ("600", "580", "560")


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_email_html(html: str) -> ValidationResult:
    """
    Check generated HTML for email-client compatibility.

    Errors make the document invalid: missing DOCTYPE, no tables, no inline
    styles, flexbox or grid layout. Everything else is a warning.
    """
    errors: List[str] = []
    warnings: List[str] = []
    lowered = html.lower()

    if "<!doctype html" not in lowered:
        errors.append("Missing DOCTYPE declaration")

    if "charset" not in lowered:
        warnings.append("Missing charset meta tag")
    if "viewport" not in lowered:
        warnings.append("Missing viewport meta tag (recommended for mobile)")
    if "x-apple-disable-message-reformatting" not in lowered:
        warnings.append("Missing Apple message reformatting prevention meta tag")

    if "xmlns=" not in lowered:
        warnings.append("Missing XHTML namespace (recommended for Outlook)")
    if "<!--[if mso]>" not in lowered:
        warnings.append("Missing MSO conditional comments (recommended for Outlook)")

    if "<table" not in lowered:
        errors.append("No table elements found - email should use table-based layout")

    if FLEX_PATTERN.search(html):
        errors.append("Flexbox detected - not supported in most email clients")
    if GRID_PATTERN.search(html):
        errors.append("CSS Grid detected - not supported in most email clients")

    if 'style="' not in lowered and "style='" not in lowered:
        errors.append("No inline styles detected - email clients require inline CSS")

    if not HIDDEN_PATTERN.search(html):
        warnings.append("No hidden preheader detected")

    if "unsubscribe" not in lowered:
        warnings.append("No unsubscribe link detected (required for CAN-SPAM compliance)")

    h1_count = len(H1_PATTERN.findall(html))
    if h1_count == 0:
        warnings.append("No H1 heading found")
    elif h1_count > 1:
        warnings.append("Multiple H1 headings found - consider using only one")

    images_without_alt = [img for img in IMG_PATTERN.findall(html) if not ALT_ATTR.search(img)]
    if images_without_alt:
        warnings.append(f"{len(images_without_alt)} image(s) missing alt text")

    if not any(marker in html for marker in WIDTH_MARKERS):
        warnings.append("Email width may exceed recommended 600px maximum")

    tables_without_role = [attrs for attrs in TABLE_TAG_PATTERN.findall(html) if not ROLE_ATTR.search(attrs)]
    if tables_without_role:
        warnings.append(f'{len(tables_without_role)} table(s) missing role="presentation" (accessibility)')

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def _complete_table_attrs(match: re.Match) -> str:
    attrs = match.group(1)
    trailing_slash = attrs.endswith("/")
    if trailing_slash:
        attrs = attrs[:-1].rstrip()
    if not CELLPADDING_ATTR.search(attrs):
        attrs += ' cellpadding="0"'
    if not CELLSPACING_ATTR.search(attrs):
        attrs += ' cellspacing="0"'
    if not BORDER_ATTR.search(attrs):
        attrs += ' border="0"'
    return f"<table{attrs}{' /' if trailing_slash else ''}>"


def sanitize_email_html(html: str) -> str:
    """
    Apply the deterministic fixes. Running it on its own output changes nothing.
    """
    sanitized = html

    if not sanitized.lstrip().lower().startswith("<!doctype"):
        sanitized = f"{DOCTYPE}\n{sanitized}"

    sanitized = TABLE_WITHOUT_ROLE_PATTERN.sub('<table role="presentation"', sanitized)
    sanitized = TABLE_TAG_PATTERN.sub(_complete_table_attrs, sanitized)

    return sanitized
