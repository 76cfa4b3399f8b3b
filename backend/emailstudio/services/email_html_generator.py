"""
Model-authored email HTML: prompt, call the text generator, clean the
output and recover the structured fields.
"""

import logging
from dataclasses import dataclass

from emailstudio.exceptions import GenerationError
from emailstudio.schemas.context import GenerationContext
from emailstudio.services.content_extractor import ExtractionResult, extract_content
from emailstudio.services.email_document import extract_html_from_response
from emailstudio.services.email_prompts import SYSTEM_PROMPT, build_email_prompt
from emailstudio.services.llm_service import TextGenerator

logger = logging.getLogger(__name__)


@dataclass
class GeneratedEmail:
    full_html: str
    extraction: ExtractionResult
    tokens_used: int


def generate_email_html(
    context: GenerationContext,
    generator: TextGenerator,
    max_tokens: int,
) -> GeneratedEmail:
    """
    Generate one email for a (segment, strategy) pair.

    Raises:
        GenerationError: The generator failed or returned no usable HTML.
    """
    prompt = build_email_prompt(context)
    logger.info(
        f"Generating email for audience '{context.audience.name}' "
        f"({context.version_strategy}), prompt length: {len(prompt)}"
    )

    try:
        result = generator.generate(prompt, max_tokens, system_message=SYSTEM_PROMPT)
    except Exception as e:
        raise GenerationError(f"Email HTML generation failed: {e}") from e

    full_html = extract_html_from_response(result.text)
    if not full_html or "<" not in full_html:
        raise GenerationError("Email HTML generation returned no HTML")

    extraction = extract_content(full_html)
    if not extraction.confident:
        logger.warning(
            f"Defaulted fields for '{context.audience.name}' ({context.version_strategy}): "
            f"{', '.join(extraction.defaulted_fields)}"
        )

    return GeneratedEmail(full_html=full_html, extraction=extraction, tokens_used=result.tokens_used)
