"""
Prompt construction for model-authored emails and AI-assisted edits.
"""
from datetime import datetime
from typing import List, Optional

from emailstudio.constants import COPY_GUIDELINES, EmailType, VersionStrategy
from emailstudio.schemas.context import AudienceContext, BrandContext, CampaignContext, GenerationContext

SYSTEM_PROMPT = """You are an expert email HTML developer and marketing copywriter. You create production-ready HTML emails that render correctly in Outlook, Gmail, Apple Mail, Yahoo Mail and on mobile devices.

Your emails are visually on-brand, written for the target audience, and built only from email-client-safe HTML."""

STRATEGY_INSTRUCTIONS = {
    VersionStrategy.CONVERSION: """## STRATEGY: CONVERSION FOCUS
- Lead with the strongest benefit immediately
- Use action-oriented language throughout
- Make the value proposition clear and specific
- Include social proof or credibility indicators if appropriate
- Make the CTA button prominent
- Prefer verbs such as "Get", "Start", "Unlock", "Discover", "Save\"""",
    VersionStrategy.AWARENESS: """## STRATEGY: AWARENESS FOCUS
- Tell a brand story
- Explain the problem and how it is solved
- Build an emotional connection before asking for action
- Use softer CTA language: "Learn More", "Explore", "See How"
- Focus on value over urgency""",
    VersionStrategy.URGENCY: """## STRATEGY: URGENCY FOCUS
- Use time-sensitive language: "Today Only", "Ends Soon", "Limited Time"
- Reference the deadline
- Emphasize scarcity where it is true
- Make the cost of waiting clear""",
    VersionStrategy.EMOTIONAL: """## STRATEGY: EMOTIONAL CONNECTION
- Lead with aspirational messaging
- Describe the outcome the reader wants
- Use "you" language
- Connect to identity: "For people who...", "If you've ever felt..."
- Build trust through authenticity""",
}

EMAIL_TYPE_GUIDANCE = {
    EmailType.PROMOTIONAL: "Focus on the offer. Lead with the value proposition. Create urgency if appropriate.",
    EmailType.WELCOME: "Warm, friendly tone. Set expectations. Guide next steps.",
    EmailType.ABANDONED_CART: "Remind without being pushy. Address likely objections. Offer help.",
    EmailType.NEWSLETTER: "Curated, valuable content. Easy to scan. Multiple entry points.",
    EmailType.ANNOUNCEMENT: "Clear, newsworthy headline. Key details upfront.",
}


def _bullets(items: List[str]) -> str:
    if not items:
        return "Not specified"
    return "\n  - " + "\n  - ".join(items)


def build_brand_section(brand: BrandContext) -> str:
    return f"""## BRAND IDENTITY
- Company Name: {brand.name}
- Primary Color: {brand.primary_color}
- Secondary Color: {brand.secondary_color}
- Additional Colors: {', '.join(brand.colors[2:]) or 'None'}
- Brand Voice: {brand.tone or 'Professional and approachable'}
- Core Message: {brand.core_message or 'Not specified'}"""


def build_campaign_section(campaign: CampaignContext) -> str:
    section = f"""## CAMPAIGN CONTEXT
- Campaign Name: {campaign.name}
- Objective: {campaign.objective or 'Drive engagement and conversions'}
- Description: {campaign.description or 'Not specified'}
- Key Messages: {_bullets(campaign.key_messages)}
- Primary CTA: {campaign.call_to_action or 'Learn More'}
- Urgency Level: {campaign.urgency_level.upper()}"""
    if campaign.start_date or campaign.end_date:
        start = campaign.start_date.strftime("%Y-%m-%d") if campaign.start_date else "Not set"
        end = campaign.end_date.strftime("%Y-%m-%d") if campaign.end_date else "Not set"
        section += f"\n- Campaign Period: {start} to {end}"
    return section


def build_audience_section(audience: AudienceContext) -> str:
    demographics = []
    age_range = audience.demographics.age_range
    if age_range and (age_range.min or age_range.max):
        demographics.append(f"Age: {age_range.min or 18}-{age_range.max or '65+'}")
    if audience.demographics.income:
        demographics.append(f"Income: {audience.demographics.income}")
    if audience.demographics.location:
        demographics.append(f"Location: {', '.join(audience.demographics.location)}")

    return f"""## TARGET AUDIENCE
- Segment Name: {audience.name}
- Description: {audience.description or 'Not specified'}
- Demographics: {' | '.join(demographics) or 'General audience'}
- Purchase Propensity: {audience.propensity_level}
- Interests: {', '.join(audience.interests) or 'Not specified'}
- Pain Points: {_bullets(audience.pain_points)}
- Key Motivators: {_bullets(audience.key_motivators)}
- Preferred Tone: {audience.preferred_tone or 'Match brand voice'}"""


def build_strategy_section(strategy: str, urgency_level: str) -> str:
    instructions = STRATEGY_INSTRUCTIONS.get(strategy, STRATEGY_INSTRUCTIONS[VersionStrategy.CONVERSION])
    if urgency_level == "high" and strategy != VersionStrategy.URGENCY:
        instructions += "\n\nNote: This campaign has HIGH urgency. Work time-sensitive elements in where they fit."
    return instructions


def build_content_section(email_type: str) -> str:
    guidance = EMAIL_TYPE_GUIDANCE.get(email_type, EMAIL_TYPE_GUIDANCE[EmailType.PROMOTIONAL])
    return f"""## CONTENT REQUIREMENTS

### Email Type: {email_type.upper()}
{guidance}

### Copy Guidelines
1. Subject Line: Maximum {COPY_GUIDELINES['subject_line']} characters.
2. Preheader: Maximum {COPY_GUIDELINES['preheader']} characters. Complement the subject line, don't repeat it.
3. Headline (H1): Maximum {COPY_GUIDELINES['headline']} characters.
4. Body Copy: 150-200 words in short, scannable paragraphs.
5. CTA Button Text: Maximum {COPY_GUIDELINES['cta_text']} characters. Start with a verb."""


def build_html_requirements_section(brand: BrandContext, year: Optional[int] = None) -> str:
    return f"""## HTML TECHNICAL REQUIREMENTS (MUST FOLLOW EXACTLY)

### Document Structure
- Start with: <!DOCTYPE html>
- Include XHTML namespaces: xmlns="http://www.w3.org/1999/xhtml" xmlns:v="urn:schemas-microsoft-com:vml" xmlns:o="urn:schemas-microsoft-com:office:office"
- Add the Outlook conditional: <!--[if mso]><noscript><xml><o:OfficeDocumentSettings><o:PixelsPerInch>96</o:PixelsPerInch></o:OfficeDocumentSettings></xml></noscript><![endif]-->
- Add <meta charset="utf-8">, a viewport meta tag and <meta name="x-apple-disable-message-reformatting">

### Layout Rules
- TABLE-based layout only (no CSS grid, no flexbox)
- Maximum content width: 600px
- role="presentation" and cellpadding="0" cellspacing="0" border="0" on every layout table

### Styling Rules
- Every element carries inline styles (style="...")
- Also include a <style> block in <head> with @media screen and (max-width: 600px) rules
- Primary brand color for buttons and accents: {brand.primary_color}
- Body background #f4f4f7, content background #ffffff

### Required Elements
1. Hidden preheader div (display: none) as the first element in body
2. A single H1 for the main headline
3. One CTA button: an <a class="cta"> inside a table cell with the brand background color
4. Body paragraphs as <p> elements with an inline margin style
5. Footer with an unsubscribe link, company name and copyright {year or datetime.utcnow().year}"""


OUTPUT_FORMAT_SECTION = """## OUTPUT FORMAT

Return ONLY the complete HTML document, starting with <!DOCTYPE html>. No explanations and no markdown code fences.

Put the subject line in this comment right after the DOCTYPE:
<!--SUBJECT: Your subject line here -->

The HTML must be complete and ready to send: no placeholders and no "[Insert X here]" text."""


def build_email_prompt(context: GenerationContext) -> str:
    """Compose the user prompt for one (audience, strategy) pair."""
    sections = [
        "# EMAIL GENERATION REQUEST\n\nGenerate a complete, production-ready HTML email based on the following context.",
        build_brand_section(context.brand),
        build_campaign_section(context.campaign),
        build_audience_section(context.audience),
        build_strategy_section(context.version_strategy, context.campaign.urgency_level),
        build_content_section(context.email_type),
        build_html_requirements_section(context.brand),
    ]

    if context.custom_instructions:
        sections.append(f"## CUSTOM INSTRUCTIONS FOR THIS SEGMENT\n{context.custom_instructions}")

    sections.append(OUTPUT_FORMAT_SECTION)
    return "\n\n".join(sections)


def build_edit_system_prompt(preserve_structure: bool) -> str:
    structure_rule = (
        "Preserve the exact HTML structure and layout. Only change text, colors or styles as requested."
        if preserve_structure
        else "You may change the structure where the request needs it."
    )
    return f"""You are an expert email HTML editor. You will receive an HTML email and a modification request.

1. Apply the requested changes.
2. {structure_rule}
3. Keep the output valid, email-client-compatible HTML with inline styles.

Return ONLY the modified HTML, no explanations."""


def build_edit_prompt(current_html: str, request: str) -> str:
    return f"""Current HTML:
```html
{current_html}
```

Modification request: {request}

Return the complete modified HTML:"""
