"""
Voice Agent Demo Builder - Website Context Composer
Turns scraped website details into a prompt appendix
"""
from typing import Optional

from demo_builder.models.client import WebsiteContext


PERSONALIZATION_NOTE = (
    "Use this information to provide more personalized and accurate responses. "
    "Reference the company's unique qualities when appropriate."
)


def compose(website_context: Optional[WebsiteContext]) -> Optional[str]:
    """
    Render the populated website fields as labeled lines.

    Returns None when no field is populated, so callers can omit the whole
    section including its heading.
    """
    if website_context is None:
        return None

    fields = [
        ("Company Description", website_context.description),
        ("Tagline", f'"{website_context.tagline}"' if website_context.tagline else None),
        ("About the Business", website_context.about_us),
        ("Business Phone", website_context.phone),
        ("Business Email", website_context.email),
        ("Address", website_context.address),
    ]
    lines = [f"**{label}:** {value}" for label, value in fields if value]

    if not lines:
        return None

    body = "\n\n".join(lines)
    return f"""
---

## Additional Business Context (from website)

{body}

{PERSONALIZATION_NOTE}
"""
