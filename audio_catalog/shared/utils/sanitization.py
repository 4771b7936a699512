"""Plain-text cleaning for user-supplied category text.

Category names and descriptions are rendered by admin and listing pages, so
any markup is stripped before validation and storage, including markup that
arrives entity-encoded.
"""

import html

import nh3


def clean_text(value: str | None) -> str | None:
    """Strip all HTML from value and trim surrounding whitespace.

    Entities are decoded before cleaning, so ``&lt;b&gt;`` is treated as a tag
    and removed. nh3 re-escapes any ``<`` or ``>`` left in text; only ``&amp;``
    is decoded afterwards so names such as "R&B" survive. Returns None unchanged.
    """
    if value is None:
        return None
    cleaned = nh3.clean(html.unescape(value), tags=set(), attributes={})
    return cleaned.replace("&amp;", "&").strip()
