import html
import re
from typing import Optional

import bleach
from bleach.css_sanitizer import CSSSanitizer
from bs4 import BeautifulSoup

# Inline markup kept inside mj-text content when importing HTML
INLINE_TEXT_TAGS = [
    "a",
    "b",
    "br",
    "code",
    "em",
    "i",
    "li",
    "ol",
    "p",
    "s",
    "small",
    "span",
    "strong",
    "sub",
    "sup",
    "u",
    "ul",
    "blockquote",
    "pre",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
]

INLINE_TEXT_ATTRIBUTES = {
    "a": ["href", "title", "target"],
    "*": ["style"],
}

TABLE_TAGS = ["table", "thead", "tbody", "tfoot", "tr", "th", "td", "caption", "colgroup", "col"]

TABLE_ATTRIBUTES = {
    "td": ["colspan", "rowspan", "align", "valign", "width"],
    "th": ["colspan", "rowspan", "align", "valign", "width"],
    "col": ["span", "width"],
    "*": ["style"],
}

EMAIL_SAFE_CSS_PROPERTIES = [
    "color",
    "background-color",
    "font-family",
    "font-size",
    "font-style",
    "font-weight",
    "line-height",
    "letter-spacing",
    "text-align",
    "text-decoration",
    "text-transform",
    "padding",
    "border",
    "border-bottom",
    "border-collapse",
    "width",
]

_WHITESPACE_RE = re.compile(r"\s+")


def escape_text(value: Optional[str]) -> str:
    """
    Escape text for use as element content.
    Returns "" if input is None.
    """
    if value is None:
        return ""
    return html.escape(str(value), quote=False)


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def sanitize_html(
    html_content: str,
    allowed_tags: Optional[list] = None,
    allowed_attributes: Optional[dict] = None,
) -> str:
    """
    Sanitize an HTML fragment before it is stored as component content

    Args:
        html_content: Raw HTML content
        allowed_tags: List of allowed HTML tags (default: inline text subset)
        allowed_attributes: Allowed attributes per tag (default: links + style)

    Returns:
        Sanitized HTML
    """
    if allowed_tags is None:
        allowed_tags = INLINE_TEXT_TAGS
    if allowed_attributes is None:
        allowed_attributes = INLINE_TEXT_ATTRIBUTES

    css_sanitizer = CSSSanitizer(allowed_css_properties=EMAIL_SAFE_CSS_PROPERTIES)

    clean_html = bleach.clean(
        html_content,
        tags=allowed_tags,
        attributes=allowed_attributes,
        css_sanitizer=css_sanitizer,
        strip=True,
    )

    return clean_html.strip()


def sanitize_table_rows(table_html: str) -> str:
    """
    Sanitize a whole <table> and return only its own rows.

    The table is cleaned as one unit so rows and cells keep their table
    context. Rows of nested tables stay inside the cell that holds them.
    """
    clean_table = sanitize_html(
        table_html,
        allowed_tags=INLINE_TEXT_TAGS + TABLE_TAGS,
        allowed_attributes={**INLINE_TEXT_ATTRIBUTES, **TABLE_ATTRIBUTES},
    )
    table = BeautifulSoup(clean_table, "html.parser").find("table")
    if table is None:
        return ""

    rows = []
    for child in table.find_all(True, recursive=False):
        if child.name == "tr":
            rows.append(str(child))
        elif child.name in ("thead", "tbody", "tfoot"):
            rows.extend(str(row) for row in child.find_all("tr", recursive=False))
    return "".join(rows)
