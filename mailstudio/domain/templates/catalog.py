"""
Template catalog

Starter documents offered when a new email is created. Each template is
authored as MJML and parsed once at import time; callers always receive a
fresh copy with new node ids.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from ...config import DEFAULT_BODY_WIDTH, DEFAULT_BREAKPOINT
from ..mjml.nodes import EditorNode, HeadSettings, clone_document_with_new_ids, create_node
from ..mjml.parser import parse_mjml

logger = logging.getLogger(__name__)

THEME = {
    "primary": "#2563eb",
    "primary_dark": "#1d4ed8",
    "primary_light": "#dbeafe",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "success": "#16a34a",
    "warning": "#f59e0b",
    "danger": "#ef4444",
}

FONT_FAMILY = "Helvetica, Arial, sans-serif"


class EmailTemplate(BaseModel):
    id: str
    name: str
    description: str
    category: str
    document: EditorNode
    head_settings: HeadSettings


def empty_document() -> EditorNode:
    """mjml -> mj-body -> mj-section -> mj-column, fresh ids each call"""
    column = create_node("mj-column", children=[])
    section = create_node("mj-section", children=[column])
    body = create_node("mj-body", children=[section])
    return create_node("mjml", children=[body])


def get_base_template(title: str, preview_text: str, content_sections: str) -> str:
    """Wrap body sections in the shared head and card layout"""
    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-breakpoint width="{DEFAULT_BREAKPOINT}" />
        <mj-attributes>
          <mj-all font-family="{FONT_FAMILY}" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}" width="{DEFAULT_BODY_WIDTH}">
        {content_sections}
        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="12px" color="{THEME['text_muted']}">You are receiving this email because you signed up. Unsubscribe at any time.</mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _welcome_template() -> str:
    content = f"""
        <mj-section background-color="{THEME['card_bg']}" padding="32px 20px">
          <mj-column>
            <mj-text font-size="28px" font-weight="700" color="{THEME['text_primary']}">Welcome aboard!</mj-text>
            <mj-text>Hi there, thanks for joining us. We're excited to have you.</mj-text>
            <mj-text>Here is what you can do next:</mj-text>
            <mj-text padding="0 25px 0 45px">• Complete your profile<br/>• Invite your team<br/>• Send your first campaign</mj-text>
            <mj-button href="#" background-color="{THEME['primary']}" color="#ffffff" border-radius="8px">Get started</mj-button>
          </mj-column>
        </mj-section>
    """
    return get_base_template("Welcome!", "Thanks for signing up", content)


def _newsletter_template() -> str:
    content = f"""
        <mj-section background-color="{THEME['card_bg']}" padding="24px 20px">
          <mj-column>
            <mj-text font-size="24px" font-weight="700" color="{THEME['text_primary']}">Monthly newsletter</mj-text>
            <mj-text color="{THEME['text_muted']}">The latest news, articles and resources, sent straight to your inbox.</mj-text>
            <mj-divider border-color="{THEME['border']}" />
          </mj-column>
        </mj-section>
        <mj-section background-color="{THEME['card_bg']}" padding="0 20px 24px 20px">
          <mj-column>
            <mj-image src="https://placehold.co/300x200" alt="Feature story" />
            <mj-text font-weight="600" color="{THEME['text_primary']}">Feature story</mj-text>
            <mj-text>A short summary of the main article of this issue.</mj-text>
          </mj-column>
          <mj-column>
            <mj-image src="https://placehold.co/300x200" alt="Product update" />
            <mj-text font-weight="600" color="{THEME['text_primary']}">Product update</mj-text>
            <mj-text>What changed this month and why it matters to you.</mj-text>
          </mj-column>
        </mj-section>
        <mj-section background-color="{THEME['card_bg']}" padding="0 20px 24px 20px">
          <mj-column>
            <mj-social mode="horizontal" icon-size="24px">
              <mj-social-element name="facebook" href="#">Facebook</mj-social-element>
              <mj-social-element name="x" href="#">X</mj-social-element>
              <mj-social-element name="linkedin" href="#">LinkedIn</mj-social-element>
            </mj-social>
          </mj-column>
        </mj-section>
    """
    return get_base_template("Monthly newsletter", "The latest news from our team", content)


def _promotion_template() -> str:
    content = f"""
        <mj-section background-color="{THEME['primary']}" padding="40px 20px">
          <mj-column>
            <mj-text align="center" font-size="14px" color="{THEME['primary_light']}" text-transform="uppercase">Limited time offer</mj-text>
            <mj-text align="center" font-size="36px" font-weight="700" color="#ffffff">25% off everything</mj-text>
            <mj-button href="#" background-color="#ffffff" color="{THEME['primary_dark']}" border-radius="8px">Shop now</mj-button>
          </mj-column>
        </mj-section>
        <mj-section background-color="{THEME['card_bg']}" padding="24px 20px">
          <mj-column>
            <mj-image src="https://placehold.co/600x300" alt="Featured products" />
            <mj-text align="center" color="{THEME['text_muted']}">Use code SAVE25 at checkout. Offer ends Sunday.</mj-text>
          </mj-column>
        </mj-section>
    """
    return get_base_template("25% off everything", "Our biggest sale of the season", content)


def _receipt_template() -> str:
    content = f"""
        <mj-section background-color="{THEME['card_bg']}" padding="32px 20px">
          <mj-column>
            <mj-text font-size="24px" font-weight="700" color="{THEME['text_primary']}">Thanks for your order</mj-text>
            <mj-text color="{THEME['text_muted']}">Order #0001</mj-text>
            <mj-table cellpadding="8" cellspacing="0" width="100%"><tr style="border-bottom:1px solid {THEME['border']};text-align:left;"><th>Item</th><th>Qty</th><th>Price</th></tr><tr><td>Product</td><td>1</td><td>$10.00</td></tr><tr><td colspan="2">Total</td><td>$10.00</td></tr></mj-table>
            <mj-divider border-color="{THEME['border']}" />
            <mj-text font-size="14px" color="{THEME['text_muted']}">Questions about your order? Just reply to this email.</mj-text>
          </mj-column>
        </mj-section>
    """
    return get_base_template("Your receipt", "Thanks for your order", content)


def _build_template(
    template_id: str, name: str, description: str, category: str, mjml_text: Optional[str]
) -> EmailTemplate:
    if mjml_text is None:
        document, head_settings = empty_document(), HeadSettings()
    else:
        result = parse_mjml(mjml_text)
        document, head_settings = result.document, result.head_settings
    return EmailTemplate(
        id=template_id,
        name=name,
        description=description,
        category=category,
        document=document,
        head_settings=head_settings,
    )


TEMPLATES: dict[str, EmailTemplate] = {
    template.id: template
    for template in (
        _build_template("blank", "Blank", "Start from an empty one-column layout", "basic", None),
        _build_template("welcome", "Welcome", "Greet new sign-ups with next steps", "onboarding", _welcome_template()),
        _build_template(
            "newsletter", "Newsletter", "Two-column article digest with social links", "content", _newsletter_template()
        ),
        _build_template("promotion", "Promotion", "Hero offer with a call to action", "marketing", _promotion_template()),
        _build_template("receipt", "Receipt", "Order summary with an itemized table", "transactional", _receipt_template()),
    )
}


def _fresh_copy(template: EmailTemplate) -> EmailTemplate:
    return template.model_copy(
        update={
            "document": clone_document_with_new_ids(template.document),
            "head_settings": template.head_settings.model_copy(deep=True),
        }
    )


def get_template(template_id: str) -> Optional[EmailTemplate]:
    """Fresh copy of a catalog entry, or None for an unknown id"""
    template = TEMPLATES.get(template_id)
    if template is None:
        return None
    return _fresh_copy(template)


def list_templates() -> list[EmailTemplate]:
    return [_fresh_copy(template) for template in TEMPLATES.values()]


def instantiate_template(template_id: str) -> tuple[EditorNode, HeadSettings]:
    """
    Fresh copy of a template ready for editing

    Raises:
        KeyError: Unknown template id
    """
    template = get_template(template_id)
    if template is None:
        raise KeyError(template_id)

    logger.debug(f"Instantiating template {template_id}")
    return template.document, template.head_settings
