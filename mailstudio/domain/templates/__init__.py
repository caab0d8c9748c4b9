"""Templates domain - starter documents for new emails"""

from .catalog import TEMPLATES, EmailTemplate, empty_document, get_template, instantiate_template, list_templates

__all__ = [
    "TEMPLATES",
    "EmailTemplate",
    "empty_document",
    "get_template",
    "instantiate_template",
    "list_templates",
]
