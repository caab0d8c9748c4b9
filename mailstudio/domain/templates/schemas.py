"""Template domain schemas - Pydantic models for API responses"""

from pydantic import BaseModel

from ..mjml.nodes import EditorNode, HeadSettings


class TemplateSummary(BaseModel):
    """Catalog entry without its document"""

    id: str
    name: str
    description: str
    category: str


class TemplateDocumentResponse(BaseModel):
    """A fresh, editable copy of a template"""

    id: str
    document: EditorNode
    head_settings: HeadSettings
