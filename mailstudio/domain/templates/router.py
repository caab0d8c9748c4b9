"""Template router - FastAPI endpoints for the starter template catalog"""

import logging

from fastapi import APIRouter, HTTPException

from ..mjml.nodes import HeadSettings
from .catalog import empty_document, instantiate_template, list_templates
from .schemas import TemplateDocumentResponse, TemplateSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["Templates"])


@router.get("", response_model=list[TemplateSummary])
async def get_templates():
    """List the catalog (documents are fetched one at a time)"""
    return [
        TemplateSummary(
            id=template.id,
            name=template.name,
            description=template.description,
            category=template.category,
        )
        for template in list_templates()
    ]


@router.get("/empty", response_model=TemplateDocumentResponse)
async def get_empty_document():
    return TemplateDocumentResponse(id="empty", document=empty_document(), head_settings=HeadSettings())


@router.get("/{template_id}", response_model=TemplateDocumentResponse)
async def get_template_document(template_id: str):
    """Fresh copy of a template with new node ids"""
    try:
        document, head_settings = instantiate_template(template_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Template not found")

    return TemplateDocumentResponse(id=template_id, document=document, head_settings=head_settings)
