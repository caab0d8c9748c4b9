"""MJML router - FastAPI endpoints for the tree <-> markup boundary"""

import logging

from fastapi import APIRouter, HTTPException

from ... import config
from .compiler import compile_document, compile_mjml
from .errors import MjmlCompileError
from .html_bridge import parse_html_to_node
from .nodes import validate_tree
from .parser import parse_mjml
from .schema import COMPONENT_CATEGORIES, COMPONENT_DEFINITIONS, PREDEFINED_SOCIAL_PLATFORMS
from .schemas import (
    CompileResponse,
    ComponentsResponse,
    DocumentRequest,
    EditRangeRequest,
    EditRangeResponse,
    HtmlRequest,
    HtmlToMjmlResponse,
    LockedRegionResponse,
    LockedRegionsResponse,
    MarkupRequest,
    MarkupResponse,
    ParseResponse,
    SocialPlatformsResponse,
)
from .serializer import generate_mjml, node_to_mjml
from .tags import EditRange, find_locked_regions, is_range_in_locked_region

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mjml", tags=["MJML"])


def _check_size(text: str) -> None:
    if len(text) > config.MAX_MARKUP_LENGTH:
        raise HTTPException(
            status_code=413,
            detail=f"Markup exceeds maximum length of {config.MAX_MARKUP_LENGTH} characters",
        )


# ============================================================================
# SCHEMA
# ============================================================================


@router.get("/components", response_model=ComponentsResponse)
async def get_components():
    """Component definitions and palette categories"""
    return ComponentsResponse(
        components=list(COMPONENT_DEFINITIONS.values()),
        categories=list(COMPONENT_CATEGORIES),
    )


@router.get("/social-platforms", response_model=SocialPlatformsResponse)
async def get_social_platforms():
    return SocialPlatformsResponse(platforms=list(PREDEFINED_SOCIAL_PLATFORMS.values()))


# ============================================================================
# TREE <-> MARKUP
# ============================================================================


@router.post("/generate", response_model=MarkupResponse)
async def generate(data: DocumentRequest):
    """Serialize a document tree to MJML (400 when the tree breaks the schema)"""
    validate_tree(data.document)
    return MarkupResponse(mjml=generate_mjml(data.document, data.head_settings))


@router.post("/parse", response_model=ParseResponse)
async def parse(data: MarkupRequest):
    """Parse MJML source into a document tree (422 when the markup is unparseable)"""
    _check_size(data.mjml)
    result = parse_mjml(data.mjml)
    return ParseResponse(document=result.document, head_settings=result.head_settings)


@router.post("/html-to-mjml", response_model=HtmlToMjmlResponse)
async def html_to_mjml(data: HtmlRequest):
    """Convert a pasted HTML fragment into a one-column section"""
    _check_size(data.html)
    section = parse_html_to_node(data.html)
    return HtmlToMjmlResponse(mjml=node_to_mjml(section), document=section)


# ============================================================================
# COMPILATION
# ============================================================================


@router.post("/compile", response_model=CompileResponse)
async def compile_markup(data: MarkupRequest):
    _check_size(data.mjml)
    try:
        return CompileResponse(html=compile_mjml(data.mjml))
    except MjmlCompileError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.post("/compile-document", response_model=CompileResponse)
async def compile_tree(data: DocumentRequest):
    validate_tree(data.document)
    try:
        return CompileResponse(html=compile_document(data.document, data.head_settings))
    except MjmlCompileError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


# ============================================================================
# LOCKED REGIONS
# ============================================================================


@router.post("/locked-regions", response_model=LockedRegionsResponse)
async def locked_regions(data: MarkupRequest):
    """Source regions covered by data-locked="true" elements"""
    _check_size(data.mjml)
    regions = find_locked_regions(data.mjml)
    return LockedRegionsResponse(
        regions=[
            LockedRegionResponse(
                start_line=region.start_line,
                end_line=region.end_line,
                start_column=region.start_column,
                end_column=region.end_column,
            )
            for region in regions
        ]
    )


@router.post("/locked-regions/check", response_model=EditRangeResponse)
async def check_edit_range(data: EditRangeRequest):
    """Whether an edit range touches a locked region"""
    _check_size(data.mjml)
    edit = EditRange(
        start_line=data.start_line,
        start_column=data.start_column,
        end_line=data.end_line,
        end_column=data.end_column,
    )
    return EditRangeResponse(locked=is_range_in_locked_region(edit, find_locked_regions(data.mjml)))
