"""MJML domain schemas - Pydantic models for API payloads"""

from typing import Optional

from pydantic import BaseModel, field_validator

from .nodes import EditorNode, HeadSettings
from .schema import ComponentCategory, ComponentDefinition, SocialPlatform


class MarkupRequest(BaseModel):
    """Schema for endpoints taking MJML source"""

    mjml: str


class HtmlRequest(BaseModel):
    """Schema for pasted HTML"""

    html: str


class DocumentRequest(BaseModel):
    """Schema for endpoints taking a document tree"""

    document: EditorNode
    head_settings: Optional[HeadSettings] = None


class MarkupResponse(BaseModel):
    mjml: str


class ParseResponse(BaseModel):
    document: EditorNode
    head_settings: HeadSettings


class CompileResponse(BaseModel):
    html: str


class HtmlToMjmlResponse(BaseModel):
    mjml: str
    document: EditorNode


class LockedRegionResponse(BaseModel):
    start_line: int
    end_line: int
    start_column: int
    end_column: int


class LockedRegionsResponse(BaseModel):
    regions: list[LockedRegionResponse]


class ComponentsResponse(BaseModel):
    components: list[ComponentDefinition]
    categories: list[ComponentCategory]


class SocialPlatformsResponse(BaseModel):
    platforms: list[SocialPlatform]


class EditRangeRequest(BaseModel):
    """Schema for checking an editor range against locked regions"""

    mjml: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @field_validator("start_line", "start_column", "end_line", "end_column")
    @classmethod
    def validate_position(cls, v):
        if v < 1:
            raise ValueError("Positions are 1-based")
        return v


class EditRangeResponse(BaseModel):
    locked: bool
