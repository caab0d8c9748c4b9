"""
MJML component schema

Static registry of the component types the editor understands: display
metadata, allowed attributes with their defaults, containment rules and the
default children/content a freshly created node starts with.

Everything here is read-only configuration built once at import time.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...config import DEFAULT_BODY_WIDTH

# Attribute that marks a subtree as non-editable in the source editor.
# The core only preserves it.
LOCKED_ATTRIBUTE = "data-locked"

PLACEHOLDER_IMAGE = "https://placehold.co/600x300"


class ChildSpec(BaseModel):
    """Blueprint for a default child created together with its parent"""

    model_config = ConfigDict(frozen=True)

    type: str
    props: dict[str, str] = Field(default_factory=dict)
    content: Optional[str] = None
    children: tuple["ChildSpec", ...] = ()


class ComponentDefinition(BaseModel):
    """Schema entry for one component type"""

    model_config = ConfigDict(frozen=True)

    type: str
    name: str
    category: str
    icon: str
    # Allowed attribute name -> default value (None when there is no default)
    attributes: dict[str, Optional[str]] = Field(default_factory=dict)
    allowed_children: tuple[str, ...] = ()
    default_children: tuple[ChildSpec, ...] = ()
    default_content: Optional[str] = None
    text_bearing: bool = False
    void: bool = False

    @property
    def accepts_children(self) -> bool:
        return bool(self.allowed_children)

    def default_props(self) -> dict[str, str]:
        """Attributes a new node is populated with"""
        return {key: value for key, value in self.attributes.items() if value is not None}


class ComponentCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    components: tuple[str, ...]


class SocialPlatform(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    color: str
    icon: str


COLUMN_CHILD_TYPES: tuple[str, ...] = (
    "mj-text",
    "mj-image",
    "mj-button",
    "mj-divider",
    "mj-spacer",
    "mj-social",
    "mj-navbar",
    "mj-accordion",
    "mj-carousel",
    "mj-table",
    "mj-raw",
)

_PADDING = "10px 25px"

DEFAULT_SOCIAL_ELEMENTS: tuple[ChildSpec, ...] = (
    ChildSpec(type="mj-social-element", props={"name": "facebook", "href": "#"}),
    ChildSpec(type="mj-social-element", props={"name": "twitter", "href": "#"}),
    ChildSpec(type="mj-social-element", props={"name": "linkedin", "href": "#"}),
)

_DEFINITIONS: tuple[ComponentDefinition, ...] = (
    ComponentDefinition(
        type="mjml",
        name="Document",
        category="document",
        icon="FileCode",
        attributes={"lang": None, "dir": None, "owa": None},
        allowed_children=("mj-body",),
        default_children=(ChildSpec(type="mj-body"),),
    ),
    ComponentDefinition(
        type="mj-body",
        name="Body",
        category="document",
        icon="Layout",
        attributes={
            "width": DEFAULT_BODY_WIDTH,
            "background-color": "#ffffff",
            "css-class": None,
        },
        allowed_children=("mj-section", "mj-raw"),
        default_children=(ChildSpec(type="mj-section"),),
    ),
    ComponentDefinition(
        type="mj-section",
        name="Section",
        category="layout",
        icon="LayoutList",
        attributes={
            "padding": "20px 0",
            "text-align": "center",
            "background-color": None,
            "background-url": None,
            "background-size": None,
            "background-repeat": None,
            "border": None,
            "border-radius": None,
            "direction": None,
            "full-width": None,
            "css-class": None,
        },
        allowed_children=("mj-column",),
        default_children=(ChildSpec(type="mj-column"),),
    ),
    ComponentDefinition(
        type="mj-column",
        name="Column",
        category="layout",
        icon="Columns",
        attributes={
            "padding": "10px",
            "vertical-align": "top",
            "width": None,
            "background-color": None,
            "border": None,
            "border-radius": None,
            "css-class": None,
        },
        allowed_children=COLUMN_CHILD_TYPES,
    ),
    ComponentDefinition(
        type="mj-text",
        name="Text",
        category="content",
        icon="Type",
        attributes={
            "align": "left",
            "color": "#333333",
            "font-size": "16px",
            "line-height": "1.6",
            "padding": _PADDING,
            "font-family": None,
            "font-weight": None,
            "font-style": None,
            "letter-spacing": None,
            "text-decoration": None,
            "text-transform": None,
            "container-background-color": None,
            "css-class": None,
        },
        default_content="Write your text here",
        text_bearing=True,
    ),
    ComponentDefinition(
        type="mj-image",
        name="Image",
        category="content",
        icon="Image",
        attributes={
            "src": PLACEHOLDER_IMAGE,
            "alt": "Image",
            "align": "center",
            "padding": _PADDING,
            "width": None,
            "height": None,
            "href": None,
            "target": None,
            "border-radius": None,
            "container-background-color": None,
            "css-class": None,
        },
        void=True,
    ),
    ComponentDefinition(
        type="mj-button",
        name="Button",
        category="content",
        icon="MousePointerClick",
        attributes={
            "href": "#",
            "align": "center",
            "background-color": "#2563eb",
            "color": "#ffffff",
            "font-size": "16px",
            "font-weight": "600",
            "border-radius": "6px",
            "inner-padding": "12px 24px",
            "padding": _PADDING,
            "font-family": None,
            "width": None,
            "target": None,
            "border": None,
            "container-background-color": None,
            "css-class": None,
        },
        default_content="Click me",
        text_bearing=True,
    ),
    ComponentDefinition(
        type="mj-divider",
        name="Divider",
        category="content",
        icon="Minus",
        attributes={
            "border-color": "#e2e8f0",
            "border-style": "solid",
            "border-width": "1px",
            "padding": _PADDING,
            "width": None,
            "container-background-color": None,
            "css-class": None,
        },
        void=True,
    ),
    ComponentDefinition(
        type="mj-spacer",
        name="Spacer",
        category="content",
        icon="MoveVertical",
        attributes={"height": "30px", "container-background-color": None, "css-class": None},
        void=True,
    ),
    ComponentDefinition(
        type="mj-social",
        name="Social",
        category="interactive",
        icon="Share2",
        attributes={
            "mode": "horizontal",
            "align": "center",
            "icon-size": "20px",
            "icon-padding": "4px",
            "padding": _PADDING,
            "font-size": None,
            "color": None,
            "container-background-color": None,
            "css-class": None,
        },
        allowed_children=("mj-social-element",),
        default_children=DEFAULT_SOCIAL_ELEMENTS,
    ),
    ComponentDefinition(
        type="mj-social-element",
        name="Social link",
        category="interactive",
        icon="Link",
        attributes={
            "name": "web",
            "href": "#",
            "src": None,
            "alt": None,
            "background-color": None,
            "color": None,
            "target": None,
            "css-class": None,
        },
        text_bearing=True,
    ),
    ComponentDefinition(
        type="mj-navbar",
        name="Navbar",
        category="interactive",
        icon="Menu",
        attributes={
            "align": "center",
            "base-url": None,
            "hamburger": None,
            "ico-color": None,
            "css-class": None,
        },
        allowed_children=("mj-navbar-link",),
        default_children=(
            ChildSpec(type="mj-navbar-link", props={"href": "#"}, content="Home"),
            ChildSpec(type="mj-navbar-link", props={"href": "#"}, content="Contact"),
        ),
    ),
    ComponentDefinition(
        type="mj-navbar-link",
        name="Navbar link",
        category="interactive",
        icon="Link",
        attributes={
            "href": "#",
            "color": "#333333",
            "padding": "15px 10px",
            "font-size": None,
            "font-family": None,
            "target": None,
            "css-class": None,
        },
        default_content="Link",
        text_bearing=True,
    ),
    ComponentDefinition(
        type="mj-accordion",
        name="Accordion",
        category="interactive",
        icon="ChevronsUpDown",
        attributes={
            "border": "1px solid #e2e8f0",
            "padding": _PADDING,
            "font-family": None,
            "icon-align": None,
            "container-background-color": None,
            "css-class": None,
        },
        allowed_children=("mj-accordion-element",),
        default_children=(ChildSpec(type="mj-accordion-element"),),
    ),
    ComponentDefinition(
        type="mj-accordion-element",
        name="Accordion item",
        category="interactive",
        icon="ChevronDown",
        attributes={"background-color": None, "border": None, "font-family": None, "css-class": None},
        allowed_children=("mj-accordion-title", "mj-accordion-text"),
        default_children=(ChildSpec(type="mj-accordion-title"), ChildSpec(type="mj-accordion-text")),
    ),
    ComponentDefinition(
        type="mj-accordion-title",
        name="Accordion title",
        category="interactive",
        icon="Heading",
        attributes={"color": "#333333", "font-size": "16px", "padding": "16px", "background-color": None},
        default_content="Accordion title",
        text_bearing=True,
    ),
    ComponentDefinition(
        type="mj-accordion-text",
        name="Accordion text",
        category="interactive",
        icon="AlignLeft",
        attributes={"color": "#333333", "font-size": "14px", "padding": "16px", "background-color": None},
        default_content="Accordion content",
        text_bearing=True,
    ),
    ComponentDefinition(
        type="mj-carousel",
        name="Carousel",
        category="interactive",
        icon="GalleryHorizontal",
        attributes={
            "align": "center",
            "thumbnails": "visible",
            "border-radius": None,
            "container-background-color": None,
            "css-class": None,
        },
        allowed_children=("mj-carousel-image",),
        default_children=(
            ChildSpec(type="mj-carousel-image", props={"src": PLACEHOLDER_IMAGE, "alt": "Slide 1"}),
            ChildSpec(type="mj-carousel-image", props={"src": PLACEHOLDER_IMAGE, "alt": "Slide 2"}),
        ),
    ),
    ComponentDefinition(
        type="mj-carousel-image",
        name="Carousel image",
        category="interactive",
        icon="Image",
        attributes={"src": PLACEHOLDER_IMAGE, "alt": "Slide", "href": None, "title": None, "target": None},
        void=True,
    ),
    ComponentDefinition(
        type="mj-table",
        name="Table",
        category="content",
        icon="Table",
        attributes={
            "width": "100%",
            "cellpadding": "8",
            "cellspacing": "0",
            "border": "none",
            "color": "#333333",
            "font-size": "14px",
            "padding": _PADDING,
            "align": None,
            "font-family": None,
            "table-layout": None,
            "container-background-color": None,
            "css-class": None,
        },
        default_content=(
            '<tr style="border-bottom:1px solid #e2e8f0;text-align:left;">'
            "<th>Item</th><th>Price</th></tr>"
            "<tr><td>Example</td><td>$10</td></tr>"
        ),
        text_bearing=True,
    ),
    ComponentDefinition(
        type="mj-raw",
        name="Raw HTML",
        category="content",
        icon="Code",
        attributes={"position": None},
        default_content="<!-- Custom HTML -->",
        text_bearing=True,
    ),
)

COMPONENT_DEFINITIONS: Mapping[str, ComponentDefinition] = MappingProxyType(
    {definition.type: definition for definition in _DEFINITIONS}
)

COMPONENT_CATEGORIES: tuple[ComponentCategory, ...] = (
    ComponentCategory(id="layout", label="Layout", components=("mj-section", "mj-column")),
    ComponentCategory(
        id="content",
        label="Content",
        components=("mj-text", "mj-image", "mj-button", "mj-divider", "mj-spacer", "mj-table", "mj-raw"),
    ),
    ComponentCategory(
        id="interactive",
        label="Interactive",
        components=("mj-social", "mj-navbar", "mj-accordion", "mj-carousel"),
    ),
)

PREDEFINED_SOCIAL_PLATFORMS: Mapping[str, SocialPlatform] = MappingProxyType(
    {
        platform.name: platform
        for platform in (
            SocialPlatform(name="facebook", label="Facebook", color="#1877f2", icon="Facebook"),
            SocialPlatform(name="facebook-noshare", label="Facebook", color="#1877f2", icon="Facebook"),
            SocialPlatform(name="twitter", label="Twitter", color="#1da1f2", icon="Twitter"),
            SocialPlatform(name="twitter-noshare", label="Twitter", color="#1da1f2", icon="Twitter"),
            SocialPlatform(name="x", label="X", color="#000000", icon="Twitter"),
            SocialPlatform(name="x-noshare", label="X", color="#000000", icon="Twitter"),
            SocialPlatform(name="linkedin", label="LinkedIn", color="#0a66c2", icon="Linkedin"),
            SocialPlatform(name="linkedin-noshare", label="LinkedIn", color="#0a66c2", icon="Linkedin"),
            SocialPlatform(name="instagram", label="Instagram", color="#e4405f", icon="Instagram"),
            SocialPlatform(name="youtube", label="YouTube", color="#ff0000", icon="Youtube"),
            SocialPlatform(name="github", label="GitHub", color="#333333", icon="Github"),
            SocialPlatform(name="github-noshare", label="GitHub", color="#333333", icon="Github"),
            SocialPlatform(name="pinterest", label="Pinterest", color="#bd081c", icon="Pin"),
            SocialPlatform(name="pinterest-noshare", label="Pinterest", color="#bd081c", icon="Pin"),
            SocialPlatform(name="snapchat", label="Snapchat", color="#fffc00", icon="Ghost"),
            SocialPlatform(name="vimeo", label="Vimeo", color="#1ab7ea", icon="Video"),
            SocialPlatform(name="tumblr", label="Tumblr", color="#35465c", icon="Globe"),
            SocialPlatform(name="tumblr-noshare", label="Tumblr", color="#35465c", icon="Globe"),
            SocialPlatform(name="soundcloud", label="SoundCloud", color="#ff5500", icon="Cloud"),
            SocialPlatform(name="dribbble", label="Dribbble", color="#ea4c89", icon="Dribbble"),
            SocialPlatform(name="web", label="Web", color="#4a4a4a", icon="Globe"),
            SocialPlatform(name="medium", label="Medium", color="#00ab6c", icon="Globe"),
        )
    }
)


def get_component_definition(component_type: str) -> Optional[ComponentDefinition]:
    return COMPONENT_DEFINITIONS.get(component_type)


def is_known_type(component_type: str) -> bool:
    return component_type in COMPONENT_DEFINITIONS


def get_allowed_children(component_type: str) -> tuple[str, ...]:
    """Child types permitted under component_type, in schema order"""
    definition = COMPONENT_DEFINITIONS.get(component_type)
    if definition is None:
        return ()
    return definition.allowed_children


def can_contain(parent_type: str, child_type: str) -> bool:
    return child_type in get_allowed_children(parent_type)


def is_text_bearing(component_type: str) -> bool:
    definition = COMPONENT_DEFINITIONS.get(component_type)
    return definition is not None and definition.text_bearing


def is_void(component_type: str) -> bool:
    definition = COMPONENT_DEFINITIONS.get(component_type)
    return definition is not None and definition.void


def get_social_platform(name: Optional[str]) -> SocialPlatform:
    """Icon/color lookup for a social element, unknown names get the generic web style"""
    if name and name in PREDEFINED_SOCIAL_PLATFORMS:
        return PREDEFINED_SOCIAL_PLATFORMS[name]
    fallback = PREDEFINED_SOCIAL_PLATFORMS["web"]
    if not name:
        return fallback
    return SocialPlatform(name=name, label=name, color="#666666", icon=fallback.icon)
