"""Shared validation utilities"""

import re
from typing import Any, Optional

# Attribute names as they appear in MJML markup (mj-class, data-locked, ...)
ATTRIBUTE_NAME_PATTERN = re.compile(r"^[A-Za-z_:][A-Za-z0-9_.:\-]*$")

# Tag names accepted in attribute-by-tag head defaults
TAG_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9\-]*(:[A-Za-z0-9_\-]+)?$")

CSS_LENGTH_PATTERN = re.compile(r"^\d+(\.\d+)?(px|%)?$")


def validate_attribute_name(name: str) -> str:
    """
    Validate an attribute name.

    Args:
        name: Attribute name (e.g. "background-color", "data-locked")

    Returns:
        The name, unchanged

    Raises:
        ValueError: If the name cannot appear in markup
    """
    if not isinstance(name, str) or not ATTRIBUTE_NAME_PATTERN.match(name):
        raise ValueError(f"Invalid attribute name: {name!r}")
    return name


def coerce_attribute_value(value: Any) -> Optional[str]:
    """
    Coerce a caller-supplied attribute value to the string stored in props.

    Booleans become "true"/"false", numbers their decimal form, None means
    "no value" and is returned as None so callers can drop the key.

    Raises:
        ValueError: If the value is a container (dict/list)
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    raise ValueError(f"Attribute values must be scalars, got {type(value).__name__}")


def validate_attribute_map(props: Optional[dict]) -> dict[str, str]:
    """
    Validate a whole attribute bag.

    Keys are checked with validate_attribute_name, values coerced with
    coerce_attribute_value; keys whose value is None are dropped.
    """
    if not props:
        return {}

    validated: dict[str, str] = {}
    for key, value in props.items():
        validate_attribute_name(key)
        coerced = coerce_attribute_value(value)
        if coerced is not None:
            validated[key] = coerced
    return validated


def validate_tag_name(tag: str) -> str:
    """Validate a tag key used in head attribute defaults ("mj-text", "mj-class:title")"""
    if not isinstance(tag, str) or not TAG_NAME_PATTERN.match(tag):
        raise ValueError(f"Invalid tag name: {tag!r}")
    return tag


def validate_css_length(value: Optional[str]) -> Optional[str]:
    """
    Validate a CSS pixel or percentage length.

    Args:
        value: Length such as "480px", "50%" or "320"

    Returns:
        Normalized length, unitless values get "px"

    Raises:
        ValueError: If the value is not a px/% length
    """
    if not value:
        return value

    value = value.strip()
    if not CSS_LENGTH_PATTERN.match(value):
        raise ValueError(f"Invalid CSS length: {value!r}")

    if value.endswith("px") or value.endswith("%"):
        return value
    return f"{value}px"
