"""
Tag-nesting utility shared by the MJML parser and locked-region detection

tokenize() splits markup into tags, text, comments and declarations.
build_element_tree() turns the token stream into a nesting tree using a
stack of open elements with one recovery policy for mismatched closings:

- the closing name matches the top of the stack -> pop it
- otherwise search down the stack; on a match, close every element above it
  implicitly (they end where the closing tag starts) and then the match
- no match anywhere -> the stray closing tag is ignored

find_locked_regions() reads element extents from that same tree, so the
editor's locked boundaries and the parser's nesting can never disagree.
"""

import bisect
import html
import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from ...shared.validators import ATTRIBUTE_NAME_PATTERN
from .errors import MjmlParseError
from .schema import COMPONENT_DEFINITIONS, LOCKED_ATTRIBUTE

logger = logging.getLogger(__name__)

HTML_VOID_TAGS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)

MJML_VOID_TAGS = frozenset(
    name for name, definition in COMPONENT_DEFINITIONS.items() if definition.void
) | {"mj-breakpoint", "mj-font", "mj-all"}

DEFAULT_VOID_TAGS = HTML_VOID_TAGS | MJML_VOID_TAGS

_TAG_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9_:.\-]*")
_CLOSE_TAG_RE = re.compile(r"</\s*([A-Za-z][A-Za-z0-9_:.\-]*)\s*>")
_ATTRIBUTE_RE = re.compile(r"""([^\s=/>"']+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>"']*)))?""")

TokenKind = str  # "open" | "close" | "self_closing" | "text" | "comment" | "declaration"


@dataclass(slots=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    name: str = ""
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class TextNode:
    text: str
    start: int
    end: int


@dataclass(slots=True)
class Element:
    name: str
    attrs: dict[str, str]
    start: int
    end: int
    inner_start: int
    inner_end: int
    self_closing: bool = False
    closed_explicitly: bool = False
    children: list[Union["Element", TextNode]] = field(default_factory=list)

    @property
    def elements(self) -> list["Element"]:
        return [child for child in self.children if isinstance(child, Element)]


@dataclass(slots=True)
class LockedRegion:
    """1-based, end column exclusive (Monaco convention)"""

    start_line: int
    end_line: int
    start_column: int
    end_column: int


@dataclass(slots=True)
class EditRange:
    start_line: int
    start_column: int
    end_line: int
    end_column: int


class SourceIndex:
    """Offset -> (line, column) lookup, both 1-based"""

    def __init__(self, source: str):
        self.source = source
        self.line_starts = [0] + [m.end() for m in re.finditer("\n", source)]

    def line_of(self, offset: int) -> int:
        return bisect.bisect_right(self.line_starts, offset)

    def column_of(self, offset: int) -> int:
        line = self.line_of(offset)
        return offset - self.line_starts[line - 1] + 1

    def line_length(self, line: int) -> int:
        start = self.line_starts[line - 1]
        end = self.source.find("\n", start)
        if end == -1:
            end = len(self.source)
        return end - start

    def error(self, message: str, offset: int) -> MjmlParseError:
        return MjmlParseError(message, line=self.line_of(offset), column=self.column_of(offset), offset=offset)


# ============================================================================
# TOKENIZER
# ============================================================================


def parse_attributes(text: str) -> dict[str, str]:
    """
    Parse the attribute part of a tag.

    Single- and double-quoted values are accepted and HTML-unescaped.
    Unquoted values, bare names and junk fragments are skipped. The first
    occurrence of a duplicated name wins.
    """
    attrs: dict[str, str] = {}
    for match in _ATTRIBUTE_RE.finditer(text):
        name, double_quoted, single_quoted, unquoted = match.groups()
        value = double_quoted if double_quoted is not None else single_quoted
        if value is None:
            logger.debug(f"Skipping malformed attribute fragment: {match.group(0)!r}")
            continue
        if not ATTRIBUTE_NAME_PATTERN.match(name):
            logger.debug(f"Skipping invalid attribute name: {name!r}")
            continue
        if name in attrs:
            continue
        attrs[name] = html.unescape(value)
    return attrs


def _scan_tag_end(source: str, position: int, index: SourceIndex, tag_name: str) -> int:
    """Offset of the '>' that ends the tag whose attributes start at position"""
    quote: Optional[str] = None
    quote_start = position
    last_significant = ""
    length = len(source)

    while position < length:
        char = source[position]
        if char < " " and char not in "\t\n\r":
            raise index.error(f"Control character U+{ord(char):04X} inside <{tag_name}>", position)
        if quote:
            if char == quote:
                quote = None
                last_significant = char
        elif char in "\"'" and last_significant == "=":
            quote = char
            quote_start = position
        elif char == ">":
            return position
        elif not char.isspace():
            last_significant = char
        position += 1

    if quote:
        raise index.error(f"Unterminated attribute quote in <{tag_name}>", quote_start)
    raise index.error(f"Unterminated tag <{tag_name}>", position)


def tokenize(source: str, index: Optional[SourceIndex] = None) -> list[Token]:
    """
    Split markup into tokens.

    Raises:
        MjmlParseError: Unterminated tag, quote, comment or declaration, or a
            control character inside a tag
    """
    index = index or SourceIndex(source)
    tokens: list[Token] = []
    length = len(source)
    text_start = 0
    position = 0

    def flush_text(end: int) -> None:
        if end > text_start:
            tokens.append(Token("text", text_start, end))

    while position < length:
        lt = source.find("<", position)
        if lt == -1:
            break
        following = source[lt + 1] if lt + 1 < length else ""

        if source.startswith("<!--", lt):
            close = source.find("-->", lt + 4)
            if close == -1:
                raise index.error("Unterminated comment", lt)
            flush_text(lt)
            tokens.append(Token("comment", lt, close + 3))
            position = text_start = close + 3
            continue

        if source.startswith("<![CDATA[", lt):
            close = source.find("]]>", lt)
            if close == -1:
                raise index.error("Unterminated CDATA section", lt)
            # CDATA is character data, keep it inside the running text
            position = close + 3
            continue

        if following in ("!", "?"):
            close = source.find(">", lt)
            if close == -1:
                raise index.error("Unterminated declaration", lt)
            flush_text(lt)
            tokens.append(Token("declaration", lt, close + 1))
            position = text_start = close + 1
            continue

        if following == "/":
            match = _CLOSE_TAG_RE.match(source, lt)
            if match is None:
                position = lt + 1
                continue
            flush_text(lt)
            tokens.append(Token("close", lt, match.end(), name=match.group(1).lower()))
            position = text_start = match.end()
            continue

        name_match = _TAG_NAME_RE.match(source, lt + 1)
        if name_match is None:
            # A bare '<' (e.g. "a < b") is text
            position = lt + 1
            continue

        name = name_match.group(0).lower()
        gt = _scan_tag_end(source, name_match.end(), index, name)
        attribute_text = source[name_match.end():gt]
        self_closing = attribute_text.rstrip().endswith("/")
        if self_closing:
            attribute_text = attribute_text.rstrip()[:-1]

        flush_text(lt)
        tokens.append(
            Token(
                "self_closing" if self_closing else "open",
                lt,
                gt + 1,
                name=name,
                attrs=parse_attributes(attribute_text),
            )
        )
        position = text_start = gt + 1

    flush_text(length)
    return tokens


# ============================================================================
# NESTING
# ============================================================================


def build_element_tree(
    tokens: list[Token],
    source: str,
    void_tags: frozenset[str] = DEFAULT_VOID_TAGS,
) -> Element:
    """Nest tokens under a synthetic "#document" element"""
    root = Element(name="#document", attrs={}, start=0, end=len(source), inner_start=0, inner_end=len(source))
    stack: list[Element] = [root]

    for token in tokens:
        if token.kind in ("open", "self_closing"):
            element = Element(
                name=token.name,
                attrs=token.attrs,
                start=token.start,
                end=token.end,
                inner_start=token.end,
                inner_end=token.end,
                self_closing=token.kind == "self_closing",
            )
            stack[-1].children.append(element)
            if token.kind == "open" and token.name not in void_tags:
                stack.append(element)

        elif token.kind == "close":
            match_at = None
            for depth in range(len(stack) - 1, 0, -1):
                if stack[depth].name == token.name:
                    match_at = depth
                    break

            if match_at is None:
                logger.debug(f"Ignoring stray closing tag </{token.name}> at offset {token.start}")
                continue

            while len(stack) > match_at:
                element = stack.pop()
                element.inner_end = token.start
                if len(stack) == match_at:
                    element.end = token.end
                    element.closed_explicitly = True
                else:
                    element.end = token.start
                    logger.debug(f"Implicitly closing <{element.name}> at </{token.name}>")

        elif token.kind == "text":
            stack[-1].children.append(TextNode(source[token.start:token.end], token.start, token.end))

    while len(stack) > 1:
        element = stack.pop()
        element.inner_end = element.end = len(source)
        logger.debug(f"Closing <{element.name}> at end of input")

    return root


def parse_element_tree(source: str) -> Element:
    """tokenize + build_element_tree"""
    index = SourceIndex(source)
    return build_element_tree(tokenize(source, index), source)


def iter_elements(element: Element):
    for child in element.children:
        if isinstance(child, Element):
            yield child
            yield from iter_elements(child)


# ============================================================================
# LOCKED REGIONS
# ============================================================================


def is_locked(element: Element) -> bool:
    return element.attrs.get(LOCKED_ATTRIBUTE, "").strip().lower() == "true"


def find_locked_regions(source: str) -> list[LockedRegion]:
    """
    Regions of source covered by elements carrying data-locked="true".

    A childless tag yields its exact span; a paired element locks whole
    lines from its opening line to the line where it was closed.
    """
    index = SourceIndex(source)
    root = build_element_tree(tokenize(source, index), source)
    regions: list[LockedRegion] = []

    for element in iter_elements(root):
        if not is_locked(element):
            continue

        start_line = index.line_of(element.start)
        if element.end == element.inner_start:
            # self-closing or void: only the tag itself
            regions.append(
                LockedRegion(
                    start_line=start_line,
                    end_line=index.line_of(element.end - 1),
                    start_column=index.column_of(element.start),
                    end_column=index.column_of(element.end - 1) + 1,
                )
            )
        else:
            end_line = index.line_of(max(element.end - 1, element.start))
            regions.append(
                LockedRegion(
                    start_line=start_line,
                    end_line=end_line,
                    start_column=1,
                    end_column=index.line_length(end_line) + 1,
                )
            )

    return regions


def is_range_in_locked_region(edit: EditRange, regions: list[LockedRegion]) -> bool:
    """True when the edit range overlaps any locked region"""
    for region in regions:
        starts_before_region_ends = edit.start_line < region.end_line or (
            edit.start_line == region.end_line and edit.start_column <= region.end_column
        )
        ends_after_region_starts = edit.end_line > region.start_line or (
            edit.end_line == region.start_line and edit.end_column >= region.start_column
        )
        if starts_before_region_ends and ends_after_region_starts:
            return True
    return False
