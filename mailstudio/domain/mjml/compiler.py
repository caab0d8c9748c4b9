import io
import logging
from typing import Optional

from mjml import mjml_to_html

from .errors import MjmlCompileError
from .lowering import lower_document, needs_lowering
from .nodes import EditorNode, HeadSettings
from .parser import parse_mjml
from .serializer import generate_mjml

logger = logging.getLogger(__name__)


def _run_engine(mjml_content: str) -> str:
    try:
        result = mjml_to_html(io.StringIO(mjml_content))
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise MjmlCompileError(f"Failed to compile MJML template: {str(e)}") from e

    # mjml_to_html returns a mapping with 'html' and 'errors' keys
    if hasattr(result, "get"):
        if result.get("errors"):
            logger.warning(f"MJML compilation warnings: {result['errors']}")
        return result.get("html") or ""
    return str(result)


def compile_mjml(mjml_text: str) -> str:
    """
    Compile MJML markup to production-ready HTML

    Markup using components the engine lacks, or carrying editor-only
    attributes, is parsed and lowered first.

    Raises:
        MjmlParseError: Lowering was needed and the markup cannot be parsed
        MjmlCompileError: The engine rejected the markup
    """
    if needs_lowering(mjml_text):
        parsed = parse_mjml(mjml_text)
        mjml_text = generate_mjml(lower_document(parsed.document), parsed.head_settings)

    return _run_engine(mjml_text)


def compile_document(document_root: EditorNode, head_settings: Optional[HeadSettings] = None) -> str:
    """Compile a document tree to HTML"""
    return _run_engine(generate_mjml(lower_document(document_root), head_settings))
