"""Template adapter for abstracting template rendering operations."""

import logging
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from keysmith.core.errors import GenerationError
from keysmith.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)


class TemplateAdapter:
    """Jinja2 template adapter implementation."""

    def __init__(self, trim_blocks: bool = True, lstrip_blocks: bool = True):
        """Initialize the Jinja2 template adapter.

        Args:
            trim_blocks: Remove newlines after block tags
            lstrip_blocks: Strip leading whitespace from block tags
        """
        self.env = Environment(
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            keep_trailing_newline=True,
            undefined=StrictUndefined,  # Raise errors for undefined variables
            autoescape=False,
        )

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render a Jinja2 template string with the given context.

        Raises:
            GenerationError: If the template is invalid or references an
                undefined variable
        """
        try:
            template = self.env.from_string(template_string)
            return template.render(context)
        except TemplateError as e:
            exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
            logger.error(
                "template_string_render_error",
                error=str(e),
                context_keys=sorted(context),
                exc_info=exc_info,
            )
            raise GenerationError(f"Template rendering failed: {e}") from e


def create_template_adapter() -> TemplateAdapter:
    """Create a template adapter with default implementation."""
    return TemplateAdapter()


__all__ = ["TemplateAdapter", "create_template_adapter"]
