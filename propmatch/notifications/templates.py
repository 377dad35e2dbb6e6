"""Message rendering for listing notifications using Jinja2.

This module wraps Jinja2 template rendering with strict undefined checking
to catch template errors early.
"""

import logging
from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)


class MessageRenderer:
    """Renders outbound chat messages from templates in
    ``propmatch.notifications.message_templates``.

    Messages are plain text sent through a chat client, so autoescaping is
    off. Templates are cached by the Jinja2 environment.
    """

    def __init__(
        self,
        template_dir: str = "message_templates",
        template_name: str = "new_listing.txt.j2",
    ):
        """Initialize renderer with a Jinja2 environment.

        Args:
            template_dir: Directory name within the propmatch.notifications package
            template_name: Filename of the message template
        """
        self.template_name = template_name

        self.env = Environment(
            loader=PackageLoader("propmatch.notifications", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
        )

        logger.debug(f"Initialized MessageRenderer with templates from {template_dir}")

    def render(self, context: Dict) -> str:
        """Render the message with the provided context.

        Args:
            context: Dictionary of template variables

        Returns:
            Rendered message text (surrounding whitespace stripped)

        Raises:
            NotificationTemplateError: If template rendering fails
        """
        try:
            template = self.env.get_template(self.template_name)
            message = template.render(context).strip()
        except TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        logger.debug(f"Rendered message for listing: {context.get('listing_id', 'unknown')}")
        return message
