"""
Notification template rendering.

This module fills the fixed notification templates packaged with the Lambda
(templates/ directory) with the submitted contact details. It is single-pass
placeholder substitution, not a general templating engine.

Templates are cached in memory for warm Lambda invocations.
"""

import html
import logging
from pathlib import Path
from typing import Dict

from domain.errors import RenderError
from domain.models import BodyFormat, Submission

logger = logging.getLogger(__name__)

# src/services/template.py -> src/templates/
# In Lambda: /var/task/templates/
TEMPLATES_DIR = Path(__file__).parent.parent / 'templates'

TEMPLATE_FILES = {
    BodyFormat.HTML: 'notification.html',
    BodyFormat.TEXT: 'notification.txt',
}

# Module-level cache: {template_name: content}
_template_cache: Dict[str, str] = {}


def load_template(template_name: str) -> str:
    """
    Load a template from the templates directory (cached).

    Args:
        template_name: Template file name (e.g., "notification.html")

    Returns:
        str: Template content

    Raises:
        RenderError: If the template file doesn't exist
    """
    if template_name in _template_cache:
        return _template_cache[template_name]

    template_path = TEMPLATES_DIR / template_name
    try:
        with open(template_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError:
        logger.error(f"Template not found: {template_path}")
        raise RenderError(f"Template '{template_name}' not found")

    logger.info(f"Loaded template {template_name}: {len(content)} characters")
    _template_cache[template_name] = content
    return content


def fill_template(template: str, escape_html: bool, **variables: str) -> str:
    """
    Substitute {placeholders} in a template.

    User-controlled values are HTML-escaped when escape_html is set. Braces
    in values are substituted literally; str.format never re-reads arguments.

    Args:
        template: Template with {variable} placeholders
        escape_html: HTML-escape every value before substitution
        **variables: Values to substitute

    Returns:
        str: The filled template

    Raises:
        RenderError: If a placeholder has no value or the template is malformed

    Example:
        >>> fill_template("<p>{name}</p>", True, name="<b>Jo</b>")
        '<p>&lt;b&gt;Jo&lt;/b&gt;</p>'
    """
    escaped = {}
    for key, value in variables.items():
        escaped[key] = html.escape(value, quote=True) if escape_html else value

    try:
        return template.format(**escaped)
    except KeyError as e:
        missing_var = str(e).strip("'")
        logger.error(f"Missing variable in template: {missing_var}")
        raise RenderError(f"Missing required variable in template: {missing_var}")
    except (IndexError, ValueError) as e:
        logger.error(f"Malformed template: {e}")
        raise RenderError(f"Malformed template: {e}")


def render_body(submission: Submission, body_format: BodyFormat) -> str:
    """
    Render the notification body for a submission.

    Only name, email, telephone and detail reach the template; the
    verification token never does.
    """
    template = load_template(TEMPLATE_FILES[body_format])
    return fill_template(
        template,
        escape_html=body_format is BodyFormat.HTML,
        **submission.template_fields()
    )


def render_subject(submission: Submission, subject_template: str) -> str:
    """Render a single-line subject; line breaks in values are collapsed."""
    subject = fill_template(subject_template, escape_html=False, **submission.template_fields())
    return ' '.join(subject.split())


def clear_cache() -> None:
    """Clear the template cache."""
    _template_cache.clear()
    logger.info("Template cache cleared")
