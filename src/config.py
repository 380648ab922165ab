"""
Process-wide configuration for the contact form Lambda functions.

Settings are read from environment variables once, when a handler module is
imported, and shared by every invocation served by that process.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from domain.errors import RenderError
from domain.models import BodyFormat, Submission
from services.template import fill_template

logger = logging.getLogger(__name__)

DEFAULT_VERIFY_URL = 'https://www.google.com/recaptcha/api/siteverify'
DEFAULT_SUBJECT = 'Contact form submission from {name}'
DEFAULT_SUCCESS_REDIRECT = '/success.html'


class ConfigurationError(Exception):
    """Raised when module configuration is invalid or missing."""
    pass


@dataclass(frozen=True)
class Settings:
    """
    Immutable configuration shared across invocations.

    Attributes:
        captcha_site_secret: Shared secret for the verification service
        forward_address: Mailbox that receives the notification
        source_address: Verified SES sender address
        verify_url: Verification service endpoint
        body_format: HTML or plain text notification body
        subject_template: Subject line with a {name} placeholder
        success_redirect_path: Relative page the query handler redirects to
        verify_timeout: (connect, read) seconds for the verification call
        ses_timeout: (connect, read) seconds for the SES call
        region: AWS region for the SES client
        environment: Deployment environment name
    """
    captcha_site_secret: str
    forward_address: str
    source_address: str
    verify_url: str = DEFAULT_VERIFY_URL
    body_format: BodyFormat = BodyFormat.HTML
    subject_template: str = DEFAULT_SUBJECT
    success_redirect_path: str = DEFAULT_SUCCESS_REDIRECT
    verify_timeout: Tuple[float, float] = (5.0, 10.0)
    ses_timeout: Tuple[float, float] = (5.0, 10.0)
    region: str = 'us-east-1'
    environment: str = 'dev'

    def __repr__(self) -> str:
        # Never expose the shared secret in logs
        return (
            f"Settings(forward_address={self.forward_address}, "
            f"source_address={self.source_address}, "
            f"body_format={self.body_format.value}, "
            f"verify_url={self.verify_url}, environment={self.environment})"
        )


def _require(name: str) -> str:
    value = os.environ.get(name, '').strip()
    if not value:
        raise ConfigurationError(
            f"{name} environment variable is required but not set. "
            f"Please configure this in your SAM template or Lambda environment."
        )
    return value


def _read_seconds(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got: '{raw}'")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got: {value}")
    return value


def _read_body_format() -> BodyFormat:
    raw = os.environ.get('BODY_FORMAT', BodyFormat.HTML.value).strip().lower()
    try:
        return BodyFormat(raw)
    except ValueError:
        allowed = ', '.join(f.value for f in BodyFormat)
        raise ConfigurationError(f"BODY_FORMAT must be one of: {allowed}. Got: '{raw}'")


def _read_region() -> str:
    return os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION') or 'us-east-1'


def _read_subject_template() -> str:
    subject_template = os.environ.get('NOTIFICATION_SUBJECT') or DEFAULT_SUBJECT
    sample = Submission('name', 'email', 'telephone', 'detail', 'token')
    try:
        fill_template(subject_template, escape_html=False, **sample.template_fields())
    except RenderError as e:
        raise ConfigurationError(f"NOTIFICATION_SUBJECT is not a valid template: {e}")
    return subject_template


def load_settings() -> Settings:
    """
    Read and validate settings from environment variables.

    Returns:
        Settings: The validated configuration

    Raises:
        ConfigurationError: If a required variable is missing or a value is invalid
    """
    subject_template = _read_subject_template()
    redirect_path = os.environ.get('SUCCESS_REDIRECT_PATH') or DEFAULT_SUCCESS_REDIRECT

    settings = Settings(
        captcha_site_secret=_require('CAPTCHA_SITE_SECRET'),
        forward_address=_require('FORWARD_ADDRESS'),
        source_address=_require('SOURCE_ADDRESS'),
        verify_url=os.environ.get('CAPTCHA_VERIFY_URL') or DEFAULT_VERIFY_URL,
        body_format=_read_body_format(),
        subject_template=subject_template,
        success_redirect_path=redirect_path,
        verify_timeout=(
            _read_seconds('VERIFY_CONNECT_TIMEOUT', 5.0),
            _read_seconds('VERIFY_READ_TIMEOUT', 10.0),
        ),
        ses_timeout=(
            _read_seconds('SES_CONNECT_TIMEOUT', 5.0),
            _read_seconds('SES_READ_TIMEOUT', 10.0),
        ),
        region=_read_region(),
        environment=os.environ.get('ENVIRONMENT', 'dev'),
    )

    logger.info(f"Settings loaded: {settings!r}")
    return settings


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for Lambda.

    AWS Lambda installs its own handler; a console handler is only added for
    local runs where none exists.
    """
    root = logging.getLogger()
    root.setLevel((level or os.environ.get('LOG_LEVEL', 'INFO')).upper())

    if not root.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
        root.addHandler(console_handler)

    return root
