"""
AWS Lambda handler for contact form submissions delivered as an event body.

Thin orchestration layer that delegates to SubmissionPipeline.
Policy: verification rejections and SES failures are logged and reported as
handled; only invalid input and render failures fail the invocation.
"""

from typing import Any, Dict

import config
from domain.input_sources import EventBodySource
from domain.models import PipelineResult
from domain.submission_pipeline import SubmissionPipeline
from integrations.captcha_verification import CaptchaVerifier
from integrations.ses_notification import SesNotifier

logger = config.configure_logging()


class SubmissionRejectedError(Exception):
    """Raised to the Lambda runtime when a submission cannot be handled."""

    def __init__(self, result: PipelineResult):
        self.result = result
        super().__init__(f"Submission rejected ({result.outcome.value}): {result.reason}")


# Initialize once at module level (reused across invocations)
settings = config.load_settings()
verifier = CaptchaVerifier.from_settings(settings)
notifier = SesNotifier.from_settings(settings)
pipeline = SubmissionPipeline(EventBodySource(), verifier, notifier, settings)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Relay one contact form submission.

    Expected event format:
    {
        "name": "Jane",
        "email": "jane@example.com",
        "telephone": "555-0100",
        "detail": "Message text",
        "captcha": "verification-token"
    }

    Args:
        event: Lambda event (form object, or API Gateway event with a JSON body)
        context: Lambda context

    Returns:
        Empty dict once the submission has been handled

    Raises:
        SubmissionRejectedError: For missing input or an internal render failure
    """
    request_id = getattr(context, 'aws_request_id', 'UNKNOWN')
    logger.info(f"Contact form submission received: request_id={request_id}")

    result = pipeline.handle(event)

    if result.should_fail_invocation:
        logger.error(f"Submission failed: {result!r}")
        raise SubmissionRejectedError(result)

    if result.dispatch_failed:
        logger.warning(f"Submission handled without notification: {result!r}")
    else:
        logger.info(f"Submission handled: {result!r}")

    return {}

