"""
AWS Lambda handler for contact form submissions sent as a query string
through API Gateway.

On success the visitor is redirected (303 See Other) to a fixed success page.
"""

import json
from typing import Any, Dict

import config
from domain.input_sources import QueryStringSource
from domain.models import PipelineOutcome
from domain.submission_pipeline import SubmissionPipeline
from integrations.captcha_verification import CaptchaVerifier
from integrations.ses_notification import SesNotifier

logger = config.configure_logging()

# Initialize once at module level (reused across invocations)
settings = config.load_settings()
verifier = CaptchaVerifier.from_settings(settings)
notifier = SesNotifier.from_settings(settings)
pipeline = SubmissionPipeline(
    QueryStringSource(),
    verifier,
    notifier,
    settings,
    success_redirect=settings.success_redirect_path
)


def _json_response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*'
        },
        'body': json.dumps(payload)
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Relay one contact form submission from query string parameters.

    Expected query string:
        ?name=Jane&email=jane@example.com&telephone=555&detail=Hello&captcha=token

    Returns:
        303 redirect on success (also when SES rejected the message),
        400 for missing fields, 403 when verification fails,
        500 for internal errors
    """
    request_id = getattr(context, 'aws_request_id', 'UNKNOWN')
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Contact form query received: request_id={request_id}")

    try:
        result = pipeline.handle(event)

        if result.outcome is PipelineOutcome.DONE:
            if result.dispatch_failed:
                logger.warning(f"Redirecting although notification failed: {result!r}")
            return {
                'statusCode': 303,
                'headers': {'Location': result.redirect_location},
                'body': ''
            }

        if result.outcome is PipelineOutcome.REJECTED_INPUT:
            return _json_response(400, {
                'error': f"{result.reason} is required",
                'field': result.reason
            })

        if result.outcome is PipelineOutcome.REJECTED_VERIFICATION:
            return _json_response(403, {'error': 'Verification failed'})

        logger.error(f"Internal error handling submission: {result!r}")
        return _json_response(500, {'error': 'Internal server error'})

    except Exception as e:
        logger.error(f"Unexpected error handling submission: {str(e)}", exc_info=True)
        return _json_response(500, {'error': 'Internal server error'})


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    return _json_response(200, {
        'status': 'healthy',
        'environment': settings.environment,
        'bodyFormat': settings.body_format.value,
        'verificationConfigured': bool(settings.captcha_site_secret and settings.verify_url),
        'mailConfigured': bool(settings.source_address and settings.forward_address)
    })
