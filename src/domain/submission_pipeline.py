"""
Contact form submission pipeline - core business logic.

This module handles the end-to-end processing of one submission:
1. Extract the submission from the invocation payload
2. Verify the human-verification token
3. Render the notification
4. Dispatch it through SES
5. Return a PipelineResult

Failure policy:
- Missing input aborts before any network call (REJECTED_INPUT)
- Any verification failure, including an unreachable service, aborts
  without dispatching (REJECTED_VERIFICATION)
- A render failure is a programmer error (INTERNAL_ERROR)
- A dispatch failure is logged and still reported as DONE so the host
  does not redeliver the invocation
"""

import logging
from typing import Any, Optional

from config import Settings
from integrations.captcha_verification import VerificationError
from integrations.ses_notification import DispatchError
from services import template as template_service

from .errors import InputError, RenderError
from .input_sources import InputSource
from .models import NotificationMessage, PipelineResult, Submission

logger = logging.getLogger(__name__)


class SubmissionPipeline:
    """
    Verify -> render -> dispatch pipeline for one invocation at a time.

    All collaborators are injected and never mutated, so one instance is
    built per process and shared across invocations.
    """

    def __init__(self, input_source: InputSource, verifier, dispatcher,
                 settings: Settings, success_redirect: Optional[str] = None):
        """
        Args:
            input_source: Extracts the Submission from the event
            verifier: Object with verify(secret, token) -> VerificationResult
            dispatcher: Object with dispatch(message) -> DispatchOutcome
            settings: Process-wide configuration
            success_redirect: Page returned with DONE results (query-string variant)
        """
        self.input_source = input_source
        self.verifier = verifier
        self.dispatcher = dispatcher
        self.settings = settings
        self.success_redirect = success_redirect

    def handle(self, event: Any) -> PipelineResult:
        """
        Process one invocation payload.

        Args:
            event: Raw Lambda event

        Returns:
            PipelineResult for the terminal state reached
        """
        try:
            submission = self.input_source.extract(event)
        except InputError as e:
            logger.warning(f"Rejected submission: {e}")
            return PipelineResult.rejected_input(e.field)

        logger.info(f"Parsed submission: {submission.identity()}")

        if not self._verify(submission):
            return PipelineResult.rejected_verification()

        try:
            message = self.build_message(submission)
        except RenderError as e:
            logger.error(f"Failed to render notification for {submission.identity()}: {e}",
                         exc_info=True)
            return PipelineResult.internal_error(str(e))

        try:
            outcome = self.dispatcher.dispatch(message)
        except DispatchError as e:
            logger.error(
                f"Notification dispatch failed for {submission.identity()}: "
                f"error_code={e.error_code}, error={e}"
            )
            return PipelineResult.done(
                redirect_location=self.success_redirect,
                dispatch_error=str(e)
            )

        logger.info(f"Notification sent for {submission.identity()}: message_id={outcome.message_id}")
        return PipelineResult.done(
            message_id=outcome.message_id,
            redirect_location=self.success_redirect
        )

    def _verify(self, submission: Submission) -> bool:
        try:
            result = self.verifier.verify(
                self.settings.captcha_site_secret,
                submission.verification_token
            )
        except VerificationError as e:
            logger.error(
                f"Verification could not be confirmed for {submission.identity()}: "
                f"{e.__class__.__name__}: {e}"
            )
            return False

        if not result.verified:
            logger.warning(
                f"Verification declined for {submission.identity()}: "
                f"error_codes={list(result.error_codes)}"
            )
            return False

        if result.error_codes:
            logger.info(f"Verification passed with diagnostics: {list(result.error_codes)}")
        return True

    def build_message(self, submission: Submission) -> NotificationMessage:
        """
        Build the notification for a verified submission.

        Raises:
            RenderError: If a template cannot be rendered
        """
        return NotificationMessage(
            subject=template_service.render_subject(submission, self.settings.subject_template),
            body=template_service.render_body(submission, self.settings.body_format),
            body_format=self.settings.body_format,
            source_address=self.settings.source_address,
            destination_address=self.settings.forward_address,
        )
