"""
Data models for the contact form domain.

These type-safe data structures define clear contracts between components.
None of them outlive a single invocation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class BodyFormat(Enum):
    """Notification body format sent through SES."""
    HTML = 'html'
    TEXT = 'text'


@dataclass(frozen=True)
class Submission:
    """
    Parsed contact form submission.

    Attributes:
        name: Visitor's name
        email: Visitor's email address
        telephone: Visitor's phone number
        detail: Free-text message
        verification_token: Human-verification token from the form widget
    """
    name: str
    email: str
    telephone: str
    detail: str
    verification_token: str

    def identity(self) -> str:
        """Log-safe description of who submitted the form."""
        return f"name={self.name!r}, email={self.email!r}"

    def template_fields(self):
        """Fields available to the notification template (token excluded)."""
        return {
            'name': self.name,
            'email': self.email,
            'telephone': self.telephone,
            'detail': self.detail,
        }


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of one verification service call.

    Attributes:
        verified: Whether the service confirmed the token
        error_codes: Diagnostic codes returned by the service
    """
    verified: bool
    error_codes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NotificationMessage:
    """
    Fully built notification ready for SES.

    Attributes:
        subject: Single-line subject
        body: Rendered body (HTML or plain text)
        body_format: Format of `body`
        source_address: Sender address (verified in SES)
        destination_address: Recipient address
    """
    subject: str
    body: str
    body_format: BodyFormat
    source_address: str
    destination_address: str


@dataclass(frozen=True)
class DispatchOutcome:
    """Successful SES submission."""
    message_id: str


class PipelineOutcome(Enum):
    """Terminal states of the submission pipeline."""
    DONE = 'done'
    REJECTED_INPUT = 'rejected_input'
    REJECTED_VERIFICATION = 'rejected_verification'
    INTERNAL_ERROR = 'internal_error'


@dataclass(frozen=True)
class PipelineResult:
    """
    Result of handling one submission.

    This explicit result type makes success/failure handling clear
    and prevents exceptions from being used for control flow.

    Attributes:
        outcome: Terminal pipeline state
        message_id: SES message id (DONE only, None if dispatch failed)
        reason: Failure reason (field name for REJECTED_INPUT)
        redirect_location: Success page for query-string submissions
        dispatch_error: SES diagnostic when dispatch failed
    """
    outcome: PipelineOutcome
    message_id: Optional[str] = None
    reason: Optional[str] = None
    redirect_location: Optional[str] = None
    dispatch_error: Optional[str] = None

    @classmethod
    def done(cls, message_id: Optional[str] = None, redirect_location: Optional[str] = None,
             dispatch_error: Optional[str] = None) -> 'PipelineResult':
        return cls(
            outcome=PipelineOutcome.DONE,
            message_id=message_id,
            redirect_location=redirect_location,
            dispatch_error=dispatch_error,
        )

    @classmethod
    def rejected_input(cls, reason: str) -> 'PipelineResult':
        return cls(outcome=PipelineOutcome.REJECTED_INPUT, reason=reason)

    @classmethod
    def rejected_verification(cls, reason: Optional[str] = None) -> 'PipelineResult':
        return cls(outcome=PipelineOutcome.REJECTED_VERIFICATION, reason=reason)

    @classmethod
    def internal_error(cls, reason: str) -> 'PipelineResult':
        return cls(outcome=PipelineOutcome.INTERNAL_ERROR, reason=reason)

    @property
    def is_done(self) -> bool:
        return self.outcome is PipelineOutcome.DONE

    @property
    def dispatch_failed(self) -> bool:
        """Done, but SES did not accept the message."""
        return self.is_done and self.message_id is None

    @property
    def should_fail_invocation(self) -> bool:
        """
        Only caller and programmer errors are reported to the host as failures.

        Verification rejections and dispatch failures count as handled so the
        host does not redeliver the invocation.
        """
        return self.outcome in (PipelineOutcome.REJECTED_INPUT, PipelineOutcome.INTERNAL_ERROR)

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.is_done:
            if self.dispatch_failed:
                return f"PipelineResult(done, dispatch_failed, error={self.dispatch_error})"
            return f"PipelineResult(done, message_id={self.message_id})"
        return f"PipelineResult({self.outcome.value}, reason={self.reason})"
