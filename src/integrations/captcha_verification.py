"""
Human-verification (CAPTCHA) client.

This module checks the token submitted with a contact form against the
verification service's siteverify endpoint.

Usage:
    from integrations.captcha_verification import CaptchaVerifier

    verifier = CaptchaVerifier.from_settings(settings)
    result = verifier.verify(settings.captcha_site_secret, token)
    if result.verified:
        ...
"""

import logging
import time
from typing import Any, Tuple

import requests

from domain.models import VerificationResult

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class VerificationError(Exception):
    """Base class: the token could not be confirmed."""
    pass


class VerificationTransportError(VerificationError):
    """Raised on DNS, connection or timeout failures."""
    pass


class VerificationStatusError(VerificationError):
    """Raised when the service answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


class VerificationResponseError(VerificationError):
    """Raised when the response body is not the expected JSON object."""
    pass


# ============================================================================
# Client
# ============================================================================

class CaptchaVerifier:
    """
    Verification service client.

    Holds one requests.Session built per process; verify() keeps no state
    between calls, so the instance is shared across invocations.
    """

    def __init__(self, session: requests.Session, verify_url: str,
                 timeout: Tuple[float, float] = (5.0, 10.0)):
        self.session = session
        self.verify_url = verify_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> 'CaptchaVerifier':
        session = requests.Session()
        session.headers.update({'Accept': 'application/json'})
        logger.info(
            f"Verification client initialized: url={settings.verify_url}, "
            f"connect_timeout={settings.verify_timeout[0]}s, "
            f"read_timeout={settings.verify_timeout[1]}s, no retries"
        )
        return cls(session, settings.verify_url, settings.verify_timeout)

    def verify(self, secret: str, token: str) -> VerificationResult:
        """
        Check a verification token.

        Args:
            secret: Shared site secret
            token: Token submitted with the form

        Returns:
            VerificationResult: verified flag plus any diagnostic error codes

        Raises:
            VerificationTransportError: If the service could not be reached
            VerificationStatusError: If the service returned a non-2xx status
            VerificationResponseError: If the response body is malformed
        """
        start_time = time.time()

        try:
            response = self.session.post(
                self.verify_url,
                json={'secret': secret, 'response': token},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Verification request failed: {e.__class__.__name__}: {e}")
            raise VerificationTransportError(f"Verification service unreachable: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Verification service returned HTTP {response.status_code}")
            raise VerificationStatusError(
                response.status_code,
                f"Verification service returned HTTP {response.status_code}"
            )

        result = self._parse_response(response)

        logger.info(
            f"Verification completed: verified={result.verified}, "
            f"error_codes={list(result.error_codes)}, "
            f"execution_time={time.time() - start_time:.2f}s"
        )
        return result

    @staticmethod
    def _parse_response(response: requests.Response) -> VerificationResult:
        try:
            data: Any = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse verification response: {e}, body: {response.text[:200]}")
            raise VerificationResponseError(f"Verification response is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise VerificationResponseError(
                f"Verification response must be a JSON object, got {type(data).__name__}"
            )

        success = data.get('success')
        if not isinstance(success, bool):
            raise VerificationResponseError(
                f"Verification response has no boolean 'success' field: {success!r}"
            )

        error_codes = data.get('error-codes') or []
        if not isinstance(error_codes, list):
            error_codes = [error_codes]

        return VerificationResult(
            verified=success,
            error_codes=tuple(str(code) for code in error_codes)
        )
