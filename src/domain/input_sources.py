"""
Input sources that turn a Lambda event into a Submission.

Two shapes are supported:
- EventBodySource: the form object itself (direct invocation), or an
  API Gateway proxy event whose `body` holds the form as JSON
- QueryStringSource: API Gateway `queryStringParameters`
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict, Mapping

from .errors import InputError
from .models import Submission

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('name', 'email', 'telephone', 'detail')

# Widgets name the token field differently; the first non-empty one wins
TOKEN_FIELDS = ('captcha', 'g-recaptcha-response', 'h-captcha-response')
TOKEN_REASON = 'captcha'


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _require_text(fields: Mapping[str, Any], key: str, reason: str) -> str:
    value = fields.get(key)
    if not _is_text(value):
        raise InputError(reason)
    return value


def submission_from_fields(fields: Mapping[str, Any]) -> Submission:
    """
    Validate raw form fields and build a Submission.

    Fields are checked in a fixed order and the first missing one is reported.

    Args:
        fields: Mapping of form field names to values

    Returns:
        Submission: Immutable submission with the values as received

    Raises:
        InputError: If a field is missing, empty or not a string
    """
    values = {key: _require_text(fields, key, key) for key in REQUIRED_FIELDS}

    token_key = next((key for key in TOKEN_FIELDS if _is_text(fields.get(key))), TOKEN_FIELDS[0])
    token = _require_text(fields, token_key, TOKEN_REASON)

    return Submission(verification_token=token, **values)


class InputSource:
    """Extracts a Submission from a raw invocation payload."""

    def extract(self, event: Any) -> Submission:
        raise NotImplementedError


class EventBodySource(InputSource):
    """Reads the form from the event, unwrapping an API Gateway JSON body."""

    def extract(self, event: Any) -> Submission:
        if not isinstance(event, dict):
            raise InputError('body', f"Event must be an object, got {type(event).__name__}")

        fields: Dict[str, Any] = event
        body = event.get('body')
        if isinstance(body, str):
            fields = self._decode_body(body, bool(event.get('isBase64Encoded')))

        return submission_from_fields(fields)

    @staticmethod
    def _decode_body(body: str, is_base64: bool) -> Dict[str, Any]:
        try:
            if is_base64:
                body = base64.b64decode(body).decode('utf-8')
            decoded = json.loads(body)
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to decode event body: {e}")
            raise InputError('body', f"Event body is not valid JSON: {e}")

        if not isinstance(decoded, dict):
            raise InputError('body', "Event body must be a JSON object")
        return decoded


class QueryStringSource(InputSource):
    """Reads the form from API Gateway query string parameters."""

    def extract(self, event: Any) -> Submission:
        if not isinstance(event, dict):
            raise InputError('queryStringParameters')
        params = event.get('queryStringParameters') or {}
        return submission_from_fields(params)
