"""
AWS Lambda handler that stores raw contact form request bodies in S3.

The object key is derived from the receive time and the body itself.
"""

import json
import os
from typing import Any, Dict

from botocore.exceptions import ClientError

import config
from services import s3 as s3_service

logger = config.configure_logging()

STORAGE_BUCKET = os.environ.get('STORAGE_BUCKET')
STORAGE_KEY_PREFIX = os.environ.get('STORAGE_KEY_PREFIX', 'submissions/')


def _response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(payload)
    }


def _request_body(event: Any) -> str:
    if isinstance(event, dict) and isinstance(event.get('body'), str):
        return event['body']
    return json.dumps(event, sort_keys=True)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Store the request body as a JSON object in S3.

    Returns:
        200 with the stored key, 500 if STORAGE_BUCKET is not configured,
        502 if S3 rejected the upload
    """
    if not STORAGE_BUCKET:
        logger.error("STORAGE_BUCKET environment variable is not set")
        return _response(500, {'error': 'Storage is not configured'})

    body = _request_body(event)
    key = s3_service.submission_key(body, STORAGE_KEY_PREFIX)

    try:
        s3_service.store_submission(STORAGE_BUCKET, key, body)
    except ClientError:
        return _response(502, {'error': 'Failed to store submission'})

    return _response(200, {'key': key})
