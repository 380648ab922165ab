"""
S3 operations utilities for Lambda handlers.

This module provides reusable functions for storing raw contact form
submissions in Amazon S3.
"""

import hashlib
import logging
from datetime import datetime, timezone
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Configure S3 client with timeouts to prevent infinite hangs
s3_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=10,  # 10 seconds to establish connection
    read_timeout=30      # 30 seconds max for reading response
)

# Initialize S3 client at module level (thread-safe, reused across invocations)
s3_client = boto3.client('s3', config=s3_config)
logger.info("S3 client initialized with timeouts: connect=10s, read=30s, max_attempts=1")


def submission_key(body: str, prefix: str = '', now: Optional[datetime] = None) -> str:
    """
    Derive the object key for a stored submission.

    The key is the UTC receive time followed by a short digest of the body,
    so two submissions in the same microsecond still get distinct keys.

    Example:
        2025-01-02 03:04:05.000006 UTC with prefix "submissions/" gives
        "submissions/20250102T030405000006Z-<first 12 hex of sha256>.json"
    """
    now = now or datetime.now(timezone.utc)
    timestamp = now.astimezone(timezone.utc).strftime('%Y%m%dT%H%M%S%fZ')
    digest = hashlib.sha256(body.encode('utf-8')).hexdigest()[:12]
    return f"{prefix}{timestamp}-{digest}.json"


def store_submission(bucket: str, key: str, content: str) -> None:
    """
    Upload a raw submission body to S3.

    Args:
        bucket: S3 bucket name
        key: S3 object key
        content: Request body as a string

    Raises:
        ClientError: If S3 operation fails
        ValueError: If parameters are invalid
    """
    if not bucket:
        raise ValueError("S3 bucket name cannot be empty")
    if not key:
        raise ValueError("S3 object key cannot be empty")
    if content is None:
        raise ValueError("Content cannot be None")

    try:
        logger.info(
            f"Uploading submission to S3: bucket={bucket}, key={key}, "
            f"size={len(content)} bytes"
        )

        s3_client.put_object(
            Bucket=bucket,
            Key=key,
            Body=content.encode('utf-8'),
            ContentType='application/json'
        )

        logger.info(f"Successfully stored submission: s3://{bucket}/{key}")

    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))

        logger.error(
            f"Failed to store submission in S3: "
            f"bucket={bucket}, key={key}, "
            f"error_code={error_code}, error_message={error_message}"
        )

        raise
