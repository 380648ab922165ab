"""
Tests for S3 service operations.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from botocore.exceptions import ClientError
import hashlib
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from services import s3


class TestSubmissionKey:
    """Test object key derivation."""

    def test_key_from_timestamp_and_body(self):
        body = '{"name": "Jane"}'
        now = datetime(2025, 1, 2, 3, 4, 5, 6, tzinfo=timezone.utc)

        key = s3.submission_key(body, 'submissions/', now)

        digest = hashlib.sha256(body.encode('utf-8')).hexdigest()[:12]
        assert key == f'submissions/20250102T030405000006Z-{digest}.json'

    def test_key_is_utc(self):
        local = datetime(2025, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))

        key = s3.submission_key('x', '', local)

        assert key.startswith('20250102T030405000000Z-')

    def test_different_bodies_get_different_keys(self):
        now = datetime(2025, 1, 2, tzinfo=timezone.utc)

        assert s3.submission_key('a', '', now) != s3.submission_key('b', '', now)


class TestStoreSubmission:
    """Test uploading submissions to S3."""

    @patch('services.s3.s3_client')
    def test_store_success(self, mock_s3_client):
        s3.store_submission('test-bucket', 'submissions/a.json', '{"name": "Jane"}')

        mock_s3_client.put_object.assert_called_once_with(
            Bucket='test-bucket',
            Key='submissions/a.json',
            Body=b'{"name": "Jane"}',
            ContentType='application/json'
        )

    @pytest.mark.parametrize('bucket,key,content,message', [
        ('', 'k', 'c', 'bucket name cannot be empty'),
        ('b', '', 'c', 'object key cannot be empty'),
        ('b', 'k', None, 'Content cannot be None'),
    ])
    @patch('services.s3.s3_client')
    def test_store_invalid_parameters(self, mock_s3_client, bucket, key, content, message):
        with pytest.raises(ValueError, match=message):
            s3.store_submission(bucket, key, content)

        mock_s3_client.put_object.assert_not_called()

    @patch('services.s3.s3_client')
    def test_store_client_error(self, mock_s3_client):
        mock_s3_client.put_object.side_effect = ClientError(
            {'Error': {'Code': 'AccessDenied', 'Message': 'Access Denied'}},
            'PutObject'
        )

        with pytest.raises(ClientError):
            s3.store_submission('test-bucket', 'submissions/a.json', '{}')
