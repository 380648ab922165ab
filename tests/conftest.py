"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
import pytest
from unittest.mock import Mock

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('CAPTCHA_SITE_SECRET', 'test-site-secret')
os.environ.setdefault('FORWARD_ADDRESS', 'inbox@example.com')
os.environ.setdefault('SOURCE_ADDRESS', 'noreply@example.com')
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('STORAGE_BUCKET', 'contact-submissions-test')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')


@pytest.fixture
def lambda_context():
    """Mock Lambda context."""
    context = Mock()
    context.aws_request_id = "test-request-id"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test"
    context.function_name = "contact-form-test"
    return context


@pytest.fixture
def form_fields():
    """A complete, well-formed contact form."""
    return {
        'name': 'Jane',
        'email': 'jane@x.com',
        'telephone': '555',
        'detail': 'hello',
        'captcha': 'tok1'
    }
