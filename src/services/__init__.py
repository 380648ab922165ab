"""
Utility functions for Lambda handler operations.

This package contains reusable service functions for notification template
rendering and S3 interactions.
"""

__all__ = ['s3', 'template']
