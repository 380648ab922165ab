"""
Amazon SES notification dispatcher.

Sends the rendered contact form notification with SES `send_email`.
One call per submission, no retries.
"""

import logging
import time
from typing import Any, Dict

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from domain.models import BodyFormat, DispatchOutcome, NotificationMessage

logger = logging.getLogger(__name__)

CHARSET = 'UTF-8'


class DispatchError(Exception):
    """
    Raised when SES does not accept the message.

    Attributes:
        error_code: AWS error code (e.g. "MessageRejected"), or the botocore
            exception name for transport failures
    """

    def __init__(self, error_code: str, message: str):
        self.error_code = error_code
        super().__init__(message)


def create_ses_client(region: str, connect_timeout: float = 5.0, read_timeout: float = 10.0):
    """
    Initialize boto3 SES client with timeout configuration.

    Returns:
        boto3.client: Configured SES client (thread-safe, reused across invocations)
    """
    client_config = Config(
        retries={
            'max_attempts': 1,  # 1 attempt total (no retries)
            'mode': 'standard'
        },
        connect_timeout=connect_timeout,
        read_timeout=read_timeout
    )

    client = boto3.client('ses', region_name=region, config=client_config)

    logger.info(
        f"SES client initialized: region={region}, "
        f"connect_timeout={connect_timeout}s, read_timeout={read_timeout}s, max_attempts=1"
    )
    return client


class SesNotifier:
    """Submits NotificationMessages through SES."""

    def __init__(self, ses_client):
        self.ses_client = ses_client

    @classmethod
    def from_settings(cls, settings) -> 'SesNotifier':
        connect_timeout, read_timeout = settings.ses_timeout
        return cls(create_ses_client(settings.region, connect_timeout, read_timeout))

    @staticmethod
    def build_request(message: NotificationMessage) -> Dict[str, Any]:
        """Build `send_email` keyword arguments for a message."""
        body_key = 'Html' if message.body_format is BodyFormat.HTML else 'Text'
        return {
            'Source': message.source_address,
            'Destination': {'ToAddresses': [message.destination_address]},
            'Message': {
                'Subject': {'Data': message.subject, 'Charset': CHARSET},
                'Body': {body_key: {'Data': message.body, 'Charset': CHARSET}},
            },
        }

    def dispatch(self, message: NotificationMessage) -> DispatchOutcome:
        """
        Send a notification.

        Args:
            message: Fully built notification

        Returns:
            DispatchOutcome: The SES message id

        Raises:
            DispatchError: If SES rejects the message or cannot be reached
        """
        start_time = time.time()

        try:
            response = self.ses_client.send_email(**self.build_request(message))
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            error_message = e.response.get('Error', {}).get('Message', str(e))
            logger.error(
                f"SES send_email failed: error_code={error_code}, "
                f"error_message={error_message}, "
                f"source={message.source_address}, destination={message.destination_address}"
            )
            raise DispatchError(error_code, f"SES rejected message ({error_code}): {error_message}") from e
        except BotoCoreError as e:
            logger.error(f"SES send_email transport failure: {e.__class__.__name__}: {e}")
            raise DispatchError(e.__class__.__name__, f"SES unreachable: {e}") from e

        message_id = response.get('MessageId')
        if not message_id:
            raise DispatchError('MissingMessageId', "SES response did not include a MessageId")

        logger.info(
            f"SES accepted message: message_id={message_id}, "
            f"execution_time={time.time() - start_time:.2f}s"
        )
        return DispatchOutcome(message_id=message_id)
