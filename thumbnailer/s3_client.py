"""
S3Client - S3/MinIO operations for downloading and uploading images.
"""

import logging
from typing import Optional

import boto3
from botocore.config import Config

from .s3_config import S3Config


class S3Client:
    """
    Wrapper for S3/MinIO operations.

    The bucket is passed on every call because each s3:// URI names its own.
    boto3 clients are thread-safe, so one instance serves every option of a
    job.
    """

    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.

        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        # Unset keys leave authentication to boto3's credential chain.
        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': config.addressing_style}
            ),
            verify=config.verify_ssl
        )

    @property
    def client(self):
        """Return the underlying boto3 client."""
        return self._client

    @staticmethod
    def s3_key(path: str) -> str:
        """Normalize a URI path into an S3 object key."""
        return path.lstrip('/')

    def download_object(self, bucket: str, key: str) -> bytes:
        """Download an object from S3."""
        self.logger.debug(f"Downloading s3://{bucket}/{key}")
        response = self._client.get_object(Bucket=bucket, Key=self.s3_key(key))
        return response['Body'].read()

    def upload_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream',
        acl: Optional[str] = None
    ) -> None:
        """Upload an object to S3 with the configured (or given) canned ACL."""
        self.logger.debug(f"Uploading s3://{bucket}/{key} ({len(data)} bytes)")
        self._client.put_object(
            Bucket=bucket,
            Key=self.s3_key(key),
            Body=data,
            ContentType=content_type,
            ACL=acl or self.config.acl
        )
