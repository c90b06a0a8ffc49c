"""
S3Config - Object storage configuration.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == '':
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off')


@dataclass
class S3Config:
    """
    Configuration for the s3:// image store.

    Bucket names are not part of the configuration: every s3:// URI carries
    its bucket as the host.

    Attributes:
        endpoint: Custom endpoint URL (MinIO, Ceph, ...); None for AWS
        region: Region name
        access_key: Access key id; None to use the default credential chain
        secret_key: Secret access key; None to use the default credential chain
        verify_ssl: Verify TLS certificates of the endpoint
        acl: Canned ACL applied to uploaded thumbnails
        addressing_style: 'auto', 'path' or 'virtual'
    """
    endpoint: Optional[str] = None
    region: str = 'us-east-1'
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    verify_ssl: bool = True
    acl: str = 'public-read'
    addressing_style: str = 'auto'

    ADDRESSING_STYLES = ('auto', 'path', 'virtual')

    @classmethod
    def from_env(cls) -> 'S3Config':
        """Build a configuration from S3_* environment variables."""
        return cls(
            endpoint=os.getenv('S3_ENDPOINT') or None,
            region=os.getenv('S3_REGION') or 'us-east-1',
            access_key=os.getenv('S3_ACCESS_KEY') or None,
            secret_key=os.getenv('S3_SECRET_KEY') or None,
            verify_ssl=_env_bool('S3_VERIFY_SSL', True),
            acl=os.getenv('S3_ACL') or 'public-read',
            addressing_style=os.getenv('S3_ADDRESSING_STYLE') or 'auto',
        )

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if self.endpoint and not self.endpoint.startswith(('http://', 'https://')):
            errors.append(f"S3 endpoint must be an http(s) URL: {self.endpoint}")
        if not self.region:
            errors.append("S3 region is required")
        if bool(self.access_key) != bool(self.secret_key):
            errors.append("S3 access key and secret key must be given together")
        if self.addressing_style not in self.ADDRESSING_STYLES:
            errors.append(
                f"S3 addressing style must be one of {', '.join(self.ADDRESSING_STYLES)}: "
                f"{self.addressing_style}"
            )
        return errors
