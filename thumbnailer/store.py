"""
Image stores - Open and save decoded images at a URI.

The URI scheme picks the backend:

    file:///path/to/image.jpg      local filesystem
    s3://bucket/path/to/image.jpg  object storage, bucket = host, key = path

Handles are cheap and bound to one URI; create one per read or write.
"""

import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Type
from urllib.parse import ParseResult, unquote, urlparse

from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image

from . import codec
from .errors import (
    PathError,
    StoreIOError,
    UnsupportedOperationError,
    UnsupportedSchemeError,
)
from .s3_client import S3Client
from .s3_config import S3Config


def parse_uri(uri: str) -> ParseResult:
    """Parse a URI, turning parser failures into PathError."""
    try:
        return urlparse(uri)
    except ValueError as e:
        raise PathError(f"Malformed URI {uri!r}: {e}", uri) from e


@dataclass
class StoreContext:
    """
    Explicit dependencies of the store backends.

    One context is shared by every handle of a job; the S3 client is created
    on first use.
    """
    s3_config: S3Config = field(default_factory=S3Config)
    s3_client: Optional[S3Client] = None
    logger: Optional[logging.Logger] = None

    def __post_init__(self):
        self._lock = threading.Lock()

    def get_s3_client(self) -> S3Client:
        with self._lock:
            if self.s3_client is None:
                self.s3_client = S3Client(self.s3_config, self.logger)
            return self.s3_client


class ImageStore:
    """
    A backend bound to one image URI.

    Subclasses implement ``open`` and ``save``; ``delete`` is optional.
    """

    scheme = ''

    def __init__(self, uri: str, parsed: ParseResult, context: StoreContext):
        self.uri = uri
        self.parsed = parsed
        self.context = context
        self.logger = context.logger or logging.getLogger(__name__)

    @property
    def path(self) -> str:
        return unquote(self.parsed.path)

    @property
    def extension(self) -> str:
        return codec.extension_of(self.path)

    def open(self) -> Image.Image:
        raise NotImplementedError

    def save(self, img: Image.Image) -> int:
        """Encode and store the image, returning the number of bytes written."""
        raise NotImplementedError

    def delete(self) -> None:
        raise UnsupportedOperationError(
            f"Deleting images is not supported for {self.scheme}:// URIs: {self.uri}",
            self.uri,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri!r})"


class LocalImageStore(ImageStore):
    """Filesystem implementation of ImageStore."""

    scheme = 'file'

    def open(self) -> Image.Image:
        try:
            with open(self.path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise StoreIOError(f"Cannot read {self.path}: {e}", self.uri) from e
        return codec.decode(data, self.extension, self.uri)

    def save(self, img: Image.Image) -> int:
        """
        Save the image to the path of the URI.

        The format comes from the extension. The image is encoded in memory and
        written to a temporary file next to the destination which is renamed
        into place, so a failed save never leaves a partial file behind.
        """
        fmt = codec.format_for(self.extension, self.uri)
        data = codec.encode(img, fmt)

        directory = os.path.dirname(self.path) or '.'
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=directory,
                prefix='.' + os.path.basename(self.path) + '.',
                suffix='.tmp'
            )
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise StoreIOError(f"Cannot write {self.path}: {e}", self.uri) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
        return len(data)

    def delete(self) -> None:
        try:
            os.remove(self.path)
        except OSError as e:
            raise StoreIOError(f"Failed to remove {self.path}: {e}", self.uri) from e


class S3ImageStore(ImageStore):
    """Object storage implementation of ImageStore."""

    scheme = 's3'

    def __init__(self, uri: str, parsed: ParseResult, context: StoreContext):
        super().__init__(uri, parsed, context)
        if not parsed.netloc:
            raise PathError(f"S3 URI has no bucket: {uri}", uri)

    @property
    def bucket(self) -> str:
        return self.parsed.netloc

    @property
    def key(self) -> str:
        return S3Client.s3_key(self.path)

    def open(self) -> Image.Image:
        try:
            data = self.context.get_s3_client().download_object(self.bucket, self.key)
        except (ClientError, BotoCoreError) as e:
            raise StoreIOError(f"Cannot download {self.uri}: {e}", self.uri) from e
        return codec.decode(data, self.extension, self.uri)

    def save(self, img: Image.Image) -> int:
        fmt = codec.format_for(self.extension, self.uri)
        data = codec.encode(img, fmt)
        try:
            self.context.get_s3_client().upload_object(
                self.bucket,
                self.key,
                data,
                content_type=codec.CONTENT_TYPES[fmt],
            )
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"An error occurred while putting {self.uri} on S3: {e}")
            raise StoreIOError(f"Cannot upload {self.uri}: {e}", self.uri) from e
        return len(data)


STORE_BACKENDS: Dict[str, Type[ImageStore]] = {
    LocalImageStore.scheme: LocalImageStore,
    S3ImageStore.scheme: S3ImageStore,
}


def open_store(uri: str, context: Optional[StoreContext] = None) -> ImageStore:
    """
    Return the image store handling ``uri``.

    Raises:
        UnsupportedSchemeError: no backend is registered for the scheme
        PathError: the URI cannot be parsed
    """
    parsed = parse_uri(uri)
    backend = STORE_BACKENDS.get(parsed.scheme.lower())
    if backend is None:
        raise UnsupportedSchemeError(uri)
    return backend(uri, parsed, context or StoreContext())
