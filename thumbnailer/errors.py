"""
Thumbnailer exceptions.

Errors raised while opening the source image abort the whole job. Every other
error is captured in the result of the option that raised it.
"""

from typing import Any, Dict, Optional


class ThumbnailerError(Exception):
    """Base exception for the thumbnailer."""

    code = "THUMBNAILER_ERROR"

    def __init__(self, message: str, uri: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.uri = uri

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "uri": self.uri,
        }


class UnsupportedSchemeError(ThumbnailerError):
    """Raised when no store backend handles the scheme of a URI."""

    code = "UNSUPPORTED_SCHEME"

    def __init__(self, uri: str):
        super().__init__(f"No image store for URI: {uri}", uri)


class UnsupportedFormatError(ThumbnailerError):
    """Raised when a file extension does not map to a known image format."""

    code = "UNSUPPORTED_FORMAT"

    def __init__(self, extension: str, uri: Optional[str] = None):
        super().__init__(f"Unsupported image format: {extension!r}", uri)
        self.extension = extension


class DecodeError(ThumbnailerError):
    """Raised when image bytes cannot be decoded."""

    code = "DECODE_ERROR"


class StoreIOError(ThumbnailerError):
    """Raised when reading or writing a backing store fails."""

    code = "STORE_IO_ERROR"


class PathError(ThumbnailerError):
    """Raised when a source, folder or destination URI is malformed."""

    code = "PATH_ERROR"


class CropError(ThumbnailerError):
    """Raised when a crop rectangle does not overlap the image."""

    code = "CROP_ERROR"


class OptionError(ThumbnailerError):
    """Raised for a thumbnail option that fails validation."""

    code = "INVALID_OPTION"


class UnsupportedOperationError(ThumbnailerError):
    """Raised when a store backend does not implement an operation."""

    code = "UNSUPPORTED_OPERATION"


class EncodeError(ThumbnailerError):
    """Raised when an image cannot be written in the requested format."""

    code = "ENCODE_ERROR"


class ConfigurationError(ThumbnailerError):
    """Raised for engine or storage settings that cannot be used."""

    code = "INVALID_CONFIG"
