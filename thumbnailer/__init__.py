"""
Thumbnail generation engine.

Turns one source image and a list of thumbnail options into independently
stored thumbnails. Images are read from and written to file:// or s3:// URIs.
"""

__version__ = "1.0.0"

from .s3_config import S3Config
from .s3_client import S3Client
from .config import ThumbnailerConfig
from .errors import (
    ThumbnailerError,
    UnsupportedSchemeError,
    UnsupportedFormatError,
    DecodeError,
    EncodeError,
    ConfigurationError,
    StoreIOError,
    PathError,
    CropError,
    OptionError,
    UnsupportedOperationError,
)
from .job import Rectangle, ThumbnailOption, ThumbnailJob, ThumbnailResult, JobReport
from .store import StoreContext, ImageStore, LocalImageStore, S3ImageStore, open_store
from .naming import thumbnail_uri
from .generation_stats import GenerationStats
from .generator import Thumbnailer

__all__ = [
    "S3Config",
    "S3Client",
    "ThumbnailerConfig",
    "ThumbnailerError",
    "UnsupportedSchemeError",
    "UnsupportedFormatError",
    "DecodeError",
    "EncodeError",
    "ConfigurationError",
    "StoreIOError",
    "PathError",
    "CropError",
    "OptionError",
    "UnsupportedOperationError",
    "Rectangle",
    "ThumbnailOption",
    "ThumbnailJob",
    "ThumbnailResult",
    "JobReport",
    "StoreContext",
    "ImageStore",
    "LocalImageStore",
    "S3ImageStore",
    "open_store",
    "thumbnail_uri",
    "GenerationStats",
    "Thumbnailer",
]
