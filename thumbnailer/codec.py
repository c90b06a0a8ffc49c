"""
Codec - Format-aware decoding and encoding of images with Pillow.

The format is always chosen from a lower-cased file extension. Pillow wheels
ship libjpeg-turbo, so JPEG decoding already runs on the accelerated engine.
"""

import io
import os
from typing import Optional

from PIL import Image

from .errors import DecodeError, EncodeError, UnsupportedFormatError


FORMATS = {
    '.jpg': 'JPEG',
    '.jpeg': 'JPEG',
    '.png': 'PNG',
    '.tif': 'TIFF',
    '.tiff': 'TIFF',
    '.bmp': 'BMP',
    '.gif': 'GIF',
}

CONTENT_TYPES = {
    'JPEG': 'image/jpeg',
    'PNG': 'image/png',
    'TIFF': 'image/tiff',
    'BMP': 'image/bmp',
    'GIF': 'image/gif',
}

CANONICAL_MODE = 'RGBA'

JPEG_QUALITY = 75
GIF_PALETTE_SIZE = 256
TIFF_COMPRESSION = 'tiff_adobe_deflate'
TIFF_PREDICTOR_TAG = 317
TIFF_HORIZONTAL_DIFFERENCING = 2

# Modes Pillow converts straight to RGBA; everything else goes through RGB.
_DIRECT_TO_CANONICAL = {'1', 'L', 'LA', 'P', 'PA', 'RGB', 'RGBX', 'RGBa'}


def extension_of(path: str) -> str:
    """Lower-cased extension of a path, including the dot."""
    return os.path.splitext(path)[1].lower()


def format_for(extension: str, uri: Optional[str] = None) -> str:
    """Map a file extension to a Pillow format name."""
    fmt = FORMATS.get(extension.lower())
    if fmt is None:
        raise UnsupportedFormatError(extension, uri)
    return fmt


def content_type_for(extension: str) -> str:
    """MIME type used when publishing an image with this extension."""
    return CONTENT_TYPES[format_for(extension)]


def decode(data: bytes, extension: str, uri: Optional[str] = None) -> Image.Image:
    """
    Decode image bytes.

    Args:
        data: Encoded image
        extension: Extension of the file the bytes came from (e.g. '.jpg')
        uri: Location of the bytes, for error reporting

    Returns:
        Fully loaded PIL image
    """
    format_for(extension, uri)
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Cannot decode image: {e}", uri) from e
    return img


def to_canonical(img: Image.Image) -> Image.Image:
    """Return the image as non-premultiplied RGBA, 8 bits per channel."""
    if img.mode == CANONICAL_MODE:
        return img
    if img.mode not in _DIRECT_TO_CANONICAL:
        img = img.convert('RGB')
    return img.convert(CANONICAL_MODE)


def is_opaque(img: Image.Image) -> bool:
    """True when the image has no alpha channel or every pixel is opaque."""
    if 'A' not in img.getbands():
        return True
    alpha_index = img.getbands().index('A')
    return img.getextrema()[alpha_index][0] == 255


def _jpeg_ready(img: Image.Image) -> Image.Image:
    if img.mode in ('RGB', 'L', 'CMYK'):
        return img
    if img.mode == 'RGBA':
        if is_opaque(img):
            # Alpha carries no information: drop it in one pass.
            return img.convert('RGB')
        # Translucent pixels are written premultiplied, i.e. over black.
        background = Image.new('RGBA', img.size, (0, 0, 0, 255))
        return Image.alpha_composite(background, img).convert('RGB')
    return to_canonical(img).convert('RGB')


def encode(img: Image.Image, fmt: Optional[str] = None, extension: Optional[str] = None) -> bytes:
    """
    Encode an image.

    Either ``fmt`` (a Pillow format name) or ``extension`` selects the format.

    Returns:
        Encoded bytes
    """
    if fmt is None:
        fmt = format_for(extension or '')
    if fmt not in CONTENT_TYPES:
        raise UnsupportedFormatError(fmt)

    output = io.BytesIO()
    try:
        _save(img, fmt, output)
    except (OSError, ValueError) as e:
        raise EncodeError(f"Cannot encode image as {fmt}: {e}") from e
    return output.getvalue()


def _save(img: Image.Image, fmt: str, output: io.BytesIO) -> None:
    if fmt == 'JPEG':
        _jpeg_ready(img).save(output, format='JPEG', quality=JPEG_QUALITY)
    elif fmt == 'PNG':
        img.save(output, format='PNG')
    elif fmt == 'GIF':
        if img.mode not in ('P', 'L'):
            img = img.quantize(colors=GIF_PALETTE_SIZE)
        img.save(output, format='GIF')
    elif fmt == 'TIFF':
        img.save(
            output,
            format='TIFF',
            compression=TIFF_COMPRESSION,
            tiffinfo={TIFF_PREDICTOR_TAG: TIFF_HORIZONTAL_DIFFERENCING},
        )
    elif fmt == 'BMP':
        img.save(output, format='BMP')
