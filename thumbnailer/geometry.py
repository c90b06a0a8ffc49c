"""
Geometry helpers: target size resolution, crop boxes and the shared box.
"""

import math
from typing import Iterable, Optional, Tuple

from .errors import CropError
from .job import Rectangle, ThumbnailOption


Size = Tuple[int, int]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolve_size(width: int, height: int, src_width: int, src_height: int) -> Size:
    """
    Resolve the requested size against a source size.

    A zero dimension is derived from the other one so the aspect ratio is
    kept (never below 1px). When both are zero the source size is kept.
    """
    if width == 0 and height == 0:
        return src_width, src_height
    if width == 0:
        width = max(1, _round_half_up(height * src_width / src_height))
    if height == 0:
        height = max(1, _round_half_up(width * src_height / src_width))
    return width, height


def crop_box(rect: Rectangle, size: Size) -> Tuple[int, int, int, int]:
    """Clip a crop rectangle to the image bounds."""
    left, upper, right, lower = rect.box
    width, height = size
    left, upper = max(0, left), max(0, upper)
    right, lower = min(width, right), min(height, lower)
    if right <= left or lower <= upper:
        raise CropError(f"Crop rectangle ({rect}) is outside the {width}x{height} image")
    return left, upper, right, lower


def shared_box(options: Iterable[ThumbnailOption], size: Size) -> Optional[Size]:
    """
    Smallest box every crop-free resizing option can be derived from.

    Returns the component-wise maximum of the resolved sizes, or None when no
    option qualifies.
    """
    max_width, max_height = 0, 0
    for opt in options:
        if opt.rect is not None or opt.is_passthrough:
            continue
        width, height = resolve_size(opt.width, opt.height, *size)
        max_width = max(max_width, width)
        max_height = max(max_height, height)
    if max_width == 0:
        return None
    return max_width, max_height
