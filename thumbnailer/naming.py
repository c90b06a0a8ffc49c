"""
Naming policy - Where a generated thumbnail is written.
"""

import posixpath
from typing import Optional, Tuple
from urllib.parse import unquote

from .job import ThumbnailJob, ThumbnailOption
from .store import parse_uri


def source_name(src_image: str) -> Tuple[str, str]:
    """Return (base name, lower-cased extension) of the source image."""
    filename = posixpath.basename(parse_uri(src_image).path)
    base, ext = posixpath.splitext(filename)
    return base, ext.lower()


def thumbnail_name(
    job: ThumbnailJob,
    option: ThumbnailOption,
    size: Optional[Tuple[int, int]] = None,
    keep_passthrough_extension: bool = False
) -> str:
    """
    File name of a generated thumbnail.

    Args:
        job: The request
        option: The option as requested
        size: Resolved (width, height); defaults to the option's own values
        keep_passthrough_extension: Append the extension for options that
            neither crop nor resize

    Examples, for a source named cat.JPG:
        cat_s100x100.jpg
        cat_c10-10-50-50_s20x20.jpg
        cat                          (no crop, no resize)
    """
    base, ext = source_name(job.src_image)
    width, height = size or (option.width, option.height)

    if option.rect is not None:
        (min_x, min_y), (max_x, max_y) = option.rect.min, option.rect.max
        return f"{base}_c{min_x}-{min_y}-{max_x}-{max_y}_s{width}x{height}{ext}"
    if option.width == 0 and option.height == 0:
        # Historical name: no extension, unless asked for one.
        return base + ext if keep_passthrough_extension else base
    return f"{base}_s{width}x{height}{ext}"


def thumbnail_uri(
    job: ThumbnailJob,
    option: ThumbnailOption,
    size: Optional[Tuple[int, int]] = None,
    keep_passthrough_extension: bool = False
) -> str:
    """
    Output URI of a thumbnail.

    An explicit ``dst_image`` is used verbatim. Otherwise the generated name
    is placed in the job's destination folder.

    Raises:
        PathError: dst_image or dst_folder cannot be parsed
    """
    if option.dst_image:
        parse_uri(option.dst_image)
        return option.dst_image

    folder = parse_uri(job.dst_folder)
    name = thumbnail_name(job, option, size, keep_passthrough_extension)
    path = posixpath.join(folder.path or '/', name)
    return folder._replace(path=path).geturl()


def same_location(first: str, second: str) -> bool:
    """True when two URIs address the same image."""
    a, b = parse_uri(first), parse_uri(second)
    return (
        a.scheme.lower() == b.scheme.lower()
        and a.netloc == b.netloc
        and posixpath.normpath(unquote(a.path) or '/') == posixpath.normpath(unquote(b.path) or '/')
    )
