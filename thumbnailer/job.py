"""
Job model - Thumbnail generation requests and their results.

The JSON wire format, as received from the queue or HTTP layer:

    {
        "srcImage": "s3://bucket/photos/cat.jpg",
        "dstFolder": "s3://bucket/thumbs/",
        "deleteSrc": false,
        "opts": [
            {"width": 200, "height": 0},
            {"rect": {"min": [10, 10], "max": [50, 50]}, "width": 20, "height": 20},
            {"dstImage": "file:///tmp/cat-small.png", "width": 64, "height": 64}
        ]
    }
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned crop rectangle in source pixel coordinates.

    Attributes:
        min: (x, y) of the first corner
        max: (x, y) of the opposite corner
    """
    min: Tuple[int, int]
    max: Tuple[int, int]

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower), corners swapped if given reversed."""
        x0, x1 = sorted((self.min[0], self.max[0]))
        y0, y1 = sorted((self.min[1], self.max[1]))
        return x0, y0, x1, y1

    def __str__(self) -> str:
        return f"min: {list(self.min)}, max: {list(self.max)}"

    def to_dict(self) -> dict:
        return {'min': list(self.min), 'max': list(self.max)}

    @classmethod
    def from_dict(cls, data: dict) -> 'Rectangle':
        return cls(
            min=(int(data['min'][0]), int(data['min'][1])),
            max=(int(data['max'][0]), int(data['max'][1])),
        )


@dataclass(frozen=True)
class ThumbnailOption:
    """
    One requested thumbnail.

    Attributes:
        width: Target width; 0 derives it from the height and the aspect ratio
        height: Target height; 0 derives it from the width and the aspect ratio
        rect: Optional crop applied to the source before resizing
        dst_image: Optional URI overriding the generated output location
    """
    width: int = 0
    height: int = 0
    rect: Optional[Rectangle] = None
    dst_image: Optional[str] = None

    @property
    def is_passthrough(self) -> bool:
        """True when the option neither resizes nor crops."""
        return self.rect is None and self.width == 0 and self.height == 0

    def validate(self) -> List[str]:
        errors = []
        if self.width < 0:
            errors.append(f"width must not be negative: {self.width}")
        if self.height < 0:
            errors.append(f"height must not be negative: {self.height}")
        return errors

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {'width': self.width, 'height': self.height}
        if self.rect is not None:
            data['rect'] = self.rect.to_dict()
        if self.dst_image:
            data['dstImage'] = self.dst_image
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'ThumbnailOption':
        rect = data.get('rect')
        return cls(
            width=int(data.get('width') or 0),
            height=int(data.get('height') or 0),
            rect=Rectangle.from_dict(rect) if rect else None,
            dst_image=data.get('dstImage') or None,
        )


@dataclass(frozen=True)
class ThumbnailJob:
    """
    One thumbnail generation request.

    Attributes:
        src_image: URI of the source image
        dst_folder: URI of the folder receiving generated thumbnails
        options: Requested thumbnails
        delete_src: Remove the source once every thumbnail was written
    """
    src_image: str
    dst_folder: str = ''
    options: Tuple[ThumbnailOption, ...] = ()
    delete_src: bool = False

    def __post_init__(self):
        # Accept any sequence but store an immutable one.
        if not isinstance(self.options, tuple):
            object.__setattr__(self, 'options', tuple(self.options))

    def validate(self) -> List[str]:
        """Return a list of problems with the request (empty when valid)."""
        errors = []
        if not self.src_image:
            errors.append("srcImage is required")
        needs_folder = any(not opt.dst_image for opt in self.options)
        if needs_folder and not self.dst_folder:
            errors.append("dstFolder is required unless every option sets dstImage")
        for i, opt in enumerate(self.options):
            errors.extend(f"opts[{i}]: {e}" for e in opt.validate())
        return errors

    def to_dict(self) -> dict:
        return {
            'srcImage': self.src_image,
            'dstFolder': self.dst_folder,
            'deleteSrc': self.delete_src,
            'opts': [opt.to_dict() for opt in self.options],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ThumbnailJob':
        return cls(
            src_image=data.get('srcImage', ''),
            dst_folder=data.get('dstFolder', ''),
            options=tuple(ThumbnailOption.from_dict(o) for o in data.get('opts') or []),
            delete_src=bool(data.get('deleteSrc', False)),
        )

    @classmethod
    def from_json(cls, text: str) -> 'ThumbnailJob':
        return cls.from_dict(json.loads(text))

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class ThumbnailResult:
    """
    Outcome of one option.

    Attributes:
        index: Position of the option in the job
        option: The option as requested
        thumbnail: URI written, None on failure
        error: Exception raised while generating, None on success
        width: Width of the generated image
        height: Height of the generated image
        bytes_written: Encoded size of the generated image
    """
    index: int
    option: ThumbnailOption
    thumbnail: Optional[str] = None
    error: Optional[Exception] = None
    width: Optional[int] = None
    height: Optional[int] = None
    bytes_written: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            'thumbnail': self.thumbnail,
            'err': str(self.error) if self.error is not None else None,
        }


@dataclass
class JobReport:
    """
    Collected outcome of a job.

    Attributes:
        job: The request
        results: One result per option, in option order
        source_deleted: True once the source image was removed
        delete_error: Error raised while removing the source
        stats: Generation statistics
    """
    job: ThumbnailJob
    results: List[ThumbnailResult] = field(default_factory=list)
    source_deleted: bool = False
    delete_error: Optional[Exception] = None
    stats: Any = None

    @property
    def failed_results(self) -> List[ThumbnailResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed_results and self.delete_error is None

    @property
    def error(self) -> Optional[str]:
        """Summary of what went wrong, None when the job fully succeeded."""
        failed = self.failed_results
        if failed:
            details = '; '.join(f"opts[{r.index}]: {r.error}" for r in failed)
            return f"At least one thumbnail generation failed ({len(failed)}/{len(self.results)}) - {details}"
        if self.delete_error is not None:
            return f"Failed to delete {self.job.src_image}: {self.delete_error}"
        return None

    def to_list(self) -> List[dict]:
        return [r.to_dict() for r in self.results]

    @staticmethod
    def sorted_results(results: Sequence[ThumbnailResult]) -> List[ThumbnailResult]:
        return sorted(results, key=lambda r: r.index)
