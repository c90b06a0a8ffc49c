"""
Thumbnailer - Generates every thumbnail of a job from one decoded source.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Iterator, List, Optional, Tuple

from PIL import Image

from .codec import to_canonical
from .config import ThumbnailerConfig
from .errors import ConfigurationError, OptionError, PathError, ThumbnailerError
from .generation_stats import GenerationStats
from .geometry import crop_box, resolve_size, shared_box
from .job import JobReport, ThumbnailJob, ThumbnailOption, ThumbnailResult
from .naming import same_location, thumbnail_uri
from .store import StoreContext, open_store


# Catmull-Rom
RESAMPLE = Image.Resampling.BICUBIC


class Thumbnailer:
    """
    Generates the thumbnails of a job.

    The source image is opened and decoded once. When a job asks for several
    thumbnails, the source is first resized to the largest box any crop-free
    option needs, and those options are derived from that smaller image.
    Options then run in parallel on a bounded thread pool, each producing
    exactly one ThumbnailResult.
    """

    def __init__(
        self,
        config: Optional[ThumbnailerConfig] = None,
        store_context: Optional[StoreContext] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the thumbnailer.

        Args:
            config: Engine settings (worker count, naming flags)
            store_context: Dependencies of the image stores (S3 settings)
            logger: Optional logger instance

        Raises:
            ConfigurationError: the settings fail validation
        """
        self.config = config or ThumbnailerConfig()
        errors = self.config.validate()
        if errors:
            raise ConfigurationError('; '.join(errors))
        self.logger = logger or logging.getLogger(__name__)
        self.store_context = store_context or StoreContext(logger=self.logger)

    def open_source(self, job: ThumbnailJob) -> Image.Image:
        """Open and decode the source image of a job."""
        src = open_store(job.src_image, self.store_context)
        start = time.monotonic()
        img = src.open()
        self.logger.debug(
            f"Opened {job.src_image} ({img.width}x{img.height} {img.mode}) "
            f"in {time.monotonic() - start:.3f}s"
        )
        return img

    def shared_thumbnail(self, job: ThumbnailJob, src: Image.Image) -> Optional[Image.Image]:
        """
        Resize the source to the biggest box needed by crop-free options.

        Returns None for single-option jobs and when no option can use it.
        """
        if len(job.options) <= 1:
            return None
        box = shared_box(job.options, src.size)
        if box is None:
            return None
        if box == src.size:
            return src
        self.logger.debug(f"Shared thumbnail {box[0]}x{box[1]} for {len(job.options)} options")
        return src.resize(box, RESAMPLE)

    def generate(
        self,
        job: ThumbnailJob,
        stats: Optional[GenerationStats] = None
    ) -> Iterator[ThumbnailResult]:
        """
        Generate the thumbnails of a job.

        The source is opened and prepared before this returns, so a source
        that cannot be read raises here and no option runs. The returned
        iterator yields one result per option in completion order and ends
        once every option has reported.

        Args:
            job: The request
            stats: Optional statistics to update as results come in

        Raises:
            ThumbnailerError: the source image cannot be opened
        """
        stats = stats or GenerationStats()
        stats.total_to_process = len(job.options)

        if not job.options:
            # Still reject sources no store can handle.
            open_store(job.src_image, self.store_context)
            self.logger.info(f"No thumbnails requested for {job.src_image}")
            return iter(())

        try:
            img = self.open_source(job)
        except ThumbnailerError as e:
            self.logger.error(f"An error occurred while opening {job.src_image}: {e}")
            raise

        # From now on every option sees the same RGBA image.
        src = to_canonical(img)
        shared = self.shared_thumbnail(job, src)

        executor = ThreadPoolExecutor(
            max_workers=min(self.config.max_workers, len(job.options)),
            thread_name_prefix='thumbnailer'
        )
        futures = []
        for index, opt in enumerate(job.options):
            if shared is not None and opt.rect is None and not opt.is_passthrough:
                base = shared
            else:
                # Crop coordinates refer to the full resolution source.
                base = src
            futures.append(
                executor.submit(self.generate_thumbnail, job, index, opt, base, src.size)
            )
        return self._collect(job, executor, futures, stats)

    def _collect(
        self,
        job: ThumbnailJob,
        executor: ThreadPoolExecutor,
        futures: List[Future],
        stats: GenerationStats
    ) -> Iterator[ThumbnailResult]:
        try:
            for future in as_completed(futures):
                result = future.result()
                stats.record(result)
                yield result
        finally:
            executor.shutdown(wait=True)
            self.logger.info(
                f"Thumbnails of {job.src_image}: {stats.processed} generated, "
                f"{stats.errors} errors ({stats.elapsed_seconds:.2f}s)"
            )

    def generate_thumbnail(
        self,
        job: ThumbnailJob,
        index: int,
        option: ThumbnailOption,
        img: Image.Image,
        src_size: Tuple[int, int]
    ) -> ThumbnailResult:
        """
        Generate and save one thumbnail. Never raises.

        Args:
            job: The request
            index: Position of the option in the job
            option: The option to generate
            img: Image to derive the thumbnail from (source or shared thumbnail)
            src_size: Size of the full resolution source
        """
        start = time.monotonic()
        try:
            errors = option.validate()
            if errors:
                raise OptionError('; '.join(errors))

            ref_size = src_size
            cropped = False
            if option.rect is not None:
                img = img.crop(crop_box(option.rect, img.size))
                ref_size = img.size
                cropped = True

            if option.width == 0 and option.height == 0:
                thumb = img if cropped else img.copy()
            else:
                size = resolve_size(option.width, option.height, *ref_size)
                thumb = img.resize(size, RESAMPLE)

            uri = thumbnail_uri(
                job, option, thumb.size,
                keep_passthrough_extension=self.config.keep_passthrough_extension
            )
            if same_location(uri, job.src_image):
                raise PathError(f"Thumbnail would overwrite the source image: {uri}", uri)
            saving = time.monotonic()
            self.logger.debug(f"thumb: {uri} generated in {saving - start:.3f}s")

            written = open_store(uri, self.store_context).save(thumb)
            self.logger.info(f"thumb: {uri} saved in {time.monotonic() - saving:.3f}s")
            return ThumbnailResult(
                index=index,
                option=option,
                thumbnail=uri,
                width=thumb.width,
                height=thumb.height,
                bytes_written=written,
            )
        except ThumbnailerError as e:
            self.logger.error(f"An error occurred while generating opts[{index}] of {job.src_image}: {e}")
            return ThumbnailResult(index=index, option=option, error=e)
        except Exception as e:
            self.logger.exception(f"Unexpected error generating opts[{index}] of {job.src_image}: {e}")
            return ThumbnailResult(index=index, option=option, error=e)

    def run(self, job: ThumbnailJob) -> JobReport:
        """
        Generate every thumbnail, then delete the source if requested.

        The source is only deleted when every option succeeded. Thumbnails
        already written are kept when some option failed.

        Raises:
            ThumbnailerError: the source image cannot be opened
        """
        stats = GenerationStats()
        results = list(self.generate(job, stats))
        report = JobReport(job=job, results=JobReport.sorted_results(results), stats=stats)

        if job.delete_src:
            if report.failed_results:
                self.logger.warning(
                    f"Keeping {job.src_image}: {len(report.failed_results)} thumbnail(s) failed"
                )
            else:
                try:
                    self.delete_source(job)
                    report.source_deleted = True
                except ThumbnailerError as e:
                    self.logger.error(f"An error occurred while deleting {job.src_image}: {e}")
                    report.delete_error = e
        return report

    def delete_source(self, job: ThumbnailJob) -> None:
        """
        Delete the source image of a job.

        Raises:
            UnsupportedOperationError: the backend cannot delete (anything but file://)
            StoreIOError: the file could not be removed
        """
        self.logger.info(f"Deleting {job.src_image}")
        open_store(job.src_image, self.store_context).delete()
