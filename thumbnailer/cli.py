"""
Command Line Interface for running thumbnail jobs.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import urllib3

from .config import ThumbnailerConfig
from .errors import ConfigurationError, ThumbnailerError
from .generator import Thumbnailer
from .job import ThumbnailJob
from .s3_config import S3Config
from .store import StoreContext


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(threadName)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    return logging.getLogger('thumbnailer')


def get_s3_config(args: argparse.Namespace) -> S3Config:
    """Get S3 configuration from environment and CLI overrides."""
    config = S3Config.from_env()

    if getattr(args, 's3_endpoint', None):
        config.endpoint = args.s3_endpoint
    if getattr(args, 's3_region', None):
        config.region = args.s3_region
    if getattr(args, 's3_access_key', None):
        config.access_key = args.s3_access_key
    if getattr(args, 's3_secret_key', None):
        config.secret_key = args.s3_secret_key
    if getattr(args, 'no_verify_ssl', False):
        config.verify_ssl = False

    return config


def get_thumbnailer_config(args: argparse.Namespace) -> ThumbnailerConfig:
    """Get engine configuration from environment and CLI overrides."""
    config = ThumbnailerConfig.from_env()

    if getattr(args, 'max_workers', None) is not None:
        config.max_workers = args.max_workers
    if getattr(args, 'keep_passthrough_extension', False):
        config.keep_passthrough_extension = True

    return config


def load_job(path: str) -> ThumbnailJob:
    """Load a job from a JSON file, or from stdin when path is '-'."""
    if path == '-':
        return ThumbnailJob.from_json(sys.stdin.read())
    with open(path, 'r', encoding='utf-8') as f:
        return ThumbnailJob.from_json(f.read())


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--s3-endpoint', help='Override S3_ENDPOINT')
    s3_group.add_argument('--s3-region', help='Override S3_REGION')
    s3_group.add_argument('--s3-access-key', help='Override S3_ACCESS_KEY')
    s3_group.add_argument('--s3-secret-key', help='Override S3_SECRET_KEY')
    s3_group.add_argument('--no-verify-ssl', action='store_true',
                          help='Do not verify the TLS certificate of the S3 endpoint')


def _load_and_validate(args: argparse.Namespace, logger: logging.Logger) -> Optional[ThumbnailJob]:
    try:
        job = load_job(args.job)
    except FileNotFoundError:
        logger.error(f"Job file not found: {args.job}")
        return None
    except (ValueError, KeyError, TypeError, IndexError) as e:
        logger.error(f"Failed to load job: {e}")
        return None

    errors = job.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return None
    return job


def cmd_run(args: argparse.Namespace) -> int:
    """Execute run command."""
    logger = setup_logging(args.verbose)

    job = _load_and_validate(args, logger)
    if job is None:
        return 1

    try:
        s3_config = get_s3_config(args)
        config = get_thumbnailer_config(args)
        errors = s3_config.validate() + config.validate()
    except ConfigurationError as e:
        errors = [str(e)]
    if errors:
        for error in errors:
            logger.error(error)
        return 1
    if not s3_config.verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    logger.info(f"Source: {job.src_image}")
    logger.info(f"Destination: {job.dst_folder}")
    logger.info(f"Thumbnails: {len(job.options)} (max {config.max_workers} in parallel)")

    thumbnailer = Thumbnailer(
        config=config,
        store_context=StoreContext(s3_config=s3_config, logger=logger),
        logger=logger
    )
    try:
        report = thumbnailer.run(job)
    except ThumbnailerError as e:
        logger.error(f"Job failed: {e}")
        print(json.dumps({'err': str(e)}))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    print(json.dumps(report.to_list(), indent=2))
    if not report.ok:
        logger.error(report.error)
        return 1
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute validate command."""
    logger = setup_logging(args.verbose)

    job = _load_and_validate(args, logger)
    if job is None:
        return 1
    logger.info(f"Job is valid: {len(job.options)} thumbnail(s) from {job.src_image}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='thumbnailer',
        description='Generate thumbnails from a JSON job description',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Job file:
  {"srcImage": "file:///photos/cat.jpg", "dstFolder": "s3://thumbs/cats",
   "deleteSrc": false, "opts": [{"width": 200, "height": 0}]}

Examples:
  python -m thumbnailer run job.json
  cat job.json | python -m thumbnailer run - --max-workers 8
  python -m thumbnailer validate job.json
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Run command
    run_parser = subparsers.add_parser('run', help='Generate the thumbnails of a job')
    run_parser.add_argument('job', help="Job JSON file ('-' for stdin)")
    run_parser.add_argument('-w', '--max-workers', type=int, metavar='N',
                            help='Thumbnails generated in parallel (default: 4)')
    run_parser.add_argument('--keep-passthrough-extension', action='store_true',
                            help='Keep the extension in names of unresized thumbnails')
    run_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(run_parser)

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Check a job file without running it')
    validate_parser.add_argument('job', help="Job JSON file ('-' for stdin)")
    validate_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'run':
        return cmd_run(parsed_args)
    elif parsed_args.command == 'validate':
        return cmd_validate(parsed_args)

    return 1
