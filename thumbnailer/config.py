"""
ThumbnailerConfig - Settings of the generation engine.
"""

import os
from dataclasses import dataclass
from typing import List

from .errors import ConfigurationError


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, '').strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer: {value!r}") from None


@dataclass
class ThumbnailerConfig:
    """
    Attributes:
        max_workers: Upper bound on options of one job processed in parallel
        keep_passthrough_extension: Keep the source extension in the generated
            name of a "no crop, no resize" option. The historical name is the
            bare base name, which no codec can save to.
    """
    max_workers: int = 4
    keep_passthrough_extension: bool = False

    @classmethod
    def from_env(cls) -> 'ThumbnailerConfig':
        """
        Build a configuration from THUMBNAILER_* environment variables.

        Raises:
            ConfigurationError: a numeric variable cannot be parsed
        """
        keep = os.getenv('THUMBNAILER_KEEP_PASSTHROUGH_EXTENSION', '')
        return cls(
            max_workers=_env_int('THUMBNAILER_MAX_WORKERS', 4),
            keep_passthrough_extension=keep.strip().lower() in ('1', 'true', 'yes', 'on'),
        )

    def validate(self) -> List[str]:
        errors = []
        if self.max_workers < 1:
            errors.append(f"max_workers must be at least 1: {self.max_workers}")
        return errors
