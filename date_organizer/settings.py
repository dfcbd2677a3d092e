"""
Runtime settings: environment variables and CLI overrides resolved into one
immutable value that is handed to the BatchRelocator.
"""
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Mapping, Optional

from . import config
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class Settings:
    source: Path
    destination: Path
    allowed_extensions: FrozenSet[str] = config.MEDIA_EXTS
    dry_run: bool = False
    throttle_every: int = config.THROTTLE_EVERY
    throttle_seconds: float = config.THROTTLE_SECONDS
    show_progress: bool = True
    video_metadata: bool = False


def normalize_extensions(exts: Iterable[str]) -> FrozenSet[str]:
    """'JPG', '.Png', 'mp4' -> {'.jpg', '.png', '.mp4'}"""
    out = set()
    for ext in exts:
        ext = ext.strip().lower()
        if not ext:
            continue
        out.add(ext if ext.startswith('.') else f'.{ext}')
    return frozenset(out)


def parse_extensions(value: Optional[str]) -> FrozenSet[str]:
    if value is None or not value.strip():
        return config.MEDIA_EXTS
    if value.strip() == '*':
        return frozenset()
    return normalize_extensions(re.split(r'[,\s;]+', value))


def _flag(value: Optional[str]) -> bool:
    return (value or '').strip().lower() in config.TRUTHY


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  source: Optional[Path] = None,
                  destination: Optional[Path] = None,
                  allowed_extensions: Optional[Iterable[str]] = None,
                  dry_run: Optional[bool] = None,
                  video_metadata: Optional[bool] = None,
                  show_progress: bool = True,
                  throttle_every: int = config.THROTTLE_EVERY,
                  throttle_seconds: float = config.THROTTLE_SECONDS) -> Settings:
    """
    Builds Settings from the environment. Explicit arguments (from the CLI)
    take precedence over environment variables.

    Raises ConfigurationError if no source directory is given or the
    throttle values are invalid.
    """
    env = os.environ if environ is None else environ

    if source is None:
        raw = env.get(config.ENV_SOURCE, '').strip()
        if not raw:
            raise ConfigurationError(
                f"No source folder given. Pass SRC or set {config.ENV_SOURCE}."
            )
        source = Path(raw)
    source = Path(source).expanduser().resolve()

    if destination is None:
        raw = env.get(config.ENV_DESTINATION, '').strip()
        # Default: organize next to the source folder
        destination = Path(raw) if raw else source.parent
    destination = Path(destination).expanduser().resolve()

    if allowed_extensions is None:
        exts = parse_extensions(env.get(config.ENV_EXTENSIONS))
    else:
        exts = normalize_extensions(allowed_extensions)

    if dry_run is None:
        dry_run = _flag(env.get(config.ENV_DRY_RUN))
    if video_metadata is None:
        video_metadata = _flag(env.get(config.ENV_VIDEO_METADATA))

    if not isinstance(throttle_every, int) or throttle_every < 0:
        raise ConfigurationError(f"throttle_every must be a non-negative integer, got {throttle_every!r}")
    if throttle_seconds < 0:
        raise ConfigurationError(f"throttle_seconds must be >= 0, got {throttle_seconds!r}")

    return Settings(
        source=source,
        destination=destination,
        allowed_extensions=exts,
        dry_run=dry_run,
        throttle_every=throttle_every,
        throttle_seconds=throttle_seconds,
        show_progress=show_progress,
        video_metadata=video_metadata,
    )
