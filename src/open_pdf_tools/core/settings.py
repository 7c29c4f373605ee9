"""Settings management for Open PDF Tools."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_documents_dir

logger = logging.getLogger(__name__)


class PageSize(str, Enum):
    """Target page sizes for image conversion."""
    A4 = "a4"
    LETTER = "letter"

    @property
    def dimensions_mm(self) -> tuple[float, float]:
        """Return (width, height) in millimeters, portrait."""
        return {
            PageSize.A4: (210.0, 297.0),
            PageSize.LETTER: (215.9, 279.4),
        }[self]


class Orientation(str, Enum):
    """Page orientation for image conversion."""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    AUTO = "auto"


class PageFit(str, Enum):
    """How an image is fitted onto its page."""
    FIT = "fit"
    SHRINK = "shrink"
    MATCH = "match"


class MarginSize(str, Enum):
    """Page margin presets."""
    NONE = "none"
    SMALL = "small"
    LARGE = "large"

    @property
    def mm(self) -> float:
        """Return margin width in millimeters."""
        return {
            MarginSize.NONE: 0.0,
            MarginSize.SMALL: 10.0,
            MarginSize.LARGE: 20.0,
        }[self]


class CompressionLevel(str, Enum):
    """Compression presets."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def use_object_streams(self) -> bool:
        """Whether to pack objects into object streams."""
        return self is not CompressionLevel.LOW

    @property
    def recompress_flate(self) -> bool:
        """Whether to re-deflate existing Flate streams."""
        return self is not CompressionLevel.LOW

    @property
    def jpeg_quality(self) -> int | None:
        """Return JPEG quality for recompressed images (None = keep images)."""
        return {
            CompressionLevel.LOW: None,
            CompressionLevel.MEDIUM: None,
            CompressionLevel.HIGH: 60,
        }[self]

    @property
    def max_image_dimension(self) -> int | None:
        """Return the longest side, in pixels, for recompressed images."""
        return {
            CompressionLevel.LOW: None,
            CompressionLevel.MEDIUM: None,
            CompressionLevel.HIGH: 1600,
        }[self]

    @property
    def strip_metadata(self) -> bool:
        """Whether to drop XMP and document info metadata."""
        return self is CompressionLevel.HIGH


@dataclass
class ImagePdfOptions:
    """Layout options for converting images to PDF."""
    page_size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    page_fit: PageFit = PageFit.SHRINK
    margin: MarginSize = MarginSize.LARGE


_ENUM_FIELDS: dict[str, type[Enum]] = {
    "page_size": PageSize,
    "orientation": Orientation,
    "page_fit": PageFit,
    "margin": MarginSize,
    "compression_level": CompressionLevel,
}


def _checked_value(key: str, value: Any, default: Any) -> Any:
    """Convert a loaded JSON value to the type of the field's default."""
    if key in _ENUM_FIELDS:
        return _ENUM_FIELDS[key](value)

    if isinstance(default, bool):
        valid = isinstance(value, bool)
    elif isinstance(default, int):
        valid = isinstance(value, int) and not isinstance(value, bool)
    elif isinstance(default, str):
        valid = isinstance(value, str)
    elif isinstance(default, list):
        valid = isinstance(value, list) and all(isinstance(v, str) for v in value)
    elif isinstance(default, dict):
        valid = isinstance(value, dict) and all(
            isinstance(v, int) and not isinstance(v, bool) for v in value.values()
        )
    else:
        valid = False

    if not valid:
        raise TypeError(f"Invalid value for {key}: {value!r}")
    return value


@dataclass
class Settings:
    """Application settings."""

    # Output settings
    default_output_dir: str = ""
    remember_last_dir: bool = True
    last_used_dir: str = ""

    # Recent directories
    recent_directories: list[str] = field(default_factory=list)
    max_recent_dirs: int = 10

    # Image to PDF defaults
    page_size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    page_fit: PageFit = PageFit.SHRINK
    margin: MarginSize = MarginSize.LARGE

    # Compression default
    compression_level: CompressionLevel = CompressionLevel.MEDIUM

    # Window settings
    window_geometry: dict[str, int] = field(default_factory=lambda: {
        "x": 100, "y": 100, "width": 900, "height": 700
    })
    last_tab: int = 0

    _config_path: Path = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Initialize config path and default output directory."""
        if self._config_path is None:
            config_dir = Path(user_config_dir("open-pdf-tools", "OpenAEC"))
            config_dir.mkdir(parents=True, exist_ok=True)
            self._config_path = config_dir / "settings.json"

        if not self.default_output_dir:
            self.default_output_dir = str(Path(user_documents_dir()) / "PDFs")

    @classmethod
    def load(cls, config_path: Path | None = None) -> Settings:
        """Load settings from JSON file."""
        settings = cls(_config_path=config_path)

        if not settings._config_path.exists():
            return settings

        try:
            with open(settings._config_path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise TypeError(f"Expected a JSON object, got {type(data).__name__}")

            for key, value in data.items():
                if key.startswith("_") or not hasattr(settings, key):
                    continue
                setattr(settings, key, _checked_value(key, value, getattr(settings, key)))
        except (json.JSONDecodeError, ValueError, TypeError) as e:
            logger.warning("Could not load settings from %s: %s", settings._config_path, e)
            return cls(_config_path=settings._config_path)

        return settings

    def save(self) -> None:
        """Save settings to JSON file."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def add_recent_directory(self, directory: str) -> None:
        """Add a directory to recent directories list."""
        dir_path = str(Path(directory).resolve())

        # Remove if already exists
        if dir_path in self.recent_directories:
            self.recent_directories.remove(dir_path)

        self.recent_directories.insert(0, dir_path)
        self.recent_directories = self.recent_directories[:self.max_recent_dirs]

        if self.remember_last_dir:
            self.last_used_dir = dir_path

    def get_output_directory(self) -> Path:
        """Get the output directory to use."""
        if self.remember_last_dir and self.last_used_dir:
            path = Path(self.last_used_dir)
            if path.exists():
                return path
        path = Path(self.default_output_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def image_options(self) -> ImagePdfOptions:
        """Get the default image conversion options."""
        return ImagePdfOptions(
            page_size=self.page_size,
            orientation=self.orientation,
            page_fit=self.page_fit,
            margin=self.margin,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        result = {}
        for key, value in asdict(self).items():
            if key.startswith("_"):
                continue
            if isinstance(value, Enum):
                result[key] = value.value
            else:
                result[key] = value
        return result
