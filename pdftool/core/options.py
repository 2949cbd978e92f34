"""Request objects for the compress and convert commands."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pdftool.core.errors import InvalidArgumentError, UnsupportedFormatError

SUPPORTED_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")

MIN_QUALITY = 1
MAX_QUALITY = 100


def parse_quality(value: Union[str, int]) -> int:
    """Parse a quality percentage given on the command line."""
    try:
        quality = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(
            f"Invalid quality percentage: {value} (must be {MIN_QUALITY}-{MAX_QUALITY})"
        ) from None
    return quality


def check_quality(quality: int) -> int:
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidArgumentError(
            f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got: {quality}"
        )
    return quality


@dataclass
class CompressionRequest:
    """A single PDF compression job."""

    input_path: Path
    output_path: Path
    quality: int

    def __post_init__(self):
        """Validate the request after initialization."""
        self.input_path = Path(self.input_path)
        self.output_path = Path(self.output_path)
        self.quality = check_quality(parse_quality(self.quality))
        if self.input_path.resolve() == self.output_path.resolve():
            raise InvalidArgumentError("Input and output files cannot be the same")


@dataclass
class ConversionRequest:
    """A single image-to-PDF conversion job."""

    input_path: Path
    output_path: Path

    def __post_init__(self):
        self.input_path = Path(self.input_path)
        self.output_path = Path(self.output_path)
        if self.extension not in SUPPORTED_IMAGE_EXTENSIONS:
            raise UnsupportedFormatError(
                f"Unsupported file format: {self.extension or '(none)'} "
                f"(supported: {', '.join(SUPPORTED_IMAGE_EXTENSIONS)})"
            )

    @property
    def extension(self) -> str:
        return self.input_path.suffix.lower()
