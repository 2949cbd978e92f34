"""Encoder settings derived from a quality percentage."""

from dataclasses import dataclass
from enum import Enum

from pdftool.core.options import check_quality


@dataclass(frozen=True)
class QualityTier:
    """A Ghostscript preset and the image resolution that goes with it."""

    preset: str
    resolution: int


SCREEN = QualityTier("/screen", 72)
EBOOK = QualityTier("/ebook", 150)
PRINTER = QualityTier("/printer", 300)
PREPRESS = QualityTier("/prepress", 300)

# (inclusive upper bound, tier), lowest first; anything above goes to PREPRESS
QUALITY_TIERS = (
    (25, SCREEN),
    (50, EBOOK),
    (75, PRINTER),
)


def tier_for_quality(quality: int) -> QualityTier:
    """
    Map a quality percentage onto one of the four Ghostscript presets.

    Args:
        quality: Quality percentage, 1-100. Lower means smaller output.

    Returns:
        The matching QualityTier. Boundary values (25, 50, 75) belong to the
        more compressed tier.
    """
    check_quality(quality)
    for upper, tier in QUALITY_TIERS:
        if quality <= upper:
            return tier
    return PREPRESS


class ValidationMode(str, Enum):
    """How forgiving the fallback backend is with malformed input."""

    STRICT = "strict"
    RELAXED = "relaxed"


@dataclass(frozen=True)
class FallbackConfig:
    """Write options for the pikepdf fallback backend."""

    validation: ValidationMode = ValidationMode.RELAXED
    write_object_streams: bool = False
    write_xref_streams: bool = False


def fallback_config(quality: int) -> FallbackConfig:
    """Pick structural compaction flags for a quality percentage."""
    check_quality(quality)
    if quality < 50:
        return FallbackConfig(write_object_streams=True, write_xref_streams=True)
    if quality < 80:
        return FallbackConfig(write_object_streams=True)
    return FallbackConfig()
