"""Compression backends: Ghostscript when installed, pikepdf otherwise."""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Union

import pikepdf

from pdftool.core.errors import BackendExecutionError
from pdftool.core.options import CompressionRequest
from pdftool.core.settings import (
    FallbackConfig,
    ValidationMode,
    fallback_config,
    tier_for_quality,
)

logger = logging.getLogger(__name__)

PDF_COMPATIBILITY_LEVEL = "1.4"


def ghostscript_candidates(os_name: Optional[str] = None) -> Sequence[str]:
    """Executable names to look for, in order of preference."""
    if (os_name or os.name) == "nt":
        return ("gswin64c", "gswin32c")
    return ("gs",)


class OptimizerProbe(Protocol):
    """Something that can tell whether an external optimizer is installed."""

    def find(self) -> Optional[str]:
        ...


class ExecutableProbe:
    """Looks up Ghostscript on the search path."""

    def __init__(self, candidates: Optional[Sequence[str]] = None):
        self.candidates = tuple(candidates) if candidates is not None else tuple(ghostscript_candidates())

    def find(self) -> Optional[str]:
        for name in self.candidates:
            path = shutil.which(name)
            if path:
                logger.debug("Found %s at %s", name, path)
                return path
        logger.debug("None of %s found on PATH", ", ".join(self.candidates))
        return None


class StaticProbe:
    """A probe with a fixed answer. Pass None for "not installed"."""

    def __init__(self, executable: Optional[str] = None):
        self.executable = executable

    def find(self) -> Optional[str]:
        return self.executable


def ghostscript_args(executable: str, request: CompressionRequest) -> List[str]:
    """Build the Ghostscript command line for a request."""
    tier = tier_for_quality(request.quality)
    resolution = str(tier.resolution)
    return [
        executable,
        "-q",
        "-dNOPAUSE",
        "-dBATCH",
        "-dSAFER",
        "-sDEVICE=pdfwrite",
        f"-dCompatibilityLevel={PDF_COMPATIBILITY_LEVEL}",
        f"-dPDFSETTINGS={tier.preset}",
        "-dEmbedAllFonts=true",
        "-dSubsetFonts=true",
        "-dColorImageDownsampleType=/Bicubic",
        f"-dColorImageResolution={resolution}",
        "-dGrayImageDownsampleType=/Bicubic",
        f"-dGrayImageResolution={resolution}",
        "-dMonoImageDownsampleType=/Bicubic",
        f"-dMonoImageResolution={resolution}",
        f"-sOutputFile={request.output_path}",
        str(request.input_path),
    ]


@dataclass(frozen=True)
class GhostscriptBackend:
    """Re-encodes the PDF through an external Ghostscript process."""

    executable: str

    def describe(self, request: CompressionRequest) -> str:
        tier = tier_for_quality(request.quality)
        return f"Using Ghostscript for compression ({tier.preset}, {tier.resolution} DPI)..."

    def compress(self, request: CompressionRequest) -> None:
        args = ghostscript_args(self.executable, request)
        logger.debug("Running: %s", " ".join(args))

        # stderr is inherited so Ghostscript diagnostics reach the user
        try:
            result = subprocess.run(args)
        except OSError as e:
            raise BackendExecutionError(f"Could not run Ghostscript ({self.executable}): {e}") from e

        if result.returncode != 0:
            raise BackendExecutionError(
                f"Ghostscript compression failed with exit status {result.returncode}"
            )


def pikepdf_save_options(config: FallbackConfig) -> dict:
    """Translate a FallbackConfig into keyword arguments for Pdf.save()."""
    save_options = {"compress_streams": True}

    # qpdf writes a cross-reference stream whenever it generates object streams
    if config.write_object_streams or config.write_xref_streams:
        save_options["object_stream_mode"] = pikepdf.ObjectStreamMode.generate
    else:
        save_options["object_stream_mode"] = pikepdf.ObjectStreamMode.preserve

    return save_options


@dataclass(frozen=True)
class PikepdfBackend:
    """Structural rewrite with pikepdf. Images are left untouched."""

    def describe(self, request: CompressionRequest) -> str:
        return "Ghostscript not found, using pikepdf for basic optimization..."

    def compress(self, request: CompressionRequest, config: Optional[FallbackConfig] = None) -> None:
        config = config or fallback_config(request.quality)
        save_options = pikepdf_save_options(config)
        logger.debug(
            "pikepdf settings: object streams=%s, xref streams=%s, validation=%s",
            config.write_object_streams,
            config.write_xref_streams,
            config.validation.value,
        )

        try:
            with pikepdf.open(
                request.input_path,
                attempt_recovery=config.validation is ValidationMode.RELAXED,
            ) as pdf:
                pdf.save(request.output_path, **save_options)
        except (pikepdf.PdfError, OSError) as e:
            raise BackendExecutionError(f"pikepdf optimization failed: {e}") from e


Backend = Union[GhostscriptBackend, PikepdfBackend]


def select_backend(probe: OptimizerProbe) -> Backend:
    """Choose Ghostscript if the probe finds it, pikepdf otherwise."""
    executable = probe.find()
    if executable:
        return GhostscriptBackend(executable)
    return PikepdfBackend()
