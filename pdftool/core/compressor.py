"""PDF compression through Ghostscript, with a pikepdf fallback."""

import logging
from pathlib import Path
from typing import Optional, Union

from pdftool.core.backends import ExecutableProbe, OptimizerProbe, select_backend
from pdftool.core.errors import NotFoundError
from pdftool.core.options import CompressionRequest
from pdftool.core.report import CompressionReport, build_report

logger = logging.getLogger(__name__)


class PDFCompressor:
    """Compresses PDF files with whichever backend is available."""

    def __init__(self, probe: Optional[OptimizerProbe] = None):
        """
        Initialize the compressor.

        Args:
            probe: Used to look for Ghostscript. Defaults to a search-path
                lookup, repeated on every call to compress().
        """
        self.probe = probe or ExecutableProbe()

    def compress(self, request: CompressionRequest) -> CompressionReport:
        """
        Compress a PDF file.

        Args:
            request: Validated input/output paths and quality percentage

        Returns:
            Size statistics for the input and output files
        """
        if not request.input_path.exists():
            raise NotFoundError(f"Input file does not exist: {request.input_path}")

        backend = select_backend(self.probe)
        logger.info(backend.describe(request))

        backend.compress(request)

        return build_report(request.input_path, request.output_path)


def compress_pdf(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    quality: int,
    probe: Optional[OptimizerProbe] = None,
) -> CompressionReport:
    """
    Convenience function to compress a PDF file.

    Args:
        input_path: Path to the input PDF file
        output_path: Path for the output file
        quality: Quality percentage, 1-100
        probe: Optional Ghostscript probe

    Returns:
        Size statistics for the input and output files
    """
    request = CompressionRequest(input_path, output_path, quality)
    return PDFCompressor(probe).compress(request)
