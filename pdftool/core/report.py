"""Before/after size statistics for a compressed PDF."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from pdftool.core.errors import NotFoundError

logger = logging.getLogger(__name__)


def format_size(size_bytes: float) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


@dataclass
class CompressionReport:
    """Sizes of the input and output files."""

    input_size: int
    output_size: int

    @property
    def ratio_percent(self) -> Optional[float]:
        """Output size as a percentage of the input size."""
        if self.input_size == 0:
            return None
        return self.output_size / self.input_size * 100

    @property
    def savings_percent(self) -> Optional[float]:
        if self.input_size == 0:
            return None
        return (self.input_size - self.output_size) / self.input_size * 100

    @property
    def grew(self) -> bool:
        return self.output_size >= self.input_size


def _file_size(path: Path, label: str) -> int:
    try:
        return path.stat().st_size
    except FileNotFoundError as e:
        raise NotFoundError(f"Failed to get {label} file info: {path}") from e


def build_report(input_path: Union[str, Path], output_path: Union[str, Path]) -> CompressionReport:
    """Stat both files and return their sizes."""
    report = CompressionReport(
        input_size=_file_size(Path(input_path), "input"),
        output_size=_file_size(Path(output_path), "output"),
    )
    if report.input_size == 0:
        logger.debug("Input file is empty, skipping ratio computation")
    return report


def format_report(report: CompressionReport) -> List[str]:
    """Render a report as lines of text for the terminal."""
    if report.input_size == 0:
        return [f"Compressed size: {format_size(report.output_size)} (input was empty)"]

    lines = [
        "Compression results:",
        f"  Original size:   {report.input_size / 1024:.2f} KB ({report.input_size / (1024 * 1024):.2f} MB)",
        f"  Compressed size: {report.output_size / 1024:.2f} KB ({report.output_size / (1024 * 1024):.2f} MB)",
        f"  Final size: {report.ratio_percent:.1f}% of original",
        f"  Space saved: {report.savings_percent:.1f}%",
    ]
    if report.grew:
        lines.append("  Note: output file is not smaller than input")
    return lines
