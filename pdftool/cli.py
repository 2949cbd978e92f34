"""Command-line interface for pdftool."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from pdftool.core.compressor import PDFCompressor
from pdftool.core.converter import ImageConverter
from pdftool.core.errors import PDFToolError
from pdftool.core.options import CompressionRequest, ConversionRequest
from pdftool.core.report import format_report

COMPRESS_DESCRIPTION = """\
Compress a PDF file with the specified quality percentage.

Quality levels:
  1-25:   Maximum compression, lowest quality (/screen preset)
  26-50:  High compression, medium-low quality (/ebook preset)
  51-75:  Medium compression, good quality (/printer preset)
  76-100: Light compression, highest quality (/prepress preset)
"""

GHOSTSCRIPT_HINT = """\
For best compression results, install Ghostscript:
  - Linux: sudo apt install ghostscript
  - macOS: brew install ghostscript
  - Windows: download from ghostscript.com
"""


def compress_command(args: argparse.Namespace) -> int:
    """Compress a single PDF file."""
    request = CompressionRequest(args.input, args.output, args.quality)
    if not args.quiet:
        print(f"Compressing PDF: {request.input_path} -> {request.output_path} (Quality: {request.quality}%)")

    report = PDFCompressor().compress(request)

    if not args.quiet:
        print()
        for line in format_report(report):
            print(line)
        print("PDF compression completed successfully!")
    return 0


def convert_command(args: argparse.Namespace) -> int:
    """Convert a single image to PDF."""
    request = ConversionRequest(args.input, args.output)
    if not args.quiet:
        print(f"Converting image: {request.input_path} -> {request.output_path}")

    ImageConverter().convert(request)

    if not args.quiet:
        print(f"Successfully converted {request.input_path} to {request.output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdftool",
        description="Compress PDF files and convert images (PNG/JPEG) to PDF.",
        epilog=GHOSTSCRIPT_HINT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress output",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    compress = subparsers.add_parser(
        "compress",
        help="Compress a PDF file",
        description=COMPRESS_DESCRIPTION,
        epilog=GHOSTSCRIPT_HINT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    compress.add_argument("input", type=Path, help="PDF file to compress")
    compress.add_argument("output", type=Path, help="Output PDF file")
    # Parsed by CompressionRequest so a bad value is reported like any other error
    compress.add_argument("quality", help="Quality percentage, 1-100")
    compress.set_defaults(handler=compress_command)

    convert = subparsers.add_parser(
        "convert",
        help="Convert PNG or JPEG to PDF",
        description="Convert a PNG or JPEG image file to a single-page PDF with automatic sizing.",
    )
    convert.add_argument("input", type=Path, help="Image file (.png, .jpg, .jpeg)")
    convert.add_argument("output", type=Path, help="Output PDF file")
    convert.set_defaults(handler=convert_command)

    return parser


def configure_logging(verbose: bool, quiet: bool):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


def main(args: List[str] | None = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.command is None:
        parser.print_help()
        print("\nError: No command specified.", file=sys.stderr)
        return 1

    configure_logging(parsed_args.verbose, parsed_args.quiet)

    try:
        return parsed_args.handler(parsed_args)
    except PDFToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
