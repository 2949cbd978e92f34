"""Core compression and conversion functionality."""

from pdftool.core.compressor import PDFCompressor, compress_pdf
from pdftool.core.converter import ImageConverter, convert_image_to_pdf
from pdftool.core.options import CompressionRequest, ConversionRequest

__all__ = [
    "CompressionRequest",
    "ConversionRequest",
    "ImageConverter",
    "PDFCompressor",
    "compress_pdf",
    "convert_image_to_pdf",
]
