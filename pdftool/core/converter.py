"""Single image (PNG/JPEG) to single-page PDF conversion."""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from fpdf import FPDF
from fpdf.errors import FPDFException
from PIL import Image

from pdftool.core.errors import DecodeError, EncodeError, NotFoundError, WriteError
from pdftool.core.options import ConversionRequest

logger = logging.getLogger(__name__)

# Assumed density of the source image
SOURCE_DPI = 300
POINTS_PER_INCH = 72

# Largest side of the placed image, in points
MAX_PAGE_DIMENSION = 500

JPEG_QUALITY = 90

# Decoder is picked from the extension, never from the file contents
PIL_FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}


@dataclass(frozen=True)
class ImageGeometry:
    """Pixel dimensions of the decoded image."""

    width: int
    height: int


@dataclass(frozen=True)
class PageGeometry:
    """Size of the placed image on the page, in points."""

    width: float
    height: float


def page_geometry(image: ImageGeometry) -> PageGeometry:
    """
    Convert pixel dimensions to points and clamp to MAX_PAGE_DIMENSION.

    The image is assumed to be SOURCE_DPI. If either side ends up larger than
    MAX_PAGE_DIMENSION, the larger side is set to it and the other is scaled to
    keep the aspect ratio. Small images are not scaled up.
    """
    width = image.width * POINTS_PER_INCH / SOURCE_DPI
    height = image.height * POINTS_PER_INCH / SOURCE_DPI

    if width > MAX_PAGE_DIMENSION or height > MAX_PAGE_DIMENSION:
        if width > height:
            height = height * MAX_PAGE_DIMENSION / width
            width = MAX_PAGE_DIMENSION
        else:
            width = width * MAX_PAGE_DIMENSION / height
            height = MAX_PAGE_DIMENSION

    return PageGeometry(width, height)


def decode_image(path: Path, extension: str) -> Image.Image:
    """Decode an image with the decoder matching its extension."""
    image_format = PIL_FORMATS[extension]
    try:
        with Image.open(path, formats=[image_format]) as img:
            img.load()
            return img.copy()
    except (OSError, Image.DecompressionBombError) as e:
        # UnidentifiedImageError is an OSError too
        raise DecodeError(f"Failed to decode image {path.name} as {image_format}: {e}") from e


def save_image(img: Image.Image, path: Path, extension: str):
    """Re-encode an image in its original format."""
    image_format = PIL_FORMATS[extension]
    try:
        if image_format == "JPEG":
            if img.mode not in ("RGB", "L", "CMYK"):
                img = img.convert("RGB")
            img.save(path, format="JPEG", quality=JPEG_QUALITY)
        else:
            img.save(path, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to save temporary image: {e}") from e


class ImageConverter:
    """Places a single image, centered, on an A4 page."""

    def convert(self, request: ConversionRequest) -> PageGeometry:
        """
        Convert an image file to a one-page PDF.

        Args:
            request: Input image and output PDF paths

        Returns:
            Size of the image as placed on the page, in points
        """
        if not request.input_path.exists():
            raise NotFoundError(f"Input file does not exist: {request.input_path}")

        img = decode_image(request.input_path, request.extension)
        geometry = page_geometry(ImageGeometry(*img.size))
        logger.debug(
            "Image %dx%d px placed at %.1fx%.1f pt",
            img.width,
            img.height,
            geometry.width,
            geometry.height,
        )

        fd, temp_name = tempfile.mkstemp(prefix="pdftool_", suffix=request.extension)
        os.close(fd)
        temp_path = Path(temp_name)
        try:
            save_image(img, temp_path, request.extension)
            self._write_pdf(temp_path, geometry, request.output_path)
        finally:
            temp_path.unlink(missing_ok=True)

        return geometry

    def _write_pdf(self, image_path: Path, geometry: PageGeometry, output_path: Path):
        pdf = FPDF(orientation="P", unit="pt", format="A4")
        pdf.set_auto_page_break(auto=False)
        pdf.add_page()

        x = (pdf.w - geometry.width) / 2
        y = (pdf.h - geometry.height) / 2
        try:
            pdf.image(str(image_path), x=x, y=y, w=geometry.width, h=geometry.height)
        except (FPDFException, OSError, ValueError) as e:
            raise EncodeError(f"Failed to add image to PDF: {e}") from e

        try:
            pdf.output(str(output_path))
        except OSError as e:
            raise WriteError(f"Failed to save PDF {output_path}: {e}") from e


def convert_image_to_pdf(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
) -> PageGeometry:
    """
    Convenience function to convert an image file to PDF.

    Args:
        input_path: Path to a .png, .jpg or .jpeg file
        output_path: Path for the output PDF

    Returns:
        Size of the image as placed on the page, in points
    """
    request = ConversionRequest(input_path, output_path)
    return ImageConverter().convert(request)
