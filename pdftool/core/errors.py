"""Exceptions raised by the compression and conversion pipelines."""


class PDFToolError(Exception):
    """Base class for all errors reported to the user."""


class NotFoundError(PDFToolError, FileNotFoundError):
    """An input file does not exist."""


class InvalidArgumentError(PDFToolError, ValueError):
    """A request argument is out of range or inconsistent."""


class UnsupportedFormatError(PDFToolError):
    """The input file extension is not one we can convert."""


class BackendExecutionError(PDFToolError):
    """Ghostscript or pikepdf failed to produce the compressed file."""


class DecodeError(PDFToolError):
    """The source image could not be decoded."""


class EncodeError(PDFToolError):
    """The image could not be re-encoded or placed on the page."""


class WriteError(PDFToolError):
    """The output PDF could not be written."""
