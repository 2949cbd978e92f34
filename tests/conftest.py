from __future__ import annotations

from pathlib import Path

import pikepdf
import pytest
from PIL import Image

from pdftool.core import backends


def write_pdf(path: Path, pages: int = 2) -> Path:
    pdf = pikepdf.new()
    for _ in range(pages):
        pdf.add_blank_page(page_size=(200, 300))
    pdf.save(path)
    return path


def write_image(path: Path, size: tuple[int, int], image_format: str) -> Path:
    img = Image.new("RGB", size, (15, 98, 254))
    img.save(path, format=image_format)
    return path


@pytest.fixture
def sample_pdf(tmp_path: Path) -> Path:
    return write_pdf(tmp_path / "input.pdf")


@pytest.fixture
def sample_png(tmp_path: Path) -> Path:
    return write_image(tmp_path / "photo.png", (2500, 1250), "PNG")


@pytest.fixture
def sample_jpeg(tmp_path: Path) -> Path:
    return write_image(tmp_path / "photo.JPG", (600, 2400), "JPEG")


@pytest.fixture
def no_ghostscript(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(backends.shutil, "which", lambda name: None)
