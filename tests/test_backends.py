from __future__ import annotations

import re
import subprocess
from pathlib import Path

import pikepdf
import pytest

from pdftool.core import backends
from pdftool.core.backends import (
    ExecutableProbe,
    GhostscriptBackend,
    PikepdfBackend,
    StaticProbe,
    ghostscript_args,
    ghostscript_candidates,
    pikepdf_save_options,
    select_backend,
)
from pdftool.core.errors import BackendExecutionError
from pdftool.core.options import CompressionRequest
from pdftool.core.settings import FallbackConfig, ValidationMode, fallback_config


def test_candidates_posix() -> None:
    assert ghostscript_candidates("posix") == ("gs",)


def test_candidates_windows_prefers_64_bit() -> None:
    assert ghostscript_candidates("nt") == ("gswin64c", "gswin32c")


def test_executable_probe_falls_through_to_second_candidate(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[str] = []

    def fake_which(name: str) -> str | None:
        seen.append(name)
        return "C:/gs/bin/gswin32c.exe" if name == "gswin32c" else None

    monkeypatch.setattr(backends.shutil, "which", fake_which)
    probe = ExecutableProbe(ghostscript_candidates("nt"))
    assert probe.find() == "C:/gs/bin/gswin32c.exe"
    assert seen == ["gswin64c", "gswin32c"]


def test_executable_probe_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(backends.shutil, "which", lambda name: None)
    assert ExecutableProbe().find() is None


def test_executable_probe_does_not_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    answers = iter(["/usr/bin/gs", None])
    monkeypatch.setattr(backends.shutil, "which", lambda name: next(answers))
    probe = ExecutableProbe(["gs"])
    assert select_backend(probe) == GhostscriptBackend("/usr/bin/gs")
    assert select_backend(probe) == PikepdfBackend()


def test_select_backend_with_static_probe() -> None:
    assert select_backend(StaticProbe("gs")) == GhostscriptBackend("gs")
    assert select_backend(StaticProbe(None)) == PikepdfBackend()
    assert select_backend(StaticProbe()) == PikepdfBackend()


def test_ghostscript_args(tmp_path: Path) -> None:
    request = CompressionRequest(tmp_path / "in.pdf", tmp_path / "out.pdf", 40)
    args = ghostscript_args("gs", request)

    assert args[0] == "gs"
    assert args[-1] == str(tmp_path / "in.pdf")
    assert args[-2] == f"-sOutputFile={tmp_path / 'out.pdf'}"
    for flag in ("-q", "-dNOPAUSE", "-dBATCH", "-dSAFER", "-sDEVICE=pdfwrite"):
        assert flag in args
    assert "-dCompatibilityLevel=1.4" in args
    assert "-dPDFSETTINGS=/ebook" in args
    assert "-dEmbedAllFonts=true" in args
    assert "-dSubsetFonts=true" in args
    for kind in ("Color", "Gray", "Mono"):
        assert f"-d{kind}ImageDownsampleType=/Bicubic" in args
        assert f"-d{kind}ImageResolution=150" in args


def test_ghostscript_args_screen_tier(tmp_path: Path) -> None:
    request = CompressionRequest(tmp_path / "in.pdf", tmp_path / "out.pdf", 10)
    args = ghostscript_args("gs", request)
    assert "-dPDFSETTINGS=/screen" in args
    assert "-dColorImageResolution=72" in args


def test_ghostscript_backend_runs_subprocess(
    monkeypatch: pytest.MonkeyPatch, sample_pdf: Path, tmp_path: Path
) -> None:
    calls: list[list[str]] = []

    def fake_run(args: list[str], **kwargs):
        calls.append(args)
        assert "stderr" not in kwargs
        return subprocess.CompletedProcess(args, 0)

    monkeypatch.setattr(backends.subprocess, "run", fake_run)
    request = CompressionRequest(sample_pdf, tmp_path / "out.pdf", 80)
    GhostscriptBackend("/usr/bin/gs").compress(request)

    assert len(calls) == 1
    assert calls[0][0] == "/usr/bin/gs"
    assert "-dPDFSETTINGS=/prepress" in calls[0]


def test_ghostscript_backend_nonzero_exit(
    monkeypatch: pytest.MonkeyPatch, sample_pdf: Path, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        backends.subprocess, "run", lambda args, **kwargs: subprocess.CompletedProcess(args, 1)
    )
    request = CompressionRequest(sample_pdf, tmp_path / "out.pdf", 50)
    with pytest.raises(BackendExecutionError, match="exit status 1"):
        GhostscriptBackend("gs").compress(request)


def test_ghostscript_backend_missing_executable(sample_pdf: Path, tmp_path: Path) -> None:
    request = CompressionRequest(sample_pdf, tmp_path / "out.pdf", 50)
    with pytest.raises(BackendExecutionError, match="Could not run Ghostscript"):
        GhostscriptBackend(str(tmp_path / "no-such-gs")).compress(request)


def test_save_options_generate_object_streams() -> None:
    options = pikepdf_save_options(fallback_config(30))
    assert options["object_stream_mode"] == pikepdf.ObjectStreamMode.generate
    assert options["compress_streams"] is True

    options = pikepdf_save_options(fallback_config(60))
    assert options["object_stream_mode"] == pikepdf.ObjectStreamMode.generate


def test_save_options_preserve_when_no_flags() -> None:
    options = pikepdf_save_options(fallback_config(90))
    assert options["object_stream_mode"] == pikepdf.ObjectStreamMode.preserve


def test_pikepdf_backend_writes_object_streams(sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.pdf"
    PikepdfBackend().compress(CompressionRequest(sample_pdf, output, 30))

    assert b"/ObjStm" in output.read_bytes()
    with pikepdf.open(output) as pdf:
        assert len(pdf.pages) == 2


def test_pikepdf_backend_high_quality_keeps_plain_xref(sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.pdf"
    PikepdfBackend().compress(CompressionRequest(sample_pdf, output, 90))

    assert b"/ObjStm" not in output.read_bytes()
    with pikepdf.open(output) as pdf:
        assert len(pdf.pages) == 2


def test_pikepdf_backend_uses_explicit_config(sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.pdf"
    config = FallbackConfig(validation=ValidationMode.STRICT, write_object_streams=True)
    PikepdfBackend().compress(CompressionRequest(sample_pdf, output, 95), config)
    assert b"/ObjStm" in output.read_bytes()


def test_pikepdf_backend_wraps_errors(tmp_path: Path) -> None:
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"this is not a pdf at all")
    request = CompressionRequest(broken, tmp_path / "out.pdf", 50)
    with pytest.raises(BackendExecutionError, match="pikepdf optimization failed"):
        PikepdfBackend().compress(request)


def _break_startxref(source: Path, target: Path) -> Path:
    data = re.sub(rb"startxref\s+\d+", b"startxref\n9999", source.read_bytes())
    target.write_bytes(data)
    return target


def test_pikepdf_backend_recovers_damaged_xref(sample_pdf: Path, tmp_path: Path) -> None:
    damaged = _break_startxref(sample_pdf, tmp_path / "damaged.pdf")
    output = tmp_path / "out.pdf"
    PikepdfBackend().compress(CompressionRequest(damaged, output, 30))

    with pikepdf.open(output) as pdf:
        assert len(pdf.pages) == 2


def test_pikepdf_backend_strict_rejects_damaged_xref(sample_pdf: Path, tmp_path: Path) -> None:
    damaged = _break_startxref(sample_pdf, tmp_path / "damaged.pdf")
    config = FallbackConfig(
        validation=ValidationMode.STRICT,
        write_object_streams=True,
        write_xref_streams=True,
    )
    with pytest.raises(BackendExecutionError):
        PikepdfBackend().compress(CompressionRequest(damaged, tmp_path / "out.pdf", 30), config)
