"""Shared fixtures: jars written on the fly with zipfile."""

from __future__ import annotations

import struct
import sys
import zipfile
from pathlib import Path
from typing import Callable

import pytest

from rpkgjar.builder import BuildResult


R_MANIFEST = "Manifest-Version: 1.0\r\nSpark-HasRPackage: true\r\n\r\n"

R_PACKAGE_ENTRIES: dict[str, bytes | None] = {
    "R/": None,
    "R/pkg/": None,
    "R/pkg/DESCRIPTION": b"Package: demo\nVersion: 0.1\n",
    "R/pkg/NAMESPACE": b"export(hello)\n",
    "R/pkg/R/": None,
    "R/pkg/R/code.R": b"hello <- function() cat('hi\\n')\n",
    "org/": None,
    "org/apache/Demo.class": b"\xca\xfe\xba\xbe\x00\x01",
}


@pytest.fixture
def make_jar(tmp_path: Path) -> Callable[..., Path]:
    """
    Build a jar under tmp_path.

    Entries map names to bytes; None marks a directory entry. Pass
    manifest=None to leave out META-INF/MANIFEST.MF entirely.
    compression sets the method for file entries, e.g. zipfile.ZIP_DEFLATED.
    """

    def _make(
        name: str = "test.jar",
        manifest: str | None = R_MANIFEST,
        entries: dict[str, bytes | None] | None = None,
        compression: int = zipfile.ZIP_STORED,
    ) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", compression=compression) as zf:
            if manifest is not None:
                zf.writestr("META-INF/", "")
                zf.writestr("META-INF/MANIFEST.MF", manifest)
            for entry, data in (entries if entries is not None else R_PACKAGE_ENTRIES).items():
                if data is None:
                    zf.writestr(zipfile.ZipInfo(entry), "")
                else:
                    zf.writestr(entry, data)
        return path

    return _make


@pytest.fixture
def corrupt_entry() -> Callable[[Path, str], None]:
    """
    Overwrite the stored data of one jar entry with 0xFF bytes, leaving headers intact.

    For a deflated entry this is an invalid block type, so reading it raises zlib.error.
    """

    def _corrupt(path: Path, entry: str) -> None:
        with zipfile.ZipFile(path) as zf:
            info = zf.getinfo(entry)
        raw = bytearray(path.read_bytes())
        # Local file header: 30 fixed bytes, then file name and extra field.
        name_len, extra_len = struct.unpack_from("<HH", raw, info.header_offset + 26)
        start = info.header_offset + 30 + name_len + extra_len
        raw[start:start + info.compress_size] = b"\xff" * info.compress_size
        path.write_bytes(bytes(raw))

    return _corrupt


class RecordingInstaller:
    """Stands in for RInstaller; remembers what it was asked to build."""

    def __init__(self, spark_home: str, success: bool = True) -> None:
        self.spark_home = spark_home
        self.success = success
        self.calls: list[Path] = []
        self.seen_files: dict[str, bytes] = {}

    def install(self, source_dir: Path, sink, verbose: bool = False) -> BuildResult:
        self.calls.append(source_dir)
        for p in sorted(source_dir.rglob("*")):
            if p.is_file():
                self.seen_files[p.relative_to(source_dir).as_posix()] = p.read_bytes()
        return BuildResult(success=self.success, returncode=0 if self.success else 1)


@pytest.fixture
def recording_installer() -> RecordingInstaller:
    return RecordingInstaller("/opt/spark")


@pytest.fixture
def python_command() -> Callable[[str], tuple[str, ...]]:
    """Base command running a Python snippet; appended arguments land in sys.argv[1:]."""

    def _command(code: str) -> tuple[str, ...]:
        return (sys.executable, "-c", code)

    return _command
