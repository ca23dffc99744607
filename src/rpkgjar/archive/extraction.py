"""
Selective extraction of R source from a jar.

Copies every entry under R/pkg into a fresh scratch directory so the
package can be built with `R CMD INSTALL`.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import TextIO
from zipfile import ZipFile

import typer

# R source code should exist under R/pkg in a jar.
R_JAR_ENTRIES = "R/pkg"

LOGGER = logging.getLogger("rpkgjar")


def r_entry_path(entry_name: str) -> str | None:
    """
    Return the part of an entry name starting at the R/pkg marker.

    Example:
        >>> r_entry_path("sub/R/pkg/DESCRIPTION")
        'R/pkg/DESCRIPTION'
        >>> r_entry_path("org/apache/Foo.class") is None
        True
    """
    idx = entry_name.find(R_JAR_ENTRIES)
    if idx < 0:
        return None
    return entry_name[idx:]


def extract_r_folder(jar: ZipFile, sink: TextIO, verbose: bool = False) -> Path:
    """
    Extract the R source bundled in a jar into a new temporary directory.

    Every entry whose name contains R/pkg is recreated under the temporary
    directory, keeping the path from the marker onwards. Directory entries
    become directories; file entries are copied byte for byte.

    If copying fails, the temporary directory is removed before the error
    propagates, so callers never see a partially populated tree.

    Parameters:
        jar: Open archive
        sink: Stream receiving progress lines
        verbose: Print one line per created directory and extracted file

    Returns:
        Path to the temporary directory (the caller owns its removal)

    Raises:
        OSError: If reading an entry or writing a file fails
        zipfile.BadZipFile, zlib.error, EOFError: If an entry is corrupt or truncated
        RuntimeError, NotImplementedError: If an entry is encrypted or uses an
            unsupported compression method
    """
    temp_dir = Path(tempfile.mkdtemp(prefix="rpkgjar-"))
    root = temp_dir.resolve()
    try:
        for info in jar.infolist():
            entry_path = r_entry_path(info.filename)
            if entry_path is None:
                continue

            out_path = temp_dir / entry_path
            if not out_path.resolve().is_relative_to(root):
                LOGGER.warning(
                    "unsafe_entry_skipped",
                    extra={"entry": info.filename, "temp_dir": str(temp_dir)},
                )
                typer.echo(f"WARN: Skipping entry outside the package tree: {info.filename}", file=sink)
                continue

            if info.is_dir():
                if verbose:
                    typer.echo(f"Creating directory: {out_path}", file=sink)
                out_path.mkdir(parents=True, exist_ok=True)
            else:
                out_path.parent.mkdir(parents=True, exist_ok=True)
                if verbose:
                    typer.echo(f"Extracting {info.filename} to {out_path}", file=sink)
                with jar.open(info) as src, out_path.open("wb") as dst:
                    shutil.copyfileobj(src, dst)
    except BaseException:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise

    return temp_dir
