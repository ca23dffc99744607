"""
Single jar processing worker.

Takes one jar path through the whole flow: existence check, manifest flag,
extraction, build, and removal of the scratch directory.
"""

from __future__ import annotations

import logging
import shutil
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, TextIO

import typer

from rpkgjar.archive import ARCHIVE_ERRORS, R_JAR_DOC, check_manifest_for_r, extract_r_folder
from rpkgjar.builder import BuildResult, PackageBuilder, RInstaller, resolve_spark_home

LOGGER = logging.getLogger("rpkgjar")


class ArchiveStatus(str, Enum):
    """Final state of one jar."""

    NOT_FOUND = "not_found"
    INVALID_ARCHIVE = "invalid_archive"
    NO_R_CODE = "no_r_code"
    EXTRACT_FAILED = "extract_failed"
    BUILD_OK = "build_ok"
    BUILD_FAILED = "build_failed"


@dataclass
class ArchiveResult:
    """
    Result of processing a single jar.

    Attributes:
        jar_path: Path as given by the caller
        status: Final state reached
        build: Build outcome, when a build was attempted
        message: Short diagnostic for warnings and failures
    """

    jar_path: str
    status: ArchiveStatus
    build: BuildResult | None = None
    message: str | None = None

    @property
    def failed(self) -> bool:
        return self.status in (ArchiveStatus.EXTRACT_FAILED, ArchiveStatus.BUILD_FAILED)


def remove_scratch_dir(path: Path) -> None:
    """Delete a scratch directory tree, logging rather than raising on failure."""
    shutil.rmtree(path, ignore_errors=True)
    if path.exists():
        LOGGER.warning("scratch_dir_not_removed", extra={"path": str(path)})
    else:
        LOGGER.debug("scratch_dir_removed", extra={"path": str(path)})


def process_jar(
    jar_path: str,
    sink: TextIO,
    *,
    verbose: bool = False,
    spark_home: str | None = None,
    installer_factory: Callable[[str], PackageBuilder] = RInstaller,
) -> ArchiveResult:
    """
    Check one jar for R source and build it if present.

    The scratch directory created for extraction is removed before this
    function returns, whatever the outcome.

    Parameters:
        jar_path: Path to the jar
        sink: Stream receiving progress, warnings and errors
        verbose: Report skipped jars and every extracted entry
        spark_home: Spark installation directory; only required when the jar
            carries R source
        installer_factory: Builds the installer from the Spark home

    Returns:
        ArchiveResult describing what happened

    Raises:
        SparkHomeNotSetError: If the jar carries R source and spark_home is unset
    """
    file = Path(jar_path)
    if not file.exists():
        typer.echo(f"WARN: {file} resolved as dependency, but not found.", file=sink)
        return ArchiveResult(jar_path, ArchiveStatus.NOT_FOUND, message="not found")

    try:
        jar = zipfile.ZipFile(file)
    except ARCHIVE_ERRORS as e:
        typer.echo(f"WARN: {file} is not a valid jar archive, skipping...", file=sink)
        LOGGER.warning("invalid_archive", extra={"jar": jar_path, "error": str(e)})
        return ArchiveResult(jar_path, ArchiveStatus.INVALID_ARCHIVE, message=str(e))

    with jar:
        try:
            has_r_code = check_manifest_for_r(jar)
        except ARCHIVE_ERRORS as e:
            typer.echo(f"WARN: {file} is not a valid jar archive, skipping...", file=sink)
            LOGGER.warning("invalid_archive", extra={"jar": jar_path, "error": str(e)})
            return ArchiveResult(jar_path, ArchiveStatus.INVALID_ARCHIVE, message=str(e))

        if not has_r_code:
            if verbose:
                typer.echo(f"{file} doesn't contain R source code, skipping...", file=sink)
            return ArchiveResult(jar_path, ArchiveStatus.NO_R_CODE)

        typer.echo(f"{file} contains R source code. Now installing package.", file=sink)
        installer = installer_factory(resolve_spark_home(spark_home))

        try:
            r_source = extract_r_folder(jar, sink, verbose)
        except ARCHIVE_ERRORS as e:
            typer.echo(f"ERROR: Failed to extract R source from {file}: {e}", file=sink)
            LOGGER.error("r_source_extract_failed", extra={"jar": jar_path, "error": str(e)})
            return ArchiveResult(jar_path, ArchiveStatus.EXTRACT_FAILED, message=str(e))

    try:
        build = installer.install(r_source, sink, verbose)
    finally:
        remove_scratch_dir(r_source)

    if not build.success:
        typer.echo(f"ERROR: Failed to build R package in {file}.", file=sink)
        typer.echo(R_JAR_DOC, file=sink)
        return ArchiveResult(jar_path, ArchiveStatus.BUILD_FAILED, build=build, message=build.message)

    return ArchiveResult(jar_path, ArchiveStatus.BUILD_OK, build=build)
