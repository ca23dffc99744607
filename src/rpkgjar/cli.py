"""
rpkgjar CLI

Commands:
- install: Build the R packages bundled in a comma-separated list of jars
- check: Report which jars declare bundled R source
- layout: Print the jar layout required for R packages
"""

from __future__ import annotations

import json
import logging
import os
import sys
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import typer

from rpkgjar.archive import ARCHIVE_ERRORS, R_JAR_DOC, check_manifest_for_r
from rpkgjar.builder import (
    SPARK_HOME_ENV,
    SPARK_TEST_HOME_ENV,
    RInstaller,
    SparkHomeNotSetError,
)
from rpkgjar.pipeline import ArchiveStatus, check_and_build_r_package

app = typer.Typer(add_completion=False, help="Build R packages shipped inside jars")


class JsonFormatter(logging.Formatter):
    """Simple JSON formatter for structured logs."""
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        # Include any custom attributes passed via `extra=`.
        reserved = {
            "name","msg","args","levelname","levelno","pathname","filename","module",
            "exc_info","exc_text","stack_info","lineno","funcName","created","msecs",
            "relativeCreated","thread","threadName","processName","process","taskName",
        }
        for k, v in record.__dict__.items():
            if k in reserved or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str) -> logging.Logger:
    logger = logging.getLogger("rpkgjar")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


LOGGER = logging.getLogger("rpkgjar")


@app.command("install")
def install_cmd(
    jars: str = typer.Argument(..., help="Comma-separated list of jar paths"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Report skipped jars, extracted entries and the build command"
    ),
    spark_home: str | None = typer.Option(
        None, "--spark-home",
        help=f"Spark installation directory (default: ${SPARK_HOME_ENV}, then ${SPARK_TEST_HOME_ENV})",
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging verbosity (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """
    Extract and install the R source packages bundled in JARS.

    Jars whose manifest contains `Spark-HasRPackage: true` have their R/pkg
    tree extracted to a temporary directory and installed with
    `R CMD INSTALL` into $SPARK_HOME/R/lib.

    Example:
        rpkgjar install libs/a.jar,libs/b.jar --verbose
    """
    global LOGGER
    LOGGER = setup_logging(log_level)

    home = spark_home or os.environ.get(SPARK_HOME_ENV) or os.environ.get(SPARK_TEST_HOME_ENV)

    try:
        results = check_and_build_r_package(
            jars,
            sys.stdout,
            verbose,
            spark_home=home,
            installer_factory=lambda h: RInstaller(h, logger=LOGGER),
        )
    except SparkHomeNotSetError as e:
        typer.echo(f"Error: {e} Set --spark-home or ${SPARK_HOME_ENV}.", err=True)
        raise typer.Exit(code=2)

    failed = [r for r in results if r.failed]
    built = [r for r in results if r.status == ArchiveStatus.BUILD_OK]
    LOGGER.info(
        "batch_finished",
        extra={"jars": len(results), "built": len(built), "failed": len(failed)},
    )

    if failed:
        typer.echo(f"\n{len(failed)} R package(s) failed:", err=True)
        for result in failed:
            typer.echo(f"  - {result.jar_path} ({result.status.value})", err=True)
        raise typer.Exit(code=1)


@app.command("check")
def check_cmd(
    jars: list[Path] = typer.Argument(..., help="Jar files to inspect"),
) -> None:
    """Report whether each jar declares bundled R source in its manifest."""
    problems = 0
    for jar_path in jars:
        if not jar_path.exists():
            typer.echo(f"{jar_path}: not found", err=True)
            problems += 1
            continue
        try:
            with zipfile.ZipFile(jar_path) as jar:
                has_r_code = check_manifest_for_r(jar)
        except ARCHIVE_ERRORS as e:
            typer.echo(f"{jar_path}: not a valid jar archive ({e})", err=True)
            problems += 1
            continue

        if has_r_code:
            typer.echo(f"{jar_path}: contains R source code")
        else:
            typer.echo(f"{jar_path}: no R source code")

    if problems:
        raise typer.Exit(code=1)


@app.command("layout")
def layout_cmd() -> None:
    """Print the jar layout required for bundled R packages."""
    typer.echo(R_JAR_DOC)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
