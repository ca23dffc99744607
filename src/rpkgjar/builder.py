from __future__ import annotations

import logging
import subprocess
import threading
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Protocol, TextIO

import typer

from rpkgjar.archive import R_JAR_ENTRIES

# Base of the shell command used to install R packages.
BASE_INSTALL_CMD: tuple[str, ...] = ("R", "CMD", "INSTALL", "-l")

SPARK_HOME_ENV = "SPARK_HOME"
SPARK_TEST_HOME_ENV = "SPARK_TEST_HOME"


class SparkHomeNotSetError(ValueError):
    """Raised when no Spark installation directory is configured."""


def resolve_spark_home(*candidates: str | None) -> str:
    """Return the first non-empty candidate, in order of preference.

    Callers spell out the fallback chain, e.g.:
        resolve_spark_home(option, os.environ.get("SPARK_HOME"), os.environ.get("SPARK_TEST_HOME"))
    """
    for candidate in candidates:
        if candidate:
            return candidate
    raise SparkHomeNotSetError("SPARK_HOME not set!")


@dataclass
class BuildResult:
    """Outcome of one package build.

    Attributes:
        success: Whether the build command exited with status 0
        returncode: Exit status, or None if the process never ran to completion
        output_lines: Number of output lines relayed to the sink
        message: Diagnostic for launch failures, or for output that could not be
            written to the sink
        command: The command line that was (or would have been) executed
    """

    success: bool
    returncode: int | None = None
    output_lines: int = 0
    message: str | None = None
    command: list[str] = field(default_factory=list)


class PackageBuilder(Protocol):
    """Minimal interface for something that installs an extracted R package."""

    def install(self, source_dir: Path, sink: TextIO, verbose: bool = False) -> BuildResult:
        ...


class OutputRelay(threading.Thread):
    """Copies a child process's output into a sink, line by line.

    If writing to the sink fails, the error is kept in `error` and the rest
    of the stream is read and discarded so the child never blocks on a full pipe.
    """

    def __init__(self, stream: IO[str], sink: TextIO, name: str = "redirect R packaging") -> None:
        super().__init__(name=name, daemon=True)
        self.stream = stream
        self.sink = sink
        self.lines = 0
        self.error: Exception | None = None

    def run(self) -> None:
        for line in self.stream:
            if self.error is not None:
                continue
            try:
                typer.echo(line.rstrip("\r\n"), file=self.sink)
            except (OSError, ValueError) as e:
                self.error = e
                continue
            self.lines += 1


@dataclass
class RInstaller:
    """Builds R packages with the R command line tool.

    Runs:
        R CMD INSTALL -l <spark_home>/R/lib <source_dir>/R/pkg

    The child gets an empty environment and its stderr merged into stdout.
    Running the same install twice is harmless; R replaces the package.
    """

    spark_home: str
    base_command: tuple[str, ...] = BASE_INSTALL_CMD
    logger: logging.Logger | None = None

    @property
    def library_path(self) -> Path:
        return Path(self.spark_home) / "R" / "lib"

    def install_command(self, source_dir: Path) -> list[str]:
        package_path = Path(source_dir) / R_JAR_ENTRIES
        return [*self.base_command, str(self.library_path), str(package_path)]

    def install(self, source_dir: Path, sink: TextIO, verbose: bool = False) -> BuildResult:
        """Install the package extracted under `source_dir`.

        Never raises for a failed build: launch errors are written to the sink
        with their traceback and reported as an unsuccessful BuildResult.
        """
        command = self.install_command(source_dir)
        if verbose:
            typer.echo(f"Building R package with the command: {command}", file=sink)

        try:
            proc = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env={},
                text=True,
                errors="replace",
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            return self._launch_failure(command, sink, e)

        relay = OutputRelay(proc.stdout, sink)
        relay.start()
        try:
            returncode = proc.wait()
        except (OSError, subprocess.SubprocessError) as e:
            proc.kill()
            return self._launch_failure(command, sink, e)
        finally:
            relay.join()
            proc.stdout.close()

        message = None
        if relay.error is not None:
            message = f"Output relay stopped writing: {relay.error}"
        if self.logger:
            self.logger.info(
                "r_package_build_finished",
                extra={
                    "command": command,
                    "returncode": returncode,
                    "output_lines": relay.lines,
                    "relay_error": str(relay.error) if relay.error else None,
                },
            )
        return BuildResult(
            success=returncode == 0,
            returncode=returncode,
            output_lines=relay.lines,
            message=message,
            command=command,
        )

    def _launch_failure(self, command: list[str], sink: TextIO, error: Exception) -> BuildResult:
        typer.echo(f"{error}\n{traceback.format_exc()}", file=sink)
        if self.logger:
            self.logger.error(
                "r_package_build_error",
                extra={"command": command, "error": str(error)},
                exc_info=error,
            )
        return BuildResult(success=False, message=str(error), command=command)
