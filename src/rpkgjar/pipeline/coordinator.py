"""
Batch processing of a comma-separated jar list.

Runs the single-jar worker over each path in order. One jar's failure never
stops the batch; only a missing Spark home does.
"""

from __future__ import annotations

import sys
from typing import Callable, TextIO

from rpkgjar.builder import PackageBuilder, RInstaller

from .worker import ArchiveResult, process_jar


def split_jar_list(jars: str) -> list[str]:
    """
    Split a comma-separated jar list into paths.

    Surrounding whitespace is trimmed and empty items are dropped.

    Example:
        >>> split_jar_list("a.jar, b.jar,,")
        ['a.jar', 'b.jar']
    """
    return [p.strip() for p in jars.split(",") if p.strip()]


def check_and_build_r_package(
    jars: str,
    sink: TextIO | None = None,
    verbose: bool = False,
    *,
    spark_home: str | None = None,
    installer_factory: Callable[[str], PackageBuilder] = RInstaller,
) -> list[ArchiveResult]:
    """
    Build the R packages bundled in any of the given jars.

    Each jar is processed sequentially. Progress, warnings and errors go to
    the sink; the returned results only summarize what was reported there.

    Parameters:
        jars: Comma-separated jar paths
        sink: Stream receiving all output (stdout when None)
        verbose: Report skipped jars and every extracted entry
        spark_home: Spark installation directory used for R/lib
        installer_factory: Builds the installer from the Spark home

    Returns:
        One ArchiveResult per jar path, in input order

    Raises:
        SparkHomeNotSetError: If a jar carries R source and spark_home is unset

    Example:
        >>> results = check_and_build_r_package(
        ...     "libs/a.jar,libs/b.jar", sys.stdout, verbose=True, spark_home="/opt/spark"
        ... )
    """
    sink = sink if sink is not None else sys.stdout
    return [
        process_jar(
            jar_path,
            sink,
            verbose=verbose,
            spark_home=spark_home,
            installer_factory=installer_factory,
        )
        for jar_path in split_jar_list(jars)
    ]
