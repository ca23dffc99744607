"""
Jar inspection and R source extraction.

Basic usage:
    >>> from zipfile import ZipFile
    >>> from rpkgjar.archive import check_manifest_for_r, extract_r_folder
    >>>
    >>> with ZipFile("my-package.jar") as jar:
    ...     if check_manifest_for_r(jar):
    ...         source_dir = extract_r_folder(jar, sys.stdout, verbose=True)
"""

from .manifest import (
    HAS_R_PACKAGE,
    MANIFEST_PATH,
    JarManifest,
    parse_manifest,
    read_manifest,
    check_manifest_for_r,
)
from .extraction import (
    R_JAR_ENTRIES,
    r_entry_path,
    extract_r_folder,
)
from .errors import ARCHIVE_ERRORS
from .layout import R_JAR_DOC

__all__ = [
    # Manifest
    "HAS_R_PACKAGE",
    "MANIFEST_PATH",
    "JarManifest",
    "parse_manifest",
    "read_manifest",
    "check_manifest_for_r",
    # Extraction
    "R_JAR_ENTRIES",
    "r_entry_path",
    "extract_r_folder",
    # Layout
    "R_JAR_DOC",
    # Errors
    "ARCHIVE_ERRORS",
]
