"""
Pipeline module for building R packages shipped inside jars.

Provides the single-jar worker and the batch driver over a comma-separated
jar list.
"""

from .coordinator import check_and_build_r_package, split_jar_list
from .worker import ArchiveResult, ArchiveStatus, process_jar, remove_scratch_dir

__all__ = [
    "check_and_build_r_package",
    "split_jar_list",
    "ArchiveResult",
    "ArchiveStatus",
    "process_jar",
    "remove_scratch_dir",
]
