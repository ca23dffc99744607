"""Exceptions zipfile can raise while opening or reading a damaged jar."""

from __future__ import annotations

import zipfile
import zlib

# zlib.error: corrupt deflate data; EOFError: truncated entry;
# RuntimeError: encrypted entry; NotImplementedError: unsupported compression.
ARCHIVE_ERRORS: tuple[type[BaseException], ...] = (
    zipfile.BadZipFile,
    OSError,
    zlib.error,
    EOFError,
    RuntimeError,
    NotImplementedError,
)
