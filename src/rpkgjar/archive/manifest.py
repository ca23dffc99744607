"""
Jar manifest parsing and the R package flag.

Reads META-INF/MANIFEST.MF from a jar and exposes its main attributes
through a Pydantic model. Per-entry sections after the first blank line are
not read; the R package flag lives in the main section.
"""

from __future__ import annotations

from zipfile import ZipFile

from pydantic import BaseModel, Field

# Main attribute that marks a jar as carrying R source code.
HAS_R_PACKAGE = "Spark-HasRPackage"

MANIFEST_PATH = "META-INF/MANIFEST.MF"


class JarManifest(BaseModel):
    """
    Parsed jar manifest.

    Attribute names are case-insensitive in the jar manifest format, so
    lookups go through get() rather than the raw dictionary.

    Attributes:
        main_attributes: Attributes of the main section, in file order
    """

    main_attributes: dict[str, str] = Field(default_factory=dict)

    def get(self, name: str) -> str | None:
        """
        Look up an attribute value.

        Parameters:
            name: Attribute name (matched case-insensitively)

        Returns:
            Attribute value, or None if absent

        Example:
            >>> manifest = parse_manifest("Manifest-Version: 1.0\\nSpark-HasRPackage: true\\n")
            >>> manifest.get("spark-hasrpackage")
            'true'
        """
        wanted = name.lower()
        for key, value in self.main_attributes.items():
            if key.lower() == wanted:
                return value
        return None

    def has_r_package(self) -> bool:
        """Return True if the main section declares bundled R source."""
        value = self.get(HAS_R_PACKAGE)
        return value is not None and value.strip() == "true"


def _logical_lines(text: str) -> list[str]:
    """Join continuation lines (leading single space) onto their header line."""
    lines: list[str] = []
    for raw in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        if raw.startswith(" ") and lines and lines[-1]:
            lines[-1] += raw[1:]
        else:
            lines.append(raw)
    return lines


def parse_manifest(text: str) -> JarManifest:
    """
    Parse manifest text into a JarManifest.

    Lines without a "name: value" separator are ignored. The main section
    ends at the first blank line that follows an attribute; leading blank
    lines are skipped.

    Parameters:
        text: Decoded MANIFEST.MF content

    Returns:
        JarManifest model
    """
    main: dict[str, str] = {}

    for line in _logical_lines(text):
        if not line.strip():
            if main:
                break
            continue

        name, sep, value = line.partition(":")
        if not sep:
            continue
        value = value[1:] if value.startswith(" ") else value
        main[name.strip()] = value

    return JarManifest(main_attributes=main)


def read_manifest(jar: ZipFile) -> JarManifest | None:
    """
    Read and parse the manifest of an open jar.

    Parameters:
        jar: Open archive

    Returns:
        JarManifest, or None if the jar has no manifest entry
    """
    for info in jar.infolist():
        if info.filename.upper() == MANIFEST_PATH:
            data = jar.read(info)
            return parse_manifest(data.decode("utf-8", errors="replace"))
    return None


def check_manifest_for_r(jar: ZipFile) -> bool:
    """
    Check whether a jar declares bundled R source code.

    A jar without a manifest is treated as not carrying R code.

    Parameters:
        jar: Open archive

    Returns:
        True if Spark-HasRPackage is present and equals "true" after trimming
    """
    manifest = read_manifest(jar)
    if manifest is None:
        return False
    return manifest.has_r_package()
