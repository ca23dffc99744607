"""Tests for jar manifest parsing and the R package flag."""

import zipfile

import pytest

from rpkgjar.archive import (
    HAS_R_PACKAGE,
    JarManifest,
    parse_manifest,
    read_manifest,
    check_manifest_for_r,
)

PLAIN_MANIFEST = "Manifest-Version: 1.0\r\nCreated-By: test\r\n\r\n"


class TestParseManifest:
    """Tests for parse_manifest()."""

    def test_main_attributes(self):
        """Test that main section attributes are parsed in order."""
        manifest = parse_manifest("Manifest-Version: 1.0\nCreated-By: 1.8.0 (Oracle)\n")
        assert manifest.main_attributes == {
            "Manifest-Version": "1.0",
            "Created-By": "1.8.0 (Oracle)",
        }

    def test_crlf_line_endings(self):
        """Test that CRLF manifests parse like LF ones."""
        manifest = parse_manifest("Manifest-Version: 1.0\r\nSpark-HasRPackage: true\r\n\r\n")
        assert manifest.get(HAS_R_PACKAGE) == "true"

    def test_continuation_lines(self):
        """Test that lines starting with a space continue the previous value."""
        manifest = parse_manifest(
            "Manifest-Version: 1.0\n"
            "Class-Path: lib/first.jar lib/sec\n"
            " ond.jar\n"
        )
        assert manifest.get("Class-Path") == "lib/first.jar lib/second.jar"

    def test_value_containing_colon(self):
        """Test that only the first colon separates name and value."""
        manifest = parse_manifest("Implementation-URL: http://example.org/x\n")
        assert manifest.get("Implementation-URL") == "http://example.org/x"

    def test_stops_at_end_of_main_section(self):
        """Test that per-entry sections after the first blank line are not read."""
        manifest = parse_manifest(
            "Manifest-Version: 1.0\n"
            "\n"
            "Name: org/apache/Demo.class\n"
            "SHA-256-Digest: abc=\n"
            "\n"
        )
        assert manifest.main_attributes == {"Manifest-Version": "1.0"}
        assert manifest.get("SHA-256-Digest") is None

    def test_leading_blank_lines_skipped(self):
        """Test that blank lines before any attribute do not end the main section."""
        manifest = parse_manifest("\n\nSpark-HasRPackage: true\n")
        assert manifest.has_r_package()

    def test_lines_without_separator_ignored(self):
        """Test that garbage lines do not break parsing."""
        manifest = parse_manifest("not an attribute\nSpark-HasRPackage: true\n")
        assert manifest.main_attributes == {"Spark-HasRPackage": "true"}

    def test_empty_text(self):
        """Test that an empty manifest has no attributes."""
        manifest = parse_manifest("")
        assert manifest.main_attributes == {}


class TestJarManifest:
    """Tests for JarManifest lookups."""

    def test_get_is_case_insensitive(self):
        """Test attribute names match regardless of case."""
        manifest = JarManifest(main_attributes={"Spark-HasRPackage": "true"})
        assert manifest.get("spark-hasrpackage") == "true"
        assert manifest.get("SPARK-HASRPACKAGE") == "true"

    def test_get_missing(self):
        """Test that absent attributes return None."""
        assert JarManifest().get(HAS_R_PACKAGE) is None

    @pytest.mark.parametrize("value", ["true", " true", "true ", "\ttrue  "])
    def test_has_r_package_trims(self, value):
        """Test that surrounding whitespace is ignored."""
        assert JarManifest(main_attributes={HAS_R_PACKAGE: value}).has_r_package()

    @pytest.mark.parametrize("value", ["TRUE", "True", "yes", "1", "", "false", "t rue"])
    def test_has_r_package_is_case_sensitive(self, value):
        """Test that only the literal "true" enables the flag."""
        assert not JarManifest(main_attributes={HAS_R_PACKAGE: value}).has_r_package()

    def test_flag_in_named_section_does_not_count(self):
        """Test that only the main section is consulted."""
        manifest = parse_manifest(
            "Manifest-Version: 1.0\n\nName: R/pkg/\nSpark-HasRPackage: true\n"
        )
        assert not manifest.has_r_package()


class TestCheckManifestForR:
    """Tests for reading the flag from a jar."""

    def test_jar_with_flag(self, make_jar):
        """Test a jar declaring R source."""
        with zipfile.ZipFile(make_jar()) as jar:
            assert check_manifest_for_r(jar)

    def test_jar_without_flag(self, make_jar):
        """Test a jar whose manifest lacks the key."""
        with zipfile.ZipFile(make_jar(manifest=PLAIN_MANIFEST)) as jar:
            assert not check_manifest_for_r(jar)

    def test_jar_without_manifest(self, make_jar):
        """Test that a jar with no manifest counts as flag absent."""
        with zipfile.ZipFile(make_jar(manifest=None)) as jar:
            assert read_manifest(jar) is None
            assert not check_manifest_for_r(jar)

    def test_manifest_name_matched_case_insensitively(self, tmp_path):
        """Test that a lower-case manifest entry is still found."""
        path = tmp_path / "lower.jar"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("meta-inf/manifest.mf", "Spark-HasRPackage: true\n")
        with zipfile.ZipFile(path) as jar:
            assert check_manifest_for_r(jar)
