"""User-facing description of the jar layout expected for R packages."""

from __future__ import annotations

from .extraction import R_JAR_ENTRIES
from .manifest import HAS_R_PACKAGE, MANIFEST_PATH

R_JAR_DOC = f"""\
In order for Spark to build R packages that are parts of Spark Packages, there are a few
requirements. The R source code must be shipped in a jar, with additional Java/Scala
classes. The jar must be in the following format:
  1- The Manifest ({MANIFEST_PATH}) must contain the key-value: {HAS_R_PACKAGE}: true
  2- The standard R package layout must be preserved under {R_JAR_ENTRIES}/ inside the jar. More
  information on the standard R package layout can be found in:
  http://cran.r-project.org/doc/contrib/Leisch-CreatingPackages.pdf
  An example layout is given below. After running `jar tf $JAR_FILE | sort`:

META-INF/MANIFEST.MF
R/
R/pkg/
R/pkg/DESCRIPTION
R/pkg/NAMESPACE
R/pkg/R/
R/pkg/R/myRcode.R
org/
org/apache/
..."""
