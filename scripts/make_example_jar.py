#!/usr/bin/env python3
"""Package an R source tree into a jar that rpkgjar can install.

Copies an R package directory (the one holding DESCRIPTION) under R/pkg/
inside a new jar and writes a manifest carrying Spark-HasRPackage: true.
Useful for trying `rpkgjar install` against a real R installation.

Usage:
    python scripts/make_example_jar.py path/to/mypkg -o mypkg.jar
"""

import zipfile
from pathlib import Path

import typer

from rpkgjar.archive import HAS_R_PACKAGE, MANIFEST_PATH, R_JAR_ENTRIES


app = typer.Typer(
    help="Build a jar bundling an R package",
    add_completion=False,
)


@app.command()
def main(
    package_dir: Path = typer.Argument(
        ...,
        help="R package source directory (contains DESCRIPTION)",
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Jar file to write",
    ),
    flag: bool = typer.Option(
        True,
        "--flag/--no-flag",
        help=f"Write {HAS_R_PACKAGE}: true into the manifest",
    ),
) -> None:
    """
    Write PACKAGE_DIR into a jar under R/pkg/.

    Example:
        python scripts/make_example_jar.py examples/demo -o demo.jar
    """
    if not (package_dir / "DESCRIPTION").is_file():
        typer.echo(f"Error: no DESCRIPTION file in {package_dir}", err=True)
        raise typer.Exit(code=1)

    manifest = "Manifest-Version: 1.0\r\n"
    if flag:
        manifest += f"{HAS_R_PACKAGE}: true\r\n"
    manifest += "\r\n"

    files = 0
    output.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(MANIFEST_PATH, manifest)
        zf.writestr(zipfile.ZipInfo(f"{R_JAR_ENTRIES}/"), "")
        for path in sorted(package_dir.rglob("*")):
            arcname = f"{R_JAR_ENTRIES}/{path.relative_to(package_dir).as_posix()}"
            if path.is_dir():
                zf.writestr(zipfile.ZipInfo(f"{arcname}/"), "")
            else:
                zf.write(path, arcname)
                files += 1

    typer.secho(
        f"Wrote {files} file(s) to {output}",
        fg=typer.colors.GREEN,
        bold=True,
    )


if __name__ == "__main__":
    app()
