import io
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from jvm_provenance.cli import CLIConfig, print_error, print_json, print_table
from jvm_provenance.config import (
    ProvenanceOptions,
    apply_env_overrides,
    load_options,
    parse_dependencies_file,
)
from jvm_provenance.exceptions import ProvenanceError
from jvm_provenance.logging_config import logger, setup_logging
from jvm_provenance.lsif import LsifPackageWriter, PackageWriter
from jvm_provenance.resolution import PackageTable, build_package_table
from jvm_provenance.runtime import JavaVersion, find_java_binary, probe_jvm_properties
from jvm_provenance.symbols import classfile_for_symbol

app = typer.Typer()

OPTIONS_HELP = "JSON options file declaring artifacts and JDK settings."
DEPENDENCIES_HELP = "Tab-separated dependencies file (group, artifact, version, path)."


@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Pretty output with tables (also via JVM_PROVENANCE_HUMAN_MODE env var)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr at DEBUG level."),
):
    """
    jvm-provenance: attribute compiled JVM classes to the package they came from.

    Machine mode is the default (JSON output). Use --human/-H for tables.
    """
    if human:
        CLIConfig.set_machine_mode(False)
    if verbose:
        setup_logging(level="DEBUG", suppress_console=False, force=True)


def _load_options(options_path: Optional[Path], dependencies: Optional[Path]) -> ProvenanceOptions:
    options = load_options(options_path) if options_path else ProvenanceOptions()
    if dependencies:
        options.packages.extend(parse_dependencies_file(dependencies))
    return apply_env_overrides(options)


def _build_table(
    options_path: Optional[Path],
    dependencies: Optional[Path],
    writer: Optional[PackageWriter] = None,
) -> PackageTable:
    options = _load_options(options_path, dependencies)
    return build_package_table(options, writer or LsifPackageWriter(io.StringIO()))


def _package_payload(package) -> Optional[dict]:
    return package.model_dump() if package is not None else None


def _fail(error: Exception) -> None:
    print_error(str(error), code=type(error).__name__)
    raise typer.Exit(code=1)


@app.command()
def resolve(
    symbols: List[str] = typer.Argument(..., help="SemanticDB symbols to resolve."),
    options_path: Optional[Path] = typer.Option(None, "--options", "-o", help=OPTIONS_HELP),
    dependencies: Optional[Path] = typer.Option(None, "--dependencies", "-d", help=DEPENDENCIES_HELP),
):
    """
    Print the package that declares each symbol.
    """
    try:
        table = _build_table(options_path, dependencies)
    except ProvenanceError as e:
        _fail(e)

    packages = [table.resolve_symbol_package(symbol) for symbol in symbols]
    results = []
    for symbol, package in zip(symbols, packages):
        results.append({
            "symbol": symbol,
            "classfile": classfile_for_symbol(symbol),
            "package": _package_payload(package),
        })

    if CLIConfig.is_machine_mode():
        print_json(results)
        return

    view = Table(title="Symbol provenance")
    view.add_column("Symbol", style="cyan")
    view.add_column("Classfile", style="magenta")
    view.add_column("Package", style="green")
    for row, package in zip(results, packages):
        view.add_row(row["symbol"], row["classfile"] or "-", package.coordinates if package else "-")
    print_table(view)


@app.command()
def classfile(
    keys: List[str] = typer.Argument(..., help="Classfile paths such as com/acme/Widget.class."),
    options_path: Optional[Path] = typer.Option(None, "--options", "-o", help=OPTIONS_HELP),
    dependencies: Optional[Path] = typer.Option(None, "--dependencies", "-d", help=DEPENDENCIES_HELP),
):
    """
    Print the package that owns each classfile.
    """
    try:
        table = _build_table(options_path, dependencies)
    except ProvenanceError as e:
        _fail(e)

    packages = [table.resolve_package(key) for key in keys]
    results = [{"classfile": key, "package": _package_payload(package)} for key, package in zip(keys, packages)]

    if CLIConfig.is_machine_mode():
        print_json(results)
        return

    view = Table(title="Classfile provenance")
    view.add_column("Classfile", style="magenta")
    view.add_column("Package", style="green")
    for key, package in zip(keys, packages):
        view.add_row(key, package.coordinates if package else "-")
    print_table(view)


@app.command()
def stats(
    options_path: Optional[Path] = typer.Option(None, "--options", "-o", help=OPTIONS_HELP),
    dependencies: Optional[Path] = typer.Option(None, "--dependencies", "-d", help=DEPENDENCIES_HELP),
):
    """
    Build the table and report what it indexed.
    """
    try:
        table = _build_table(options_path, dependencies)
    except ProvenanceError as e:
        _fail(e)

    summary = table.stats()
    if CLIConfig.is_machine_mode():
        print_json(summary.model_dump())
        return

    view = Table(title=f"Package table (Java {summary.runtime_version})")
    view.add_column("Package", style="cyan")
    view.add_column("Classfiles", justify="right", style="magenta")
    for coordinates, count in sorted(summary.classfiles_per_package.items()):
        view.add_row(coordinates, str(count))
    print_table(view)


@app.command()
def runtime(
    java_home: Optional[Path] = typer.Option(None, "--java-home", help="JDK to probe instead of JAVA_HOME/PATH."),
    java_version: Optional[str] = typer.Option(None, "--java-version", help="Classify this version string without probing."),
):
    """
    Classify a Java runtime as legacy (boot classpath) or modular.
    """
    try:
        if java_version:
            version = JavaVersion(java_version)
        else:
            version = JavaVersion.from_properties(probe_jvm_properties(find_java_binary(java_home)))
    except ProvenanceError as e:
        _fail(e)

    print_json({
        "version": version.version_string,
        "major": version.major,
        "legacy": version.is_legacy,
        "package": version.package.model_dump(),
    })


@app.command()
def emit(
    imports: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Lines of '<moniker id><TAB><symbol>'."),
    options_path: Optional[Path] = typer.Option(None, "--options", "-o", help=OPTIONS_HELP),
    dependencies: Optional[Path] = typer.Option(None, "--dependencies", "-d", help=DEPENDENCIES_HELP),
    start_id: int = typer.Option(1, "--start-id", help="First LSIF element id to allocate."),
):
    """
    Write LSIF packageInformation vertices and edges for imported symbols.
    """
    writer = LsifPackageWriter(sys.stdout, start_id=start_id)
    try:
        table = _build_table(options_path, dependencies, writer)
    except ProvenanceError as e:
        _fail(e)

    linked = 0
    for line_number, line in enumerate(imports.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        moniker, sep, symbol = line.partition("\t")
        if not sep or not moniker.strip().isdigit():
            logger.warning(f"{imports}:{line_number}: expected '<moniker id><TAB><symbol>', skipping")
            continue
        if table.record_import_if_known(symbol.strip(), int(moniker)) is not None:
            linked += 1

    logger.info(f"Linked {linked} monikers to {len(table.registry)} packages")


if __name__ == "__main__":
    app()
