"""
Options for building a package table.

Options come from a JSON file:

{
  "packages": [
    {"group": "com.acme", "artifact": "widgets", "version": "1.0",
     "path": "/deps/widgets-1.0.jar"}
  ],
  "index_jdk": true,          // attribute JDK classes to the runtime package
  "java_version": "11.0.2",   // optional; probed from the JVM when absent
  "java_home": "/usr/lib/jvm/java-11"  // optional
}

Build tools may instead hand over a tab-separated dependencies file with one
``group<TAB>artifact<TAB>version<TAB>path`` line per artifact.

Environment overrides (applied last):
    JVM_PROVENANCE_INDEX_JDK      true/false
    JVM_PROVENANCE_JAVA_VERSION   version string
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from jvm_provenance.exceptions import ConfigError
from jvm_provenance.logging_config import logger
from jvm_provenance.schemas import DeclaredArtifact

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


class ProvenanceOptions(BaseModel):
    """
    Inputs to package table construction.
    """
    packages: List[DeclaredArtifact] = Field(default_factory=list)
    index_jdk: bool = True
    java_version: Optional[str] = None
    java_home: Optional[Path] = None


def load_options(path: Path) -> ProvenanceOptions:
    """
    Load options from a JSON file. Relative artifact paths are resolved
    against the file's directory.

    Raises:
        ConfigError: If the file cannot be read or fails validation.
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read options file '{path}': {e}") from e

    try:
        options = ProvenanceOptions.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid options in '{path}': {e}") from e

    base = path.parent
    for declared in options.packages:
        if not declared.path.is_absolute():
            declared.path = base / declared.path

    logger.debug(f"Loaded {len(options.packages)} declared artifacts from '{path}'")
    return options


def parse_dependencies_file(path: Path) -> List[DeclaredArtifact]:
    """
    Parse a tab-separated dependencies file. Blank lines and lines starting
    with '#' are ignored.

    Raises:
        ConfigError: If the file cannot be read or a line is malformed.
    """
    path = Path(path)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise ConfigError(f"Could not read dependencies file '{path}': {e}") from e

    artifacts: List[DeclaredArtifact] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        columns = line.rstrip("\r\n").split("\t")
        if len(columns) != 4:
            raise ConfigError(
                f"{path}:{line_number}: expected 4 tab-separated columns, got {len(columns)}"
            )
        group, artifact, version, jar = columns
        try:
            artifacts.append(DeclaredArtifact(group=group, artifact=artifact, version=version, path=Path(jar)))
        except ValidationError as e:
            raise ConfigError(f"{path}:{line_number}: {e}") from e
    return artifacts


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{value}'")


def apply_env_overrides(options: ProvenanceOptions) -> ProvenanceOptions:
    """Return a copy of ``options`` with environment overrides applied."""
    updates = {}
    index_jdk = os.getenv("JVM_PROVENANCE_INDEX_JDK")
    if index_jdk:
        updates["index_jdk"] = _parse_bool("JVM_PROVENANCE_INDEX_JDK", index_jdk)
    java_version = os.getenv("JVM_PROVENANCE_JAVA_VERSION")
    if java_version:
        updates["java_version"] = java_version
    if updates:
        logger.debug(f"Applying environment overrides: {sorted(updates)}")
        return options.model_copy(update=updates)
    return options
