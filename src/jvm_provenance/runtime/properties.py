"""
Discovery of JVM system properties.

Properties are read by running ``java -XshowSettings:properties -version``,
which prints every system property to stderr. Path-list properties are
printed one entry per line, with the extra entries indented further than
the key line.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from jvm_provenance.exceptions import JvmProbeError
from jvm_provenance.logging_config import logger

PROPERTY_SECTION_HEADER = "Property settings:"
BOOT_CLASSPATH_SUFFIX = ".boot.class.path"
PROBE_TIMEOUT_SECONDS = 30


def parse_property_settings(text: str) -> Dict[str, str]:
    """
    Parse the property section printed by ``-XshowSettings:properties``.

    Continuation lines are joined with the ``path.separator`` property
    (``os.pathsep`` if the JVM did not report one).
    """
    values: Dict[str, List[str]] = {}
    in_section = False
    key_indent = None
    current_key = None

    for line in text.splitlines():
        if not in_section:
            if line.strip() == PROPERTY_SECTION_HEADER:
                in_section = True
            continue

        stripped = line.strip()
        if not stripped:
            break

        indent = len(line) - len(line.lstrip())
        if current_key is not None and key_indent is not None and indent > key_indent:
            values[current_key].append(stripped)
            continue

        key, sep, value = stripped.partition("=")
        if not sep:
            logger.debug(f"Ignoring unexpected property line: {stripped!r}")
            continue
        current_key = key.strip()
        key_indent = indent
        values[current_key] = [value.strip()] if value.strip() else []

    separator = os.pathsep
    if values.get("path.separator"):
        separator = values["path.separator"][0]
    return {key: separator.join(parts) for key, parts in values.items()}


def find_java_binary(java_home: Optional[Path] = None) -> str:
    """Locate the ``java`` launcher: explicit home, then $JAVA_HOME, then PATH."""
    home = java_home or (Path(os.environ["JAVA_HOME"]) if os.environ.get("JAVA_HOME") else None)
    if home is not None:
        candidate = home / "bin" / ("java.exe" if os.name == "nt" else "java")
        if candidate.is_file():
            return str(candidate)
        logger.debug(f"No java launcher under '{home}', falling back to PATH")
    found = shutil.which("java")
    if found is None:
        raise JvmProbeError("java", "no java launcher found on JAVA_HOME or PATH")
    return found


def probe_jvm_properties(java_binary: str, timeout: float = PROBE_TIMEOUT_SECONDS) -> Dict[str, str]:
    """
    Run the JVM once and return its system properties.

    Raises:
        JvmProbeError: If the launcher cannot be run or prints no properties.
    """
    command = [java_binary, "-XshowSettings:properties", "-version"]
    logger.debug(f"Probing JVM properties: {' '.join(command)}")
    try:
        completed = subprocess.run(command, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise JvmProbeError(java_binary, str(e)) from e

    if completed.returncode != 0:
        raise JvmProbeError(java_binary, f"exited with status {completed.returncode}")

    properties = parse_property_settings(completed.stderr + "\n" + completed.stdout)
    if not properties:
        raise JvmProbeError(java_binary, "no property settings in output")
    logger.debug(f"Read {len(properties)} JVM properties from '{java_binary}'")
    return properties


def boot_classpath_entries(properties: Mapping[str, str]) -> List[Path]:
    """
    Paths listed by every property whose key ends in ``.boot.class.path``
    (e.g. ``sun.boot.class.path``), in property order.
    """
    separator = properties.get("path.separator") or os.pathsep
    entries: List[Path] = []
    for key, value in properties.items():
        if not key.endswith(BOOT_CLASSPATH_SUFFIX) or not value:
            continue
        for entry in value.split(separator):
            if entry:
                entries.append(Path(entry))
    return entries
