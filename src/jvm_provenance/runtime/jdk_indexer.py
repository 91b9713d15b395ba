from typing import Mapping

from jvm_provenance.logging_config import logger
from jvm_provenance.scanner import ResolutionTable, is_jar_candidate, scan_archive
from .properties import boot_classpath_entries
from .version import JavaVersion


def index_jdk(
    java_version: JavaVersion,
    properties: Mapping[str, str],
    table: ResolutionTable,
    enabled: bool = True,
) -> int:
    """
    Scan the boot classpath jars of a legacy runtime into the table.

    Modular runtimes are never scanned here; their classfiles are attributed
    lazily through a runtime image probe.

    Returns:
        Number of classfile keys attributed to the runtime package.
    """
    if not enabled:
        logger.debug("JDK indexing disabled")
        return 0
    if not java_version.is_legacy:
        logger.debug(f"Java {java_version.major} is modular; JDK classfiles are resolved on demand")
        return 0

    total = 0
    scanned = 0
    for path in boot_classpath_entries(properties):
        if not is_jar_candidate(path):
            logger.debug(f"Skipping boot classpath entry '{path}': not a jar file")
            continue
        total += scan_archive(path, java_version.package, table)
        scanned += 1

    logger.info(f"Indexed {total} JDK classfiles from {scanned} boot classpath jars")
    return total
