"""
jvm-provenance: resolves which package (library artifact or JDK) a compiled
JVM class came from.
"""

from jvm_provenance.config import ProvenanceOptions, load_options
from jvm_provenance.resolution import PackageInformationRegistry, PackageTable, build_package_table
from jvm_provenance.schemas import ArtifactPackage, DeclaredArtifact, Package, RuntimePackage

__version__ = "0.1.0"

__all__ = [
    "ProvenanceOptions",
    "load_options",
    "PackageInformationRegistry",
    "PackageTable",
    "build_package_table",
    "ArtifactPackage",
    "DeclaredArtifact",
    "Package",
    "RuntimePackage",
]
